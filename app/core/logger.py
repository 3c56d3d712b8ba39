import datetime
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from app.core.config import Settings

ROOT_LOGGER_NAME = "catalog"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CustomJsonFormatter(JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def _formatter(settings: Settings) -> logging.Formatter:
    if settings.log_json:
        return CustomJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")
    return logging.Formatter(PLAIN_FORMAT)


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Build the process-wide ``catalog`` logger. Safe to call more than once:
    handlers are attached on the first call only.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(settings.log_level.upper())
    if getattr(logger, "_catalog_configured", False):
        return logger

    formatter = _formatter(settings)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        # one file per day, like logs/app.log.2025-01-31
        file_handler = TimedRotatingFileHandler(settings.log_file, when="midnight", backupCount=14, utc=True)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger._catalog_configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the ``catalog`` logger, e.g. ``get_logger("products")``."""
    return logging.getLogger(ROOT_LOGGER_NAME).getChild(name)
