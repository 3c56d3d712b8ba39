from typing import Any, Dict, Iterable, List

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import ErrorType, ERROR_STATUS_MAP, INTERNAL_ERROR_MESSAGE, VALIDATION_FAILED_MESSAGE
from app.core.logger import get_logger

logger = get_logger("api")

# request locations that carry no meaning for the client
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class AppException(Exception):
    """Custom exception that services can raise."""

    def __init__(self, error_type: ErrorType, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(message)

    def to_content(self) -> Dict[str, Any]:
        return {"message": self.message}


class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: int):
        super().__init__(ErrorType.NOT_FOUND, f"{entity} with ID {entity_id} was not found.")
        self.entity = entity
        self.entity_id = entity_id


class FieldValidationError(AppException):
    """Business-rule validation failure reported against request fields."""

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__(ErrorType.VALIDATION, VALIDATION_FAILED_MESSAGE)
        self.errors = errors

    def to_content(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class InvalidCategorySetError(FieldValidationError):
    def __init__(self, message: str):
        super().__init__({"categoryIds": [message]})


class ReferentialIntegrityError(AppException):
    def __init__(self, message: str, missing_ids: Iterable[int] = ()):
        super().__init__(ErrorType.REFERENTIAL_INTEGRITY, message)
        self.missing_ids = sorted(set(missing_ids))

    def to_content(self) -> Dict[str, Any]:
        return {"message": self.message, "missing_ids": self.missing_ids}


class CategoryInUseError(AppException):
    def __init__(self, category_id: int):
        super().__init__(
            ErrorType.CATEGORY_IN_USE,
            f"Category with ID {category_id} is still assigned to products and cannot be deleted.",
        )
        self.category_id = category_id


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "request"


def collect_field_errors(errors: Iterable[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Group pydantic error entries by dotted field path."""
    grouped: Dict[str, List[str]] = {}
    for err in errors:
        grouped.setdefault(_field_name(err.get("loc", ())), []).append(err.get("msg", "Invalid value."))
    return grouped


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to proper HTTP response."""
    status_code = ERROR_STATUS_MAP.get(exc.error_type, 500)
    # not-found is already logged by the stores, validation stays quiet
    if exc.error_type not in (ErrorType.VALIDATION, ErrorType.NOT_FOUND):
        logger.warning(exc.message, extra={"error_type": exc.error_type.value, "status_code": status_code})
    return JSONResponse(status_code=status_code, content=exc.to_content())


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = collect_field_errors(exc.errors())
    logger.debug("Request validation failed", extra={"errors": errors})
    return JSONResponse(
        status_code=ERROR_STATUS_MAP[ErrorType.VALIDATION],
        content={"message": VALIDATION_FAILED_MESSAGE, "errors": errors},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500 without internals."""
    logger.error(
        "An unexpected error occurred.",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=ERROR_STATUS_MAP[ErrorType.INTERNAL_ERROR],
        content={"message": INTERNAL_ERROR_MESSAGE},
    )
