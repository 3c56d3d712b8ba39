from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.core.config import settings
from app.core.database.base import Base
from app.core.database.db import engine
from app.core.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from app.core.logger import configure_logging

# Routers
from catalog.routers import categories_router, products_router

logger = configure_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: dev-friendly table creation (replace with Alembic in prod)
    logger.info("Catalog service startup", extra={"database": engine.url.render_as_string(hide_password=True)})
    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await engine.dispose()
    logger.info("Catalog service shutdown")


app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="CRUD API for products, categories and the links between them.",
    debug=settings.debug,
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok"}


app.include_router(categories_router)
app.include_router(products_router)
