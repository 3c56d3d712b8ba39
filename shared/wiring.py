from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.db import get_session
from app.core.logger import get_logger
from catalog.domain.repositories import CategoryRepository, ProductRepository
from catalog.services import CategoryService, ProductService

# one handle per store, children of the process-wide "catalog" logger
categories_logger = get_logger("categories")
products_logger = get_logger("products")


def get_category_service(db: AsyncSession = Depends(get_session)) -> CategoryService:
    return CategoryService(CategoryRepository(db, logger=categories_logger))


def get_product_service(db: AsyncSession = Depends(get_session)) -> ProductService:
    """
    Build the product service with both repositories sharing ONE DB session,
    so a product write and its category lookups see the same transaction.
    """
    return ProductService(
        ProductRepository(db, logger=products_logger),
        CategoryRepository(db, logger=categories_logger),
    )
