from catalog.domain.models.category import Category, product_categories
from catalog.domain.models.product import Product

__all__ = ["Category", "Product", "product_categories"]
