from catalog.domain.repositories.category_repository import CategoryRepository
from catalog.domain.repositories.product_repository import ProductRepository
