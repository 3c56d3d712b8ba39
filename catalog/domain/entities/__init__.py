from catalog.domain.entities.category import CategoryCreate, CategoryOut, CategoryUpdate
from catalog.domain.entities.product import (
    CreateProductRequest,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    UpdateProductRequest,
)
