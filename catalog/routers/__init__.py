from catalog.routers.categories import router as categories_router
from catalog.routers.products import router as products_router
