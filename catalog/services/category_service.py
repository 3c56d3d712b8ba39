from typing import List, Optional

from catalog.domain.entities.category import CategoryCreate, CategoryOut, CategoryUpdate
from catalog.domain.repositories import CategoryRepository


class CategoryService:
    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    async def list(self, page: int, page_size: int) -> List[CategoryOut]:
        rows = await self.repo.list(page, page_size)
        return [CategoryOut.model_validate(row) for row in rows]

    async def get(self, category_id: int) -> Optional[CategoryOut]:
        obj = await self.repo.get(category_id)
        return CategoryOut.model_validate(obj) if obj else None

    async def create(self, payload: CategoryCreate) -> CategoryOut:
        obj = await self.repo.insert(payload)
        return CategoryOut.model_validate(obj)

    async def update(self, category_id: int, payload: CategoryUpdate) -> Optional[CategoryOut]:
        obj = await self.repo.update(category_id, payload)
        return CategoryOut.model_validate(obj) if obj else None

    async def delete(self, category_id: int) -> bool:
        # raises CategoryInUseError for a category still linked to products
        return await self.repo.delete(category_id)
