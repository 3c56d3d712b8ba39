from typing import List, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import InvalidCategorySetError, ReferentialIntegrityError
from catalog.domain.associations import dedupe_ids
from catalog.domain.entities.product import ProductCreate, ProductOut, ProductUpdate
from catalog.domain.repositories import CategoryRepository, ProductRepository


class ProductService:
    """
    Business rules around products:
    - category ids are deduplicated, then the count rule is checked the same
      way on create and update, before anything is written;
    - ids that match no category are rejected up front with the missing ids.
    """

    def __init__(
        self,
        repo: ProductRepository,
        categories_repo: CategoryRepository,
        min_categories: Optional[int] = None,
        max_categories: Optional[int] = None,
    ):
        self.repo = repo
        self.categories_repo = categories_repo
        self.min_categories = min_categories if min_categories is not None else settings.min_categories_per_product
        self.max_categories = max_categories if max_categories is not None else settings.max_categories_per_product

    # ---------- Queries ----------

    async def list(self, page: int, page_size: int) -> List[ProductOut]:
        rows = await self.repo.list(page, page_size)
        return [ProductOut.model_validate(row) for row in rows]

    async def get(self, product_id: int) -> Optional[ProductOut]:
        obj = await self.repo.get(product_id)
        return ProductOut.model_validate(obj) if obj else None

    # ---------- Mutations ----------

    async def create(self, payload: ProductCreate, category_ids: Sequence[int]) -> ProductOut:
        ids = await self._checked_category_ids(category_ids)
        obj = await self.repo.insert(payload, ids)
        return ProductOut.model_validate(obj)

    async def update(self, product_id: int, payload: ProductUpdate, category_ids: Sequence[int]) -> Optional[ProductOut]:
        ids = await self._checked_category_ids(category_ids)
        obj = await self.repo.update(product_id, payload, ids)
        return ProductOut.model_validate(obj) if obj else None

    async def delete(self, product_id: int) -> bool:
        return await self.repo.delete(product_id)

    # ---------- Internal helpers ----------

    def _check_count(self, ids: List[int]) -> None:
        if len(ids) < self.min_categories:
            if self.min_categories == 1:
                raise InvalidCategorySetError("A product must have at least one category.")
            raise InvalidCategorySetError(f"A product must have at least {self.min_categories} categories.")
        if self.max_categories is not None and len(ids) > self.max_categories:
            raise InvalidCategorySetError(f"A product can have at most {self.max_categories} categories.")

    async def _checked_category_ids(self, category_ids: Sequence[int]) -> List[int]:
        ids = dedupe_ids(category_ids)
        self._check_count(ids)

        found = {c.id for c in await self.categories_repo.get_by_ids(ids)}
        missing = [cid for cid in ids if cid not in found]
        if missing:
            raise ReferentialIntegrityError(
                f"Categories not found: {', '.join(str(cid) for cid in missing)}.",
                missing_ids=missing,
            )
        return ids
