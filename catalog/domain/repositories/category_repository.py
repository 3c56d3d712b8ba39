from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import CategoryInUseError
from catalog.domain.entities.category import CategoryCreate, CategoryUpdate
from catalog.domain.models.category import Category, product_categories
from shared.abstracts.abstract_repository import AbstractRepository


class CategoryRepository(AbstractRepository):
    # ---------- Query helpers ----------

    async def get_by_ids(self, ids: Iterable[int]) -> List[Category]:
        idlist = list(set(ids))
        if not idlist:
            return []
        res = await self.db.execute(select(Category).where(Category.id.in_(idlist)).order_by(Category.id))
        return list(res.scalars().all())

    async def is_referenced(self, category_id: int) -> bool:
        res = await self.db.execute(
            select(exists().where(product_categories.c.category_id == category_id))
        )
        return bool(res.scalar())

    # ---------- AbstractRepository CRUD ----------

    async def list(self, page: int, page_size: int) -> List[Category]:
        stmt = (
            select(Category)
            .order_by(Category.id.asc())
            .offset(self.offset_for(page, page_size))
            .limit(page_size)
        )
        res = await self.db.execute(stmt)
        return list(res.scalars().all())

    async def get(self, entity_id: int) -> Optional[Category]:
        obj = await self.db.get(Category, entity_id)
        if obj is None:
            self.logger.warning("Category was not found", extra={"category_id": entity_id})
        return obj

    async def insert(self, obj: CategoryCreate) -> Category:
        category = Category(name=obj.name)
        async with self.atomic():
            self.db.add(category)
            await self.db.flush()
        self.logger.info(
            "Category created", extra={"category_id": category.id, "category_name": category.name}
        )
        return category

    async def update(self, entity_id: int, obj: CategoryUpdate) -> Optional[Category]:
        async with self.atomic():
            category = await self.db.get(Category, entity_id)
            if category is None:
                self.logger.warning(
                    "Attempted to update non-existing category", extra={"category_id": entity_id}
                )
                return None
            old_name = category.name
            category.name = obj.name
        self.logger.info(
            "Category updated",
            extra={"category_id": entity_id, "old_name": old_name, "new_name": category.name},
        )
        return category

    async def delete(self, entity_id: int) -> bool:
        """
        Delete a category. A category still linked to a product is never
        removed; ``CategoryInUseError`` is raised instead.
        """
        if await self.db.get(Category, entity_id) is None:
            self.logger.warning("Attempted to delete non-existing category", extra={"category_id": entity_id})
            return False
        if await self.is_referenced(entity_id):
            self.logger.warning("Refused to delete category in use", extra={"category_id": entity_id})
            raise CategoryInUseError(entity_id)

        try:
            async with self.atomic():
                res = await self.db.execute(delete(Category).where(Category.id == entity_id))
        except IntegrityError as e:
            # linked between the check above and the delete
            self.logger.warning("Refused to delete category in use", extra={"category_id": entity_id})
            raise CategoryInUseError(entity_id) from e
        self.logger.info("Category deleted", extra={"category_id": entity_id})
        # rowcount can be None on some DBs; coerce safely
        return bool(getattr(res, "rowcount", 0))
