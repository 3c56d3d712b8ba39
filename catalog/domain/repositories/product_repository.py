from typing import List, Optional, Sequence, Set

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.core.exceptions import ReferentialIntegrityError
from catalog.domain.associations import AssociationDelta, dedupe_ids, reconcile
from catalog.domain.entities.product import ProductCreate, ProductUpdate
from catalog.domain.models.category import product_categories
from catalog.domain.models.product import Product
from shared.abstracts.abstract_repository import AbstractRepository


class ProductRepository(AbstractRepository):

    def _select_with_categories(self):
        # categories are never lazy-loaded: every read fetches them explicitly
        return (
            select(Product)
            .options(selectinload(Product.categories))
            .execution_options(populate_existing=True)
        )

    async def list(self, page: int, page_size: int) -> Sequence[Product]:
        stmt = (
            self._select_with_categories()
            .order_by(Product.id.asc())
            .offset(self.offset_for(page, page_size))
            .limit(page_size)
        )
        res = await self.db.execute(stmt)
        return res.scalars().all()

    async def get(self, product_id: int) -> Optional[Product]:
        res = await self.db.execute(self._select_with_categories().where(Product.id == product_id))
        obj = res.scalars().first()
        if obj is None:
            self.logger.warning("Product was not found", extra={"product_id": product_id})
        return obj

    async def insert(self, payload: ProductCreate, category_ids: Sequence[int] = ()) -> Product:
        """
        Insert the product row and one link row per distinct category id in a
        single transaction.
        """
        ids = dedupe_ids(category_ids)
        obj = Product(name=payload.name, description=payload.description, price=payload.price)
        try:
            async with self.atomic():
                self.db.add(obj)
                await self.db.flush()
                await self._apply_delta(obj.id, AssociationDelta(to_add=frozenset(ids)))
        except IntegrityError as e:
            raise self._integrity_error(ids, e) from e

        self.logger.info(
            "Product created",
            extra={"product_id": obj.id, "product_name": obj.name, "category_ids": ids},
        )
        return await self.get(obj.id)

    async def update(self, product_id: int, payload: ProductUpdate, category_ids: Sequence[int]) -> Optional[Product]:
        """
        Update scalar fields and bring the category links in line with
        ``category_ids``. Links present before and after are left alone.
        Returns ``None`` without writing for an empty id list or a missing product.
        """
        ids = dedupe_ids(category_ids)
        if not ids:
            self.logger.warning(
                "Attempted to update product with an empty category list", extra={"product_id": product_id}
            )
            return None

        try:
            async with self.atomic():
                obj = await self.db.get(Product, product_id)
                if obj is None:
                    self.logger.warning("Attempted to update non-existing product", extra={"product_id": product_id})
                    return None

                obj.name = payload.name
                obj.description = payload.description
                obj.price = payload.price

                current = await self.list_category_ids(product_id)
                delta = reconcile(current, ids)
                await self.db.flush()
                await self._apply_delta(product_id, delta)
        except IntegrityError as e:
            raise self._integrity_error(ids, e) from e

        self.logger.info(
            "Product updated",
            extra={
                "product_id": product_id,
                "category_ids": ids,
                "added_category_ids": sorted(delta.to_add),
                "removed_category_ids": sorted(delta.to_remove),
            },
        )
        return await self.get(product_id)

    async def delete(self, product_id: int) -> bool:
        async with self.atomic():
            # remove join rows first so this works even without ON DELETE CASCADE
            await self.db.execute(
                delete(product_categories).where(product_categories.c.product_id == product_id)
            )
            res = await self.db.execute(delete(Product).where(Product.id == product_id))
        # rowcount can be None on some DBs; coerce safely
        deleted = bool(getattr(res, "rowcount", 0))
        if deleted:
            self.logger.info("Product deleted", extra={"product_id": product_id})
        else:
            self.logger.warning("Attempted to delete non-existing product", extra={"product_id": product_id})
        return deleted

    # ----------------------------
    # Category link management (join table only, no collection writes)
    # ----------------------------

    async def list_category_ids(self, product_id: int) -> Set[int]:
        res = await self.db.execute(
            select(product_categories.c.category_id).where(product_categories.c.product_id == product_id)
        )
        return {row[0] for row in res.all()}

    async def _apply_delta(self, product_id: int, delta: AssociationDelta) -> None:
        if delta.is_empty:
            return
        if delta.to_remove:
            await self.db.execute(
                delete(product_categories).where(
                    product_categories.c.product_id == product_id,
                    product_categories.c.category_id.in_(sorted(delta.to_remove)),
                )
            )
        if delta.to_add:
            await self.db.execute(
                insert(product_categories),
                [{"product_id": product_id, "category_id": cid} for cid in sorted(delta.to_add)],
            )

    def _integrity_error(self, category_ids: List[int], error: IntegrityError) -> ReferentialIntegrityError:
        self.logger.warning(
            "Category link rejected by the database",
            extra={"category_ids": category_ids, "error": str(error.orig)},
        )
        return ReferentialIntegrityError("One or more categories do not exist.")
