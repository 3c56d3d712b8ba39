from __future__ import annotations
from decimal import Decimal
from typing import List

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base
from catalog.domain.models.category import Category, product_categories


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # read-only view of the join table; link rows are written by ProductRepository
    # and the collection is only ever filled by an explicit eager load
    categories: Mapped[List[Category]] = relationship(
        Category,
        secondary=product_categories,
        order_by=Category.id,
        viewonly=True,
        lazy="raise",
    )
