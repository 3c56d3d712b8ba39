from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic_core import PydanticCustomError

from catalog.domain.entities.category import CategoryOut

PRODUCT_NAME_MAX_LENGTH = 200
# matches products.price NUMERIC(12, 2)
PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 2

# Decimal in, JSON number out
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ProductBase(BaseModel):
    name: str
    description: str
    price: Price = Field(max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("product_name_required", "Product name is required.")
        if len(v) > PRODUCT_NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "product_name_too_long", "Product name must be less than 200 characters."
            )
        return v

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("product_description_required", "Product description is required.")
        return v

    @field_validator("price")
    @classmethod
    def check_price(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise PydanticCustomError("price_not_positive", "Price must be greater than 0.")
        return v


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    id: int


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Price
    categories: List[CategoryOut] = []


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "product": {"name": "Headphones", "description": "Over-ear, wireless", "price": 129.99},
                "categoryIds": [1, 3],
            }
        },
    )

    product: ProductCreate
    category_ids: List[int] = Field(alias="categoryIds")


class UpdateProductRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "product": {"id": 7, "name": "Headphones", "description": "Over-ear, wireless", "price": 99.0},
                "categoryIds": [1, 4],
            }
        },
    )

    product: ProductUpdate
    category_ids: List[int] = Field(alias="categoryIds")
