from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

CATEGORY_NAME_MAX_LENGTH = 100


class CategoryBase(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise PydanticCustomError("category_name_required", "Category name is required.")
        if len(v) > CATEGORY_NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "category_name_too_long", "Category name must be less than 100 characters."
            )
        return v


class CategoryCreate(CategoryBase):
    model_config = {"json_schema_extra": {"example": {"name": "Electronics"}}}


class CategoryUpdate(CategoryBase):
    id: int

    model_config = {"json_schema_extra": {"example": {"id": 1, "name": "Consumer electronics"}}}


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
