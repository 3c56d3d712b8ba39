from typing import List

from fastapi import APIRouter, Body, Depends, Path, Query, Response, status

from app.core.config import settings
from app.core.exceptions import FieldValidationError, NotFoundError
from catalog.domain.entities.category import CategoryCreate, CategoryOut, CategoryUpdate
from catalog.services.category_service import CategoryService
from shared.wiring import get_category_service

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={
        400: {
            "description": "Validation failed.",
            "content": {
                "application/json": {
                    "examples": {
                        "empty_name": {
                            "summary": "Missing name",
                            "value": {"message": "Validation failed.", "errors": {"name": ["Category name is required."]}},
                        }
                    }
                }
            },
        },
        500: {"description": "Unexpected error; no internal detail is returned."},
    },
)


@router.get(
    "",
    summary="List categories",
    description="Returns one page of categories ordered by ID. An empty page answers `204 No Content`.",
    response_model=List[CategoryOut],
    responses={204: {"description": "No categories on this page."}},
)
async def list_categories(
    page: int = Query(1, ge=1, description="1-based page number."),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, alias="pageSize"),
    svc: CategoryService = Depends(get_category_service),
):
    rows = await svc.list(page, page_size)
    if not rows:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return rows


@router.get(
    "/{category_id}",
    summary="Get category by ID",
    response_model=CategoryOut,
    responses={404: {"description": "Category not found."}},
)
async def get_category(
    category_id: int = Path(..., description="Category ID"),
    svc: CategoryService = Depends(get_category_service),
):
    obj = await svc.get(category_id)
    if not obj:
        raise NotFoundError("Category", category_id)
    return obj


@router.post(
    "",
    summary="Create category",
    response_model=CategoryOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    response: Response,
    payload: CategoryCreate = Body(...),
    svc: CategoryService = Depends(get_category_service),
):
    obj = await svc.create(payload)
    response.headers["Location"] = f"{router.prefix}/{obj.id}"
    return obj


@router.put(
    "/{category_id}",
    summary="Update category",
    description="Renames a category. The `id` in the body must match the one in the URL.",
    response_model=CategoryOut,
    responses={404: {"description": "Category not found."}},
)
async def update_category(
    category_id: int = Path(..., description="Category ID"),
    payload: CategoryUpdate = Body(...),
    svc: CategoryService = Depends(get_category_service),
):
    if payload.id != category_id:
        raise FieldValidationError({"id": ["Category ID in URL and request body must match."]})
    obj = await svc.update(category_id, payload)
    if not obj:
        raise NotFoundError("Category", category_id)
    return obj


@router.delete(
    "/{category_id}",
    summary="Delete category",
    description="Deletes a category. Categories still assigned to a product are refused with `409`.",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Category not found."},
        409: {"description": "Category is still assigned to products."},
    },
)
async def delete_category(
    category_id: int = Path(..., description="Category ID"),
    svc: CategoryService = Depends(get_category_service),
):
    ok = await svc.delete(category_id)
    if not ok:
        raise NotFoundError("Category", category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
