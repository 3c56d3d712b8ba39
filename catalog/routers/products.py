from typing import List

from fastapi import APIRouter, Body, Depends, Path, Query, Response, status

from app.core.config import settings
from app.core.exceptions import FieldValidationError, NotFoundError
from catalog.domain.entities.product import CreateProductRequest, ProductOut, UpdateProductRequest
from catalog.services.product_service import ProductService
from shared.wiring import get_product_service

router = APIRouter(
    prefix="/products",
    tags=["products"],
    responses={
        400: {
            "description": "Validation failed or unknown category IDs.",
            "content": {
                "application/json": {
                    "examples": {
                        "no_categories": {
                            "summary": "Empty category list",
                            "value": {
                                "message": "Validation failed.",
                                "errors": {"categoryIds": ["A product must have at least one category."]},
                            },
                        },
                        "unknown_category": {
                            "summary": "Unknown category",
                            "value": {"message": "Categories not found: 42.", "missing_ids": [42]},
                        },
                    }
                }
            },
        },
        500: {"description": "Unexpected error; no internal detail is returned."},
    },
)


@router.get(
    "",
    summary="List products",
    description=(
        "Returns one page of products ordered by ID, each with its categories. "
        "An empty page answers `204 No Content`."
    ),
    response_model=List[ProductOut],
    responses={204: {"description": "No products on this page."}},
)
async def list_products(
    page: int = Query(1, ge=1, description="1-based page number."),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, alias="pageSize"),
    svc: ProductService = Depends(get_product_service),
):
    rows = await svc.list(page, page_size)
    if not rows:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return rows


@router.get(
    "/{product_id}",
    summary="Get product by ID",
    response_model=ProductOut,
    responses={404: {"description": "Product not found."}},
)
async def get_product(
    product_id: int = Path(..., description="Product ID"),
    svc: ProductService = Depends(get_product_service),
):
    obj = await svc.get(product_id)
    if not obj:
        raise NotFoundError("Product", product_id)
    return obj


@router.post(
    "",
    summary="Create product",
    description=(
        "Creates a product and links it to the given categories. "
        "Repeated category IDs are collapsed; at least one category is required."
    ),
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    response: Response,
    payload: CreateProductRequest = Body(...),
    svc: ProductService = Depends(get_product_service),
):
    obj = await svc.create(payload.product, payload.category_ids)
    response.headers["Location"] = f"{router.prefix}/{obj.id}"
    return obj


@router.put(
    "/{product_id}",
    summary="Update product",
    description=(
        "Replaces name, description and price, and sets the product's categories to exactly "
        "`categoryIds`. Links that already exist are kept as they are."
    ),
    response_model=ProductOut,
    responses={404: {"description": "Product not found."}},
)
async def update_product(
    product_id: int = Path(..., description="Product ID"),
    payload: UpdateProductRequest = Body(...),
    svc: ProductService = Depends(get_product_service),
):
    if payload.product.id != product_id:
        raise FieldValidationError({"product.id": ["Product ID in URL and request body must match."]})
    obj = await svc.update(product_id, payload.product, payload.category_ids)
    if not obj:
        raise NotFoundError("Product", product_id)
    return obj


@router.delete(
    "/{product_id}",
    summary="Delete product",
    description="Deletes a product together with its category links.",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "Product not found."}},
)
async def delete_product(
    product_id: int = Path(..., description="Product ID"),
    svc: ProductService = Depends(get_product_service),
):
    ok = await svc.delete(product_id)
    if not ok:
        raise NotFoundError("Product", product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
