from fastapi import APIRouter, Depends, HTTPException, Query
from core.dependencies import get_api
from core.errors import ApiError, http_error
from services.api_client import StorefrontApi
from typing import Optional

router = APIRouter(tags=["Catalog"])


# GET /products - catalog listing, filters passed through upstream
@router.get("/products")
async def get_products(
    category: Optional[str] = None,
    search: Optional[str] = Query(None, description="Keyword on product name"),
    api: StorefrontApi = Depends(get_api),
):
    params = {k: v for k, v in {"category": category, "search": search}.items() if v}
    try:
        return await api.list_products(params)
    except ApiError as e:
        raise http_error(e)


@router.get("/products/{product_id}")
async def get_product(product_id: str, api: StorefrontApi = Depends(get_api)):
    try:
        return await api.get_product(product_id)
    except ApiError as e:
        if e.status == 404:
            raise HTTPException(status_code=404, detail="Product not found")
        raise http_error(e)


@router.get("/categories")
async def get_categories(api: StorefrontApi = Depends(get_api)):
    try:
        return await api.list_categories()
    except ApiError as e:
        raise http_error(e)


@router.get("/styles")
async def get_styles(category: Optional[str] = None, api: StorefrontApi = Depends(get_api)):
    try:
        return await api.list_styles(category)
    except ApiError as e:
        raise http_error(e)


@router.get("/materials")
async def get_materials(api: StorefrontApi = Depends(get_api)):
    try:
        return await api.list_materials()
    except ApiError as e:
        raise http_error(e)
