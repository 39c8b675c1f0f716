from fastapi import APIRouter, Depends, Query
from typing import Literal
from core.dependencies import get_api, require_admin
from core.errors import ApiError, http_error
from schemas.order import CustomOrderStatusUpdate, OrderStatusUpdate
from schemas.product import CategoryIn, MaterialIn, ProductCreate, ProductUpdate, StyleIn
from services.api_client import StorefrontApi

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])

Resource = Literal["products", "categories", "styles", "materials"]

# ===================== Common =====================

async def _call(coro):
    try:
        return await coro
    except ApiError as e:
        raise http_error(e)

# ===================== Orders =====================

@router.get("/orders")
async def list_all_orders(api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_list_orders())

@router.get("/orders/recent")
async def list_recent_orders(limit: int = Query(5, ge=1, le=50), api: StorefrontApi = Depends(get_api)):
    return await _call(api.recent_orders(limit))

@router.patch("/orders/{order_id}/status")
async def update_order_status(order_id: str, data: OrderStatusUpdate, api: StorefrontApi = Depends(get_api)):
    if data.current_status == data.status:
        return {"message": "Status unchanged", "order_id": order_id, "status": data.status}
    await _call(api.update_order_status(order_id, data.status))
    return {"message": "Order status updated", "order_id": order_id, "status": data.status}

@router.get("/custom-orders")
async def list_custom_orders(api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_list_custom_orders())

@router.get("/custom-orders/{order_id}")
async def get_custom_order(order_id: str, api: StorefrontApi = Depends(get_api)):
    return await _call(api.get_custom_order(order_id))

@router.patch("/custom-orders/{order_id}/status")
async def update_custom_order_status(
    order_id: str, data: CustomOrderStatusUpdate, api: StorefrontApi = Depends(get_api)
):
    if data.current_status == data.status:
        return {"message": "Status unchanged", "order_id": order_id, "status": data.status}
    await _call(api.update_custom_order_status(order_id, data.status))
    return {"message": "Custom order status updated", "order_id": order_id, "status": data.status}

# ===================== Stats =====================

@router.get("/dashboard/stats")
async def dashboard_stats(api: StorefrontApi = Depends(get_api)):
    return await _call(api.dashboard_stats())

# ===================== Catalog =====================

@router.get("/{resource}")
async def list_resource(resource: Resource, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_list(resource))

@router.post("/products")
async def create_product(product: ProductCreate, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_create("products", product.to_upstream(exclude_none=True)))

@router.put("/products/{product_id}")
async def update_product(product_id: str, update: ProductUpdate, api: StorefrontApi = Depends(get_api)):
    data = update.to_upstream(exclude_none=True)
    if not data:
        return {"message": "Nothing to update", "product_id": product_id}
    return await _call(api.admin_update("products", product_id, data))

@router.post("/categories")
async def create_category(category: CategoryIn, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_create("categories", category.to_upstream(exclude_none=True)))

@router.put("/categories/{category_id}")
async def update_category(category_id: str, category: CategoryIn, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_update("categories", category_id, category.to_upstream(exclude_none=True)))

@router.post("/styles")
async def create_style(style: StyleIn, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_create("styles", style.to_upstream(exclude_none=True)))

@router.put("/styles/{style_id}")
async def update_style(style_id: str, style: StyleIn, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_update("styles", style_id, style.to_upstream(exclude_none=True)))

@router.post("/materials")
async def create_material(material: MaterialIn, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_create("materials", material.to_upstream(exclude_none=True)))

@router.put("/materials/{material_id}")
async def update_material(material_id: str, material: MaterialIn, api: StorefrontApi = Depends(get_api)):
    return await _call(api.admin_update("materials", material_id, material.to_upstream(exclude_none=True)))

@router.delete("/{resource}/{item_id}")
async def delete_resource(resource: Resource, item_id: str, api: StorefrontApi = Depends(get_api)):
    await _call(api.admin_delete(resource, item_id))
    return {"message": "Deleted", "resource": resource, "id": item_id}
