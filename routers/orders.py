# /routers/orders.py
import logging
from fastapi import APIRouter, Depends
from core.dependencies import get_api, require_auth
from core.errors import ApiError
from schemas.order import OrderHistoryOut
from services.api_client import StorefrontApi

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"], dependencies=[Depends(require_auth)])


def _as_list(payload) -> list:
    if isinstance(payload, dict):
        payload = payload.get("data", payload.get("orders", []))
    return payload if isinstance(payload, list) else []


# GET /orders/ - ready-made and custom order history of the signed-in user
@router.get("/", response_model=OrderHistoryOut)
async def list_orders(api: StorefrontApi = Depends(get_api)):
    history = OrderHistoryOut(orders=[], custom_orders=[], errors=[])

    try:
        history.orders = _as_list(await api.list_orders())
    except ApiError as e:
        logger.error("Error fetching orders: %s", e.message)
        history.errors.append(e.message)

    try:
        history.custom_orders = _as_list(await api.list_custom_orders())
    except ApiError as e:
        logger.error("Error fetching custom orders: %s", e.message)
        history.errors.append(e.message)

    return history
