from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from core.dependencies import get_checkout_service, get_session_id, require_auth
from core.errors import CheckoutError, EmptyCheckout, IncompleteShipping
from schemas.checkout import CheckoutSummary, ShippingAddress
from services.checkout import CheckoutService

router = APIRouter(prefix="/checkout", tags=["Checkout"], dependencies=[Depends(require_auth)])


def _error_response(e: CheckoutError):
    if isinstance(e, EmptyCheckout):
        return RedirectResponse(url="/cart", status_code=303)
    content = {"detail": e.message}
    if isinstance(e, IncompleteShipping):
        content["missing"] = e.missing
    return JSONResponse(status_code=e.status_code, content=content)


# GET /checkout/ - priced summary of the active order source
@router.get("/", response_model=CheckoutSummary)
async def get_checkout(
    session_id: str = Depends(get_session_id),
    service: CheckoutService = Depends(get_checkout_service),
):
    try:
        return await service.summary(session_id)
    except CheckoutError as e:
        return _error_response(e)


# POST /checkout/ - create the order, open a payment and send the browser to it
@router.post("/")
async def submit_checkout(
    shipping_address: ShippingAddress,
    redirect: bool = True,
    session_id: str = Depends(get_session_id),
    service: CheckoutService = Depends(get_checkout_service),
):
    try:
        result = await service.prepare_and_submit(session_id, shipping_address)
    except CheckoutError as e:
        return _error_response(e)

    if redirect:
        return RedirectResponse(url=result.authorization_url, status_code=303)
    return result
