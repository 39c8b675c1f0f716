import logging
from fastapi import APIRouter, Depends, Response
from core.dependencies import get_api
from core.errors import ApiError
from schemas.order import PaymentVerifyOut
from services.api_client import StorefrontApi
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment", tags=["Payments"])


# GET /payment/verify?reference=... - landing route after the hosted payment page
@router.get("/verify", response_model=PaymentVerifyOut)
async def verify_payment(
    response: Response,
    reference: Optional[str] = None,
    api: StorefrontApi = Depends(get_api),
):
    if not reference:
        response.status_code = 400
        return PaymentVerifyOut(status="error", message="Invalid payment reference")

    try:
        result = await api.verify_payment(reference)
    except ApiError as e:
        logger.error("Payment verification for %s failed: %s", reference, e.message)
        response.status_code = 502
        return PaymentVerifyOut(
            status="error",
            message="An error occurred while verifying payment.",
            redirect="/orders",
        )

    if isinstance(result, dict) and result.get("success"):
        return PaymentVerifyOut(
            status="success",
            message="Payment successful! Your order has been confirmed.",
            redirect="/orders",
        )
    return PaymentVerifyOut(
        status="error",
        message="Payment verification failed. Please contact support.",
        redirect="/orders",
    )
