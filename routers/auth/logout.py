import logging
from fastapi import APIRouter, Depends, Response
from core.config import UPSTREAM_AUTH_COOKIE
from core.dependencies import get_api
from core.errors import ApiError
from services.api_client import StorefrontApi

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/logout")
async def logout(response: Response, api: StorefrontApi = Depends(get_api)):
    try:
        await api.logout()
    except ApiError as e:
        # the local cookie goes either way
        logger.warning("Upstream logout failed: %s", e.message)
    response.delete_cookie(UPSTREAM_AUTH_COOKIE)
    return {"message": "Logged out"}
