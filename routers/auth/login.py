from fastapi import APIRouter, Depends, HTTPException, Response
from core.config import UPSTREAM_AUTH_COOKIE
from core.dependencies import get_api
from core.errors import ApiError
from schemas.auth import LoginRequest
from services.api_client import StorefrontApi

router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=UPSTREAM_AUTH_COOKIE,
        value=token,
        httponly=True,
        secure=False,     # enable behind HTTPS
        samesite="lax"
    )


@router.post("/login")
async def login(data: LoginRequest, response: Response, api: StorefrontApi = Depends(get_api)):
    try:
        payload, token = await api.login(data.email, data.password)
    except ApiError as e:
        status_code = e.status if e.status in (400, 401, 403) else 502
        raise HTTPException(status_code=status_code, detail=e.message if e.status < 500 else "Login failed")

    if token:
        set_auth_cookie(response, token)

    user = payload.get("user") if isinstance(payload, dict) else None
    return {"message": "Logged in", "user": user}
