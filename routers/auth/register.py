from fastapi import APIRouter, Depends, HTTPException, Response
from core.dependencies import get_api
from core.errors import ApiError, http_error
from schemas.auth import RegisterRequest
from services.api_client import StorefrontApi
from .login import set_auth_cookie

router = APIRouter()


@router.post("/register")
async def register(data: RegisterRequest, response: Response, api: StorefrontApi = Depends(get_api)):
    try:
        payload, token = await api.register(data.name, data.email, data.password)
    except ApiError as e:
        if e.status == 409:
            raise HTTPException(status_code=400, detail=e.message)
        raise http_error(e)

    if token:
        set_auth_cookie(response, token)

    user = payload.get("user") if isinstance(payload, dict) else None
    return {"message": "Registered", "user": user}
