from fastapi import APIRouter, Depends
from core.dependencies import get_auth
from schemas.auth import AuthStatus
from services.auth_gate import AuthGate

router = APIRouter()


# GET /auth/me - session flags used by navigation guards
@router.get("/me", response_model=AuthStatus)
async def me(auth: AuthGate = Depends(get_auth)):
    return AuthStatus(is_authenticated=auth.is_authenticated, is_admin=auth.is_admin, user=auth.user)
