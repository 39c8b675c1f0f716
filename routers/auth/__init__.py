from fastapi import APIRouter
from . import login, logout, register, user

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
auth_router.include_router(register.router)
auth_router.include_router(login.router)
auth_router.include_router(logout.router)
auth_router.include_router(user.router)
