# schemas/auth.py
from pydantic import BaseModel, EmailStr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str


class AuthStatus(BaseModel):
    is_authenticated: bool
    is_admin: bool
    user: Optional[dict] = None
