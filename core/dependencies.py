# core/dependencies.py
from typing import Set

from fastapi import Depends, Request

from core.config import API_BASE_URL, UPSTREAM_AUTH_COOKIE
from core.errors import AdminRequired, LoginRequired
from core.storage import Storage
from services.api_client import StorefrontApi
from services.auth_gate import AuthGate
from services.cart_store import CartStore
from services.checkout import CheckoutService


def get_session_id(request: Request) -> str:
    return request.state.session_id


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_transient_storage(request: Request) -> Storage:
    return request.app.state.transient


def get_api(request: Request) -> StorefrontApi:
    return StorefrontApi(
        request.app.state.http,
        API_BASE_URL,
        auth_token=request.cookies.get(UPSTREAM_AUTH_COOKIE),
    )


async def get_auth(api: StorefrontApi = Depends(get_api)) -> AuthGate:
    return await AuthGate.lookup(api)


async def require_auth(request: Request, auth: AuthGate = Depends(get_auth)) -> AuthGate:
    if not auth.is_authenticated:
        raise LoginRequired(request.url.path)
    return auth


async def require_admin(auth: AuthGate = Depends(require_auth)) -> AuthGate:
    if not auth.is_admin:
        raise AdminRequired()
    return auth


async def get_cart(
    storage: Storage = Depends(get_storage),
    session_id: str = Depends(get_session_id),
) -> CartStore:
    return await CartStore.load(storage, session_id)


def get_checkout_in_flight(request: Request) -> Set[str]:
    return request.app.state.checkout_in_flight


def get_checkout_service(
    api: StorefrontApi = Depends(get_api),
    storage: Storage = Depends(get_storage),
    transient: Storage = Depends(get_transient_storage),
    in_flight: Set[str] = Depends(get_checkout_in_flight),
) -> CheckoutService:
    return CheckoutService(api, transient, storage, in_flight)
