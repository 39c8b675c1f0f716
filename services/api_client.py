# services/api_client.py
"""
Async client for the upstream commerce API.

One `aiohttp.ClientSession` is shared by the whole app; a `StorefrontApi`
instance is cheap and carries the visitor's upstream auth token, which is sent
as a Cookie header on every call. The session uses a dummy cookie jar so one
visitor's cookies never leak into another visitor's requests.
"""
import asyncio
import logging
from http.cookies import SimpleCookie
from typing import Any, Dict, Optional, Tuple

import aiohttp

from core.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS, UPSTREAM_AUTH_COOKIE
from core.errors import GENERIC_API_ERROR, ApiError, message_from_payload

logger = logging.getLogger(__name__)

ADMIN_RESOURCES = {"products", "categories", "styles", "materials"}


def create_http_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=HTTP_TIMEOUT_SECONDS),
        cookie_jar=aiohttp.DummyCookieJar(),
        headers={"Accept": "application/json"},
    )


async def _read_body(resp: aiohttp.ClientResponse) -> Any:
    try:
        return await resp.json(content_type=None)
    except ValueError:
        return await resp.text()


def _auth_cookie(cookies: SimpleCookie) -> Optional[str]:
    morsel = cookies.get(UPSTREAM_AUTH_COOKIE)
    return morsel.value if morsel is not None else None


class StorefrontApi:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = API_BASE_URL,
        auth_token: Optional[str] = None,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Any, SimpleCookie]:
        url = f"{self.base_url}/api{path}"
        headers = {}
        if self.auth_token:
            headers["Cookie"] = f"{UPSTREAM_AUTH_COOKIE}={self.auth_token}"

        try:
            async with self.session.request(method, url, json=json, params=params, headers=headers) as resp:
                payload = await _read_body(resp)
                if resp.status >= 400:
                    message = message_from_payload(payload)
                    logger.warning("%s %s -> %s: %s", method, path, resp.status, message)
                    raise ApiError(resp.status, message, payload)
                return payload, resp.cookies
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("%s %s failed: %r", method, path, e)
            raise ApiError(503, GENERIC_API_ERROR) from e

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        payload, _ = await self._send(method, path, **kwargs)
        return payload

    # ---------------- auth ----------------

    async def get_current_user(self) -> dict:
        return await self._request("GET", "/auth/user")

    async def login(self, email: str, password: str) -> Tuple[Any, Optional[str]]:
        payload, cookies = await self._send("POST", "/auth/login", json={"email": email, "password": password})
        return payload, _auth_cookie(cookies)

    async def register(self, name: str, email: str, password: str) -> Tuple[Any, Optional[str]]:
        payload, cookies = await self._send(
            "POST", "/auth/register", json={"name": name, "email": email, "password": password}
        )
        return payload, _auth_cookie(cookies)

    async def logout(self) -> Any:
        return await self._request("POST", "/auth/logout", json={})

    # ---------------- catalog ----------------

    async def list_products(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", "/products", params=params or None)

    async def get_product(self, product_id) -> dict:
        return await self._request("GET", f"/products/{product_id}")

    async def list_categories(self) -> Any:
        return await self._request("GET", "/categories")

    async def list_styles(self, category: Optional[str] = None) -> Any:
        return await self._request("GET", "/styles", params={"category": category} if category else None)

    async def list_materials(self) -> Any:
        return await self._request("GET", "/materials")

    # ---------------- orders ----------------

    async def create_order(self, body: dict) -> dict:
        return await self._request("POST", "/orders", json=body)

    async def create_custom_order(self, body: dict) -> dict:
        return await self._request("POST", "/custom-orders", json=body)

    async def list_orders(self) -> Any:
        return await self._request("GET", "/orders")

    async def list_custom_orders(self) -> Any:
        return await self._request("GET", "/custom-orders")

    async def get_custom_order(self, order_id) -> dict:
        return await self._request("GET", f"/custom-orders/{order_id}")

    # ---------------- payments ----------------

    async def initialize_payment(self, order_id, order_type: str) -> dict:
        return await self._request(
            "POST", "/payments/initialize-order", json={"orderId": order_id, "orderType": order_type}
        )

    async def verify_payment(self, reference: str) -> dict:
        return await self._request("GET", f"/payments/verify/{reference}")

    # ---------------- admin ----------------

    @staticmethod
    def _admin_path(resource: str) -> str:
        if resource not in ADMIN_RESOURCES:
            raise ValueError(f"Unknown admin resource: {resource}")
        return f"/admin/{resource}"

    async def admin_list(self, resource: str) -> Any:
        return await self._request("GET", self._admin_path(resource))

    async def admin_create(self, resource: str, body: dict) -> Any:
        return await self._request("POST", self._admin_path(resource), json=body)

    async def admin_update(self, resource: str, item_id, body: dict) -> Any:
        return await self._request("PUT", f"{self._admin_path(resource)}/{item_id}", json=body)

    async def admin_delete(self, resource: str, item_id) -> Any:
        return await self._request("DELETE", f"{self._admin_path(resource)}/{item_id}")

    async def admin_list_orders(self) -> Any:
        return await self._request("GET", "/admin/orders")

    async def admin_list_custom_orders(self) -> Any:
        return await self._request("GET", "/admin/custom-orders")

    async def update_order_status(self, order_id, status: str) -> Any:
        return await self._request("PATCH", f"/admin/orders/{order_id}/status", json={"status": status})

    async def update_custom_order_status(self, order_id, status: str) -> Any:
        return await self._request("PATCH", f"/admin/custom-orders/{order_id}/status", json={"status": status})

    async def dashboard_stats(self) -> Any:
        return await self._request("GET", "/admin/dashboard/stats")

    async def recent_orders(self, limit: int = 5) -> Any:
        return await self._request("GET", "/admin/orders/recent", params={"limit": limit})
