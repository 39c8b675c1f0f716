import pytest
from aiohttp import web
from aiohttp import test_utils

from core.errors import GENERIC_API_ERROR, ApiError
from services.api_client import StorefrontApi, create_http_session

USER = {"id": "u1", "name": "Ama", "role": "user"}


async def current_user(request):
    if request.cookies.get("access_token") != "tok":
        return web.json_response({"message": "Not authenticated"}, status=401)
    return web.json_response(USER)


async def login(request):
    body = await request.json()
    if body.get("password") != "secret":
        return web.json_response({"message": "Invalid credentials"}, status=401)
    resp = web.json_response({"user": USER})
    resp.set_cookie("access_token", "tok", httponly=True)
    return resp


async def product(request):
    if request.match_info["product_id"] != "1":
        return web.json_response({"detail": "Product not found"}, status=404)
    return web.json_response({"id": 1, "name": "Ankara Shirt", "price": 50})


async def products(request):
    return web.json_response({"query": dict(request.query)})


async def initialize(request):
    return web.json_response({"received": await request.json()})


async def broken(request):
    return web.Response(text="upstream exploded", status=500)


@pytest.fixture
async def upstream():
    app = web.Application()
    app.router.add_get("/api/auth/user", current_user)
    app.router.add_post("/api/auth/login", login)
    app.router.add_get("/api/products", products)
    app.router.add_get("/api/products/{product_id}", product)
    app.router.add_post("/api/payments/initialize-order", initialize)
    app.router.add_get("/api/admin/dashboard/stats", broken)
    server = test_utils.TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
async def http():
    session = create_http_session()
    yield session
    await session.close()


def base_url(server) -> str:
    return str(server.make_url("")).rstrip("/")


async def test_token_is_sent_as_cookie(upstream, http):
    api = StorefrontApi(http, base_url(upstream), auth_token="tok")
    assert await api.get_current_user() == USER


async def test_missing_token_is_rejected_upstream(upstream, http):
    api = StorefrontApi(http, base_url(upstream))
    with pytest.raises(ApiError) as exc:
        await api.get_current_user()
    assert exc.value.status == 401
    assert exc.value.message == "Not authenticated"


async def test_login_returns_upstream_token_without_storing_it(upstream, http):
    api = StorefrontApi(http, base_url(upstream))
    payload, token = await api.login("ama@example.com", "secret")
    assert payload == {"user": USER}
    assert token == "tok"
    # the shared session keeps no cookies between visitors
    with pytest.raises(ApiError):
        await api.get_current_user()
    assert await StorefrontApi(http, base_url(upstream), auth_token=token).get_current_user() == USER


async def test_error_detail_is_surfaced(upstream, http):
    api = StorefrontApi(http, base_url(upstream))
    with pytest.raises(ApiError) as exc:
        await api.get_product(99)
    assert exc.value.status == 404
    assert exc.value.message == "Product not found"
    assert exc.value.payload == {"detail": "Product not found"}


async def test_non_json_error_falls_back_to_generic_message(upstream, http):
    api = StorefrontApi(http, base_url(upstream), auth_token="tok")
    with pytest.raises(ApiError) as exc:
        await api.dashboard_stats()
    assert exc.value.status == 500
    assert exc.value.message == GENERIC_API_ERROR


async def test_payment_init_body(upstream, http):
    api = StorefrontApi(http, base_url(upstream), auth_token="tok")
    result = await api.initialize_payment("ord-1", "custom")
    assert result == {"received": {"orderId": "ord-1", "orderType": "custom"}}


async def test_query_params(upstream, http):
    api = StorefrontApi(http, base_url(upstream))
    result = await api.list_products({"category": "shirts"})
    assert result == {"query": {"category": "shirts"}}


async def test_unreachable_upstream_is_a_503(http):
    api = StorefrontApi(http, "http://127.0.0.1:9")
    with pytest.raises(ApiError) as exc:
        await api.list_categories()
    assert exc.value.status == 503
    assert exc.value.message == GENERIC_API_ERROR


def test_unknown_admin_resource_is_refused():
    with pytest.raises(ValueError):
        StorefrontApi._admin_path("users")
