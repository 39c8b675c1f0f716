import pytest
from fastapi.testclient import TestClient

from core.dependencies import get_api
from core.errors import ApiError, StorageError
from core.storage import MemoryStorage, Storage
from main import app

PRODUCTS = {
    "1": {"id": 1, "name": "Ankara Shirt", "price": 50, "imageUrl": "/img/1.png"},
    "2": {"id": 2, "name": "Linen Trousers", "price": "35.50"},
}


class FakeApi:
    """Stand-in for StorefrontApi that records calls and can be told to fail."""

    def __init__(self, user=None):
        self.user = user
        self.auth_token = "tok" if user else None
        self.calls = []
        self.fail = {}
        self.order_response = {"id": "ord-1"}
        self.payment_response = {"authorizationUrl": "https://pay.example/abc", "reference": "ref-1"}
        self.verify_response = {"success": True}

    def _maybe_fail(self, name):
        error = self.fail.get(name)
        if error is not None:
            raise error

    async def get_current_user(self):
        self.calls.append(("get_current_user",))
        self._maybe_fail("get_current_user")
        if self.user is None:
            raise ApiError(401, "Not authenticated")
        return self.user

    async def login(self, email, password):
        self.calls.append(("login", email))
        if password != "secret":
            raise ApiError(401, "Invalid credentials")
        return {"user": {"id": "u1", "email": email, "role": "user"}}, "tok"

    async def logout(self):
        self.calls.append(("logout",))
        self._maybe_fail("logout")
        return {"message": "Logged out"}

    async def get_product(self, product_id):
        self.calls.append(("get_product", product_id))
        product = PRODUCTS.get(str(product_id))
        if product is None:
            raise ApiError(404, "Product not found")
        return product

    async def create_order(self, body):
        self.calls.append(("create_order", body))
        self._maybe_fail("create_order")
        return self.order_response

    async def create_custom_order(self, body):
        self.calls.append(("create_custom_order", body))
        self._maybe_fail("create_custom_order")
        return self.order_response

    async def initialize_payment(self, order_id, order_type):
        self.calls.append(("initialize_payment", order_id, order_type))
        self._maybe_fail("initialize_payment")
        return self.payment_response

    async def verify_payment(self, reference):
        self.calls.append(("verify_payment", reference))
        self._maybe_fail("verify_payment")
        return self.verify_response

    async def list_orders(self):
        self._maybe_fail("list_orders")
        return [{"id": "ord-1", "status": "paid"}]

    async def list_custom_orders(self):
        self._maybe_fail("list_custom_orders")
        return [{"id": "co-1", "status": "pending"}]

    async def update_order_status(self, order_id, status):
        self.calls.append(("update_order_status", order_id, status))
        return {"id": order_id, "status": status}

    async def admin_list(self, resource):
        self.calls.append(("admin_list", resource))
        return []

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


class BrokenStorage(MemoryStorage):
    """Reads work, writes fail."""

    async def set_item(self, session_id, key, value):
        raise StorageError("write refused")


@pytest.fixture
def storage() -> Storage:
    return MemoryStorage()


@pytest.fixture
def transient() -> Storage:
    return MemoryStorage()


@pytest.fixture
def customer():
    return FakeApi(user={"id": "u1", "name": "Ama", "email": "ama@example.com", "role": "user"})


@pytest.fixture
def admin():
    return FakeApi(user={"id": "a1", "name": "Kofi", "email": "kofi@example.com", "role": "admin"})


@pytest.fixture
def make_client():
    clients = []

    def _make(api):
        app.dependency_overrides[get_api] = lambda: api
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_storage() -> Storage:
    return BrokenStorage()


@pytest.fixture
def make_api():
    return FakeApi
