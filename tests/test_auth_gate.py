from core.errors import ApiError
from services.auth_gate import AuthGate


async def test_no_token_means_signed_out_without_a_lookup(make_api):
    api = make_api()
    gate = await AuthGate.lookup(api)
    assert not gate.is_authenticated
    assert not gate.is_admin
    assert api.calls == []


async def test_customer_is_authenticated_but_not_admin(customer):
    gate = await AuthGate.lookup(customer)
    assert gate.is_authenticated
    assert not gate.is_admin
    assert gate.user["email"] == "ama@example.com"


async def test_admin_role(admin):
    gate = await AuthGate.lookup(admin)
    assert gate.is_admin


async def test_lookup_failure_reads_as_signed_out(customer):
    customer.fail["get_current_user"] = ApiError(503, "down")
    gate = await AuthGate.lookup(customer)
    assert not gate.is_authenticated


async def test_wrapped_user_payload(make_api):
    api = make_api(user={"user": {"id": "a1", "role": "admin"}})
    gate = await AuthGate.lookup(api)
    assert gate.is_admin
    assert gate.user == {"id": "a1", "role": "admin"}


def test_missing_user_is_not_admin():
    assert not AuthGate(None).is_admin
    assert not AuthGate({"id": "u1"}).is_admin
