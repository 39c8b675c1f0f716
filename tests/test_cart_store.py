import json

from core.config import CART_STORAGE_KEY
from services.cart_store import CartStore, parse_cart

SHIRT = {"id": 1, "name": "Ankara Shirt", "price": 50}
DRESS = {"id": "d-7", "name": "Kente Dress", "price": 120.5}


async def test_add_merges_lines_for_the_same_product(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT)
    await cart.add_to_cart(SHIRT, 2)
    await cart.add_to_cart(DRESS)

    assert [(line.product_id, line.quantity) for line in cart.lines] == [(1, 3), ("d-7", 1)]


async def test_product_ids_match_across_int_and_str(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT)
    await cart.add_to_cart({**SHIRT, "id": "1"})

    assert len(cart.lines) == 1
    assert cart.lines[0].quantity == 2


async def test_every_mutation_rewrites_the_mirror(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT, 2)
    stored = json.loads(await storage.get_item("s1", CART_STORAGE_KEY))
    assert stored[0]["quantity"] == 2

    await cart.update_quantity(1, 5)
    stored = json.loads(await storage.get_item("s1", CART_STORAGE_KEY))
    assert stored[0]["quantity"] == 5

    reloaded = await CartStore.load(storage, "s1")
    assert reloaded.cart_count == 5


async def test_update_quantity_below_one_is_ignored(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT, 2)

    await cart.update_quantity(1, 0)
    await cart.update_quantity(1, -3)

    assert cart.lines[0].quantity == 2


async def test_update_quantity_of_unknown_product_is_a_noop(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT)
    await cart.update_quantity(99, 4)
    assert [(line.product_id, line.quantity) for line in cart.lines] == [(1, 1)]


async def test_remove_missing_product_is_not_an_error(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT)
    await cart.remove_from_cart("nope")
    await cart.remove_from_cart(1)
    assert cart.lines == []


async def test_clear_cart_drops_the_mirror(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT)
    await cart.clear_cart()

    assert cart.lines == []
    assert await storage.get_item("s1", CART_STORAGE_KEY) is None


async def test_totals_follow_the_current_lines(storage):
    cart = await CartStore.load(storage, "s1")
    await cart.add_to_cart(SHIRT, 2)
    assert cart.cart_total == 100
    assert cart.cart_count == 2

    await cart.add_to_cart(DRESS)
    assert cart.cart_total == 220.5
    assert cart.cart_count == 3

    cart.lines[0].quantity = 1
    assert cart.cart_total == 170.5


async def test_no_duplicate_lines_after_mixed_operations(storage):
    cart = await CartStore.load(storage, "s1")
    ops = [
        ("add", 1, 1), ("add", 2, 1), ("add", 1, 2), ("update", 2, 0),
        ("remove", 1, None), ("add", 1, 1), ("update", 1, 4), ("add", 2, 3),
    ]
    for op, pid, qty in ops:
        if op == "add":
            await cart.add_to_cart({"id": pid, "name": f"p{pid}", "price": 10}, qty)
        elif op == "update":
            await cart.update_quantity(pid, qty)
        else:
            await cart.remove_from_cart(pid)
        ids = [str(line.product_id) for line in cart.lines]
        assert len(ids) == len(set(ids))
        assert all(line.quantity >= 1 for line in cart.lines)


async def test_invalid_json_in_mirror_loads_empty_cart(storage):
    await storage.set_item("s1", CART_STORAGE_KEY, "{not json")
    cart = await CartStore.load(storage, "s1")
    assert cart.lines == []
    assert cart.cart_total == 0


def test_parse_cart_rejects_wrong_shapes():
    assert parse_cart(json.dumps({"id": 1})) == []
    assert parse_cart(json.dumps([{"product_id": 1, "name": "x", "price": 5, "quantity": 0}])) == []
    assert parse_cart(None) == []


def test_parse_cart_folds_duplicate_lines():
    raw = json.dumps([
        {"product_id": 1, "name": "x", "price": 5, "quantity": 1},
        {"product_id": "1", "name": "x", "price": 5, "quantity": 2},
    ])
    lines = parse_cart(raw)
    assert len(lines) == 1
    assert lines[0].quantity == 3
