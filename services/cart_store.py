# services/cart_store.py
import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from core.config import CART_STORAGE_KEY
from core.storage import Storage
from schemas.cart import CartLine, ProductId

logger = logging.getLogger(__name__)

_lines_adapter = TypeAdapter(List[CartLine])


def same_product(a: ProductId, b: ProductId) -> bool:
    """Ids arrive as int from JSON bodies and as str from paths; compare loosely."""
    return str(a) == str(b)


def parse_cart(raw: Optional[str]) -> List[CartLine]:
    """Decode the durable mirror. Corrupt data yields an empty cart."""
    if not raw:
        return []
    try:
        lines = _lines_adapter.validate_python(json.loads(raw))
    except (ValueError, ValidationError) as e:
        logger.warning("Discarding unreadable cart mirror: %s", e)
        return []

    # a hand-edited mirror may hold duplicates; fold them into one line
    merged: List[CartLine] = []
    for line in lines:
        existing = next((m for m in merged if same_product(m.product_id, line.product_id)), None)
        if existing is None:
            merged.append(line)
        else:
            existing.quantity += line.quantity
    return merged


class CartStore:
    """
    Product selection of one visitor, mirrored to durable storage.

    Every mutation rewrites the mirror before returning. Totals are computed
    from the current lines on each read.
    """

    def __init__(self, storage: Storage, session_id: str, lines: Optional[List[CartLine]] = None,
                 key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.session_id = session_id
        self.key = key
        self.lines: List[CartLine] = lines or []

    @classmethod
    async def load(cls, storage: Storage, session_id: str, key: str = CART_STORAGE_KEY) -> "CartStore":
        raw = await storage.get_item(session_id, key)
        return cls(storage, session_id, parse_cart(raw), key=key)

    def _find(self, product_id: ProductId) -> Optional[CartLine]:
        return next((line for line in self.lines if same_product(line.product_id, product_id)), None)

    async def _persist(self) -> None:
        raw = json.dumps([line.model_dump() for line in self.lines])
        await self.storage.set_item(self.session_id, self.key, raw)

    async def add_to_cart(self, product, quantity: int = 1) -> None:
        """`product` is anything with id/name/price (a `Product` or a dict)."""
        data = product if isinstance(product, dict) else product.model_dump()
        existing = self._find(data["id"])
        if existing is not None:
            existing.quantity += quantity
        else:
            self.lines.append(CartLine(
                product_id=data["id"],
                name=data["name"],
                price=float(data["price"]),
                quantity=quantity,
                image_url=data.get("image_url") or data.get("imageUrl"),
            ))
        await self._persist()

    async def remove_from_cart(self, product_id: ProductId) -> None:
        self.lines = [line for line in self.lines if not same_product(line.product_id, product_id)]
        await self._persist()

    async def update_quantity(self, product_id: ProductId, quantity: int) -> None:
        if quantity < 1:
            return
        line = self._find(product_id)
        if line is None:
            return
        line.quantity = quantity
        await self._persist()

    async def clear_cart(self) -> None:
        self.lines = []
        await self.storage.remove_item(self.session_id, self.key)

    @property
    def cart_total(self) -> float:
        return sum(line.price * line.quantity for line in self.lines)

    @property
    def cart_count(self) -> int:
        return sum(line.quantity for line in self.lines)
