# services/checkout.py
"""
Checkout handoff: turns the active order source (cart or custom order) into a
priced, addressed order, creates it upstream and opens a payment.
"""
import logging
from typing import List, Optional, Set

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from core.config import CURRENCY, CUSTOM_ORDER_STORAGE_KEY, SHIPPING_FEE, TAX_RATE
from core.errors import (
    ApiError,
    CheckoutFailed,
    CheckoutInProgress,
    EmptyCheckout,
    IncompleteShipping,
    StorageError,
    message_from_payload,
)
from core.storage import Storage
from schemas.cart import CartLine
from schemas.checkout import (
    CheckoutBreakdown,
    CheckoutPayload,
    CheckoutResult,
    CheckoutSource,
    CheckoutSummary,
    CustomCheckoutSource,
    RegularCheckoutSource,
    ShippingAddress,
)
from services.api_client import StorefrontApi
from services.cart_store import CartStore
from services.custom_order import (
    FABRIC_TYPES,
    GARMENT_TYPES,
    NAVIGATION_STATE_KEY,
    URGENCY_OPTIONS,
    lookup,
    price_draft,
    round2,
)

logger = logging.getLogger(__name__)

ORDER_FAILED = "Failed to create your order. Please try again."
PAYMENT_FAILED = "Failed to initialize payment. Please try again."


def resolve_custom_handoff(nav_state: Optional[str], durable_fallback: Optional[str]) -> Optional[CustomCheckoutSource]:
    """Navigation state wins; the durable copy covers reloads. Unreadable data counts as absent."""
    for origin, raw in (("navigation", nav_state), ("fallback", durable_fallback)):
        if not raw:
            continue
        try:
            return CustomCheckoutSource.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring unreadable custom order handoff (%s): %s", origin, e)
    return None


def resolve_checkout_source(nav_state: Optional[str], durable_fallback: Optional[str],
                            cart_lines: List[CartLine]) -> Optional[CheckoutSource]:
    custom = resolve_custom_handoff(nav_state, durable_fallback)
    if custom is not None:
        return custom
    if cart_lines:
        return RegularCheckoutSource(lines=list(cart_lines))
    return None


def checkout_base(source: CheckoutSource) -> float:
    if isinstance(source, CustomCheckoutSource):
        return price_draft(source.draft).deposit
    if isinstance(source, RegularCheckoutSource):
        return sum(line.price * line.quantity for line in source.lines)
    raise TypeError(f"Unsupported checkout source: {type(source).__name__}")


def compute_breakdown(source: CheckoutSource, shipping_fee: float = SHIPPING_FEE,
                      tax_rate: float = TAX_RATE) -> CheckoutBreakdown:
    base = round2(checkout_base(source))
    shipping = round2(shipping_fee)
    tax = round2(base * tax_rate)
    return CheckoutBreakdown(
        base=base,
        shipping=shipping,
        tax=tax,
        grand_total=round2(base + shipping + tax),
    )


def build_payload(source: CheckoutSource, shipping_address: ShippingAddress) -> CheckoutPayload:
    if isinstance(source, CustomCheckoutSource):
        price = price_draft(source.draft)
        source = source.model_copy(update={"total": price.total, "deposit": price.deposit})
    return CheckoutPayload(
        source=source,
        shipping_address=shipping_address,
        breakdown=compute_breakdown(source),
    )


def order_request(payload: CheckoutPayload) -> dict:
    """Upstream order-creation body for either order type."""
    source = payload.source
    if isinstance(source, RegularCheckoutSource):
        return {
            "items": [{"productId": line.product_id, "quantity": line.quantity} for line in source.lines],
            "shippingAddress": payload.shipping_address.as_line(),
        }
    if isinstance(source, CustomCheckoutSource):
        draft = source.draft
        body = {to_camel(k): v for k, v in draft.model_dump(exclude={"measurements"}).items()}
        body["measurements"] = {k: v for k, v in draft.measurements.model_dump().items() if v is not None}
        garment = lookup(GARMENT_TYPES, draft.garment_type)
        fabric = lookup(FABRIC_TYPES, draft.fabric_type)
        urgency = lookup(URGENCY_OPTIONS, draft.urgency)
        body.update({
            "garmentLabel": garment.label if garment else None,
            "fabricLabel": fabric.label if fabric else None,
            "urgencyLabel": urgency.label if urgency else None,
            "total": source.total,
            "deposit": source.deposit,
            "shippingAddress": payload.shipping_address.as_line(),
        })
        return body
    raise TypeError(f"Unsupported checkout source: {type(source).__name__}")


def _unwrap(response) -> dict:
    """Some upstream handlers wrap the body in {"data": ...}."""
    if isinstance(response, dict) and isinstance(response.get("data"), dict):
        return response["data"]
    return response if isinstance(response, dict) else {}


class CheckoutService:
    def __init__(self, api: StorefrontApi, transient: Storage, durable: Storage,
                 in_flight: Optional[Set[str]] = None):
        self.api = api
        self.transient = transient
        self.durable = durable
        self.in_flight = in_flight if in_flight is not None else set()

    async def _load(self, session_id: str):
        cart = await CartStore.load(self.durable, session_id)
        nav_state = await self.transient.get_item(session_id, NAVIGATION_STATE_KEY)
        fallback = await self.durable.get_item(session_id, CUSTOM_ORDER_STORAGE_KEY)
        return resolve_checkout_source(nav_state, fallback, cart.lines), cart

    async def summary(self, session_id: str) -> CheckoutSummary:
        source, _ = await self._load(session_id)
        if source is None:
            raise EmptyCheckout()
        payload = build_payload(source, ShippingAddress())
        return CheckoutSummary(
            order_type=payload.order_type,
            source=payload.source,
            breakdown=payload.breakdown,
            currency=CURRENCY,
        )

    async def prepare_and_submit(self, session_id: str, shipping_address: ShippingAddress) -> CheckoutResult:
        if session_id in self.in_flight:
            raise CheckoutInProgress()
        self.in_flight.add(session_id)
        try:
            return await self._submit(session_id, shipping_address)
        finally:
            self.in_flight.discard(session_id)

    async def _submit(self, session_id: str, shipping_address: ShippingAddress) -> CheckoutResult:
        missing = shipping_address.missing_fields()
        if missing:
            raise IncompleteShipping(missing)

        source, cart = await self._load(session_id)
        if source is None:
            raise EmptyCheckout()

        payload = build_payload(source, shipping_address)
        body = order_request(payload)

        try:
            if payload.order_type == "custom":
                created = await self.api.create_custom_order(body)
            else:
                created = await self.api.create_order(body)
        except ApiError as e:
            raise CheckoutFailed(message_from_payload(e.payload, ORDER_FAILED)) from e

        order_id = _unwrap(created).get("id")
        if order_id is None:
            logger.error("Order creation returned no id: %r", created)
            raise CheckoutFailed(ORDER_FAILED)

        try:
            payment = _unwrap(await self.api.initialize_payment(order_id, payload.order_type))
        except ApiError as e:
            raise CheckoutFailed(message_from_payload(e.payload, PAYMENT_FAILED)) from e

        authorization_url = payment.get("authorizationUrl")
        if not authorization_url:
            logger.error("Payment init for order %s returned no authorization URL", order_id)
            raise CheckoutFailed(PAYMENT_FAILED)

        await self._cleanup(session_id, payload.order_type, cart)
        logger.info("Checkout %s order %s, grand total %s", payload.order_type, order_id,
                    payload.breakdown.grand_total)
        return CheckoutResult(
            order_id=order_id,
            order_type=payload.order_type,
            authorization_url=authorization_url,
            reference=payment.get("reference"),
        )

    async def _cleanup(self, session_id: str, order_type: str, cart: CartStore) -> None:
        # the order and payment exist upstream now; a failed cleanup must not block the redirect
        try:
            if order_type == "custom":
                await self.transient.remove_item(session_id, NAVIGATION_STATE_KEY)
                await self.durable.remove_item(session_id, CUSTOM_ORDER_STORAGE_KEY)
            else:
                await cart.clear_cart()
        except StorageError as e:
            logger.error("Post-checkout cleanup failed for %s: %s", session_id, e)
