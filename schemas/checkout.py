# schemas/checkout.py
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union

from schemas.cart import CartLine
from schemas.custom_order import CustomOrderDraft

SHIPPING_FIELDS = ("full_name", "phone", "address", "city", "region")


class ShippingAddress(BaseModel):
    full_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    region: str = ""

    def missing_fields(self) -> List[str]:
        return [f for f in SHIPPING_FIELDS if not getattr(self, f).strip()]

    def as_line(self) -> str:
        return ", ".join(getattr(self, f).strip() for f in SHIPPING_FIELDS)


class RegularCheckoutSource(BaseModel):
    order_type: Literal["regular"] = "regular"
    lines: List[CartLine]


class CustomCheckoutSource(BaseModel):
    order_type: Literal["custom"] = "custom"
    draft: CustomOrderDraft
    total: float
    deposit: float


CheckoutSource = Annotated[
    Union[RegularCheckoutSource, CustomCheckoutSource],
    Field(discriminator="order_type"),
]


class CheckoutBreakdown(BaseModel):
    base: float
    shipping: float
    tax: float
    grand_total: float


class CheckoutPayload(BaseModel):
    source: CheckoutSource
    shipping_address: ShippingAddress
    breakdown: CheckoutBreakdown

    @property
    def order_type(self) -> str:
        return self.source.order_type


class CheckoutSummary(BaseModel):
    order_type: Literal["regular", "custom"]
    source: CheckoutSource
    breakdown: CheckoutBreakdown
    currency: str


class CheckoutResult(BaseModel):
    order_id: Union[int, str]
    order_type: Literal["regular", "custom"]
    authorization_url: str
    reference: Optional[str] = None
