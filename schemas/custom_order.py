# schemas/custom_order.py
from pydantic import BaseModel, Field, field_validator
from typing import Dict, Literal, Optional

Urgency = Literal["standard", "express", "rush"]


class Measurements(BaseModel):
    """Body measurements in inches."""

    bust: Optional[float] = None
    waist: Optional[float] = None
    hips: Optional[float] = None
    shoulder: Optional[float] = None
    sleeves: Optional[float] = None
    length: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CustomOrderDraft(BaseModel):
    # Personal info
    full_name: str = ""
    email: str = ""
    phone: str = ""

    # Style selection
    garment_type: Optional[str] = None
    style: str = ""
    occasion: str = ""

    measurements: Measurements = Field(default_factory=Measurements)

    # Material & design
    fabric_type: Optional[str] = None
    fabric_color: str = ""
    design_details: str = ""
    reference_image: Optional[str] = None

    urgency: Urgency = "standard"
    special_requests: str = ""


class CustomOrderUpdate(BaseModel):
    """Partial update from one wizard step; unset fields are left alone."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    garment_type: Optional[str] = None
    style: Optional[str] = None
    occasion: Optional[str] = None
    measurements: Optional[Measurements] = None
    fabric_type: Optional[str] = None
    fabric_color: Optional[str] = None
    design_details: Optional[str] = None
    reference_image: Optional[str] = None
    urgency: Optional[Urgency] = None
    special_requests: Optional[str] = None


class CatalogOption(BaseModel):
    value: str
    label: str
    price: float


class CustomOrderPrice(BaseModel):
    base_price: float
    fabric_price: float
    urgency_price: float
    total: float
    deposit: float


class WizardOut(BaseModel):
    step: int
    step_name: str
    submitted: bool = False
    draft: CustomOrderDraft
    errors: Dict[str, str] = {}
    price: CustomOrderPrice
