# services/custom_order.py
"""
Custom tailoring order wizard.

Four steps (personal info, style, measurements, material & design); each step
is validated before the wizard moves forward. Price is derived from the three
catalog choices every time it is read.
"""
import json
import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from core.config import CUSTOM_ORDER_STORAGE_KEY, DEPOSIT_RATE
from core.errors import HandoffFailed, StorageError
from core.storage import Storage
from schemas.checkout import CustomCheckoutSource
from schemas.custom_order import (
    CatalogOption,
    CustomOrderDraft,
    CustomOrderPrice,
    CustomOrderUpdate,
    WizardOut,
)

logger = logging.getLogger(__name__)

GARMENT_TYPES: List[CatalogOption] = [
    CatalogOption(value="dress", label="Dress", price=250),
    CatalogOption(value="suit", label="Suit", price=500),
    CatalogOption(value="shirt", label="Shirt", price=150),
    CatalogOption(value="skirt", label="Skirt", price=120),
    CatalogOption(value="pants", label="Pants", price=180),
    CatalogOption(value="kaftan", label="Kaftan", price=280),
]

FABRIC_TYPES: List[CatalogOption] = [
    CatalogOption(value="cotton", label="Cotton", price=0),
    CatalogOption(value="silk", label="Silk", price=100),
    CatalogOption(value="linen", label="Linen", price=50),
    CatalogOption(value="velvet", label="Velvet", price=150),
    CatalogOption(value="chiffon", label="Chiffon", price=80),
    CatalogOption(value="satin", label="Satin", price=120),
]

URGENCY_OPTIONS: List[CatalogOption] = [
    CatalogOption(value="standard", label="Standard (3-4 weeks)", price=0),
    CatalogOption(value="express", label="Express (2 weeks)", price=100),
    CatalogOption(value="rush", label="Rush (1 week)", price=200),
]

STEP_NAMES = {
    1: "Personal Info",
    2: "Style Selection",
    3: "Measurements",
    4: "Material & Design",
}
FIRST_STEP = 1
LAST_STEP = 4

WIZARD_STORAGE_KEY = "customOrderWizard"
# in-memory stand-in for router navigation state
NAVIGATION_STATE_KEY = "customOrderNavigationState"

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REQUIRED_MEASUREMENTS = ("bust", "waist", "hips", "length")
# a null clears these selections; for text fields it is ignored
NULLABLE_FIELDS = {"garment_type", "fabric_type", "reference_image"}


def lookup(options: List[CatalogOption], value: Optional[str]) -> Optional[CatalogOption]:
    return next((o for o in options if o.value == value), None)


def round2(value: Union[float, Decimal]) -> float:
    """Round half-up to cents; same input always gives the same output."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def price_custom_order(garment_type: Optional[str], fabric_type: Optional[str],
                       urgency: Optional[str]) -> CustomOrderPrice:
    garment = lookup(GARMENT_TYPES, garment_type)
    fabric = lookup(FABRIC_TYPES, fabric_type)
    rush = lookup(URGENCY_OPTIONS, urgency) or URGENCY_OPTIONS[0]

    base_price = garment.price if garment else 0
    fabric_price = fabric.price if fabric else 0
    urgency_price = rush.price

    total = base_price + fabric_price + urgency_price
    return CustomOrderPrice(
        base_price=base_price,
        fabric_price=fabric_price,
        urgency_price=urgency_price,
        total=total,
        deposit=round2(total * DEPOSIT_RATE),
    )


def price_draft(draft: CustomOrderDraft) -> CustomOrderPrice:
    return price_custom_order(draft.garment_type, draft.fabric_type, draft.urgency)


def validate_step(draft: CustomOrderDraft, step: int) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if step == 1:
        if not draft.full_name.strip():
            errors["full_name"] = "Full name is required"
        if not draft.email.strip():
            errors["email"] = "Email is required"
        elif not EMAIL_RE.match(draft.email.strip()):
            errors["email"] = "Email is invalid"
        if not draft.phone.strip():
            errors["phone"] = "Phone number is required"
    elif step == 2:
        if lookup(GARMENT_TYPES, draft.garment_type) is None:
            errors["garment_type"] = "Please select a garment type"
    elif step == 3:
        for name in REQUIRED_MEASUREMENTS:
            if getattr(draft.measurements, name) is None:
                errors[f"measurements.{name}"] = f"{name.capitalize()} measurement is required"
    elif step == 4:
        if lookup(FABRIC_TYPES, draft.fabric_type) is None:
            errors["fabric_type"] = "Please select a fabric type"
    return errors


class CustomOrderWizard:
    def __init__(self, draft: Optional[CustomOrderDraft] = None, step: int = FIRST_STEP,
                 errors: Optional[Dict[str, str]] = None):
        self.draft = draft or CustomOrderDraft()
        self.step = step
        self.errors: Dict[str, str] = errors or {}
        self.submitted = False

    @property
    def price(self) -> CustomOrderPrice:
        return price_draft(self.draft)

    def update(self, changes: Union[CustomOrderUpdate, dict]) -> None:
        if isinstance(changes, dict):
            changes = CustomOrderUpdate.model_validate(changes)
        data = changes.model_dump(exclude_unset=True)

        measurements = data.pop("measurements", None)
        merged = self.draft.model_dump()
        merged.update({k: v for k, v in data.items() if v is not None or k in NULLABLE_FIELDS})
        if measurements is not None:
            merged["measurements"].update(measurements)
        self.draft = CustomOrderDraft.model_validate(merged)

    def validate(self, step: Optional[int] = None) -> Dict[str, str]:
        return validate_step(self.draft, step or self.step)

    def next_step(self) -> bool:
        """Advance if the current step is complete; otherwise keep the errors."""
        errors = self.validate()
        if errors:
            self.errors = errors
            return False
        self.errors = {}
        if self.step < LAST_STEP:
            self.step += 1
        return True

    def previous_step(self) -> None:
        if self.step > FIRST_STEP:
            self.step -= 1
        self.errors = {}

    def finalize(self) -> Optional[CustomCheckoutSource]:
        """Build the checkout source from step 4. Returns None when blocked."""
        if self.step != LAST_STEP:
            self.errors = {"step": "Complete all steps before submitting"}
            return None
        errors = self.validate()
        if errors:
            self.errors = errors
            return None
        self.errors = {}
        price = self.price
        return CustomCheckoutSource(draft=self.draft.model_copy(deep=True),
                                    total=price.total, deposit=price.deposit)

    def to_out(self) -> WizardOut:
        return WizardOut(
            step=self.step,
            step_name="Submitted" if self.submitted else STEP_NAMES[self.step],
            submitted=self.submitted,
            draft=self.draft,
            errors=self.errors,
            price=self.price,
        )

    def dumps(self) -> str:
        return json.dumps({"step": self.step, "draft": self.draft.model_dump(), "errors": self.errors})

    @classmethod
    def loads(cls, raw: Optional[str]) -> "CustomOrderWizard":
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
            step = int(data.get("step", FIRST_STEP))
            if step not in STEP_NAMES:
                raise ValueError(f"bad step {step}")
            return cls(CustomOrderDraft.model_validate(data.get("draft") or {}), step, data.get("errors") or {})
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            logger.warning("Discarding unreadable wizard state: %s", e)
            return cls()


async def load_wizard(storage: Storage, session_id: str) -> CustomOrderWizard:
    return CustomOrderWizard.loads(await storage.get_item(session_id, WIZARD_STORAGE_KEY))


async def save_wizard(storage: Storage, session_id: str, wizard: CustomOrderWizard) -> None:
    await storage.set_item(session_id, WIZARD_STORAGE_KEY, wizard.dumps())


async def reset_wizard(storage: Storage, session_id: str) -> None:
    await storage.remove_item(session_id, WIZARD_STORAGE_KEY)


async def discard_custom_order(transient: Storage, durable: Storage, session_id: str) -> None:
    """Drop the wizard and any custom order already handed to checkout."""
    await reset_wizard(transient, session_id)
    await transient.remove_item(session_id, NAVIGATION_STATE_KEY)
    await durable.remove_item(session_id, CUSTOM_ORDER_STORAGE_KEY)
    logger.info("Custom order discarded for %s", session_id)


async def submit_custom_order(wizard: CustomOrderWizard, transient: Storage, durable: Storage,
                              session_id: str) -> Optional[CustomCheckoutSource]:
    """
    Finalize the wizard and hand the order to checkout.

    The handoff goes to navigation state and to the durable fallback; the
    draft is discarded only after both writes succeed. Returns None when step
    validation blocks submission (errors are on the wizard).
    """
    source = wizard.finalize()
    if source is None:
        return None

    raw = source.model_dump_json()
    try:
        await durable.set_item(session_id, CUSTOM_ORDER_STORAGE_KEY, raw)
        await transient.set_item(session_id, NAVIGATION_STATE_KEY, raw)
    except StorageError as e:
        logger.error("Custom order handoff failed for %s: %s", session_id, e)
        wizard.errors = {"submit": HandoffFailed.message}
        raise HandoffFailed() from e

    wizard.submitted = True
    await reset_wizard(transient, session_id)
    logger.info("Custom order handed to checkout for %s (total=%s)", session_id, source.total)
    return source
