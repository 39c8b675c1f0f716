import json

import pytest

from core.config import CUSTOM_ORDER_STORAGE_KEY
from core.errors import HandoffFailed
from services.custom_order import (
    NAVIGATION_STATE_KEY,
    WIZARD_STORAGE_KEY,
    CustomOrderWizard,
    discard_custom_order,
    load_wizard,
    price_custom_order,
    save_wizard,
    submit_custom_order,
)

PERSONAL = {"full_name": "Ama Mensah", "email": "ama@example.com", "phone": "+233 20 000 0000"}
MEASUREMENTS = {"bust": 36, "waist": 28, "hips": 38, "length": 42}


def wizard_on_step_four(**overrides) -> CustomOrderWizard:
    wizard = CustomOrderWizard()
    wizard.update(PERSONAL)
    assert wizard.next_step()
    wizard.update({"garment_type": "dress"})
    assert wizard.next_step()
    wizard.update({"measurements": MEASUREMENTS})
    assert wizard.next_step()
    wizard.update({"fabric_type": "silk", "urgency": "rush", **overrides})
    assert wizard.step == 4
    return wizard


def test_pricing_adds_garment_fabric_and_urgency():
    price = price_custom_order("dress", "silk", "rush")
    assert price.total == 550
    assert price.deposit == 275


def test_pricing_is_idempotent():
    assert price_custom_order("suit", "velvet", "express") == price_custom_order("suit", "velvet", "express")


def test_pricing_with_nothing_selected_uses_default_urgency():
    price = price_custom_order(None, None, None)
    assert (price.base_price, price.fabric_price, price.urgency_price, price.total) == (0, 0, 0, 0)


def test_price_tracks_current_selection():
    wizard = CustomOrderWizard()
    wizard.update({"garment_type": "shirt"})
    assert wizard.price.total == 150
    wizard.update({"fabric_type": "linen", "urgency": "express"})
    assert wizard.price.total == 300
    assert wizard.price.deposit == 150
    wizard.update({"garment_type": None})
    assert wizard.price.total == 150


def test_step_one_with_empty_email_stays_on_step_one():
    wizard = CustomOrderWizard()
    wizard.update({"full_name": "Ama", "phone": "0200000000"})

    assert not wizard.next_step()
    assert wizard.step == 1
    assert "email" in wizard.errors
    assert wizard.draft.full_name == "Ama"


@pytest.mark.parametrize("email", ["ama", "ama@example", "ama @example.com", "@example.com"])
def test_step_one_rejects_malformed_email(email):
    wizard = CustomOrderWizard()
    wizard.update({**PERSONAL, "email": email})
    assert not wizard.next_step()
    assert wizard.errors["email"] == "Email is invalid"


def test_step_two_requires_a_catalog_garment():
    wizard = CustomOrderWizard(step=2)
    assert not wizard.next_step()
    assert "garment_type" in wizard.errors

    wizard.update({"garment_type": "tuxedo"})
    assert not wizard.next_step()

    wizard.update({"garment_type": "kaftan"})
    assert wizard.next_step()
    assert wizard.step == 3


def test_step_three_requires_core_measurements_only():
    wizard = CustomOrderWizard(step=3)
    wizard.update({"measurements": {"bust": 36, "waist": "", "shoulder": 15}})
    assert not wizard.next_step()
    assert set(wizard.errors) == {"measurements.waist", "measurements.hips", "measurements.length"}

    wizard.update({"measurements": {"waist": 28, "hips": 38, "length": 40}})
    assert wizard.next_step()
    assert wizard.draft.measurements.shoulder == 15
    assert wizard.draft.measurements.sleeves is None


def test_back_clears_errors_and_keeps_values():
    wizard = CustomOrderWizard()
    wizard.update(PERSONAL)
    wizard.next_step()
    assert not wizard.next_step()
    assert wizard.errors

    wizard.previous_step()
    assert wizard.step == 1
    assert wizard.errors == {}
    assert wizard.draft.email == PERSONAL["email"]

    wizard.previous_step()
    assert wizard.step == 1


def test_finalize_only_on_step_four():
    wizard = CustomOrderWizard()
    wizard.update(PERSONAL)
    assert wizard.finalize() is None
    assert wizard.step == 1


def test_finalize_requires_fabric():
    wizard = wizard_on_step_four(fabric_type=None)
    assert wizard.finalize() is None
    assert "fabric_type" in wizard.errors


def test_wizard_state_round_trips_through_storage():
    wizard = wizard_on_step_four(reference_image=None)
    restored = CustomOrderWizard.loads(wizard.dumps())
    assert restored.step == 4
    assert restored.draft == wizard.draft


def test_corrupt_wizard_state_starts_over():
    assert CustomOrderWizard.loads("[]").step == 1
    assert CustomOrderWizard.loads('{"step": 9}').step == 1
    assert CustomOrderWizard.loads("nope").step == 1


async def test_submit_hands_off_and_discards_draft(storage, transient):
    wizard = wizard_on_step_four()
    await save_wizard(transient, "s1", wizard)

    source = await submit_custom_order(wizard, transient, storage, "s1")

    assert source.total == 550
    assert source.deposit == 275
    assert wizard.submitted
    assert await transient.get_item("s1", WIZARD_STORAGE_KEY) is None
    assert json.loads(await storage.get_item("s1", CUSTOM_ORDER_STORAGE_KEY))["order_type"] == "custom"
    assert await transient.get_item("s1", NAVIGATION_STATE_KEY) is not None
    assert (await load_wizard(transient, "s1")).step == 1


async def test_submit_blocked_by_validation_writes_nothing(storage, transient):
    wizard = wizard_on_step_four(fabric_type=None)
    assert await submit_custom_order(wizard, transient, storage, "s1") is None
    assert await storage.get_item("s1", CUSTOM_ORDER_STORAGE_KEY) is None


async def test_failed_handoff_keeps_wizard_on_step_four(transient, broken_storage):
    wizard = wizard_on_step_four()
    with pytest.raises(HandoffFailed):
        await submit_custom_order(wizard, transient, broken_storage, "s1")

    assert wizard.step == 4
    assert not wizard.submitted
    assert wizard.errors == {"submit": HandoffFailed.message}
    assert wizard.draft.garment_type == "dress"


async def test_discard_drops_wizard_and_handoff(storage, transient):
    wizard = wizard_on_step_four()
    await submit_custom_order(wizard, transient, storage, "s1")
    await storage.set_item("s2", CUSTOM_ORDER_STORAGE_KEY, "{}")

    await discard_custom_order(transient, storage, "s1")

    assert await transient.get_item("s1", NAVIGATION_STATE_KEY) is None
    assert await storage.get_item("s1", CUSTOM_ORDER_STORAGE_KEY) is None
    assert await transient.get_item("s1", WIZARD_STORAGE_KEY) is None
    # other visitors are untouched
    assert await storage.get_item("s2", CUSTOM_ORDER_STORAGE_KEY) == "{}"
