from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from core.dependencies import get_session_id, get_storage, get_transient_storage
from core.errors import HandoffFailed
from core.storage import Storage
from schemas.custom_order import CustomOrderUpdate, WizardOut
from schemas.checkout import ShippingAddress
from services.checkout import build_payload
from services.custom_order import (
    FABRIC_TYPES,
    GARMENT_TYPES,
    URGENCY_OPTIONS,
    discard_custom_order,
    load_wizard,
    save_wizard,
    submit_custom_order,
)

router = APIRouter(prefix="/custom-order", tags=["Custom Order"])


# GET /custom-order/catalog - garment, fabric and urgency price tables
@router.get("/catalog")
async def get_catalog():
    return {
        "garment_types": GARMENT_TYPES,
        "fabric_types": FABRIC_TYPES,
        "urgency_options": URGENCY_OPTIONS,
    }


# GET /custom-order/ - wizard step, draft, errors and live price
@router.get("/", response_model=WizardOut)
async def get_wizard(
    transient: Storage = Depends(get_transient_storage),
    session_id: str = Depends(get_session_id),
):
    return (await load_wizard(transient, session_id)).to_out()


# PUT /custom-order/ - merge field values from the current step
@router.put("/", response_model=WizardOut)
async def update_wizard(
    changes: CustomOrderUpdate,
    transient: Storage = Depends(get_transient_storage),
    session_id: str = Depends(get_session_id),
):
    wizard = await load_wizard(transient, session_id)
    wizard.update(changes)
    await save_wizard(transient, session_id, wizard)
    return wizard.to_out()


# POST /custom-order/next - validate the current step and move forward
@router.post("/next", response_model=WizardOut)
async def next_step(
    response: Response,
    transient: Storage = Depends(get_transient_storage),
    session_id: str = Depends(get_session_id),
):
    wizard = await load_wizard(transient, session_id)
    if not wizard.next_step():
        response.status_code = 422
    await save_wizard(transient, session_id, wizard)
    return wizard.to_out()


# POST /custom-order/back - previous step, values kept, errors cleared
@router.post("/back", response_model=WizardOut)
async def previous_step(
    transient: Storage = Depends(get_transient_storage),
    session_id: str = Depends(get_session_id),
):
    wizard = await load_wizard(transient, session_id)
    wizard.previous_step()
    await save_wizard(transient, session_id, wizard)
    return wizard.to_out()


# POST /custom-order/submit - finalize on step 4 and hand off to checkout
@router.post("/submit")
async def submit(
    transient: Storage = Depends(get_transient_storage),
    storage: Storage = Depends(get_storage),
    session_id: str = Depends(get_session_id),
):
    wizard = await load_wizard(transient, session_id)
    try:
        source = await submit_custom_order(wizard, transient, storage, session_id)
    except HandoffFailed as e:
        await save_wizard(transient, session_id, wizard)
        return JSONResponse(
            status_code=503,
            content={"detail": e.message, "wizard": wizard.to_out().model_dump(mode="json")},
        )

    if source is None:
        await save_wizard(transient, session_id, wizard)
        return JSONResponse(status_code=422, content=wizard.to_out().model_dump(mode="json"))

    payload = build_payload(source, ShippingAddress())
    return {
        "message": "Custom order ready for checkout",
        "redirect": "/checkout",
        "order_type": payload.order_type,
        "total": source.total,
        "deposit": source.deposit,
        "breakdown": payload.breakdown,
    }


# DELETE /custom-order/ - start over, dropping any order already handed to checkout
@router.delete("/")
async def reset(
    transient: Storage = Depends(get_transient_storage),
    storage: Storage = Depends(get_storage),
    session_id: str = Depends(get_session_id),
):
    await discard_custom_order(transient, storage, session_id)
    return {"message": "Custom order reset"}
