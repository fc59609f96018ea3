"""UI Router - overlay flags for navigation components."""
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from storefront.errors import ERROR_MODAL_ID_REQUIRED, ERROR_UNKNOWN_EVENT
from storefront.stores import UIStore
from .deps import get_ui_store
from .models import UIEventRequest

router = APIRouter(prefix="/api/ui", tags=["ui"])


@router.get("")
async def get_ui_state(store: UIStore = Depends(get_ui_store)):
    return asdict(store.get_snapshot())


@router.post("/events")
async def send_ui_event(request: UIEventRequest, store: UIStore = Depends(get_ui_store)):
    """Apply a UI event by name (toggleSearch, openModal, closeAll, ...)."""
    if request.type not in store.event_types:
        raise HTTPException(status_code=400, detail=ERROR_UNKNOWN_EVENT)

    if request.type == "openModal":
        if not request.modal_id:
            raise HTTPException(status_code=400, detail=ERROR_MODAL_ID_REQUIRED)
        state = store.open_modal(request.modal_id)
    else:
        state = store.send({"type": request.type})

    return asdict(state)
