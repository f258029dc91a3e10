from fastapi import APIRouter, Depends

from api.deps import get_controller
from api.errors import http_errors
from models.requests import ClickIn, DraftIn
from services.controller import MapController

router = APIRouter(prefix="/interaction", tags=["interaction"])


@router.get("")
def get_interaction(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return ctl.interaction_status()


@router.post("/marker")
def prepare_marker(body: DraftIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        ctl.prepare_marker(body.name, body.desc, body.cat)
        return ctl.interaction_status()


@router.post("/zone")
def start_zone(body: DraftIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        ctl.start_zone(body.name, body.desc, body.cat)
        return ctl.interaction_status()


@router.post("/click")
def click(body: ClickIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        if body.latlng is None:
            return {"action": "none"}
        return ctl.click(body.latlng)


@router.post("/dblclick")
def double_click(body: ClickIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        return ctl.double_click(body.latlng)


# Closing the zone panel
@router.post("/cancel")
def cancel(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return {"cancelled": ctl.cancel_zone()}


@router.post("/escape")
def escape(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        ctl.escape()
        return ctl.interaction_status()
