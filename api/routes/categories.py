from fastapi import APIRouter, Depends

from api.deps import get_controller
from api.errors import http_errors
from models.requests import CategoryIn, VisibilityIn
from services.controller import MapController

router = APIRouter(prefix="/categories", tags=["categories"])


def _category_out(ctl: MapController, cat) -> dict:
    return {**cat.model_dump(), "visible": ctl.registry.is_visible(cat.id)}


@router.get("")
def get_categories(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return [_category_out(ctl, c) for c in ctl.registry.list_categories()]


@router.post("", status_code=201)
def add_category(body: CategoryIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        return _category_out(ctl, ctl.add_category(body.name, body.color))


@router.put("/{category_id}/visibility")
def set_visibility(category_id: str, body: VisibilityIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        ctl.toggle_category(category_id, body.visible)
        return {"id": category_id, "visible": ctl.registry.is_visible(category_id)}


@router.post("/{category_id}/zoom")
def zoom(category_id: str, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        bounds = ctl.zoom_to_category(category_id)
        return {"id": category_id, "bounds": None if bounds is None else [list(c) for c in bounds]}


@router.get("/{category_id}/items")
def category_items(category_id: str, q: str = "", ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return [ctl.describe(item) for item in ctl.category_items(category_id, q)]
