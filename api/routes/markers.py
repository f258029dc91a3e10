from fastapi import APIRouter, Depends

from api.deps import get_controller
from api.errors import http_errors
from models.requests import AnnotationEditIn, MarkerIn, PositionIn
from services.controller import MapController

router = APIRouter(prefix="/markers", tags=["markers"])


@router.get("")
def get_markers(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return [ctl.describe(m) for m in ctl.store.markers.values()]


@router.post("", status_code=201)
def create_marker(body: MarkerIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        cat = body.cat or ctl.default_category()
        return ctl.describe(ctl.create_marker(body.name, body.desc, cat, body.latlng))


@router.patch("/{marker_id}")
def edit_marker(marker_id: str, body: AnnotationEditIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        return ctl.describe(ctl.edit_marker(marker_id, body.name, body.desc, body.cat))


@router.put("/{marker_id}/position")
def move_marker(marker_id: str, body: PositionIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        return ctl.describe(ctl.move_marker(marker_id, body.latlng))


@router.delete("/{marker_id}")
def delete_marker(marker_id: str, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return {"id": marker_id, "removed": ctl.delete_marker(marker_id)}
