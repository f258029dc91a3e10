from fastapi import APIRouter, Depends

from api.deps import get_controller
from api.errors import http_errors
from models.requests import AnnotationEditIn, ZoneIn
from services.controller import MapController

router = APIRouter(prefix="/zones", tags=["zones"])

@router.get("")
def get_zones(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return [ctl.describe(z) for z in ctl.store.zones.values()]

@router.post("", status_code=201)
def create_zone(body: ZoneIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        cat = body.cat or ctl.default_category()
        return ctl.describe(ctl.create_zone(body.name, body.desc, cat, body.latlngs))

@router.patch("/{zone_id}")
def edit_zone(zone_id: str, body: AnnotationEditIn, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        return ctl.describe(ctl.edit_zone(zone_id, body.name, body.desc, body.cat))

@router.delete("/{zone_id}")
def delete_zone(zone_id: str, ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return {"id": zone_id, "removed": ctl.delete_zone(zone_id)}
