from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from api.deps import get_controller
from api.errors import http_errors
from services.controller import MapController

router = APIRouter(tags=["data"])


@router.get("/data/export")
def export_data(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock, http_errors():
        payload = ctl.export_data()
    filename = ctl.state.settings.EXPORT_FILENAME
    return Response(
        content=payload,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/data/import")
def import_data(file: UploadFile = File(...), ctl: MapController = Depends(get_controller)):
    payload = file.file.read()
    with ctl.state.lock, http_errors():
        ctl.import_data(payload)
        return {
            "categories": len(ctl.registry.list_categories()),
            "markers": len(ctl.store.markers),
            "zones": len(ctl.store.zones),
        }


@router.delete("/data")
def clear_data(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        ctl.clear_user_data()
        return {"ok": True}


@router.get("/defaults")
def get_defaults(ctl: MapController = Depends(get_controller)):
    defaults = ctl.state.defaults
    return {
        "markers": [m.model_dump() for m in defaults.markers],
        "areas": [a.model_dump() for a in defaults.areas],
    }
