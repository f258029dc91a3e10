from fastapi import APIRouter, Depends

from api.deps import get_controller
from services.controller import MapController

router = APIRouter(tags=["health"])


@router.get("/health")
def health(ctl: MapController = Depends(get_controller)):
    s = ctl.state.settings
    return {
        "ok": True,
        "storage": "memory" if s.uses_memory_storage else "file",
        "data_dir": s.DATA_DIR,
        "categories": len(ctl.registry.list_categories()),
        "markers": len(ctl.store.markers),
        "zones": len(ctl.store.zones),
        "drawing": ctl.drawing.is_active,
    }
