from fastapi import APIRouter, Depends

from api.deps import get_controller
from services.controller import MapController

router = APIRouter(tags=["scene"])

@router.get("/scene")
def get_scene(ctl: MapController = Depends(get_controller)):
    with ctl.state.lock:
        return ctl.surface.to_dict()

@router.get("/notifications")
def get_notifications(limit: int = 50, ctl: MapController = Depends(get_controller)):
    max_entries = ctl.state.settings.NOTIFICATIONS_MAX
    return ctl.notifier.recent(max(1, min(limit, max_entries)))
