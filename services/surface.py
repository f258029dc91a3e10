"""Map surface the engine draws on.

The engine never renders anything itself: it places, restyles and removes
visual items, locks panning while a zone is drawn and fits the view. A web
client renders the scene kept by `SceneSurface`.
"""
from typing import Any, Dict, List, Optional, Protocol

from models.annotation import MAP_SIZE, Point
from models.scene_item import SceneItem
from services.geometry import Bounds


class MapSurface(Protocol):
    def place_item(self, item: SceneItem) -> None: ...
    def update_item(self, item: SceneItem) -> None: ...
    def remove_item(self, item_id: str) -> None: ...
    def set_item_visible(self, item_id: str, visible: bool) -> None: ...
    def clear_items(self) -> None: ...
    def enable_panning(self) -> None: ...
    def disable_panning(self) -> None: ...
    def fit_bounds(self, bounds: Bounds, padding: int = 0) -> None: ...
    def show_preview(self, points: List[Point], color: str) -> None: ...
    def clear_preview(self) -> None: ...


class SceneSurface:
    """In-process scene: items by id, panning flag, preview layer and view."""

    def __init__(self):
        self.items: Dict[str, SceneItem] = {}
        self.panning_enabled = True
        self.preview: Optional[Dict[str, Any]] = None
        self.view: Bounds = ((0.0, 0.0), (MAP_SIZE, MAP_SIZE))
        self.view_padding = 0

    def place_item(self, item: SceneItem) -> None:
        self.items[item.id] = item

    def update_item(self, item: SceneItem) -> None:
        self.items[item.id] = item

    def remove_item(self, item_id: str) -> None:
        self.items.pop(item_id, None)

    def set_item_visible(self, item_id: str, visible: bool) -> None:
        item = self.items.get(item_id)
        if item is not None:
            item.visible = visible

    def clear_items(self) -> None:
        self.items.clear()

    def enable_panning(self) -> None:
        self.panning_enabled = True

    def disable_panning(self) -> None:
        self.panning_enabled = False

    def fit_bounds(self, bounds: Bounds, padding: int = 0) -> None:
        self.view = bounds
        self.view_padding = padding

    def show_preview(self, points: List[Point], color: str) -> None:
        # vertices as dots, plus a dashed line once there are two of them
        self.preview = {
            "points": [list(p) for p in points],
            "line": [list(p) for p in points] if len(points) > 1 else None,
            "color": color,
        }

    def clear_preview(self) -> None:
        self.preview = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [it.to_dict() for it in self.items.values()],
            "panning_enabled": self.panning_enabled,
            "preview": self.preview,
            "view": {"bounds": [list(c) for c in self.view], "padding": self.view_padding},
        }
