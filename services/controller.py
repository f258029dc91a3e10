"""Top-level interaction controller.

Translates user gestures and form submissions into registry/store/drawing
operations, keeps the map surface in sync with the store and raises the
user-facing notifications.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from core.errors import AnnotationError, ParseError, ValidationError
from core.logger import get_logger
from core.state import AppState, PendingMarker
from models.annotation import Annotation, MarkerAnnotation, Point
from models.category import Category
from models.interaction import InteractionMode
from models.scene_item import SceneItem
from services.annotations import StoreChange
from services.geometry import Bounds, bounding_box, extend_bounds

logger = get_logger(__name__)


def _form_fields(name: Optional[str], desc: Optional[str]) -> tuple[str, str]:
    return (name or "Unnamed"), (desc or "")


class MapController:
    """Owns the AppState and exposes every user action as one method."""

    def __init__(self, state: AppState):
        self.state = state
        self.registry = state.registry
        self.store = state.store
        self.drawing = state.drawing
        self.gateway = state.gateway
        self.surface = state.surface
        self.notifier = state.notifier
        self.store.subscribe(self._on_store_change)

    @contextmanager
    def _reported(self) -> Iterator[None]:
        # recovered locally: state unchanged, user told, caller decides what to return
        try:
            yield
        except AnnotationError as e:
            self.notifier.warn(str(e))
            raise

    # ----------------------- lifecycle -----------------------
    def startup(self) -> None:
        """Load default categories, then whatever durable state exists."""
        self.registry.load_defaults(self.state.defaults.categories)
        self.gateway.restore()
        self._render_all()
        logger.info(f"Startup complete: {len(self.store.markers)} markers, {len(self.store.zones)} zones")

    def reload(self) -> None:
        """Rebuild everything from durable storage, e.g. after an import."""
        self._reset_placing()
        self.drawing.cancel()
        self.store.clear()
        self.registry.clear_visibility()
        self.startup()

    def _render_all(self) -> None:
        self.surface.clear_items()
        for item in self.store.all_items():
            self.surface.place_item(self._scene_item(item))

    def _scene_item(self, item: Annotation) -> SceneItem:
        points = [item.position] if isinstance(item, MarkerAnnotation) else list(item.vertices)
        return SceneItem(
            id=item.id,
            kind=item.kind,
            category_id=item.category_id,
            color=self.store.color_of(item),
            points=points,
            label=item.name,
            visible=self.registry.is_visible(item.category_id),
        )

    def _on_store_change(self, change: StoreChange) -> None:
        if change.action == "removed":
            self.surface.remove_item(change.item_id)
        elif change.action == "added":
            self.surface.place_item(self._scene_item(change.item))
        else:
            self.surface.update_item(self._scene_item(change.item))

    # ----------------------- categories -----------------------
    def add_category(self, name: str, color: str) -> Category:
        with self._reported():
            category = self.registry.add(name, color)
        self.notifier.notify("Category added")
        return category

    def toggle_category(self, category_id: str, visible: bool) -> None:
        self.registry.set_visibility(category_id, visible)
        for item in self.store.list_by_category(category_id):
            self.surface.set_item_visible(item.id, visible)

    def category_bounds(self, category_id: str) -> Optional[Bounds]:
        bounds = None
        for item in self.store.list_by_category(category_id):
            points = [item.position] if isinstance(item, MarkerAnnotation) else item.vertices
            bounds = extend_bounds(bounds, bounding_box(points))
        return bounds

    def zoom_to_category(self, category_id: str) -> Optional[Bounds]:
        bounds = self.category_bounds(category_id)
        if bounds is None:
            self.notifier.notify("No items in this category")
            return None
        self.surface.fit_bounds(bounds, padding=self.state.settings.FIT_PADDING)
        self.notifier.notify(f"Zoomed to {category_id}")
        return bounds

    def describe(self, item: Annotation) -> Dict[str, Any]:
        return {**item.to_record(), "kind": item.kind, "color": self.store.color_of(item)}

    def category_items(self, category_id: str, query: str = "") -> List[Annotation]:
        return list(self.store.search(category_id, query))

    def default_category(self) -> Optional[str]:
        return self.registry.default_category(self.state.settings.PREFERRED_CATEGORY)

    def _category_or_default(self, category_id: Optional[str]) -> str:
        category_id = category_id or self.default_category()
        if not category_id:
            self.notifier.warn("Add a category first")
            raise ValidationError("no-category", "Add a category first")
        return category_id

    # ----------------------- markers -----------------------
    def prepare_marker(self, name: str, desc: str, category_id: Optional[str] = None) -> None:
        """Arm placing mode: the next map click drops the marker."""
        if self.drawing.is_active:
            self.drawing.cancel()
        name, desc = _form_fields(name, desc)
        category_id = self._category_or_default(category_id)
        self.state.pending_marker = PendingMarker(name, desc, category_id)
        self.state.mode = InteractionMode.PLACING_MARKER
        self.notifier.notify("Click on the map to place")

    def create_marker(self, name: str, desc: str, category_id: str, position: Point) -> MarkerAnnotation:
        name, desc = _form_fields(name, desc)
        with self._reported():
            marker_id = self.store.add_marker(name, desc, category_id, position)
        self.notifier.notify("Marker added")
        return self.store.markers[marker_id]

    def edit_marker(self, marker_id: str, name: str, desc: str, category_id: str) -> MarkerAnnotation:
        name, desc = _form_fields(name, desc)
        with self._reported():
            marker = self.store.update_marker(marker_id, name=name, desc=desc, category_id=category_id)
        self.notifier.notify("Marker updated")
        return marker

    def move_marker(self, marker_id: str, position: Point) -> MarkerAnnotation:
        with self._reported():
            return self.store.move_marker(marker_id, position)

    def delete_marker(self, marker_id: str) -> bool:
        removed = self.store.remove("marker", marker_id)
        self.notifier.notify("Marker deleted")
        return removed

    # ----------------------- zones -----------------------
    def start_zone(self, name: str, desc: str, category_id: Optional[str] = None) -> None:
        self._reset_placing()
        name, desc = _form_fields(name, desc)
        category_id = self._category_or_default(category_id)
        self.drawing.start(name, desc, category_id, self.registry.color_of(category_id))
        self.state.mode = InteractionMode.DRAWING_ZONE

    def finish_zone(self) -> str:
        with self._reported():
            zone_id = self.drawing.finish()
        self.state.mode = InteractionMode.IDLE
        return zone_id

    def cancel_zone(self) -> bool:
        """Closing the zone panel discards an unfinished drawing."""
        cancelled = self.drawing.cancel()
        if self.state.mode is InteractionMode.DRAWING_ZONE:
            self.state.mode = InteractionMode.IDLE
        return cancelled

    def create_zone(self, name: str, desc: str, category_id: str, vertices: List[Point]):
        name, desc = _form_fields(name, desc)
        with self._reported():
            zone_id = self.store.add_zone(name, desc, category_id, vertices)
        self.notifier.notify("Zone added")
        return self.store.zones[zone_id]

    def edit_zone(self, zone_id: str, name: str, desc: str, category_id: str):
        name, desc = _form_fields(name, desc)
        with self._reported():
            zone = self.store.update_zone(zone_id, name=name, desc=desc, category_id=category_id)
        self.notifier.notify("Zone updated")
        return zone

    def delete_zone(self, zone_id: str) -> bool:
        removed = self.store.remove("zone", zone_id)
        self.notifier.notify("Zone deleted")
        return removed

    # ----------------------- map gestures -----------------------
    def click(self, position: Point) -> Dict[str, Any]:
        mode = self.state.mode
        if mode is InteractionMode.DRAWING_ZONE:
            with self._reported():
                count = self.drawing.add_vertex(position)
            return {"action": "vertex_added", "vertices": count}

        if mode is InteractionMode.PLACING_MARKER and self.state.pending_marker:
            pending = self.state.pending_marker
            marker = self.create_marker(pending.name, pending.desc, pending.category_id, position)
            self._reset_placing()
            return {"action": "marker_placed", "id": marker.id}

        return {"action": "none"}

    def double_click(self, position: Optional[Point] = None) -> Dict[str, Any]:
        if self.state.mode is not InteractionMode.DRAWING_ZONE:
            return {"action": "none"}
        zone_id = self.finish_zone()
        return {"action": "zone_finished", "id": zone_id}

    def escape(self) -> None:
        self._reset_placing()
        self.cancel_zone()

    def _reset_placing(self) -> None:
        self.state.pending_marker = None
        if self.state.mode is InteractionMode.PLACING_MARKER:
            self.state.mode = InteractionMode.IDLE

    def interaction_status(self) -> Dict[str, Any]:
        pending = self.state.pending_marker
        return {
            "mode": self.state.mode.name.lower(),
            "pending_marker": None if pending is None else {
                "name": pending.name, "desc": pending.desc, "cat": pending.category_id,
            },
            "drawing": self.drawing.to_dict(),
            "default_category": self.default_category(),
        }

    # ----------------------- data exchange -----------------------
    def export_data(self) -> bytes:
        with self._reported():
            return self.gateway.export_snapshot()

    def import_data(self, payload: bytes | str) -> None:
        try:
            self.gateway.import_snapshot(payload)
        except ParseError:
            self.notifier.warn("Invalid JSON")
            raise
        self.reload()
        self.notifier.notify("Data imported")

    def clear_user_data(self) -> None:
        self.escape()
        self.gateway.clear_user_data()
        self.store.clear()
        self.registry.clear_visibility()
        self._render_all()
        logger.info("User data cleared")
        self.notifier.notify("Cleared")

