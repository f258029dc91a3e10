"""Marker and zone collections, keyed by identity."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional

import pydantic

from core.errors import NotFoundError, ValidationError
from core.logger import get_logger
from models.annotation import (
    MIN_ZONE_VERTICES,
    Annotation,
    MarkerAnnotation,
    Point,
    ZoneAnnotation,
)
from services.categories import CategoryRegistry

logger = get_logger(__name__)


@dataclass
class StoreChange:
    action: str          # "added" | "updated" | "removed"
    kind: str            # "marker" | "zone"
    item_id: str
    item: Optional[Annotation] = None


StoreListener = Callable[[StoreChange], None]


class AnnotationStore:
    def __init__(self, registry: CategoryRegistry):
        self.registry = registry
        self.markers: Dict[str, MarkerAnnotation] = {}
        self.zones: Dict[str, ZoneAnnotation] = {}
        self._listeners: List[StoreListener] = []

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def _emit(self, change: StoreChange) -> None:
        for listener in self._listeners:
            listener(change)

    def _collection(self, kind: str) -> Dict[str, Annotation]:
        if kind == "marker":
            return self.markers
        if kind == "zone":
            return self.zones
        raise ValidationError("unknown-kind", f"Unknown annotation kind {kind!r}")

    def _check_category(self, category_id: str) -> None:
        # lenient: stale or unknown categories are kept and rendered in the neutral color
        if not self.registry.contains(category_id):
            logger.warning(f"Annotation references unknown category {category_id!r}")

    # ----------------------- create -----------------------
    def add_marker(self, name: str, desc: str, category_id: str, position: Point) -> str:
        self._check_category(category_id)
        try:
            marker = MarkerAnnotation(
                name=name, desc=desc, category_id=category_id, position=position
            )
        except pydantic.ValidationError as e:
            raise ValidationError("out-of-bounds", str(e)) from e
        self.markers[marker.id] = marker
        logger.info(f"Added marker {marker.id} {marker.name!r} in {category_id}")
        self._emit(StoreChange("added", "marker", marker.id, marker))
        return marker.id

    def add_zone(self, name: str, desc: str, category_id: str, vertices: Iterable[Point]) -> str:
        vertices = [tuple(v) for v in vertices]
        if len(vertices) < MIN_ZONE_VERTICES:
            raise ValidationError("min-vertices", "Need at least 3 points for a zone")
        self._check_category(category_id)
        try:
            zone = ZoneAnnotation(
                name=name, desc=desc, category_id=category_id, vertices=vertices
            )
        except pydantic.ValidationError as e:
            raise ValidationError("out-of-bounds", str(e)) from e
        self.zones[zone.id] = zone
        logger.info(f"Added zone {zone.id} {zone.name!r} in {category_id} ({len(vertices)} vertices)")
        self._emit(StoreChange("added", "zone", zone.id, zone))
        return zone.id

    # ----------------------- update -----------------------
    def _update(self, kind: str, item_id: str, name, desc, category_id) -> Annotation:
        items = self._collection(kind)
        current = items.get(item_id)
        if current is None:
            raise NotFoundError(kind, item_id)

        patch = {}
        if name is not None:
            patch["name"] = name
        if desc is not None:
            patch["desc"] = desc
        if category_id is not None:
            self._check_category(category_id)
            patch["category_id"] = category_id

        updated = current.model_copy(update=patch)
        items[item_id] = updated
        logger.info(f"Updated {kind} {item_id}: {sorted(patch)}")
        self._emit(StoreChange("updated", kind, item_id, updated))
        return updated

    def update_marker(self, item_id: str, name: str | None = None, desc: str | None = None,
                      category_id: str | None = None) -> MarkerAnnotation:
        return self._update("marker", item_id, name, desc, category_id)

    def update_zone(self, item_id: str, name: str | None = None, desc: str | None = None,
                    category_id: str | None = None) -> ZoneAnnotation:
        return self._update("zone", item_id, name, desc, category_id)

    def move_marker(self, item_id: str, position: Point) -> MarkerAnnotation:
        current = self.markers.get(item_id)
        if current is None:
            raise NotFoundError("marker", item_id)
        try:
            moved = MarkerAnnotation.model_validate(
                {**current.model_dump(), "position": tuple(position)}
            )
        except pydantic.ValidationError as e:
            raise ValidationError("out-of-bounds", str(e)) from e
        self.markers[item_id] = moved
        self._emit(StoreChange("updated", "marker", item_id, moved))
        return moved

    # ----------------------- delete -----------------------
    def remove(self, kind: str, item_id: str) -> bool:
        """Delete by identity. Unknown ids are a no-op."""
        removed = self._collection(kind).pop(item_id, None)
        if removed is None:
            logger.debug(f"Remove of unknown {kind} {item_id} ignored")
            return False
        logger.info(f"Removed {kind} {item_id}")
        self._emit(StoreChange("removed", kind, item_id, removed))
        return True

    def clear(self) -> None:
        """Bulk clear; callers own the durable side of it."""
        self.markers.clear()
        self.zones.clear()

    def load(self, markers: Iterable[MarkerAnnotation], zones: Iterable[ZoneAnnotation]) -> None:
        self.markers = {m.id: m for m in markers}
        self.zones = {z.id: z for z in zones}

    # ----------------------- queries -----------------------
    def color_of(self, item: Annotation) -> str:
        return self.registry.color_of(item.category_id)

    def all_items(self) -> Iterator[Annotation]:
        yield from self.markers.values()
        yield from self.zones.values()

    def list_by_category(self, category_id: str) -> Iterator[Annotation]:
        return (item for item in self.all_items() if item.category_id == category_id)

    def search(self, category_id: str, query: str = "") -> Iterator[Annotation]:
        q = (query or "").strip().lower()
        return (
            item for item in self.list_by_category(category_id)
            if not q or q in item.name.lower()
        )
