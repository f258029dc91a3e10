"""
Zone drawing session.

Collects polygon vertices from successive map clicks and commits a zone to
the store once at least three of them are placed. Panning stays locked for
as long as the session is active.
"""

from typing import List, Optional

from core.errors import InteractionStateError, ValidationError
from core.logger import get_logger
from models.annotation import MAP_SIZE, MIN_ZONE_VERTICES, Point
from models.interaction import DrawingState
from models.zone_draft import ZoneDraft
from services.annotations import AnnotationStore
from services.notifier import Notifier
from services.surface import MapSurface

logger = get_logger(__name__)


class ZoneDrawingSession:
    """
    Idle/Active state machine for drawing one zone at a time.

    Every way out of Active (successful finish, cancel, escape, restart)
    goes through `_reset`, which re-enables panning.
    """

    def __init__(self, store: AnnotationStore, surface: MapSurface, notifier: Notifier):
        self.store = store
        self.surface = surface
        self.notifier = notifier

        self.state = DrawingState.IDLE
        self.draft: Optional[ZoneDraft] = None

    @property
    def is_active(self) -> bool:
        return self.state is DrawingState.ACTIVE

    @property
    def vertices(self) -> List[Point]:
        return list(self.draft.vertices) if self.draft else []

    def start(self, name: str, desc: str, category_id: str, color: str) -> None:
        """
        Begin drawing a new zone.

        Starting while already active discards the unfinished polygon first,
        so panning is never locked twice.
        """
        if self.is_active:
            self.notifier.warn("Previous drawing discarded")
            self.cancel()

        self.draft = ZoneDraft(name=name, desc=desc, category_id=category_id, color=color)
        self.state = DrawingState.ACTIVE
        self.surface.disable_panning()
        self.surface.show_preview([], color)
        logger.info(f"Zone drawing started: {name!r} in {category_id}")
        self.notifier.notify("Tap/click to add points, double-tap/dblclick to finish")

    def add_vertex(self, position: Point) -> int:
        """
        Append a vertex and redraw the whole preview.

        Returns:
            Number of vertices collected so far
        """
        if not self.is_active:
            raise InteractionStateError("No zone is being drawn")
        x, y = float(position[0]), float(position[1])
        if not (0.0 <= x <= MAP_SIZE and 0.0 <= y <= MAP_SIZE):
            raise ValidationError("out-of-bounds", f"Point ({x:g}, {y:g}) is outside the map")

        self.draft.vertices.append((x, y))
        self.surface.show_preview(self.draft.vertices, self.draft.color)
        return self.draft.vertex_count()

    def finish(self) -> str:
        """
        Commit the zone and return to Idle.

        With fewer than three vertices nothing is committed and the session
        stays active so the user can keep adding points.

        Returns:
            Identity of the new zone
        """
        if not self.is_active:
            raise InteractionStateError("No zone is being drawn")
        if self.draft.vertex_count() < MIN_ZONE_VERTICES:
            raise ValidationError("min-vertices", "Need at least 3 points for a zone")

        draft = self.draft
        zones_before = len(self.store.zones)
        try:
            zone_id = self.store.add_zone(draft.name, draft.desc, draft.category_id, draft.vertices)
        finally:
            # the draft is spent once the zone is in the store, even if a write-through failed
            if len(self.store.zones) > zones_before:
                self._reset()
        logger.info(f"Zone drawing finished: {zone_id}")
        self.notifier.notify("Zone added")
        return zone_id

    def cancel(self) -> bool:
        """Discard the polygon without committing. No-op when idle."""
        if not self.is_active:
            return False
        logger.info(f"Zone drawing cancelled with {self.draft.vertex_count()} vertices")
        self._reset()
        return True

    def _reset(self):
        self.state = DrawingState.IDLE
        self.draft = None
        try:
            self.surface.clear_preview()
        finally:
            self.surface.enable_panning()

    def to_dict(self):
        return {
            "state": self.state.name.lower(),
            "vertices": [list(v) for v in self.vertices],
            "zone": None if self.draft is None else {
                "name": self.draft.name,
                "desc": self.draft.desc,
                "cat": self.draft.category_id,
                "color": self.draft.color,
            },
        }
