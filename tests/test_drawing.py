"""Tests for the zone drawing state machine."""
import pytest

from core.errors import InteractionStateError, ValidationError
from models.category import Category
from models.interaction import DrawingState
from services.annotations import AnnotationStore
from services.categories import CategoryRegistry
from services.drawing import ZoneDrawingSession
from services.notifier import Notifier
from services.surface import SceneSurface

P1, P2, P3 = (100, 100), (200, 100), (150, 200)


@pytest.fixture
def surface():
    return SceneSurface()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def store():
    registry = CategoryRegistry()
    registry.load_defaults([Category(id="Custom", color="#3b82f6")])
    return AnnotationStore(registry)


@pytest.fixture
def session(store, surface, notifier):
    return ZoneDrawingSession(store, surface, notifier)


def test_start_locks_panning_and_notifies(session, surface, notifier):
    session.start("Swamp", "", "Custom", "#3b82f6")
    assert session.state is DrawingState.ACTIVE
    assert surface.panning_enabled is False
    assert surface.preview == {"points": [], "line": None, "color": "#3b82f6"}
    assert "double" in notifier.last_message()


def test_finish_with_two_vertices_is_rejected_and_stays_active(session, store, surface):
    """Test that finishing too early keeps the drawing and its vertices."""
    session.start("Swamp", "", "Custom", "#3b82f6")
    session.add_vertex(P1)
    session.add_vertex(P2)

    with pytest.raises(ValidationError) as exc:
        session.finish()

    assert exc.value.reason == "min-vertices"
    assert session.is_active
    assert session.vertices == [(100.0, 100.0), (200.0, 100.0)]
    assert store.zones == {}
    assert surface.panning_enabled is False


def test_finish_with_three_vertices_commits_zone(session, store, surface):
    session.start("Swamp", "wet", "Custom", "#3b82f6")
    session.add_vertex(P1)
    session.add_vertex(P2)
    with pytest.raises(ValidationError):
        session.finish()
    session.add_vertex(P3)

    zone_id = session.finish()

    zone = store.zones[zone_id]
    assert zone.vertices == [(100.0, 100.0), (200.0, 100.0), (150.0, 200.0)]
    assert zone.name == "Swamp"
    assert zone.desc == "wet"
    assert zone.category_id == "Custom"
    assert session.state is DrawingState.IDLE
    assert session.vertices == []
    assert surface.panning_enabled is True
    assert surface.preview is None


def test_preview_is_redrawn_after_each_vertex(session, surface):
    session.start("Swamp", "", "Custom", "#3b82f6")
    session.add_vertex(P1)
    assert surface.preview["points"] == [[100.0, 100.0]]
    assert surface.preview["line"] is None

    session.add_vertex(P2)
    assert surface.preview["points"] == [[100.0, 100.0], [200.0, 100.0]]
    assert surface.preview["line"] == [[100.0, 100.0], [200.0, 100.0]]


def test_cancel_discards_and_unlocks(session, store, surface):
    session.start("Swamp", "", "Custom", "#3b82f6")
    for p in (P1, P2, P3):
        session.add_vertex(p)

    assert session.cancel() is True

    assert store.zones == {}
    assert session.state is DrawingState.IDLE
    assert surface.panning_enabled is True
    assert surface.preview is None
    assert session.cancel() is False


def test_restart_while_active_discards_previous_polygon(session, surface, notifier):
    session.start("First", "", "Custom", "#3b82f6")
    session.add_vertex(P1)

    session.start("Second", "", "Custom", "#ff0000")

    assert session.is_active
    assert session.vertices == []
    assert session.draft.name == "Second"
    assert surface.panning_enabled is False
    assert any(e["message"] == "Previous drawing discarded" for e in notifier.entries)

    session.cancel()
    assert surface.panning_enabled is True


def test_gestures_while_idle_are_rejected(session):
    with pytest.raises(InteractionStateError):
        session.add_vertex(P1)
    with pytest.raises(InteractionStateError):
        session.finish()


def test_vertex_outside_map_is_rejected(session):
    session.start("Swamp", "", "Custom", "#3b82f6")
    with pytest.raises(ValidationError):
        session.add_vertex((-5, 10))
    assert session.vertices == []


def test_failed_write_after_commit_still_ends_session(session, store, surface):
    def failing_write(change):
        raise OSError("disk full")

    store.subscribe(failing_write)
    session.start("Swamp", "", "Custom", "#3b82f6")
    for p in (P1, P2, P3):
        session.add_vertex(p)

    with pytest.raises(OSError):
        session.finish()

    assert len(store.zones) == 1
    assert session.state is DrawingState.IDLE
    assert surface.panning_enabled is True
    assert surface.preview is None
    with pytest.raises(InteractionStateError):
        session.finish()
    assert len(store.zones) == 1
