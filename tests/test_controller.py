"""Tests for the interaction controller: gestures, surface sync and reloads."""
import json

import pytest

from core.errors import NotFoundError, ParseError, ValidationError
from models.interaction import InteractionMode

from conftest import read_record


def test_startup_loads_defaults(controller):
    assert controller.registry.ids() == ["Flora", "Fauna", "Custom"]
    assert controller.default_category() == "Custom"
    assert controller.surface.items == {}


def test_place_marker_with_click(controller, state):
    """Test the two-step flow: submit the marker form, then click the map."""
    controller.prepare_marker("", "", None)
    assert state.mode is InteractionMode.PLACING_MARKER
    assert state.pending_marker.name == "Unnamed"
    assert state.pending_marker.category_id == "Custom"

    result = controller.click((10, 20))

    assert result["action"] == "marker_placed"
    marker = state.store.markers[result["id"]]
    assert marker.position == (10.0, 20.0)
    assert state.mode is InteractionMode.IDLE
    assert state.pending_marker is None
    item = state.surface.items[marker.id]
    assert item.color == "#3b82f6"
    assert item.points == [(10.0, 20.0)]
    assert state.notifier.last_message() == "Marker added"


def test_click_while_idle_does_nothing(controller, state):
    assert controller.click((10, 10)) == {"action": "none"}
    assert controller.double_click((10, 10)) == {"action": "none"}
    assert state.store.markers == {}


def test_draw_zone_with_clicks(controller, state):
    """Test that two points are not enough and a third one completes the zone."""
    controller.start_zone("Swamp", "wet", "Flora")
    assert state.mode is InteractionMode.DRAWING_ZONE
    assert state.surface.panning_enabled is False

    controller.click((100, 100))
    controller.click((200, 100))
    with pytest.raises(ValidationError):
        controller.double_click((200, 100))
    assert state.mode is InteractionMode.DRAWING_ZONE
    assert state.notifier.entries[0]["level"] == "warning"
    assert state.notifier.last_message() == "Need at least 3 points for a zone"

    controller.click((150, 200))
    result = controller.double_click((150, 200))

    assert result["action"] == "zone_finished"
    zone = state.store.zones[result["id"]]
    assert len(zone.vertices) == 3
    assert state.mode is InteractionMode.IDLE
    assert state.surface.panning_enabled is True
    assert state.surface.items[zone.id].color == "#22c55e"


def test_escape_cancels_everything(controller, state):
    controller.start_zone("Swamp", "", "Flora")
    controller.click((100, 100))
    controller.escape()
    assert state.mode is InteractionMode.IDLE
    assert state.surface.panning_enabled is True
    assert state.surface.preview is None
    assert state.store.zones == {}

    controller.prepare_marker("Camp", "", "Custom")
    controller.escape()
    assert state.pending_marker is None
    assert controller.click((1, 1)) == {"action": "none"}


def test_prepare_marker_ends_active_drawing(controller, state):
    controller.start_zone("Swamp", "", "Flora")
    controller.prepare_marker("Camp", "", "Custom")
    assert not state.drawing.is_active
    assert state.surface.panning_enabled is True
    assert state.mode is InteractionMode.PLACING_MARKER


def test_edit_zone_restyles_surface_item(controller, state):
    zone = controller.create_zone("Swamp", "", "Flora", [(1, 1), (1, 9), (9, 9)])
    controller.edit_zone(zone.id, "", "muddy", "Fauna")

    edited = state.store.zones[zone.id]
    assert edited.name == "Unnamed"
    assert edited.desc == "muddy"
    assert state.surface.items[zone.id].color == "#f59e0b"
    assert state.notifier.last_message() == "Zone updated"


def test_edit_unknown_marker_is_reported(controller, state):
    with pytest.raises(NotFoundError):
        controller.edit_marker("missing", "x", "", "Custom")
    assert state.notifier.entries[0]["level"] == "warning"


def test_delete_removes_surface_item(controller, state):
    marker = controller.create_marker("Camp", "", "Custom", (10, 10))
    assert controller.delete_marker(marker.id) is True
    assert marker.id not in state.surface.items
    assert controller.delete_marker(marker.id) is False


def test_toggle_category_hides_items_and_survives_reload(controller, state):
    marker = controller.create_marker("Camp", "", "Custom", (10, 10))
    other = controller.create_marker("Flower", "", "Flora", (20, 20))

    controller.toggle_category("Custom", False)
    assert state.surface.items[marker.id].visible is False
    assert state.surface.items[other.id].visible is True

    controller.reload()
    assert state.surface.items[marker.id].visible is False

    controller.toggle_category("Custom", True)
    assert state.surface.items[marker.id].visible is True


def test_zoom_to_category(controller, state):
    controller.create_marker("Camp", "", "Flora", (10, 500))
    controller.create_zone("Swamp", "", "Flora", [(100, 100), (100, 300), (400, 300)])

    bounds = controller.zoom_to_category("Flora")

    assert bounds == ((10.0, 100.0), (400.0, 500.0))
    assert state.surface.view == bounds
    assert state.surface.view_padding == 20
    assert state.notifier.last_message() == "Zoomed to Flora"

    assert controller.zoom_to_category("Fauna") is None
    assert state.notifier.last_message() == "No items in this category"


def test_add_category_feeds_new_items(controller, state):
    controller.add_category("Outlaw", "#ff0000")
    marker = controller.create_marker("Hideout", "", "Outlaw", (5, 5))
    assert state.surface.items[marker.id].color == "#ff0000"

    with pytest.raises(ValidationError):
        controller.add_category("Outlaw", "#000000")
    assert state.notifier.last_message() == "Category exists"


def test_import_reloads_state(controller, state):
    payload = json.dumps({
        "categories": [{"id": "Gang", "color": "#111111"}],
        "user": {
            "markers": [{"name": "Hideout", "desc": "", "cat": "Gang", "latlng": [5, 5]}],
            "areas": [],
        },
    })
    controller.import_data(payload)

    assert controller.registry.ids() == ["Gang"]
    assert [m.name for m in state.store.markers.values()] == ["Hideout"]
    assert len(state.surface.items) == 1


def test_failed_import_keeps_state(controller, state):
    marker = controller.create_marker("Camp", "", "Custom", (10, 10))
    with pytest.raises(ParseError):
        controller.import_data(b"not json")
    assert list(state.store.markers) == [marker.id]
    assert state.notifier.last_message() == "Invalid JSON"


def test_clear_user_data(controller, state, storage):
    controller.create_marker("Camp", "", "Custom", (10, 10))
    controller.toggle_category("Custom", False)

    controller.clear_user_data()

    assert state.store.markers == {}
    assert state.surface.items == {}
    assert controller.registry.is_visible("Custom") is True
    assert read_record(storage, state.settings.USER_DATA_KEY) is None
    assert state.notifier.last_message() == "Cleared"


def test_category_items_search(controller):
    controller.create_marker("Fishing Spot", "", "Flora", (1, 1))
    controller.create_marker("Camp", "", "Flora", (2, 2))
    assert [i.name for i in controller.category_items("Flora", "fish")] == ["Fishing Spot"]
