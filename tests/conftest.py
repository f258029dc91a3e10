import json

import pytest

from core.config import Settings
from core.state import create_state
from models.annotation import DefaultConfig
from models.category import Category
from services.controller import MapController
from services.storage import MemoryStorage


DEFAULT_CATEGORIES = [
    {"id": "Flora", "color": "#22c55e"},
    {"id": "Fauna", "color": "#f59e0b"},
    {"id": "Custom", "color": "#3b82f6"},
]


@pytest.fixture
def defaults_file(tmp_path):
    """Write a small default configuration payload."""
    path = tmp_path / "default-markers.json"
    path.write_text(json.dumps({
        "categories": DEFAULT_CATEGORIES,
        "markers": [{"name": "Saint Denis", "desc": "", "cat": "Custom", "latlng": [1210, 3190]}],
        "areas": [],
    }), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path, defaults_file):
    return Settings(
        STORAGE_BACKEND="memory",
        DATA_DIR=str(tmp_path / "data"),
        DEFAULTS_PATH=str(defaults_file),
    )


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def state(settings, storage):
    """AppState over in-memory storage with the default categories configured."""
    st = create_state(settings, storage=storage)
    st.defaults = DefaultConfig(categories=[Category(**c) for c in DEFAULT_CATEGORIES])
    return st


@pytest.fixture
def controller(state):
    ctl = MapController(state)
    ctl.startup()
    return ctl


def read_record(storage, key):
    raw = storage.get(key)
    return None if raw is None else json.loads(raw)
