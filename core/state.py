from __future__ import annotations
import threading
from dataclasses import dataclass, field
from typing import Optional

from core.config import Settings
from models.annotation import DefaultConfig
from models.interaction import InteractionMode
from services.annotations import AnnotationStore
from services.categories import CategoryRegistry
from services.drawing import ZoneDrawingSession
from services.notifier import Notifier
from services.persistence import PersistenceGateway
from services.storage import KeyValueStorage, create_storage
from services.surface import MapSurface, SceneSurface


@dataclass
class PendingMarker:
    name: str
    desc: str
    category_id: str


@dataclass
class AppState:
    settings: Settings
    storage: KeyValueStorage
    surface: MapSurface
    notifier: Notifier
    registry: CategoryRegistry
    store: AnnotationStore
    drawing: ZoneDrawingSession
    gateway: PersistenceGateway
    defaults: DefaultConfig = field(default_factory=DefaultConfig)

    # What the next map click means
    mode: InteractionMode = InteractionMode.IDLE
    pending_marker: Optional[PendingMarker] = None

    # One user action at a time; request handlers run in a thread pool
    lock: threading.RLock = field(default_factory=threading.RLock)


def create_state(
    settings: Settings,
    storage: Optional[KeyValueStorage] = None,
    surface: Optional[MapSurface] = None,
) -> AppState:
    storage = storage if storage is not None else create_storage(settings)
    surface = surface if surface is not None else SceneSurface()
    notifier = Notifier(maxlen=settings.NOTIFICATIONS_MAX)
    registry = CategoryRegistry(default_color=settings.DEFAULT_COLOR)
    store = AnnotationStore(registry)
    drawing = ZoneDrawingSession(store, surface, notifier)
    gateway = PersistenceGateway(storage, registry, store, notifier, settings)
    gateway.attach()
    return AppState(
        settings=settings,
        storage=storage,
        surface=surface,
        notifier=notifier,
        registry=registry,
        store=store,
        drawing=drawing,
        gateway=gateway,
    )
