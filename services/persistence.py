"""Snapshot persistence and file exchange.

Three independent durable records are kept:

* user data (`{markers, areas, categories}`), rewritten after every store mutation
* runtime categories (`{categories: [{id, color}]}`), rewritten when a category is added
* visibility (`{id: bool}`), rewritten with every snapshot and visibility toggle
"""
from __future__ import annotations

import json
from typing import Any, Optional

import pydantic

from core.config import Settings
from core.errors import ParseError
from core.logger import get_logger
from models.annotation import ExportFile, Snapshot, UserData
from models.category import Category
from services.annotations import AnnotationStore, StoreChange
from services.categories import CategoryRegistry
from services.notifier import Notifier
from services.storage import KeyValueStorage

logger = get_logger(__name__)


class PersistenceGateway:
    def __init__(
        self,
        storage: KeyValueStorage,
        registry: CategoryRegistry,
        store: AnnotationStore,
        notifier: Notifier,
        settings: Settings,
    ):
        self.storage = storage
        self.registry = registry
        self.store = store
        self.notifier = notifier
        self.user_key = settings.USER_DATA_KEY
        self.categories_key = settings.CATEGORIES_KEY
        self.visibility_key = settings.VISIBILITY_KEY

    def attach(self) -> None:
        """Write through on every registry and store mutation."""
        self.registry.subscribe(self._on_registry_change)
        self.store.subscribe(self._on_store_change)

    def _on_registry_change(self, event: str, category_id: Optional[str]) -> None:
        if event == "categories":
            self.save_runtime_categories()
        elif event == "visibility":
            self.save_visibility()

    def _on_store_change(self, change: StoreChange) -> None:
        self.save_snapshot()

    # ----------------------- writes -----------------------
    def _write(self, key: str, record: Any) -> None:
        self.storage.set(key, json.dumps(record))

    def save_snapshot(self) -> None:
        user = UserData(
            markers=list(self.store.markers.values()),
            zones=list(self.store.zones.values()),
            categories=self.registry.list_categories(),
        )
        self._write(self.user_key, user.to_record())
        self.save_visibility()
        logger.debug(f"Saved snapshot: {len(user.markers)} markers, {len(user.zones)} zones")

    def save_runtime_categories(self) -> None:
        cats = [c.model_dump() for c in self.registry.list_categories()]
        self._write(self.categories_key, {"categories": cats})

    def save_visibility(self) -> None:
        self._write(self.visibility_key, self.registry.visibility())

    def clear_user_data(self) -> None:
        self.storage.remove(self.user_key)
        self.storage.remove(self.visibility_key)
        logger.info("Removed user data and visibility records")

    # ----------------------- reads -----------------------
    def _read(self, key: str) -> Optional[Any]:
        raw = self.storage.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(f"record {key!r} is not valid JSON: {e}") from e

    def _degrade(self, key: str, err: Exception) -> None:
        logger.warning(f"Ignoring corrupted record {key!r}: {err}")
        # the next write replaces the record, so keep what was there
        raw = self.storage.get(key)
        if raw:
            self.storage.set(f"{key}.corrupt", raw)
            logger.warning(f"Kept a copy of {key!r} as {key}.corrupt")
        self.notifier.warn("Saved data could not be read, using defaults")

    def load_snapshot(self) -> Snapshot:
        """
        Build a snapshot from durable storage on top of the current registry.

        Missing records leave the matching part of the current state as is.
        A corrupted record is skipped with a warning.
        """
        categories = self.registry.list_categories()
        visibility: dict[str, bool] = {}
        markers, zones = [], []

        try:
            runtime = self._read(self.categories_key)
            if runtime is not None:
                if not isinstance(runtime, dict):
                    raise ParseError("runtime categories record must be an object")
                if runtime.get("categories"):
                    categories = [Category.model_validate(c) for c in runtime["categories"]]
        except (ParseError, pydantic.ValidationError, TypeError) as e:
            self._degrade(self.categories_key, e)

        try:
            vis = self._read(self.visibility_key)
            if vis is not None:
                if not isinstance(vis, dict):
                    raise ParseError("visibility record must be an object")
                if not all(isinstance(v, bool) for v in vis.values()):
                    raise ParseError("visibility record values must be true or false")
                visibility = {str(k): v for k, v in vis.items()}
        except ParseError as e:
            self._degrade(self.visibility_key, e)

        try:
            data = self._read(self.user_key)
            if data is not None:
                if not isinstance(data, dict):
                    raise ParseError("user data record must be an object")
                user = UserData.model_validate(data)
                if data.get("categories"):
                    categories = user.categories
                markers, zones = user.markers, user.zones
        except (ParseError, pydantic.ValidationError) as e:
            self._degrade(self.user_key, e)

        return Snapshot(categories=categories, markers=markers, zones=zones, visibility=visibility)

    def restore(self) -> Snapshot:
        """Load the durable snapshot and apply it to registry and store."""
        snapshot = self.load_snapshot()
        self.registry.replace(snapshot.categories)
        self.registry.replace_visibility(snapshot.visibility)
        self.store.load(snapshot.markers, snapshot.zones)
        logger.info(
            f"Restored {len(snapshot.categories)} categories, "
            f"{len(snapshot.markers)} markers, {len(snapshot.zones)} zones"
        )
        return snapshot

    # ----------------------- exchange -----------------------
    def export_snapshot(self) -> bytes:
        """
        Serialize the last saved user data as an exchange file.

        Reads the durable record, not the in-memory store.
        """
        data = self._read(self.user_key) or {"markers": [], "areas": []}
        try:
            user = UserData.model_validate(data)
        except pydantic.ValidationError as e:
            raise ParseError(f"saved user data is invalid: {e}") from e

        categories = user.categories if data.get("categories") else self.registry.list_categories()
        out = ExportFile(categories=categories, user=user)
        return json.dumps(out.to_record(), indent=2).encode("utf-8")

    def import_snapshot(self, payload: bytes | str) -> UserData:
        """
        Replace the durable user data with an exchange file.

        Accepts the export format or a bare `{markers, areas, categories}`
        record. The live state is left alone; callers reload afterwards.
        """
        try:
            if isinstance(payload, bytes):
                payload = payload.decode("utf-8")
            data = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ParseError("Invalid JSON: expected an object")

        try:
            if "user" in data:
                user_part = data.get("user") or {}
                if not isinstance(user_part, dict):
                    raise ParseError("Invalid JSON: 'user' must be an object")
                user = UserData.model_validate({
                    "markers": user_part.get("markers") or [],
                    "areas": user_part.get("areas") or [],
                    "categories": data.get("categories") or [],
                })
            else:
                user = UserData.model_validate(data)
        except pydantic.ValidationError as e:
            raise ParseError(f"Invalid data: {e}") from e

        self._write(self.user_key, user.to_record())
        logger.info(f"Imported {len(user.markers)} markers, {len(user.zones)} zones")
        return user
