"""Durable key-value storage for JSON-encoded records.

Each key holds one JSON string, mirroring browser local storage. The file
backend keeps one `<key>.json` per record and replaces it atomically.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Protocol

from core.config import Settings


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.records: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def set(self, key: str, value: str) -> None:
        self.records[key] = value

    def remove(self, key: str) -> None:
        self.records.pop(key, None)


class FileStorage:
    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            handle.write(value)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def create_storage(settings: Settings) -> KeyValueStorage:
    if settings.uses_memory_storage:
        return MemoryStorage()
    return FileStorage(settings.DATA_DIR)
