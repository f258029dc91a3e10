import time
from collections import deque
from typing import Any, Deque, Dict, List

from core.logger import get_logger

logger = get_logger(__name__)

LEVELS = ("info", "warning", "error")


class Notifier:
    """User-facing notifications, newest first, bounded like a toast history."""

    def __init__(self, maxlen: int = 200):
        self.entries: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def notify(self, message: str, level: str = "info") -> None:
        if level not in LEVELS:
            level = "info"
        self.entries.appendleft({"ts": time.time(), "level": level, "message": message})
        log = logger.warning if level != "info" else logger.info
        log(f"[notify] {message}")

    def warn(self, message: str) -> None:
        self.notify(message, level="warning")

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        return list(self.entries)[:max(1, limit)]

    def last_message(self) -> str | None:
        return self.entries[0]["message"] if self.entries else None
