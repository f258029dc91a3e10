from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

import pydantic

from core.errors import ValidationError
from core.logger import get_logger
from models.category import Category

logger = get_logger(__name__)

DEFAULT_COLOR = "#94a3b8"

# listener(event, category_id); event is "categories" or "visibility"
RegistryListener = Callable[[str, Optional[str]], None]


class CategoryRegistry:
    """Owns category identity, color and visibility.

    Categories keep insertion order. Visibility is tracked apart from the
    category list and defaults to visible for ids it has never seen.
    """

    def __init__(self, default_color: str = DEFAULT_COLOR):
        self.default_color = default_color
        self._categories: Dict[str, Category] = {}
        self._visibility: Dict[str, bool] = {}
        self._listeners: List[RegistryListener] = []

    def subscribe(self, listener: RegistryListener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: str, category_id: Optional[str] = None) -> None:
        for listener in self._listeners:
            listener(event, category_id)

    # ----------------------- loading -----------------------
    def load_defaults(self, categories: Iterable[Category]) -> None:
        """Replace the registry wholesale from the default configuration."""
        self.replace(categories)
        logger.info(f"Loaded {len(self._categories)} default categories")

    def replace(self, categories: Iterable[Category]) -> None:
        # later duplicates win on color but keep the first position
        self._categories = {}
        for cat in categories:
            self._categories[cat.id] = cat

    def replace_visibility(self, visibility: Dict[str, bool]) -> None:
        self._visibility = {str(k): bool(v) for k, v in visibility.items()}

    def clear_visibility(self) -> None:
        self._visibility.clear()

    # ----------------------- mutations -----------------------
    def add(self, name: str, color: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("empty-name", "Name required")
        if name in self._categories:
            raise ValidationError("duplicate-name", "Category exists")
        try:
            category = Category(id=name, color=color)
        except pydantic.ValidationError as e:
            raise ValidationError("invalid-color", f"Invalid color {color!r}") from e

        self._categories[category.id] = category
        self._visibility[category.id] = True
        logger.info(f"Added category {category.id} ({category.color})")
        self._emit("categories", category.id)
        return category

    def set_visibility(self, category_id: str, visible: bool) -> None:
        self._visibility[category_id] = bool(visible)
        self._emit("visibility", category_id)

    # ----------------------- queries -----------------------
    def list_categories(self) -> List[Category]:
        return list(self._categories.values())

    def ids(self) -> List[str]:
        return list(self._categories)

    def contains(self, category_id: str) -> bool:
        return category_id in self._categories

    def color_of(self, category_id: str) -> str:
        cat = self._categories.get(category_id)
        return cat.color if cat is not None else self.default_color

    def is_visible(self, category_id: str) -> bool:
        return self._visibility.get(category_id, True)

    def visibility(self) -> Dict[str, bool]:
        return dict(self._visibility)

    def default_category(self, preferred: str = "Custom") -> Optional[str]:
        """Category preselected for new markers and zones."""
        if preferred in self._categories:
            return preferred
        return next(iter(self._categories), None)
