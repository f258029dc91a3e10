from dataclasses import dataclass, field
from typing import List

from models.annotation import Point


@dataclass
class SceneItem:
    id: str
    kind: str                  # "marker" | "zone"
    category_id: str
    color: str
    points: List[Point] = field(default_factory=list)
    label: str = ""
    visible: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "cat": self.category_id,
            "color": self.color,
            "points": [list(p) for p in self.points],
            "label": self.label,
            "visible": self.visible,
        }
