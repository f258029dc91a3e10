from dataclasses import dataclass, field
from typing import List

from models.annotation import Point


@dataclass
class ZoneDraft:
    name: str
    desc: str
    category_id: str
    color: str
    vertices: List[Point] = field(default_factory=list)

    def vertex_count(self) -> int:
        return len(self.vertices)
