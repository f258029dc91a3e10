"""Marker and zone annotations plus the snapshot/exchange records built from them.

Field aliases follow the durable record format (`desc`, `cat`, `latlng`,
`latlngs`, `areas`) so a model dumped with ``by_alias=True`` is exactly what
gets stored or exported.
"""
import uuid
from typing import Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.category import Category

Point = Tuple[float, float]

# Image-based map spans [0, MAP_SIZE] on both axes
MAP_SIZE = 4096.0
MIN_ZONE_VERTICES = 3


def new_id() -> str:
    return uuid.uuid4().hex


def _check_bounds(pt: Point) -> Point:
    x, y = pt
    if not (0.0 <= x <= MAP_SIZE and 0.0 <= y <= MAP_SIZE):
        raise ValueError(f"point {pt} outside map bounds 0..{MAP_SIZE:g}")
    return pt


class MarkerAnnotation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["marker"] = "marker"
    id: str = Field(default_factory=new_id)
    name: str
    desc: str = ""
    category_id: str = Field(..., alias="cat")
    position: Point = Field(..., alias="latlng")

    @field_validator("position")
    @classmethod
    def _in_map(cls, pt: Point):
        return _check_bounds(pt)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"kind"})


class ZoneAnnotation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["zone"] = "zone"
    id: str = Field(default_factory=new_id)
    name: str
    desc: str = ""
    category_id: str = Field(..., alias="cat")
    shape: Literal["polygon"] = Field("polygon", alias="type")
    vertices: List[Point] = Field(..., alias="latlngs")

    @field_validator("vertices")
    @classmethod
    def _polygon(cls, pts: List[Point]):
        if len(pts) < MIN_ZONE_VERTICES:
            raise ValueError(f"polygon must have >= {MIN_ZONE_VERTICES} points")
        for pt in pts:
            _check_bounds(pt)
        return pts

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"kind"})


Annotation = Union[MarkerAnnotation, ZoneAnnotation]


class UserData(BaseModel):
    """The durable user-data record: `{markers, areas, categories}`."""

    model_config = ConfigDict(populate_by_name=True)

    markers: List[MarkerAnnotation] = Field(default_factory=list)
    zones: List[ZoneAnnotation] = Field(default_factory=list, alias="areas")
    categories: List[Category] = Field(default_factory=list)

    def to_record(self) -> dict:
        return {
            "markers": [m.to_record() for m in self.markers],
            "areas": [z.to_record() for z in self.zones],
            "categories": [c.model_dump() for c in self.categories],
        }


class ExportFile(BaseModel):
    """Downloadable exchange file: `{categories, user: {markers, areas}}`."""

    categories: List[Category] = Field(default_factory=list)
    user: UserData = Field(default_factory=UserData)

    def to_record(self) -> dict:
        user = self.user.to_record()
        return {
            "categories": [c.model_dump() for c in self.categories],
            "user": {"markers": user["markers"], "areas": user["areas"]},
        }


class Snapshot(BaseModel):
    categories: List[Category] = Field(default_factory=list)
    markers: List[MarkerAnnotation] = Field(default_factory=list)
    zones: List[ZoneAnnotation] = Field(default_factory=list)
    visibility: Dict[str, bool] = Field(default_factory=dict)


class DefaultMarker(BaseModel):
    name: str
    desc: str = ""
    cat: str
    latlng: Point


class DefaultArea(BaseModel):
    name: str
    desc: str = ""
    cat: str
    latlngs: List[Point]


class DefaultConfig(BaseModel):
    """Read-only default configuration payload loaded once at startup."""

    categories: List[Category] = Field(default_factory=list)
    markers: List[DefaultMarker] = Field(default_factory=list)
    areas: List[DefaultArea] = Field(default_factory=list)
