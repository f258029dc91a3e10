from typing import List, Optional
from pydantic import BaseModel, Field

from models.annotation import Point

class CategoryIn(BaseModel):
    name: str
    color: str

class VisibilityIn(BaseModel):
    visible: bool

class MarkerIn(BaseModel):
    name: str = ""
    desc: str = ""
    cat: Optional[str] = None
    latlng: Point

class ZoneIn(BaseModel):
    name: str = ""
    desc: str = ""
    cat: Optional[str] = None
    latlngs: List[Point] = Field(default_factory=list)

# Edit forms always submit all three fields
class AnnotationEditIn(BaseModel):
    name: str = ""
    desc: str = ""
    cat: str

class PositionIn(BaseModel):
    latlng: Point

class DraftIn(BaseModel):
    name: str = ""
    desc: str = ""
    cat: Optional[str] = None

class ClickIn(BaseModel):
    latlng: Optional[Point] = None
