from enum import Enum, auto

# What a map click currently means
class InteractionMode(Enum):
    IDLE = auto()
    PLACING_MARKER = auto()
    DRAWING_ZONE = auto()

class DrawingState(Enum):
    IDLE = auto()
    ACTIVE = auto()
