"""Interactive 3D sphere of ideas arranged around a focus keyword."""

from .config import DEFAULTS, Settings, load_config
from .engine import IdeaSphereEngine
from .model import (
    AutoRotating,
    Dragging,
    Frame,
    Idea,
    Inspecting,
    Point3D,
    PointerEvent,
    PointerPhase,
    RenderItem,
    ViewState,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULTS",
    "Settings",
    "load_config",
    "IdeaSphereEngine",
    "AutoRotating",
    "Dragging",
    "Frame",
    "Idea",
    "Inspecting",
    "Point3D",
    "PointerEvent",
    "PointerPhase",
    "RenderItem",
    "ViewState",
]
