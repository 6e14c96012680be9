"""Value types shared by the layout, projection and interaction layers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple, Union

__all__ = [
    "CENTER_ID",
    "Idea",
    "Point3D",
    "ViewState",
    "PointerTrack",
    "AutoRotating",
    "Dragging",
    "Inspecting",
    "InteractionState",
    "PointerPhase",
    "PointerEvent",
    "Viewport",
    "ProjectedPoint",
    "RenderItem",
    "Frame",
]

CENTER_ID = "center"


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Idea:
    """Item supplied by the idea source. Never mutated by the engine."""

    id: str
    phrase: str
    category: str = ""
    description: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object], index: int = 0) -> "Idea":
        """Build an idea from a JSON object.

        ``phrase`` is mandatory. A missing ``id`` is derived from the phrase and
        the position in the source list so the key stays stable between loads.
        """

        if not isinstance(payload, Mapping):
            raise ValueError(f"idea #{index} is not an object: {payload!r}")
        phrase = _text(payload.get("phrase") or payload.get("label") or payload.get("name"))
        if not phrase:
            raise ValueError(f"idea #{index} has no phrase")
        ident = _text(payload.get("id")) or f"{index}-{phrase}"
        return cls(
            id=ident,
            phrase=phrase,
            category=_text(payload.get("category")),
            description=_text(payload.get("description")),
        )


@dataclass(frozen=True)
class Point3D:
    """Placed node. The center point has no item and sits at the origin."""

    x: float
    y: float
    z: float
    id: str
    item: Optional[Idea] = None
    is_center: bool = False


@dataclass(frozen=True)
class ViewState:
    """Camera orientation and zoom. Replaced wholesale on every change."""

    rotation_x: float = 0.2
    rotation_y: float = 0.0
    zoom: float = 1.0


# ---------------------------------------------------------------------------
# Interaction states


@dataclass(frozen=True)
class PointerTrack:
    x: float
    y: float


@dataclass(frozen=True)
class AutoRotating:
    name = "auto_rotating"


@dataclass(frozen=True)
class Dragging:
    track: PointerTrack
    name = "dragging"


@dataclass(frozen=True)
class Inspecting:
    item: Idea
    name = "inspecting"


InteractionState = Union[AutoRotating, Dragging, Inspecting]


class PointerPhase(enum.Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


@dataclass(frozen=True)
class PointerEvent:
    """Host-independent pointer sample (mouse or single touch)."""

    phase: PointerPhase
    x: float = 0.0
    y: float = 0.0


# ---------------------------------------------------------------------------
# Projection output


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass
class ProjectedPoint:
    point: Point3D
    screen_x: float
    screen_y: float
    perspective_scale: float
    depth_key: int
    raw_z: float
    culled: bool = False

    @property
    def id(self) -> str:
        return self.point.id

    @property
    def is_center(self) -> bool:
        return self.point.is_center

    @property
    def item(self) -> Optional[Idea]:
        return self.point.item


@dataclass
class RenderItem:
    """Structure describing a node ready to be drawn."""

    id: str
    screen_x: float
    screen_y: float
    perspective_scale: float
    depth_key: int
    is_center: bool
    is_behind: bool
    is_selected: bool = False
    link_opacity: float = 0.0
    label: str = ""
    item: Optional[Idea] = None
    is_culled: bool = False


@dataclass
class Frame:
    """Everything the drawing layer needs for one refresh."""

    items: List[RenderItem]
    wireframe: List[List[Tuple[float, float]]]
    state: InteractionState
    view: ViewState
    width: float = 0.0
    height: float = 0.0
    center: Optional[RenderItem] = field(default=None)

    @property
    def selected(self) -> Optional[Idea]:
        if isinstance(self.state, Inspecting):
            return self.state.item
        return None
