"""Fibonacci-sphere placement of ideas around a fixed center node."""

from __future__ import annotations

import logging
import math
from typing import Hashable, List, Optional, Sequence, Tuple

from .model import CENTER_ID, Idea, Point3D

logger = logging.getLogger(__name__)

__all__ = ["GOLDEN_ANGLE", "sphere_layout", "LayoutCache"]

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


def sphere_layout(items: Sequence[Idea], radius: float) -> List[Point3D]:
    """Return ``len(items) + 1`` points: the center followed by one per item.

    Satellites follow the item order from the north pole (``y = radius``) to
    the south pole, each rotated by the golden angle from the previous one.
    A single item sits on the pole instead of dividing by ``N - 1 == 0``.
    """

    points: List[Point3D] = [Point3D(0.0, 0.0, 0.0, CENTER_ID, None, True)]
    count = len(items)
    for i, item in enumerate(items):
        if count > 1:
            y_norm = 1.0 - (i / (count - 1)) * 2.0
        else:
            y_norm = 1.0
        r = math.sqrt(max(0.0, 1.0 - y_norm * y_norm))
        theta = GOLDEN_ANGLE * i
        points.append(
            Point3D(
                radius * math.cos(theta) * r,
                radius * y_norm,
                radius * math.sin(theta) * r,
                item.id,
                item,
            )
        )
    return points


class LayoutCache:
    """Single-entry memo for :func:`sphere_layout`.

    The cache key is explicit: the item tuple (ideas are frozen and hashable)
    plus the radius. Any change to either produces a full rebuild.
    """

    def __init__(self) -> None:
        self._key: Optional[Tuple[Hashable, ...]] = None
        self._points: List[Point3D] = []
        self.rebuilds = 0

    @staticmethod
    def key_for(items: Sequence[Idea], radius: float) -> Tuple[Hashable, ...]:
        return (tuple(items), float(radius))

    def get(self, items: Sequence[Idea], radius: float) -> List[Point3D]:
        key = self.key_for(items, radius)
        if key != self._key:
            self._points = sphere_layout(items, radius)
            self._key = key
            self.rebuilds += 1
            logger.debug("sphere layout rebuilt: %d points (radius=%.1f)", len(self._points), radius)
        return self._points

    def clear(self) -> None:
        self._key = None
        self._points = []
