"""Decorative globe lines drawn behind the nodes."""

from __future__ import annotations

import functools
import math
from typing import Tuple

__all__ = [
    "MERIDIAN_COUNT",
    "MERIDIAN_SAMPLES",
    "PARALLEL_LEVELS",
    "PARALLEL_SAMPLES",
    "globe_wireframe",
]

MERIDIAN_COUNT = 6
MERIDIAN_SAMPLES = 21
PARALLEL_LEVELS = (-0.5, 0.0, 0.5)
PARALLEL_SAMPLES = 31

Vec3 = Tuple[float, float, float]
Polyline = Tuple[Vec3, ...]


@functools.lru_cache(maxsize=8)
def globe_wireframe(radius: float) -> Tuple[Polyline, ...]:
    """Return the meridians followed by the tropic/equator rings.

    Meridians run pole to pole at longitudes 60 degrees apart. Rings are closed:
    their first and last samples coincide.
    """

    lines = []
    for i in range(MERIDIAN_COUNT):
        theta = (i / MERIDIAN_COUNT) * math.pi * 2.0
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        line = []
        for j in range(MERIDIAN_SAMPLES):
            phi = (j / (MERIDIAN_SAMPLES - 1)) * math.pi
            sin_p = math.sin(phi)
            line.append((radius * sin_p * cos_t, radius * math.cos(phi), radius * sin_p * sin_t))
        lines.append(tuple(line))

    for level in PARALLEL_LEVELS:
        y = level * radius
        ring = math.sqrt(max(0.0, radius * radius - y * y))
        line = []
        for j in range(PARALLEL_SAMPLES):
            theta = (j / (PARALLEL_SAMPLES - 1)) * math.pi * 2.0
            line.append((ring * math.cos(theta), y, ring * math.sin(theta)))
        lines.append(tuple(line))
    return tuple(lines)
