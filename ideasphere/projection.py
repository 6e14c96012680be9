"""Rotation and perspective projection from world space to the viewport."""

from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Tuple

from .model import Point3D, ProjectedPoint, ViewState, Viewport

__all__ = ["FOCAL_LENGTH", "NEAR_PLANE", "Projection", "project_xyz", "project", "project_polyline", "project_segments"]

FOCAL_LENGTH = 900.0
NEAR_PLANE = 90.0


class Projection(NamedTuple):
    screen_x: float
    screen_y: float
    perspective_scale: float
    depth_key: int
    raw_z: float
    culled: bool = False


def project_xyz(
    x: float,
    y: float,
    z: float,
    view: ViewState,
    viewport: Viewport,
    focal_length: float = FOCAL_LENGTH,
    near_plane: float = NEAR_PLANE,
) -> Projection:
    """Zoom, rotate about Y then X, and divide by depth.

    ``raw_z`` is the depth after both rotations and before the perspective
    divide; positive values point away from the viewer. Points whose
    distance to the camera (``focal_length + raw_z``) is at or below
    ``near_plane`` are flagged ``culled``: they keep a finite scale, clamped
    at ``focal_length / near_plane``, but must not be drawn or hit-tested.
    """

    zoom = view.zoom
    sx = x * zoom
    sy = y * zoom
    sz = z * zoom

    cos_y, sin_y = math.cos(view.rotation_y), math.sin(view.rotation_y)
    xr = sx * cos_y - sz * sin_y
    zr = sz * cos_y + sx * sin_y

    cos_x, sin_x = math.cos(view.rotation_x), math.sin(view.rotation_x)
    yr = sy * cos_x - zr * sin_x
    zr = zr * cos_x + sy * sin_x

    distance = focal_length + zr
    scale = focal_length / max(distance, near_plane)
    return Projection(
        xr * scale + viewport.width / 2.0,
        yr * scale + viewport.height / 2.0,
        scale,
        int(math.floor(scale * 1000.0)),
        zr,
        distance <= near_plane,
    )


def project(
    point: Point3D,
    view: ViewState,
    viewport: Viewport,
    focal_length: float = FOCAL_LENGTH,
    near_plane: float = NEAR_PLANE,
) -> ProjectedPoint:
    p = project_xyz(point.x, point.y, point.z, view, viewport, focal_length, near_plane)
    return ProjectedPoint(point, p.screen_x, p.screen_y, p.perspective_scale, p.depth_key, p.raw_z, p.culled)


def project_polyline(
    line: Iterable[Tuple[float, float, float]],
    view: ViewState,
    viewport: Viewport,
    focal_length: float = FOCAL_LENGTH,
    near_plane: float = NEAR_PLANE,
) -> List[Tuple[float, float]]:
    out: List[Tuple[float, float]] = []
    for x, y, z in line:
        p = project_xyz(x, y, z, view, viewport, focal_length, near_plane)
        out.append((p.screen_x, p.screen_y))
    return out


def project_segments(
    line: Iterable[Tuple[float, float, float]],
    view: ViewState,
    viewport: Viewport,
    focal_length: float = FOCAL_LENGTH,
    near_plane: float = NEAR_PLANE,
) -> List[List[Tuple[float, float]]]:
    """Project ``line`` and split it wherever samples are culled.

    Runs shorter than two samples are dropped.
    """

    segments: List[List[Tuple[float, float]]] = []
    current: List[Tuple[float, float]] = []
    for x, y, z in line:
        p = project_xyz(x, y, z, view, viewport, focal_length, near_plane)
        if p.culled:
            if len(current) > 1:
                segments.append(current)
            current = []
            continue
        current.append((p.screen_x, p.screen_y))
    if len(current) > 1:
        segments.append(current)
    return segments
