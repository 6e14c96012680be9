"""Painter's-algorithm ordering and render descriptors."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .model import ProjectedPoint, RenderItem

__all__ = ["BEHIND_THRESHOLD", "is_behind", "link_opacity", "depth_sort", "build_render_list"]

BEHIND_THRESHOLD = 100.0


def is_behind(raw_z: float, zoom: float, threshold: float = BEHIND_THRESHOLD) -> bool:
    """Hint for the faded treatment. Geometry is left untouched."""

    return raw_z < -threshold * zoom


def link_opacity(scale: float) -> float:
    return max(0.05, (scale - 0.5) * 0.4)


def depth_sort(projected: Iterable[ProjectedPoint]) -> List[ProjectedPoint]:
    """Return points far-to-near, with the center node always drawn last."""

    return sorted(projected, key=lambda p: (p.is_center, p.depth_key, p.perspective_scale))


def build_render_list(
    projected: Sequence[ProjectedPoint],
    zoom: float,
    *,
    center_label: str = "",
    selected_index: Optional[int] = None,
    behind_threshold: float = BEHIND_THRESHOLD,
) -> List[RenderItem]:
    """Sort ``projected`` and convert each point into a :class:`RenderItem`.

    Culled points keep their place in the order but carry no link.

    ``selected_index`` is the position in ``projected`` of the inspected node;
    only that entry is flagged, so duplicate ids never light up twice.
    """

    selected = projected[selected_index] if selected_index is not None else None
    items: List[RenderItem] = []
    for p in depth_sort(projected):
        if p.is_center:
            label = center_label
        else:
            label = p.item.phrase if p.item is not None else p.id
        items.append(
            RenderItem(
                id=p.id,
                screen_x=p.screen_x,
                screen_y=p.screen_y,
                perspective_scale=p.perspective_scale,
                depth_key=p.depth_key,
                is_center=p.is_center,
                is_behind=False if p.is_center else is_behind(p.raw_z, zoom, behind_threshold),
                is_selected=p is selected,
                link_opacity=0.0 if p.is_center or p.culled else link_opacity(p.perspective_scale),
                label=label,
                item=p.item,
                is_culled=p.culled,
            )
        )
    return items
