"""Default parameters and the typed settings built from them."""

from __future__ import annotations

import copy
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

__all__ = ["DEFAULTS", "Settings", "merge_config", "load_config"]


DEFAULTS: Dict[str, dict] = dict(
    camera=dict(focalLength=900.0, nearPlane=90.0, rotationX=0.2, rotationY=0.0, zoom=1.0),
    layout=dict(radius=420.0),
    interaction=dict(dragSensitivity=0.005, wheelSensitivity=0.001, zoomMin=0.5, zoomMax=2.5),
    animation=dict(rotationStep=0.003, frameIntervalMs=16),
    render=dict(
        behindThreshold=100.0,
        nodeHitRadius=14.0,
        centerRadius=56.0,
        wireframe=True,
        links=True,
        accent="#2DD4BF",
        background="#020617",
    ),
    system=dict(backend="auto", viewportWidth=800, viewportHeight=600),
)


def _coerce_float(value: object, default: float) -> float:
    """Return ``value`` converted to ``float`` when possible."""

    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        try:
            result = float(str(value))
        except (TypeError, ValueError):
            return default
    return result if math.isfinite(result) else default


def _coerce_int(value: object, default: int) -> int:
    return int(round(_coerce_float(value, float(default))))


def merge_config(base: Mapping[str, Mapping[str, object]], payload: Mapping[str, object]) -> Dict[str, dict]:
    """Return a copy of ``base`` updated section by section from ``payload``.

    Unknown sections and keys are dropped with a warning so a typo in a config
    file never silently introduces a new parameter.
    """

    merged = copy.deepcopy({key: dict(value) for key, value in base.items()})
    if not isinstance(payload, Mapping):
        return merged
    for section, values in payload.items():
        if section not in merged:
            logger.warning("Ignoring unknown config section %r", section)
            continue
        if not isinstance(values, Mapping):
            logger.warning("Ignoring config section %r: expected an object", section)
            continue
        for key, value in values.items():
            if key not in merged[section]:
                logger.warning("Ignoring unknown config key %s.%s", section, key)
                continue
            merged[section][key] = value
    return merged


def load_config(path: Union[str, Path, None] = None) -> Dict[str, dict]:
    """Load a JSON config file and merge it over :data:`DEFAULTS`."""

    if path is None:
        return merge_config(DEFAULTS, {})
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config file {path}: {exc}") from exc
    logger.info("Loaded config from %s", path)
    return merge_config(DEFAULTS, payload)


@dataclass(frozen=True)
class Settings:
    """Typed view over a config dict."""

    radius: float = 420.0
    focal_length: float = 900.0
    near_plane: float = 90.0
    initial_rotation_x: float = 0.2
    initial_rotation_y: float = 0.0
    initial_zoom: float = 1.0
    drag_sensitivity: float = 0.005
    wheel_sensitivity: float = 0.001
    zoom_min: float = 0.5
    zoom_max: float = 2.5
    rotation_step: float = 0.003
    frame_interval_ms: int = 16
    behind_threshold: float = 100.0
    node_hit_radius: float = 14.0
    center_radius: float = 56.0
    show_wireframe: bool = True
    show_links: bool = True
    accent: str = "#2DD4BF"
    background: str = "#020617"
    backend: str = "auto"
    viewport_width: int = 800
    viewport_height: int = 600

    @classmethod
    def from_config(cls, cfg: Optional[Mapping[str, Mapping[str, object]]] = None) -> "Settings":
        cfg = merge_config(DEFAULTS, cfg or {})
        cam = cfg["camera"]
        lay = cfg["layout"]
        inter = cfg["interaction"]
        anim = cfg["animation"]
        render = cfg["render"]
        system = cfg["system"]
        d = cls()

        zoom_min = max(1e-3, _coerce_float(inter.get("zoomMin"), d.zoom_min))
        zoom_max = max(zoom_min, _coerce_float(inter.get("zoomMax"), d.zoom_max))
        zoom = min(max(_coerce_float(cam.get("zoom"), d.initial_zoom), zoom_min), zoom_max)
        backend = str(system.get("backend") or "auto").strip().lower()
        if backend not in {"auto", "opengl", "raster"}:
            logger.warning("Unknown backend %r, using auto", backend)
            backend = "auto"

        return cls(
            radius=max(0.0, _coerce_float(lay.get("radius"), d.radius)),
            focal_length=max(1.0, _coerce_float(cam.get("focalLength"), d.focal_length)),
            near_plane=max(1e-6, _coerce_float(cam.get("nearPlane"), d.near_plane)),
            initial_rotation_x=_coerce_float(cam.get("rotationX"), d.initial_rotation_x),
            initial_rotation_y=_coerce_float(cam.get("rotationY"), d.initial_rotation_y),
            initial_zoom=zoom,
            drag_sensitivity=_coerce_float(inter.get("dragSensitivity"), d.drag_sensitivity),
            wheel_sensitivity=_coerce_float(inter.get("wheelSensitivity"), d.wheel_sensitivity),
            zoom_min=zoom_min,
            zoom_max=zoom_max,
            rotation_step=_coerce_float(anim.get("rotationStep"), d.rotation_step),
            frame_interval_ms=max(0, _coerce_int(anim.get("frameIntervalMs"), d.frame_interval_ms)),
            behind_threshold=_coerce_float(render.get("behindThreshold"), d.behind_threshold),
            node_hit_radius=max(0.0, _coerce_float(render.get("nodeHitRadius"), d.node_hit_radius)),
            center_radius=max(0.0, _coerce_float(render.get("centerRadius"), d.center_radius)),
            show_wireframe=bool(render.get("wireframe", True)),
            show_links=bool(render.get("links", True)),
            accent=str(render.get("accent") or d.accent),
            background=str(render.get("background") or d.background),
            backend=backend,
            viewport_width=max(1, _coerce_int(system.get("viewportWidth"), d.viewport_width)),
            viewport_height=max(1, _coerce_int(system.get("viewportHeight"), d.viewport_height)),
        )
