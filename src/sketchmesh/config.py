"""Tunable parameters and a façade that applies them.

Parameters can be set in code or loaded from a YAML file::

    ground_size: 100.0
    segments: 100
    stroke_width: 0.02
    influence_radius: 5.0
    sky_radius: 495.0
    on_miss: raise

Missing keys keep their defaults; unknown keys are rejected.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from math import isfinite
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import yaml

from sketchmesh import geom
from sketchmesh.billboard import DEFAULT_SKY_RADIUS, Billboard
from sketchmesh.camera import Camera
from sketchmesh.errors import InvalidConfiguration
from sketchmesh.ground import DEFAULT_INFLUENCE_RADIUS, GroundMesh, reshape_ground
from sketchmesh.ribbon import DEFAULT_STROKE_WIDTH, RibbonMesh
from sketchmesh.silhouette import check_miss_policy
from sketchmesh.xform import Frame

logger = logging.getLogger(__name__)


@dataclass
class SketchConfig:
    ground_size: float = 100.0
    segments: int = 100
    stroke_width: float = DEFAULT_STROKE_WIDTH
    influence_radius: float = DEFAULT_INFLUENCE_RADIUS
    sky_radius: float = DEFAULT_SKY_RADIUS
    on_miss: str = "raise"

    def validate(self) -> "SketchConfig":
        if isinstance(self.segments, bool) or not isinstance(self.segments, int) or self.segments < 1:
            raise InvalidConfiguration(f"segments must be an integer >= 1, got {self.segments!r}")
        for name in ("ground_size", "stroke_width", "influence_radius", "sky_radius"):
            value = getattr(self, name)
            if not geom.isgoodnum(value) or not isfinite(value) or value <= 0:
                raise InvalidConfiguration(f"{name} must be a positive number, got {value!r}")
        check_miss_policy(self.on_miss)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SketchConfig":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(f"unknown configuration keys: {', '.join(map(str, unknown))}")
        return cls(**data).validate()


def load_config(path: Union[str, Path]) -> SketchConfig:
    path = Path(path)
    with path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"could not parse {path}: {exc}") from exc
    config = SketchConfig.from_dict(data)
    logger.info(f"Loaded sketch configuration from {path}")
    return config


def dump_config(config: SketchConfig, path: Union[str, Path]) -> None:
    path = Path(path)
    with path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config.validate().to_dict(), fp, sort_keys=False)


class Sketcher:
    """The public operations with their parameters taken from one config."""

    def __init__(self, config: Optional[SketchConfig] = None, **overrides):
        config = config if config is not None else SketchConfig()
        self.config = replace(config, **overrides).validate()

    def build_ground_mesh(self, size: Optional[float] = None,
                          segments: Optional[int] = None) -> GroundMesh:
        return GroundMesh(self.config.ground_size if size is None else size,
                          self.config.segments if segments is None else segments)

    def reshape_ground(self, ground: GroundMesh, screen_path: Sequence[Sequence[float]],
                       start: Sequence[float], end: Sequence[float], camera: Camera) -> int:
        return reshape_ground(ground, screen_path, start, end, camera,
                              radius=self.config.influence_radius, on_miss=self.config.on_miss)

    def new_ribbon(self, origin: Sequence[float], world_origin: Sequence[float],
                   width: Optional[float] = None) -> RibbonMesh:
        return RibbonMesh(origin, world_origin, self.config.stroke_width if width is None else width)

    def billboard(self, ribbon: RibbonMesh) -> Billboard:
        return Billboard(ribbon)

    def project_to_sky(self, billboard: Billboard, camera: Camera, sky: Frame) -> bool:
        return billboard.project_to_sky(camera, sky, self.config.sky_radius)


__all__ = [
    "SketchConfig",
    "Sketcher",
    "load_config",
    "dump_config",
]
