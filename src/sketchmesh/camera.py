"""Immutable camera snapshots.

A camera is captured once per input event and handed to every
unprojection call, so no geometry routine depends on ambient camera
state.  Device-normalized coordinates ("NDC") span ``[-1, 1]`` on each
axis; the camera looks down its local -Z axis with +Y up.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from math import isfinite
from typing import Optional, Sequence

from sketchmesh import geom
from sketchmesh.errors import InvalidConfiguration
from sketchmesh.xform import LookRotation, Matrix, Orthographic, Perspective, Translation


@dataclass(frozen=True, eq=False)
class Camera(ABC):
    """Position, orientation and clip range shared by all cameras.

    Abstract: build a ``PerspectiveCamera`` or ``OrthographicCamera``.
    """

    position: Sequence[float] = (0.0, 0.0, 0.0)
    rotation: Matrix = field(default_factory=Matrix)
    near: float = 0.1
    far: float = 2000.0

    def __post_init__(self) -> None:
        # copy so later edits to the caller's objects cannot leak in
        object.__setattr__(self, "position", geom.point(list(self.position)))
        object.__setattr__(self, "rotation", Matrix(self.rotation))
        if not (isfinite(self.near) and isfinite(self.far)):
            raise InvalidConfiguration("camera clip planes must be finite")
        if self.near <= 0 or self.far <= self.near:
            raise InvalidConfiguration(
                f"camera clip range must satisfy 0 < near < far, got near={self.near}, far={self.far}"
            )

    @classmethod
    def look_at(cls, eye: Sequence[float], target: Sequence[float],
                up: Optional[Sequence[float]] = None, **params) -> "Camera":
        """Build a camera at ``eye`` looking toward ``target``."""

        eye = geom.point(list(eye))
        target = geom.point(list(target))
        if up is not None:
            up = geom.direction(*up[:3])
        rotation = LookRotation(geom.sub(target, eye), up)
        return cls(position=eye, rotation=rotation, **params)

    def world_matrix(self) -> Matrix:
        return Translation(self.position).mul(self.rotation)

    def view_matrix(self) -> Matrix:
        return self.rotation.transpose().mul(Translation(self.position, inverse=True))

    @abstractmethod
    def projection_matrix(self) -> Matrix:
        """View space to device-normalized clip space."""

    def projection_inverse(self) -> Matrix:
        return self.projection_matrix().inverse()

    def forward(self) -> list:
        """Unit viewing direction in world space."""

        return geom.normalize(self.rotation.transform_direction([0, 0, -1.0]))

    def unprojection_matrix(self) -> Matrix:
        """Device-normalized coordinates to world space."""

        return self.world_matrix().mul(self.projection_inverse())

    def unproject(self, ndc: Sequence[float]) -> list:
        """Map a device-normalized ``(x, y, z)`` point into world space."""

        return self.unprojection_matrix().transform_point(geom.point(list(ndc)))

    def project(self, p: Sequence[float]) -> list:
        """Map a world-space point to device-normalized coordinates."""

        m = self.projection_matrix().mul(self.view_matrix())
        return m.transform_point(geom.point(list(p)))


@dataclass(frozen=True, eq=False)
class PerspectiveCamera(Camera):
    """Pinhole camera; ``fov`` is the vertical field of view in degrees."""

    fov: float = 50.0
    aspect: float = 1.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if not (0.0 < self.fov < 180.0):
            raise InvalidConfiguration(f"field of view must lie in (0, 180) degrees, got {self.fov}")
        if not (isfinite(self.aspect) and self.aspect > 0):
            raise InvalidConfiguration(f"aspect ratio must be positive, got {self.aspect}")

    def projection_matrix(self) -> Matrix:
        return Perspective(self.fov, self.aspect, self.near, self.far)


@dataclass(frozen=True, eq=False)
class OrthographicCamera(Camera):
    """Parallel projection of the view-space box ``[left, right] x [bottom, top]``."""

    left: float = -1.0
    right: float = 1.0
    top: float = 1.0
    bottom: float = -1.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.right <= self.left or self.top <= self.bottom:
            raise InvalidConfiguration(
                f"orthographic extents are empty: left={self.left}, right={self.right}, "
                f"top={self.top}, bottom={self.bottom}"
            )

    def projection_matrix(self) -> Matrix:
        return Orthographic(self.left, self.right, self.top, self.bottom, self.near, self.far)


__all__ = [
    "Camera",
    "PerspectiveCamera",
    "OrthographicCamera",
]
