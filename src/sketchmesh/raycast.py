"""Camera-ray unprojection and ray/plane, ray/sphere intersection.

Intersection functions return ``None`` when there is no forward hit;
every caller is expected to branch on that rather than use a
placeholder point.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import mpmath as mpm

from sketchmesh import geom
from sketchmesh.camera import Camera, OrthographicCamera
from sketchmesh.xform import Matrix


@dataclass(frozen=True, eq=False)
class Ray:
    """Half-line ``origin + t * direction`` for ``t >= 0``; direction is unit length."""

    origin: list
    direction: list

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", geom.point(list(self.origin)))
        d = geom.normalize(self.direction)
        object.__setattr__(self, "direction", geom.direction(d[0], d[1], d[2]))

    def at(self, t: float) -> list:
        return geom.add(self.origin, geom.scale3(self.direction, t))


@dataclass(frozen=True, eq=False)
class Plane:
    """Points ``p`` with ``dot(normal, p) + constant == 0``.

    The normal is normalized on construction (scaling ``constant`` to
    match), so it is always unit length.
    """

    normal: list
    constant: float = 0.0

    def __post_init__(self) -> None:
        m = geom.mag(self.normal)
        if m < geom.epsilon:
            raise ValueError(f"plane normal must be non-zero: {geom.vstr(self.normal)}")
        n = self.normal
        object.__setattr__(self, "normal", geom.direction(n[0] / m, n[1] / m, n[2] / m))
        object.__setattr__(self, "constant", self.constant / m)

    @classmethod
    def from_normal_and_point(cls, normal: Sequence[float], p: Sequence[float]) -> "Plane":
        n = geom.normalize(normal)
        return cls(geom.direction(n[0], n[1], n[2]), -geom.dot(p, n))

    def distance_to_point(self, p: Sequence[float]) -> float:
        """Signed distance, positive on the side the normal points to."""

        return geom.dot(self.normal, p) + self.constant

    def project_point(self, p: Sequence[float]) -> list:
        """Foot of the perpendicular from ``p`` onto the plane."""

        return geom.sub(p, geom.scale3(self.normal, self.distance_to_point(p)))

    def coplanar_point(self) -> list:
        return geom.scale3(self.normal, -self.constant)


@dataclass(frozen=True, eq=False)
class Sphere:
    center: list
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", geom.point(list(self.center)))
        if self.radius < 0:
            raise ValueError(f"sphere radius must be non-negative, got {self.radius}")


def _cast(x: float, y: float, camera: Camera, m: Matrix) -> Ray:
    if isinstance(camera, OrthographicCamera):
        # start in the camera's own plane, travel along the view axis
        z = (camera.near + camera.far) / (camera.near - camera.far)
        return Ray(m.transform_point([x, y, z, 1.0]), camera.forward())
    target = m.transform_point([x, y, 0.5, 1.0])
    return Ray(camera.position, geom.sub(target, camera.position))


def unproject(screen_point: Sequence[float], camera: Camera) -> Ray:
    """Ray from the camera through device-normalized ``screen_point``."""

    return _cast(screen_point[0], screen_point[1], camera, camera.unprojection_matrix())


def unproject_all(screen_points: Iterable[Sequence[float]], camera: Camera) -> List[Ray]:
    """``unproject`` for many points, sharing one matrix inversion."""

    m = camera.unprojection_matrix()
    return [_cast(p[0], p[1], camera, m) for p in screen_points]


def intersect_plane(ray: Ray, plane: Plane) -> Optional[list]:
    """Return where ``ray`` crosses ``plane`` going forward, or ``None``.

    Rays parallel to the plane, including rays lying in it, do not
    intersect.
    """

    denom = geom.dot(plane.normal, ray.direction)
    if abs(denom) < geom.epsilon:
        return None
    t = -plane.distance_to_point(ray.origin) / denom
    if t < 0:
        return None
    return ray.at(t)


def intersect_sphere(ray: Ray, sphere: Sphere) -> Optional[list]:
    """Return the nearest forward hit of ``ray`` on ``sphere``, or ``None``.

    A ray starting inside the sphere hits it on the way out.
    """

    oc = geom.sub(sphere.center, ray.origin)
    with mpm.workdps(30):
        tca = mpm.mpf(geom.dot(oc, ray.direction))
        d2 = mpm.mpf(geom.dot(oc, oc)) - tca * tca
        r2 = mpm.mpf(sphere.radius) ** 2
        if d2 > r2:
            return None
        thc = mpm.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t1 < 0:
            return None
        t = float(t0) if t0 >= 0 else float(t1)
    return ray.at(t)


__all__ = [
    "Ray",
    "Plane",
    "Sphere",
    "unproject",
    "unproject_all",
    "intersect_plane",
    "intersect_sphere",
]
