"""Common triangle helpers shared by the mesh builders and validators."""

from __future__ import annotations

from typing import Sequence, Tuple

from sketchmesh.geom import cross, epsilon, mag

Vec3 = Tuple[float, float, float]


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point/vector as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def face_cross(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> list:
    """Return ``(v1 - v0) x (v2 - v0)``, twice the area-weighted face normal."""

    ax, ay, az = v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2]
    bx, by, bz = v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2]
    return cross([ax, ay, az, 1.0], [bx, by, bz, 1.0])


def triangle_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = face_cross(v0, v1, v2)
    length = mag(n)
    if length <= epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


__all__ = [
    "Vec3",
    "to_vec3",
    "face_cross",
    "triangle_normal",
]
