"""Silhouette curves: a 2D pointer trace lifted onto a 3D plane.

The plane for terrain sculpting stands upright on the stroke's ground
baseline.  Its normal is horizontal and perpendicular to the baseline,
so the curve drawn on it reads as a side view of the hill or valley
being sketched.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from sketchmesh import geom
from sketchmesh.camera import Camera
from sketchmesh.errors import DegenerateProjection, InvalidConfiguration
from sketchmesh.raycast import Plane, intersect_plane, unproject_all

logger = logging.getLogger(__name__)

# what to do with a sample whose ray never reaches the plane
MISS_POLICIES = ("raise", "skip")

SilhouetteCurve = Tuple[list, ...]


def check_miss_policy(on_miss: str) -> None:
    if on_miss not in MISS_POLICIES:
        raise InvalidConfiguration(f"unknown miss policy {on_miss!r}, expected one of {MISS_POLICIES}")


def reshape_plane(start: Sequence[float], end: Sequence[float],
                  up: Optional[Sequence[float]] = None) -> Plane:
    """Upright plane through ``start`` containing the baseline ``start -> end``.

    normal = normalize((end - start) x up)
    """

    if up is None:
        up = geom.up()
    n = geom.cross(geom.sub(end, start), up)
    if geom.mag(n) < geom.epsilon:
        raise DegenerateProjection(
            f"stroke baseline {geom.vstr(list(start))} -> {geom.vstr(list(end))} "
            "is zero-length or parallel to up"
        )
    return Plane.from_normal_and_point(n, start)


def build_silhouette(screen_path: Sequence[Sequence[float]], plane: Plane, camera: Camera,
                     on_miss: str = "raise") -> SilhouetteCurve:
    """Project every sample of ``screen_path`` onto ``plane``, in order.

    With ``on_miss='raise'`` a sample whose ray is parallel to the plane
    or crosses it behind the camera aborts the whole build with
    ``DegenerateProjection``.  With ``on_miss='skip'`` such samples are
    dropped; if none survive, ``DegenerateProjection`` is raised anyway.
    """

    check_miss_policy(on_miss)
    if len(screen_path) == 0:
        raise DegenerateProjection("screen path is empty")

    curve = []
    for i, ray in enumerate(unproject_all(screen_path, camera)):
        hit = intersect_plane(ray, plane)
        if hit is None:
            if on_miss == "raise":
                raise DegenerateProjection("sample ray does not reach the silhouette plane", index=i)
            logger.debug(f"Skipping sample {i}: ray does not reach the silhouette plane")
            continue
        curve.append(hit)

    if not curve:
        raise DegenerateProjection("no sample of the screen path reaches the silhouette plane")
    logger.debug(f"Built silhouette curve with {len(curve)} of {len(screen_path)} samples")
    return tuple(curve)


__all__ = [
    "MISS_POLICIES",
    "SilhouetteCurve",
    "check_miss_policy",
    "reshape_plane",
    "build_silhouette",
]
