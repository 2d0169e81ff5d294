"""Terrain height field and silhouette-driven sculpting.

The ground is a square grid of ``(segments+1)**2`` vertices spanning
``[-size/2, size/2]`` in X and Z.  Vertex ``index = row*(segments+1)+col``
sits at ``x = -size/2 + row*step``, ``z = -size/2 + col*step``.  Only the
Y (height) component ever changes after construction.

Sculpting follows the hill-drawing scheme of sketch-based terrain
editors: the user draws a stroke that starts and ends on the ground, the
stroke is lifted onto an upright plane through its ground baseline (see
``sketchmesh.silhouette``), and every ground vertex near that plane is
pulled toward the height the curve implies above it::

    d = signed distance of vertex from plane
    w = max(0, 1 - (d/R)**2)
    h = curve height above the vertex's projection onto the plane
    y' = (1 - w)*y + w*h

Vertices outside the curve's horizontal span are not touched.  A vertex
under the curve is blended even when ``h`` is exactly zero; coverage is
tracked separately from the value of ``h``.
"""

from __future__ import annotations

import logging
import numbers
from math import isfinite
from typing import Callable, List, Optional, Sequence

from sketchmesh import geom
from sketchmesh.camera import Camera
from sketchmesh.errors import DegenerateProjection, InvalidConfiguration
from sketchmesh.mesh import (compute_bounding_sphere, compute_vertex_normals, edge_adjacency,
                             flatten_faces, surface, to_buffers)
from sketchmesh.raycast import Plane
from sketchmesh.silhouette import build_silhouette, check_miss_policy, reshape_plane

logger = logging.getLogger(__name__)

DEFAULT_INFLUENCE_RADIUS = 5.0


class GroundMesh:
    """Fixed-topology grid whose vertex heights are sculpted in place.

    ``listeners`` are called with the mesh after every reshape, once
    heights, normals and the bounding sphere are current; an outline
    renderer registers here to rebuild its edge geometry.
    """

    def __init__(self, size: float, segments: int):
        # numpy scalars register as numbers.Integral / numbers.Real
        if isinstance(segments, bool) or not isinstance(segments, numbers.Integral) or segments < 1:
            raise InvalidConfiguration(f"ground segments must be an integer >= 1, got {segments!r}")
        if isinstance(size, bool) or not isinstance(size, numbers.Real) or not isfinite(size) or size <= 0:
            raise InvalidConfiguration(f"ground size must be a positive number, got {size!r}")

        self.size = float(size)
        self.segments = int(segments)

        step = self.size / self.segments
        half = self.size / 2.0
        n = self.segments + 1
        # positions come from the index, not an accumulated increment,
        # so the last row and column land exactly on +size/2
        self.vertices: List[list] = [geom.point(-half + row * step, 0.0, -half + col * step)
                                     for row in range(n) for col in range(n)]
        self.normals: List[list] = [geom.direction(0, 1.0, 0) for _ in self.vertices]

        self.faces: List[list] = []
        for row in range(self.segments):
            for col in range(self.segments):
                self.faces.append([self.index(row, col), self.index(row, col + 1),
                                   self.index(row + 1, col)])
                self.faces.append([self.index(row + 1, col), self.index(row, col + 1),
                                   self.index(row + 1, col + 1)])

        self.bounding_sphere = compute_bounding_sphere(self.vertices)
        self.listeners: List[Callable[["GroundMesh"], None]] = []

    def __repr__(self):
        return f"GroundMesh(size={self.size}, segments={self.segments})"

    def index(self, row: int, col: int) -> int:
        return row * (self.segments + 1) + col

    @property
    def indices(self) -> List[int]:
        return flatten_faces(self.faces)

    @property
    def heights(self) -> List[float]:
        return [v[1] for v in self.vertices]

    def set_heights(self, heights: Sequence[float]) -> None:
        if len(heights) != len(self.vertices):
            raise ValueError(f"expected {len(self.vertices)} heights, got {len(heights)}")
        for v, y in zip(self.vertices, heights):
            v[1] = y

    def refresh(self) -> None:
        """Recompute derived data after heights change and notify listeners."""

        self.normals = compute_vertex_normals(self.vertices, self.faces)
        self.bounding_sphere = compute_bounding_sphere(self.vertices)
        for listener in self.listeners:
            listener(self)

    def boundary(self) -> List[int]:
        """Perimeter vertex indices, counter-clockwise seen from above."""

        s = self.segments
        ring = [self.index(0, col) for col in range(s + 1)]
        ring += [self.index(row, s) for row in range(1, s + 1)]
        ring += [self.index(s, col) for col in range(s - 1, -1, -1)]
        ring += [self.index(row, 0) for row in range(s - 1, 0, -1)]
        return ring

    def edges(self):
        return edge_adjacency(self.faces)

    def to_surface(self) -> list:
        return surface(self.vertices, self.normals, self.faces, boundary=self.boundary())

    def as_arrays(self):
        return to_buffers(self.vertices, self.faces)


def build_ground_mesh(size: float, segments: int) -> GroundMesh:
    return GroundMesh(size, segments)


class SilhouetteProfile:
    """A silhouette curve measured along its plane's horizontal axis.

    Plane-local frame: ``planeY`` is world up, ``planeX`` is
    ``normalize(planeY x normal)`` and the origin is the first curve
    point.
    """

    def __init__(self, curve: Sequence[Sequence[float]], plane: Plane, up=None):
        if len(curve) == 0:
            raise ValueError("silhouette curve is empty")
        if up is None:
            up = geom.up()
        x_axis = geom.cross(up, plane.normal)
        if geom.mag(x_axis) < geom.epsilon:
            raise DegenerateProjection("silhouette plane is horizontal; it has no horizontal axis")
        self.curve = curve
        self.x_axis = geom.normalize(x_axis)
        self.origin = curve[0]
        self.xs = [self.local_x(p) for p in curve]

    def local_x(self, p: Sequence[float]) -> float:
        return geom.dot(geom.sub(p, self.origin), self.x_axis)

    def height(self, closest_point: Sequence[float]) -> Optional[float]:
        """Curve height minus ``closest_point.y``, or ``None`` outside the curve's span.

        Segments are scanned in curve order and the first one whose X
        interval brackets the target wins, so a curve that folds back
        on itself uses its earliest pass.
        """

        x = self.local_x(closest_point)
        for i in range(1, len(self.xs)):
            x0 = self.xs[i - 1]
            x1 = self.xs[i]
            if min(x0, x1) <= x <= max(x0, x1):
                span = x1 - x0
                alpha = 0.0 if abs(span) < geom.epsilon else (x - x0) / span
                y = geom.lerp(self.curve[i - 1][1], self.curve[i][1], alpha)
                return y - closest_point[1]
        return None


def curve_height(closest_point, curve, plane) -> Optional[float]:
    return SilhouetteProfile(curve, plane).height(closest_point)


def compute_h(closest_point, curve, plane) -> float:
    """Height correction at ``closest_point``; 0 when the curve does not cover it."""

    h = curve_height(closest_point, curve, plane)
    return 0.0 if h is None else h


def _check_radius(radius: float) -> None:
    if isinstance(radius, bool) or not isinstance(radius, numbers.Real) or not isfinite(radius) or radius <= 0:
        raise InvalidConfiguration(f"influence radius must be a positive number, got {radius!r}")


def apply_silhouette(ground: GroundMesh, curve: Sequence[Sequence[float]], plane: Plane,
                     radius: float = DEFAULT_INFLUENCE_RADIUS) -> int:
    """Blend ground heights toward ``curve``; return the number of vertices blended."""

    _check_radius(radius)
    radius = float(radius)
    profile = SilhouetteProfile(curve, plane)

    heights = ground.heights
    blended = 0
    for i, v in enumerate(ground.vertices):
        d = plane.distance_to_point(v)
        w = max(0.0, 1.0 - (d / radius) ** 2)
        if w == 0.0:
            continue
        h = profile.height(plane.project_point(v))
        if h is None:
            continue
        heights[i] = (1.0 - w) * heights[i] + w * h
        blended += 1

    ground.set_heights(heights)
    ground.refresh()
    logger.debug(f"Blended {blended} of {len(heights)} ground vertices toward silhouette")
    return blended


def reshape_ground(ground: GroundMesh, screen_path: Sequence[Sequence[float]],
                   start: Sequence[float], end: Sequence[float], camera: Camera,
                   radius: float = DEFAULT_INFLUENCE_RADIUS, on_miss: str = "raise") -> int:
    """Sculpt ``ground`` from a stroke drawn between ground points ``start`` and ``end``.

    The mesh is left unchanged if the projection fails.
    """

    _check_radius(radius)
    check_miss_policy(on_miss)
    plane = reshape_plane(start, end)
    curve = build_silhouette(screen_path, plane, camera, on_miss=on_miss)
    return apply_silhouette(ground, curve, plane, radius)


__all__ = [
    "DEFAULT_INFLUENCE_RADIUS",
    "GroundMesh",
    "SilhouetteProfile",
    "build_ground_mesh",
    "curve_height",
    "compute_h",
    "apply_silhouette",
    "reshape_ground",
]
