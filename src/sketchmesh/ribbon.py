"""Constant-width triangle strips ("ink") following a 2D pointer trace.

A ribbon is authored in device-normalized coordinates, with every
vertex on the near plane at depth ``NEAR_DEPTH``.  It starts as two
coincident vertices at the stroke origin; each accepted point appends a
left/right vertex pair and the two triangles joining it to the previous
pair::

    n-1 ---- n+1        faces [n, n+1, n-2] and [n-1, n-2, n+1]
     |   \\    |
    n-2 ---- n          (n = index of the first new vertex)

Buffers only ever grow, and faces only reference vertices that already
exist.
"""

from __future__ import annotations

from math import isfinite
from typing import List, Sequence

from sketchmesh import geom
from sketchmesh.errors import InvalidConfiguration
from sketchmesh.mesh import flatten_faces, surface, to_buffers

NEAR_DEPTH = -0.999
DEFAULT_STROKE_WIDTH = 0.02


def _device_vertex(p: Sequence[float]) -> list:
    return [p[0], p[1], NEAR_DEPTH, 1.0]


class RibbonMesh:
    """Append-only ribbon buffers plus the accepted 2D path."""

    def __init__(self, origin: Sequence[float] = (0.0, 0.0),
                 world_origin: Sequence[float] = (0.0, 0.0, 0.0),
                 stroke_width: float = DEFAULT_STROKE_WIDTH, color: str = "black"):
        if not geom.isgoodnum(stroke_width) or not isfinite(stroke_width) or stroke_width <= 0:
            raise InvalidConfiguration(f"stroke width must be a positive number, got {stroke_width!r}")

        start = geom.point(origin[0], origin[1])
        self.stroke_width = stroke_width
        self.color = color
        self.world_origin = geom.point(list(world_origin))
        self.screen_path: List[list] = [start]
        self.vertices: List[list] = [_device_vertex(start), _device_vertex(start)]
        self.faces: List[list] = []

    def __repr__(self):
        return (f"RibbonMesh(points={len(self.screen_path)}, vertices={len(self.vertices)}, "
                f"stroke_width={self.stroke_width})")

    @property
    def last_point(self) -> list:
        return self.screen_path[-1]

    def add_point(self, p: Sequence[float]) -> bool:
        """Extend the ribbon to ``p``; return ``False`` if ``p`` is too close to add.

        Points within half a stroke width of the last accepted point are
        ignored, which keeps segments from collapsing to zero length.
        """

        new = geom.point(p[0], p[1])
        end = self.screen_path[-1]
        half = self.stroke_width / 2
        if geom.dist(new, end) <= half:
            return False

        tangent = geom.normalize(geom.sub(new, end))
        offset = geom.scale3(geom.rotate90XY(tangent), half)

        n = len(self.vertices)
        self.vertices.append(_device_vertex(geom.sub(new, offset)))
        self.vertices.append(_device_vertex(geom.add(new, offset)))
        self.faces.append([n, n + 1, n - 2])
        self.faces.append([n - 1, n - 2, n + 1])
        self.screen_path.append(new)
        return True

    def _pop_point(self) -> None:
        # reverse the last successful add_point
        del self.vertices[-2:]
        del self.faces[-2:]
        self.screen_path.pop()

    def is_empty(self) -> bool:
        """True when there is not even one vertex pair to project."""

        return len(self.vertices) < 2

    @property
    def indices(self) -> List[int]:
        return flatten_faces(self.faces)

    def to_surface(self) -> list:
        normals = [geom.direction(0, 0, 1.0) for _ in self.vertices]
        return surface(self.vertices, normals, self.faces)

    def as_arrays(self):
        return to_buffers(self.vertices, self.faces)


def new_ribbon(origin: Sequence[float], world_origin: Sequence[float],
               width: float = DEFAULT_STROKE_WIDTH) -> RibbonMesh:
    return RibbonMesh(origin, world_origin, width)


def add_point(ribbon: RibbonMesh, p: Sequence[float]) -> bool:
    return ribbon.add_point(p)


__all__ = [
    "NEAR_DEPTH",
    "DEFAULT_STROKE_WIDTH",
    "RibbonMesh",
    "new_ribbon",
    "add_point",
]
