"""Utilities for working with indexed triangle meshes.

Meshes are exchanged as surface lists,
``['surface', vertices, normals, faces, boundary, holes]``, where
``vertices`` are points, ``normals`` are direction vectors of the same
length, and ``faces`` are ``[a, b, c]`` vertex index triples.  The
ground and ribbon builders keep their own buffers and export this form
for everything downstream: orientation checks,
normal and bounding-volume computation, and renderer buffers.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import numpy as np

from sketchmesh import geom
from sketchmesh.geometry_utils import face_cross, to_vec3
from sketchmesh.raycast import Sphere


def surface(vertices: Sequence, normals: Sequence, faces: Sequence,
            boundary: Sequence = (), holes: Sequence = ()) -> list:
    """Build a surface list from mesh buffers (buffers are copied)."""

    return ['surface',
            [list(v) for v in vertices],
            [list(n) for n in normals],
            [list(f) for f in faces],
            list(boundary),
            [list(h) for h in holes]]


def issurface(s) -> bool:
    return (isinstance(s, list) and len(s) == 6 and s[0] == 'surface'
            and len(s[1]) == len(s[2]))


def compute_vertex_normals(vertices: Sequence, faces: Sequence) -> List[list]:
    """Area-weighted unit vertex normals.

    Vertices that belong to no non-degenerate face get ``+Y``.
    """

    acc = [[0.0, 0.0, 0.0] for _ in vertices]
    for a, b, c in faces:
        n = face_cross(vertices[a], vertices[b], vertices[c])
        for idx in (a, b, c):
            acc[idx][0] += n[0]
            acc[idx][1] += n[1]
            acc[idx][2] += n[2]

    normals = []
    for n in acc:
        m = geom.mag(n)
        if m <= geom.epsilon:
            normals.append(geom.direction(0, 1.0, 0))
        else:
            normals.append(geom.direction(n[0] / m, n[1] / m, n[2] / m))
    return normals


def compute_bounding_sphere(points: Sequence) -> Sphere:
    """Sphere centred on the axis-aligned bounding box of ``points``.

    The radius reaches the farthest point; an empty point set gives a
    zero sphere at the origin.
    """

    if not points:
        return Sphere(geom.point(0, 0, 0), 0.0)
    lo = [min(p[i] for p in points) for i in range(3)]
    hi = [max(p[i] for p in points) for i in range(3)]
    center = geom.point((lo[0] + hi[0]) / 2.0, (lo[1] + hi[1]) / 2.0, (lo[2] + hi[2]) / 2.0)
    radius = max(geom.dist(center, p) for p in points)
    return Sphere(center, radius)


def edge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def edge_adjacency(faces: Sequence) -> Dict[tuple[int, int], List[int]]:
    """Map each undirected edge to the indices of the faces sharing it.

    Edges appear in first-seen order.  Outline renderers compare the
    normals of the (at most two) faces on each edge to find creases and
    silhouettes.
    """

    edges: Dict[tuple[int, int], List[int]] = {}
    for fidx, (a, b, c) in enumerate(faces):
        for e in (edge_key(a, b), edge_key(b, c), edge_key(c, a)):
            edges.setdefault(e, []).append(fidx)
    return edges


def flatten_faces(faces: Sequence) -> List[int]:
    return [idx for face in faces for idx in face]


def to_buffers(vertices: Sequence, faces: Sequence) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(positions, indices)`` as float32 ``(N, 3)`` and uint32 ``(3F,)`` arrays."""

    positions = np.asarray([to_vec3(v) for v in vertices], dtype=np.float32).reshape(-1, 3)
    indices = np.asarray(flatten_faces(faces), dtype=np.uint32)
    return positions, indices


__all__ = [
    "surface",
    "issurface",
    "compute_vertex_normals",
    "compute_bounding_sphere",
    "edge_key",
    "edge_adjacency",
    "flatten_faces",
    "to_buffers",
]
