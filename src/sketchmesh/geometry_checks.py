"""Validation helpers for sketchmesh surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from sketchmesh.geom import epsilon
from sketchmesh.geometry_utils import triangle_normal
from sketchmesh.mesh import issurface


def faces_oriented(surface: Sequence) -> "CheckResult":
    """Check that every non-degenerate face winds the same way as the first.

    Only meaningful for flat (or gently curved) meshes such as a ribbon
    still lying in device space, or an undeformed ground grid.
    """

    if not issurface(surface):
        raise ValueError('faces_oriented expects a surface')

    verts = surface[1]
    faces = surface[3]

    reference = None
    inconsistent = []

    for idx, face in enumerate(faces):
        if len(face) != 3:
            continue
        normal = triangle_normal(verts[face[0]], verts[face[1]], verts[face[2]])
        if normal is None:
            continue
        if reference is None:
            reference = normal
            continue
        dot = reference[0] * normal[0] + reference[1] * normal[1] + reference[2] * normal[2]
        if dot < -epsilon:
            inconsistent.append(idx)

    if reference is None:
        return CheckResult(True, ['no non-degenerate faces found'])
    if inconsistent:
        return CheckResult(False, [f'inconsistent face orientation indices: {inconsistent}'])
    return CheckResult(True, [])


def indices_in_range(surface: Sequence) -> "CheckResult":
    """Check that every face references existing vertices."""

    if not issurface(surface):
        raise ValueError('indices_in_range expects a surface')

    count = len(surface[1])
    bad = [idx for idx, face in enumerate(surface[3])
           if any(i < 0 or i >= count for i in face)]
    if bad:
        return CheckResult(False, [f'faces with out-of-range indices: {bad}'])
    return CheckResult(True, [])


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    'CheckResult',
    'faces_oriented',
    'indices_in_range',
]
