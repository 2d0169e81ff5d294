"""Anchoring 2D ink ribbons in the 3D scene.

A ``Billboard`` owns a ribbon authored in device coordinates and turns
it into 3D geometry by casting a camera ray through every ribbon vertex.
The world-space position of vertex ``i`` is always::

    frame.matrix() * mesh_matrix * positions[i]

Four anchors are supported:

near plane
    the ribbon stays in device space and the mesh matrix undoes the
    camera projection, so the stroke is glued to the screen while it is
    being drawn.
world plane
    the ribbon is cast onto a plane through ``world_origin`` that faces
    the camera; the billboard itself is turned toward the point on the
    ground under the camera.
another billboard
    the same plane cast, but the hits are stored in the target
    billboard's local frame so the stroke can ride along with it.
sky dome
    rays are cast onto a large sphere around the world origin and the
    hits are stored in the sky's local frame.

The ribbon's authored vertices are never overwritten, so any anchor can
be recomputed, for example after the camera moves.  A projection either
succeeds for every vertex or raises ``DegenerateProjection`` and leaves
the billboard as it was.

The ribbon may keep growing after it is anchored (the stroke is still
being drawn).  Vertices added since the last projection are placed under
the current anchor before ``positions`` or ``bounding_sphere`` is read,
so exported buffers always cover every face.
"""

from __future__ import annotations

import logging
from math import isfinite
from typing import Callable, List, Optional, Sequence, Tuple

from sketchmesh import geom
from sketchmesh.camera import Camera
from sketchmesh.errors import DegenerateProjection, InvalidConfiguration
from sketchmesh.mesh import compute_bounding_sphere, to_buffers
from sketchmesh.raycast import Plane, Ray, Sphere, intersect_plane, intersect_sphere, unproject_all
from sketchmesh.ribbon import RibbonMesh
from sketchmesh.xform import Frame, Matrix

logger = logging.getLogger(__name__)

DEFAULT_SKY_RADIUS = 495.0

# camera, ray/target intersection, world hit -> stored position
Anchor = Tuple[Camera, Callable[[Ray], Optional[list]], Callable[[list], list]]


class Billboard:
    """A ribbon plus the transforms that place it in the world.

    ``bounding_sphere`` encloses ``positions`` (geometry space) and is
    recomputed whenever ``positions`` changes, for view-frustum culling.
    """

    def __init__(self, ribbon: RibbonMesh):
        self.ribbon = ribbon
        self.frame = Frame()
        self.mesh_matrix = Matrix()
        # None keeps the authored device coordinates
        self._anchor: Optional[Anchor] = None
        self._positions: List[list] = [list(v) for v in ribbon.vertices]
        self._bounds = compute_bounding_sphere(self._positions)

    def __repr__(self):
        return f"Billboard({self.ribbon!r}, frame={self.frame!r})"

    @property
    def world_origin(self) -> list:
        return self.ribbon.world_origin

    @property
    def positions(self) -> List[list]:
        self._sync()
        return self._positions

    @property
    def bounding_sphere(self):
        self._sync()
        return self._bounds

    def world_matrix(self) -> Matrix:
        return self.frame.matrix().mul(self.mesh_matrix)

    def world_positions(self) -> List[list]:
        m = self.world_matrix()
        return [m.transform_point(p) for p in self.positions]

    def as_arrays(self):
        return to_buffers(self.positions, self.ribbon.faces)

    def add_point(self, p: Sequence[float]) -> bool:
        """Extend the ribbon to ``p`` and place the new vertices like the rest.

        Returns ``False`` if the ribbon rejects ``p``.  If the new vertices
        miss the current anchor, ``p`` is taken back off the ribbon and
        ``DegenerateProjection`` is raised.
        """

        self._sync()
        if not self.ribbon.add_point(p):
            return False
        try:
            self._sync()
        except DegenerateProjection:
            self.ribbon._pop_point()
            raise
        return True

    def _sync(self) -> None:
        n = len(self._positions)
        if len(self.ribbon.vertices) <= n:
            return
        added = self._place(self.ribbon.vertices[n:], start=n)
        self._positions = self._positions + added
        self._bounds = compute_bounding_sphere(self._positions)

    def _place(self, vertices: Sequence[list], start: int = 0) -> List[list]:
        if self._anchor is None:
            return [list(v) for v in vertices]
        camera, intersect, to_local = self._anchor
        return [to_local(h) for h in self._cast(camera, intersect, vertices, start)]

    def _cast(self, camera: Camera, intersect: Callable[[Ray], Optional[list]],
              vertices: Sequence[list], start: int = 0) -> List[list]:
        hits = []
        for i, ray in enumerate(unproject_all(vertices, camera), start):
            hit = intersect(ray)
            if hit is None:
                raise DegenerateProjection("vertex ray does not reach the projection target", index=i)
            hits.append(hit)
        return hits

    def _facing_plane(self, camera: Camera) -> Plane:
        return Plane.from_normal_and_point(camera.forward(), self.world_origin)

    def _assign(self, anchor: Optional[Anchor], mode: str) -> None:
        # every hit is computed before any state changes
        if anchor is None:
            positions = [list(v) for v in self.ribbon.vertices]
        else:
            camera, intersect, to_local = anchor
            positions = [to_local(h) for h in self._cast(camera, intersect, self.ribbon.vertices)]
        self._anchor = anchor
        self._positions = positions
        self._bounds = compute_bounding_sphere(positions)
        logger.debug(f"Projected {len(positions)} ribbon vertices to {mode}")

    def project_to_near_plane(self, camera: Camera) -> bool:
        """Keep the ribbon screen-aligned in front of ``camera``."""

        if self.ribbon.is_empty():
            return False
        self._assign(None, "near plane")
        self.mesh_matrix = camera.projection_inverse()
        self.frame.position = list(camera.position)
        self.frame.rotation = Matrix(camera.rotation)
        return True

    def project_to_world(self, camera: Camera) -> bool:
        """Cast the ribbon onto the camera-facing plane through ``world_origin``.

        Stored positions are offsets from ``world_origin``; the mesh
        matrix cancels the frame's rotation so the rotation only affects
        children attached to this billboard.
        """

        if self.ribbon.is_empty():
            return False
        plane = self._facing_plane(camera)
        origin = list(self.world_origin)
        self._assign((camera, lambda ray: intersect_plane(ray, plane),
                      lambda h: geom.sub(h, origin)), "world plane")

        self.frame.position = list(origin)
        eye = camera.position
        self.frame.look_at(geom.point(eye[0], 0.0, eye[2]))
        self.mesh_matrix = self.frame.rotation.transpose()
        return True

    def project_to_billboard(self, target: "Billboard", camera: Camera) -> bool:
        """Cast like ``project_to_world`` but store hits in ``target``'s frame."""

        if self.ribbon.is_empty():
            return False
        plane = self._facing_plane(camera)
        self._assign((camera, lambda ray: intersect_plane(ray, plane),
                      target.frame.world_to_local), "billboard frame")

        self.frame.reset()
        self.mesh_matrix = Matrix()
        return True

    def project_to_sky(self, camera: Camera, sky: Frame, radius: float = DEFAULT_SKY_RADIUS) -> bool:
        """Cast the ribbon onto the sky dome and store hits in ``sky``'s frame."""

        if not geom.isgoodnum(radius) or not isfinite(radius) or radius <= 0:
            raise InvalidConfiguration(f"sky radius must be a positive number, got {radius!r}")
        if self.ribbon.is_empty():
            return False
        dome = Sphere(geom.point(0, 0, 0), radius)
        self._assign((camera, lambda ray: intersect_sphere(ray, dome),
                      sky.world_to_local), "sky dome")

        self.frame.reset()
        self.mesh_matrix = Matrix()
        return True


def project_to_near_plane(billboard: Billboard, camera: Camera) -> bool:
    return billboard.project_to_near_plane(camera)


def project_to_world(billboard: Billboard, camera: Camera) -> bool:
    return billboard.project_to_world(camera)


def project_to_billboard(billboard: Billboard, camera: Camera, target: Billboard) -> bool:
    return billboard.project_to_billboard(target, camera)


def project_to_sky(billboard: Billboard, camera: Camera, sky: Frame,
                   radius: float = DEFAULT_SKY_RADIUS) -> bool:
    return billboard.project_to_sky(camera, sky, radius)


__all__ = [
    "DEFAULT_SKY_RADIUS",
    "Billboard",
    "project_to_near_plane",
    "project_to_world",
    "project_to_billboard",
    "project_to_sky",
]
