import numpy as np
import pytest

from sketchmesh import geom
from sketchmesh.camera import PerspectiveCamera
from sketchmesh.errors import DegenerateProjection, InvalidConfiguration
from sketchmesh.geometry_checks import faces_oriented, indices_in_range
from sketchmesh.ground import (GroundMesh, SilhouetteProfile, apply_silhouette,
                               build_ground_mesh, compute_h, curve_height, reshape_ground)
from sketchmesh.raycast import Plane

## plane z=0, whose horizontal axis is +X
ZPLANE = Plane(geom.direction(0, 0, 1))


def overhead():
    return PerspectiveCamera.look_at((0, 20, 10), (0, 0, 10), up=(0, 0, -1), fov=90, aspect=1)


class TestGroundMesh:

    @pytest.mark.parametrize("segments", [1, 2, 5])
    def test_counts(self, segments):
        g = build_ground_mesh(10.0, segments)
        assert len(g.vertices) == (segments + 1) ** 2
        assert len(g.normals) == len(g.vertices)
        assert len(g.indices) == 6 * segments * segments
        assert indices_in_range(g.to_surface())

    def test_extents(self):
        g = GroundMesh(10.0, 3)
        assert geom.vclose(g.vertices[0], geom.point(-5, 0, -5))
        assert geom.vclose(g.vertices[-1], geom.point(5, 0, 5))
        # row steps along X, col along Z
        assert g.vertices[g.index(1, 0)][0] == pytest.approx(-5 + 10.0 / 3)
        assert g.vertices[g.index(0, 1)][2] == pytest.approx(-5 + 10.0 / 3)
        assert all(v[1] == 0.0 for v in g.vertices)

    def test_faces_face_up(self):
        g = GroundMesh(4.0, 2)
        assert faces_oriented(g.to_surface())
        g.refresh()
        assert all(geom.vclose(n, geom.point(0, 1, 0)) for n in g.normals)

    def test_boundary_ring(self):
        g = GroundMesh(4.0, 2)
        ring = g.boundary()
        assert len(ring) == 8
        assert len(set(ring)) == 8
        assert g.index(1, 1) not in ring

    def test_edges(self):
        g = GroundMesh(4.0, 1)
        edges = g.edges()
        assert len(edges) == 5
        # the shared diagonal
        assert edges[(1, 2)] == [0, 1]

    def test_bounding_sphere(self):
        g = GroundMesh(10.0, 2)
        assert geom.vclose(g.bounding_sphere.center, geom.point(0, 0, 0))
        assert g.bounding_sphere.radius == pytest.approx(50 ** 0.5)

    def test_as_arrays(self):
        positions, indices = GroundMesh(10.0, 2).as_arrays()
        assert positions.shape == (9, 3)
        assert indices.shape == (24,)

    def test_set_heights_length(self):
        g = GroundMesh(10.0, 1)
        with pytest.raises(ValueError):
            g.set_heights([1.0, 2.0])

    def test_numpy_scalars(self):
        g = GroundMesh(np.float32(10.0), np.int64(2))
        assert g.segments == 2 and type(g.segments) is int
        assert type(g.size) is float
        assert len(g.vertices) == 9
        assert geom.vclose(g.vertices[0], geom.point(-5, 0, -5))
        with pytest.raises(InvalidConfiguration):
            GroundMesh(np.float64(10.0), np.int64(0))

    @pytest.mark.parametrize("size,segments", [(0, 2), (-1.0, 2), (10.0, 0), (10.0, 2.5), (10.0, True)])
    def test_invalid(self, size, segments):
        with pytest.raises(InvalidConfiguration):
            GroundMesh(size, segments)


class TestCurveHeight:

    def test_interpolates_first_bracketing_segment(self):
        # folds back over x in [2, 4]; the first pass wins
        curve = [geom.point(0, 1, 0), geom.point(4, 2, 0), geom.point(2, 3, 0)]
        assert compute_h(geom.point(3, 0, 0), curve, ZPLANE) == pytest.approx(1.75)

    def test_reproduces_samples(self):
        curve = [geom.point(0, 1, 0), geom.point(4, 2, 0), geom.point(6, -1, 0)]
        assert compute_h(geom.point(4, 0, 0), curve, ZPLANE) == pytest.approx(2.0)
        assert compute_h(geom.point(6, 0.5, 0), curve, ZPLANE) == pytest.approx(-1.5)

    def test_outside_span(self):
        curve = [geom.point(0, 1, 0), geom.point(4, 2, 0)]
        assert compute_h(geom.point(5, 0, 0), curve, ZPLANE) == 0.0
        assert curve_height(geom.point(-1, 0, 0), curve, ZPLANE) is None

    def test_zero_width_segment(self):
        curve = [geom.point(1, 0, 0), geom.point(1, 5, 0), geom.point(3, 5, 0)]
        assert curve_height(geom.point(1, 0, 0), curve, ZPLANE) == 0.0

    def test_measured_from_first_point(self):
        # horizontal axis runs along +X even when the stroke is drawn right to left
        curve = [geom.point(4, 2, 0), geom.point(0, 1, 0)]
        profile = SilhouetteProfile(curve, ZPLANE)
        assert profile.xs == pytest.approx([0.0, -4.0])
        assert profile.height(geom.point(1, 0, 0)) == pytest.approx(1.25)

    def test_empty_curve(self):
        with pytest.raises(ValueError):
            SilhouetteProfile([], ZPLANE)

    def test_horizontal_plane(self):
        with pytest.raises(DegenerateProjection):
            SilhouetteProfile([geom.point(0, 0, 0)], Plane(geom.direction(0, 1, 0)))


class TestApplySilhouette:

    def test_falloff(self):
        g = GroundMesh(10.0, 4)
        curve = [geom.point(-6, 4, 0), geom.point(6, 4, 0)]
        assert apply_silhouette(g, curve, ZPLANE, radius=5.0) == 15
        for row in range(5):
            assert g.vertices[g.index(row, 2)][1] == pytest.approx(4.0)
            assert g.vertices[g.index(row, 1)][1] == pytest.approx(3.0)
            assert g.vertices[g.index(row, 3)][1] == pytest.approx(3.0)
            assert g.vertices[g.index(row, 0)][1] == 0.0
            assert g.vertices[g.index(row, 4)][1] == 0.0

    def test_uncovered_vertices_unchanged(self):
        g = GroundMesh(10.0, 2)
        curve = [geom.point(-1, 4, 0), geom.point(1, 4, 0)]
        assert apply_silhouette(g, curve, ZPLANE) == 1
        assert g.vertices[g.index(1, 1)][1] == pytest.approx(4.0)
        assert g.vertices[g.index(0, 1)][1] == 0.0

    def test_zero_height_still_blends(self):
        g = GroundMesh(10.0, 2)
        g.set_heights([1.0] * len(g.vertices))
        # curve lies exactly at the vertex height, so h is 0 there
        curve = [geom.point(-6, 1, 0), geom.point(6, 1, 0)]
        assert apply_silhouette(g, curve, ZPLANE) == 3
        assert g.vertices[g.index(1, 1)][1] == pytest.approx(0.0)
        assert g.vertices[g.index(1, 0)][1] == 1.0

    def test_refreshes_normals(self):
        g = GroundMesh(10.0, 2)
        apply_silhouette(g, [geom.point(-6, 4, 0), geom.point(6, 4, 0)], ZPLANE)
        centre = g.normals[g.index(1, 1)]
        side = g.normals[g.index(1, 0)]
        assert geom.close(geom.mag(side), 1.0)
        # ridge along X: the Z-side vertex leans away from the ridge
        assert side[2] < 0
        assert centre[1] > 0
        assert g.bounding_sphere.center[1] == pytest.approx(2.0)

    def test_bad_radius(self):
        g = GroundMesh(10.0, 2)
        with pytest.raises(InvalidConfiguration):
            apply_silhouette(g, [geom.point(0, 1, 0)], ZPLANE, radius=0)

    def test_numpy_radius(self):
        g = GroundMesh(10.0, 4)
        curve = [geom.point(-6, 4, 0), geom.point(6, 4, 0)]
        assert apply_silhouette(g, curve, ZPLANE, radius=np.float32(5.0)) == 15
        assert g.vertices[g.index(0, 1)][1] == pytest.approx(3.0)


class TestReshapeGround:

    def test_reshape(self):
        g = build_ground_mesh(10.0, 2)
        seen = []
        g.listeners.append(seen.append)
        blended = reshape_ground(g, [(-0.5, 0.8), (0.5, 0.8)],
                                 geom.point(-5, 0, 0), geom.point(5, 0, 0), overhead())
        assert blended == 3
        for row in range(3):
            assert g.vertices[g.index(row, 1)][1] == pytest.approx(7.5)
            assert g.vertices[g.index(row, 0)][1] == 0.0
            assert g.vertices[g.index(row, 2)][1] == 0.0
        assert seen == [g]

    def test_failure_leaves_mesh_unchanged(self):
        g = build_ground_mesh(10.0, 2)
        seen = []
        g.listeners.append(seen.append)
        with pytest.raises(DegenerateProjection):
            reshape_ground(g, [(-0.5, 0.8), (0.0, -0.5)],
                           geom.point(-5, 0, 0), geom.point(5, 0, 0), overhead())
        assert g.heights == [0.0] * 9
        assert seen == []

    def test_skip_policy(self):
        g = build_ground_mesh(10.0, 2)
        blended = reshape_ground(g, [(-0.5, 0.8), (0.0, -0.5), (0.5, 0.8)],
                                 geom.point(-5, 0, 0), geom.point(5, 0, 0), overhead(),
                                 on_miss="skip")
        assert blended == 3

    def test_degenerate_baseline(self):
        g = build_ground_mesh(10.0, 2)
        with pytest.raises(DegenerateProjection):
            reshape_ground(g, [(0.0, 0.8)], geom.point(1, 0, 1), geom.point(1, 0, 1), overhead())
