import pytest

from sketchmesh import geom
from sketchmesh.camera import PerspectiveCamera
from sketchmesh.errors import DegenerateProjection, InvalidConfiguration
from sketchmesh.silhouette import build_silhouette, reshape_plane


@pytest.fixture
def overhead():
    """Camera 20 units up, looking straight down at (0, 0, 10), screen-up toward -Z.

    The ray through NDC (x, y) has direction (x, -1, -y), so it meets the
    plane z=0 at (10x/y, 20 - 10/y, 0) when y > 0 and misses it otherwise.
    """
    return PerspectiveCamera.look_at((0, 20, 10), (0, 0, 10), up=(0, 0, -1), fov=90, aspect=1)


@pytest.fixture
def plane():
    return reshape_plane(geom.point(-5, 0, 0), geom.point(5, 0, 0))


def test_reshape_plane_stands_on_baseline(plane):
    assert geom.vclose(plane.normal, geom.point(0, 0, 1))
    assert plane.distance_to_point(geom.point(-5, 0, 0)) == pytest.approx(0.0)
    assert plane.distance_to_point(geom.point(2, 30, 0)) == pytest.approx(0.0)


@pytest.mark.parametrize("start,end", [
    ((1, 0, 1), (1, 0, 1)),
    ((0, 0, 0), (0, 5, 0)),
])
def test_reshape_plane_degenerate(start, end):
    with pytest.raises(DegenerateProjection):
        reshape_plane(geom.point(start), geom.point(end))


def test_build_silhouette(overhead, plane):
    curve = build_silhouette([(-0.5, 0.8), (0.0, 0.8), (0.5, 0.8)], plane, overhead)
    assert isinstance(curve, tuple)
    assert len(curve) == 3
    for p, x in zip(curve, (-6.25, 0.0, 6.25)):
        assert p[0] == pytest.approx(x)
        assert p[1] == pytest.approx(7.5)
        assert p[2] == pytest.approx(0.0, abs=1e-9)


def test_every_point_lies_on_plane(overhead, plane):
    path = [(-0.3, 0.2), (0.1, 0.5), (0.6, 0.9)]
    for p in build_silhouette(path, plane, overhead):
        assert plane.distance_to_point(p) == pytest.approx(0.0, abs=1e-9)


def test_miss_raises_with_index(overhead, plane):
    with pytest.raises(DegenerateProjection) as info:
        build_silhouette([(-0.5, 0.8), (0.0, -0.5), (0.5, 0.8)], plane, overhead)
    assert info.value.index == 1
    assert "sample 1" in str(info.value)


def test_parallel_ray_is_a_miss(overhead, plane):
    with pytest.raises(DegenerateProjection):
        build_silhouette([(0.0, 0.0)], plane, overhead)


def test_skip_drops_missing_samples(overhead, plane):
    curve = build_silhouette([(-0.5, 0.8), (0.0, -0.5), (0.5, 0.8)], plane, overhead,
                             on_miss="skip")
    assert len(curve) == 2
    assert curve[0][0] < curve[1][0]


def test_skip_with_no_hits_still_raises(overhead, plane):
    with pytest.raises(DegenerateProjection):
        build_silhouette([(0.0, -0.5), (0.2, -0.9)], plane, overhead, on_miss="skip")


def test_empty_path(overhead, plane):
    with pytest.raises(DegenerateProjection):
        build_silhouette([], plane, overhead)


def test_unknown_policy(overhead, plane):
    with pytest.raises(InvalidConfiguration):
        build_silhouette([(0.0, 0.8)], plane, overhead, on_miss="clamp")
