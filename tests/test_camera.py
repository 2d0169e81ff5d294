import pytest

from sketchmesh import geom
from sketchmesh.camera import Camera, OrthographicCamera, PerspectiveCamera
from sketchmesh.errors import InvalidConfiguration
from sketchmesh.xform import FacingRotation, Matrix


def test_default_camera_looks_down_minus_z():
    cam = PerspectiveCamera()
    assert geom.vclose(cam.forward(), geom.point(0, 0, -1))
    assert cam.position == [0.0, 0.0, 0.0, 1]


def test_look_at_forward():
    cam = PerspectiveCamera.look_at((0, 5, 10), (0, 0, 0))
    expected = geom.normalize(geom.point(0, -5, -10))
    assert geom.vclose(cam.forward(), expected)


def test_snapshot_is_isolated_from_caller():
    pos = [1.0, 2.0, 3.0]
    rot = FacingRotation(geom.point(0, 0, 0), geom.point(1, 0, 4))
    cam = PerspectiveCamera(position=pos, rotation=rot)
    pos[0] = 99.0
    rot.set(0, 3, 42.0)
    assert cam.position[0] == 1.0
    assert cam.rotation.get(0, 3) == 0
    with pytest.raises(AttributeError):
        cam.fov = 10


def test_view_matrix_inverts_world_matrix():
    cam = PerspectiveCamera.look_at((3, 4, 5), (0, 1, 0), fov=60, aspect=1.5)
    m = cam.world_matrix().mul(cam.view_matrix())
    ident = Matrix()
    assert all(abs(m.get(i, j) - ident.get(i, j)) < 1e-9 for i in range(4) for j in range(4))


@pytest.mark.parametrize("cam", [
    PerspectiveCamera.look_at((3, 4, 5), (0, 1, 0), fov=60, aspect=1.5),
    OrthographicCamera.look_at((0, 10, 0), (0, 0, 0), up=(0, 0, -1), left=-4, right=4, top=3, bottom=-3),
])
def test_project_unproject_roundtrip(cam):
    for ndc in [(0.0, 0.0, 0.5), (-0.7, 0.3, -0.999), (0.9, -0.9, 0.2)]:
        world = cam.unproject(ndc)
        back = cam.project(world)
        assert back[0] == pytest.approx(ndc[0], abs=1e-9)
        assert back[1] == pytest.approx(ndc[1], abs=1e-9)
        assert back[2] == pytest.approx(ndc[2], abs=1e-9)


def test_near_plane_center_is_in_front_of_camera():
    cam = PerspectiveCamera(near=0.5)
    p = cam.unproject((0, 0, -1))
    assert geom.vclose(p, geom.point(0, 0, -0.5))


@pytest.mark.parametrize("params", [
    dict(fov=0),
    dict(fov=180),
    dict(aspect=0),
    dict(near=0),
    dict(near=5, far=1),
    dict(far=float("inf")),
])
def test_invalid_perspective(params):
    with pytest.raises(InvalidConfiguration):
        PerspectiveCamera(**params)


def test_invalid_orthographic():
    with pytest.raises(InvalidConfiguration):
        OrthographicCamera(left=1, right=-1)


def test_base_camera_cannot_be_built():
    with pytest.raises(TypeError):
        Camera()
    with pytest.raises(TypeError):
        Camera.look_at((0, 0, 5), (0, 0, 0))
