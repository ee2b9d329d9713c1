import numpy as np
import pytest

from lumentrace.common import RenderError
from lumentrace.mesh import Ray, TriangleMesh

VERTS = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (2.0, 3.0, 1.0)]
FACES = [(0, 1, 2), (1, 3, 2)]


@pytest.fixture
def mesh():
    normals = [(0.0, 0.0, 1.0), (0.0, 0.3, 1.0), (0.2, 0.0, 1.0), (0.0, 0.0, 1.0)]
    return TriangleMesh(VERTS, FACES, normals=normals, name="plane")


def test_point_at_follows_direction():
    ray = Ray((1.0, 2.0, 3.0), (0.0, 0.5, 1.0))
    assert np.allclose(ray.point_at(0.0), (1.0, 2.0, 3.0))
    assert np.allclose(ray.point_at(4.0) - ray.origin, 4.0 * ray.direction)


def test_primitive_count(mesh):
    assert mesh.primitive_count() == len(FACES)


def test_surface_area_of_unit_right_triangle(mesh):
    assert mesh.surface_area(0) == pytest.approx(0.5)


def test_hit_point_matches_barycentric_vertex(mesh):
    ray = Ray((0.2, 0.3, 1.0), (0.0, 0.0, -1.0))
    hit = mesh.ray_intersect(0, ray)
    assert hit is not None
    u, v, t = hit
    assert t == pytest.approx(1.0)
    assert np.allclose(ray.point_at(t), mesh.interpolated_vertex(0, (1 - u - v, u, v)))


def test_miss_outside_triangle(mesh):
    ray = Ray((0.8, 0.8, 1.0), (0.0, 0.0, -1.0))
    assert mesh.ray_intersect(0, ray) is None


def test_parallel_ray_misses(mesh):
    ray = Ray((-1.0, 0.2, 0.0), (1.0, 0.0, 0.0))
    assert mesh.ray_intersect(0, ray) is None


def test_hit_beyond_maxt_rejected(mesh):
    ray = Ray((0.2, 0.2, 1.0), (0.0, 0.0, -1.0), maxt=0.5)
    assert mesh.ray_intersect(0, ray) is None


def test_hit_behind_origin_rejected(mesh):
    ray = Ray((0.2, 0.2, 1.0), (0.0, 0.0, 1.0))
    assert mesh.ray_intersect(0, ray) is None


def test_bounding_box_contains_corners(mesh):
    lo, hi = mesh.bounding_box(1)
    corners = np.array([VERTS[i] for i in FACES[1]])
    assert np.allclose(lo, corners.min(axis=0))
    assert np.allclose(hi, corners.max(axis=0))


def test_centroid_equals_equal_weight_vertex(mesh):
    assert np.allclose(mesh.centroid(1), mesh.interpolated_vertex(1, (1 / 3, 1 / 3, 1 / 3)))


def test_corner_weight_returns_vertex(mesh):
    assert np.allclose(mesh.interpolated_vertex(1, (0.0, 1.0, 0.0)), VERTS[3])


def test_interpolated_normal_is_unit(mesh):
    n = mesh.interpolated_normal(0, (0.2, 0.5, 0.3))
    assert np.linalg.norm(n) == pytest.approx(1.0)


def test_interpolated_normal_requires_normals():
    plain = TriangleMesh(VERTS, FACES)
    with pytest.raises(RenderError):
        plain.interpolated_normal(0, (1.0, 0.0, 0.0))


def test_face_index_out_of_vertex_range():
    with pytest.raises(RenderError):
        TriangleMesh(VERTS, [(0, 1, 9)])


def test_triangle_index_out_of_range(mesh):
    with pytest.raises(IndexError):
        mesh.surface_area(5)


def test_string_summary(mesh):
    text = str(mesh)
    assert 'name = "plane"' in text
    assert "vertexCount = 4" in text
    assert "triangleCount = 2" in text
    assert "bsdf = null" in text