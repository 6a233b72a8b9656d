import numpy as np
import pytest

from raycaster.geometry import (
    Plane, Ray, Sphere, UNIT_SPHERE, ray_plane_intersect, ray_sphere_intersect,
)

ORIGIN = np.array([0.0, 0.0, 0.0, 1.0])


def point(x, y, z):
    return np.array([x, y, z, 1.0])


def vector(x, y, z):
    return np.array([x, y, z, 0.0])


# --- Tests for ray_sphere_intersect ---

def test_sphere_head_on_hit():
    """Distance 5 to the centre minus radius 1."""
    t = ray_sphere_intersect(point(0, 0, 5), vector(0, 0, -1), ORIGIN, 1.0)
    assert t == pytest.approx(4.0)


def test_sphere_parallel_miss():
    t = ray_sphere_intersect(point(0, 0, 5), vector(1, 0, 0), ORIGIN, 1.0)
    assert t == -1.0


def test_sphere_tangent_returns_single_root():
    """Discriminant is exactly zero: the tangent branch returns -b / 2a."""
    p0 = point(1, 0, 5)
    v = vector(0, 0, -1)
    oc = p0 - ORIGIN
    a = np.dot(v, v)
    b = 2.0 * np.dot(v, oc)
    c = np.dot(oc[:3], oc[:3]) - 1.0
    assert b * b - 4 * a * c == 0.0

    t = ray_sphere_intersect(p0, v, ORIGIN, 1.0)
    assert abs(t - (-b / (2 * a))) < 1e-6
    assert t == pytest.approx(5.0)


def test_sphere_origin_inside_returns_smaller_root():
    """The nearer root is returned even when it lies behind the origin."""
    t = ray_sphere_intersect(ORIGIN, vector(0, 0, -1), ORIGIN, 1.0)
    assert t == pytest.approx(-1.0)


def test_sphere_behind_ray_is_negative():
    t = ray_sphere_intersect(point(0, 0, 5), vector(0, 0, 1), ORIGIN, 1.0)
    assert t < 0


def test_sphere_offset_center_and_radius():
    center = point(2, 0, 0)
    t = ray_sphere_intersect(point(2, 0, 10), vector(0, 0, -1), center, 3.0)
    assert t == pytest.approx(7.0)


def test_sphere_non_unit_direction():
    """a = |V|^2 is computed, so t is measured in units of V."""
    t = ray_sphere_intersect(point(0, 0, 5), vector(0, 0, -2), ORIGIN, 1.0)
    assert t == pytest.approx(2.0)


# --- Tests for ray_plane_intersect ---

def test_plane_front_facing_hit():
    t = ray_plane_intersect(point(0, 0, -5), vector(0, 0, 1), ORIGIN, vector(0, 0, 1))
    assert t == pytest.approx(5.0)


def test_plane_back_facing_is_culled():
    t = ray_plane_intersect(point(0, 0, 5), vector(0, 0, -1), ORIGIN, vector(0, 0, 1))
    assert t == -1.0


def test_plane_parallel_miss():
    t = ray_plane_intersect(point(0, 0, -5), vector(1, 0, 0), ORIGIN, vector(0, 0, 1))
    assert t == -1.0


def test_plane_oblique_hit():
    d = vector(0, 1, 1) / np.sqrt(2.0)
    t = ray_plane_intersect(point(0, 0, -1), d, ORIGIN, vector(0, 0, 1))
    assert t == pytest.approx(np.sqrt(2.0))


# --- Tests for the Python-side primitives ---

def test_ray_normalizes_direction():
    ray = Ray((0, 0, 5), (0, 0, -3))
    assert np.allclose(ray.origin, [0, 0, 5, 1])
    assert np.allclose(ray.direction, [0, 0, -1, 0])
    assert np.allclose(ray.point_at(4.0), [0, 0, 1, 1])


def test_unit_sphere_default():
    assert np.allclose(UNIT_SPHERE.center, [0, 0, 0, 1])
    assert UNIT_SPHERE.radius == 1.0
    assert UNIT_SPHERE.intersect(Ray((0, 0, 5), (0, 0, -1))) == pytest.approx(4.0)


def test_sphere_rejects_non_positive_radius():
    with pytest.raises(ValueError):
        Sphere(radius=0.0)


def test_plane_normal_need_not_be_unit():
    plane = Plane(point=(0, 0, 0), normal=(0, 0, 1))
    assert plane.intersect(Ray((0, 0, -2), (0, 0, 1))) == pytest.approx(2.0)
    with pytest.raises(ValueError):
        Plane(normal=(0, 0, 0))
