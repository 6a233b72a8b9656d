"""
Геометрические примитивы: луч, сфера, плоскость и их пересечения.

Все векторы - однородные 4-компонентные массивы float64:
точки имеют w = 1, направления w = 0.
"""

import numpy as np
from numba import njit
from .math_utils import dot, normalize, near

# Допуск для дискриминанта (касание) и для знаменателя (плоскость)
EPSILON = 1e-7


def as_point(p):
    """Точка (x, y, z) или (x, y, z, w) -> однородная точка с w = 1."""
    p = np.asarray(p, dtype=np.float64)
    return np.array([p[0], p[1], p[2], 1.0])


def as_vector(v):
    """Вектор (x, y, z) или (x, y, z, w) -> однородный вектор с w = 0."""
    v = np.asarray(v, dtype=np.float64)
    return np.array([v[0], v[1], v[2], 0.0])


class Ray:
    """
    Луч в мировых координатах.

    Параметры:
        origin: начало луча (точка, w = 1)
        direction: направление (нормализуется при создании, w = 0)
    """

    def __init__(self, origin, direction):
        self.origin = as_point(origin)
        self.direction = normalize(as_vector(direction))

    def point_at(self, t):
        """Точка луча origin + t * direction."""
        return self.origin + t * self.direction

    def __repr__(self):
        return f"Ray(origin={self.origin[:3].tolist()}, direction={self.direction[:3].tolist()})"


class Sphere:
    """Сфера, заданная центром и радиусом (> 0)."""

    def __init__(self, center=(0.0, 0.0, 0.0), radius=1.0):
        if not radius > 0:
            raise ValueError(f"radius must be positive, got {radius}")
        self.center = as_point(center)
        self.radius = float(radius)

    def intersect(self, ray):
        return ray_sphere_intersect(ray.origin, ray.direction, self.center, self.radius)


class Plane:
    """
    Плоскость, заданная точкой и нормалью.

    Нормаль не обязана быть единичной - она нормализуется
    при проверке пересечения.
    """

    def __init__(self, point=(0.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0)):
        self.point = as_point(point)
        self.normal = as_vector(normal)
        if not np.any(self.normal[:3]):
            raise ValueError("plane normal must be non-zero")

    def intersect(self, ray):
        return ray_plane_intersect(ray.origin, ray.direction, self.point, self.normal)


# Сфера по умолчанию: единичная, в начале координат
UNIT_SPHERE = Sphere(center=(0.0, 0.0, 0.0), radius=1.0)


@njit(cache=True)
def ray_sphere_intersect(ray_origin, ray_dir, center, radius):
    """
    Пересечение луча со сферой.

    Решаем |p0 + t*V - C|^2 = r^2 относительно t:
        a = |V|^2, b = 2 * V·(p0 - C), c = |p0 - C|^2 - r^2

    Возвращает:
        -1.0, если дискриминант отрицательный;
        -b / 2a, если дискриминант ~ 0 (касание);
        меньший из двух корней (знак не проверяется - t > 0
        проверяет вызывающий код).
    """
    oc = ray_origin - center

    a = dot(ray_dir, ray_dir)
    b = 2.0 * dot(ray_dir, oc)
    c = dot(oc, oc) - radius * radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return -1.0

    # Касание: единственный корень
    if near(discriminant, 0.0, EPSILON):
        return -b / (2.0 * a)

    sqrt_d = np.sqrt(discriminant)
    t1 = (-b + sqrt_d) / (2.0 * a)
    t2 = (-b - sqrt_d) / (2.0 * a)
    return min(t1, t2)


@njit(cache=True)
def ray_plane_intersect(ray_origin, ray_dir, plane_point, plane_normal):
    """
    Пересечение луча с плоскостью.

    Принимаются только лучи, направленные по нормали
    (знаменатель > EPSILON); с обратной стороны плоскость не видна.

    Возвращает t или -1.0, если пересечения нет.
    """
    denominator = dot(normalize(plane_normal), normalize(ray_dir))

    if denominator > EPSILON:
        dist = plane_point - ray_origin
        return dot(dist, plane_normal) / denominator

    return -1.0
