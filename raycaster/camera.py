"""
Камера: матрицы вида и проекции, генерация лучей через пиксели.

Луч строится обратным проецированием (как gluUnProject) экранной точки
на ближнюю (z = 0) и дальнюю (z = 1) плоскости отсечения.
"""

import math

import numpy as np
from numba import njit
from .errors import InvalidTransformError
from .geometry import Ray, UNIT_SPHERE
from .math_utils import normalize


# ==================== МАТРИЦЫ ====================
# Построчное хранение, векторы-столбцы: p' = M @ p

def perspective(fovy, aspect, z_near, z_far):
    """
    Перспективная проекция.

    Параметры:
        fovy: угол обзора по вертикали в градусах
        aspect: отношение ширины к высоте
        z_near, z_far: расстояния до плоскостей отсечения

    Бросает ValueError, если матрица не может быть построена.
    """
    if not 0.0 < fovy < 180.0:
        raise ValueError(f"fovy must be in (0, 180) degrees, got {fovy}")
    if not aspect > 0.0:
        raise ValueError(f"aspect must be positive, got {aspect}")
    if not 0.0 < z_near < z_far:
        raise ValueError(f"expected 0 < z_near < z_far, got {z_near}, {z_far}")

    top = math.tan(math.radians(fovy) / 2.0) * z_near
    right = top * aspect

    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = z_near / right
    m[1, 1] = z_near / top
    m[2, 2] = -(z_far + z_near) / (z_far - z_near)
    m[2, 3] = -2.0 * z_far * z_near / (z_far - z_near)
    m[3, 2] = -1.0
    return m


def translate(x, y, z):
    m = np.eye(4, dtype=np.float64)
    m[:3, 3] = (x, y, z)
    return m


def scale(s):
    m = np.eye(4, dtype=np.float64)
    m[0, 0] = m[1, 1] = m[2, 2] = s
    return m


def axis_angle(axis, degrees):
    """Поворот на угол degrees вокруг оси axis."""
    x, y, z = normalize(np.asarray(axis, dtype=np.float64))
    angle = math.radians(degrees)
    c = math.cos(angle)
    s = math.sin(angle)
    C = 1.0 - c

    m = np.eye(4, dtype=np.float64)
    m[0, 0] = x*x*C + c;   m[0, 1] = x*y*C - z*s; m[0, 2] = x*z*C + y*s
    m[1, 0] = y*x*C + z*s; m[1, 1] = y*y*C + c;   m[1, 2] = y*z*C - x*s
    m[2, 0] = z*x*C - y*s; m[2, 1] = z*y*C + x*s; m[2, 2] = z*z*C + c
    return m


def _frozen(a, shape):
    a = np.array(a, dtype=np.float64).reshape(shape)
    a.flags.writeable = False
    return a


class ViewState:
    """
    Снимок состояния камеры для одного рендеринга.

    Параметры:
        model_view: матрица вида 4x4
        projection: матрица проекции 4x4
        viewport: (x, y, width, height)

    Массивы копируются и помечаются как только для чтения,
    поэтому изменение исходных матриц во время рендеринга
    на кадр не влияет.
    """

    def __init__(self, model_view, projection, viewport):
        self.model_view = _frozen(model_view, (4, 4))
        self.projection = _frozen(projection, (4, 4))
        self.viewport = _frozen(viewport, (4,))

    @classmethod
    def look_from_axis(cls, width, height, distance=3.0, pan=(0.0, 0.0),
                       rotation=None, zoom=1.0, fov=45.0, z_near=1.0, z_far=5.0):
        """
        Камера на оси z на расстоянии distance, смотрящая в начало координат.

        model_view = Translate(-camera) * Translate(pan) * rotation * Scale(zoom)
        """
        if rotation is None:
            rotation = np.eye(4)
        model_view = (translate(0.0, 0.0, -distance)
                      @ translate(pan[0], pan[1], 0.0)
                      @ np.asarray(rotation, dtype=np.float64)
                      @ scale(zoom))
        projection = perspective(fov, width / height, z_near, z_far)
        return cls(model_view, projection, (0, 0, width, height))


class RenderContext:
    """
    Всё, что нужно для рендеринга кадра: размер изображения,
    снимок камеры и сфера сцены.

    Обратная матрица (projection * model_view)^-1 вычисляется один раз
    при создании контекста.
    """

    def __init__(self, width, height, view, sphere=UNIT_SPHERE):
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        if view.viewport[2] != width or view.viewport[3] != height:
            raise ValueError(
                f"viewport {tuple(view.viewport)} does not match image size {width}x{height}")

        self.width = int(width)
        self.height = int(height)
        self.view = view
        self.sphere = sphere
        self.inverse_mvp = _frozen(invert_view(view), (4, 4))


def invert_view(view):
    """Обращение projection * model_view с проверкой на вырожденность."""
    mvp = view.projection @ view.model_view
    if not np.all(np.isfinite(mvp)):
        raise InvalidTransformError("view transform contains non-finite values")

    try:
        inverse = np.linalg.inv(mvp)
    except np.linalg.LinAlgError as exc:
        raise InvalidTransformError("view transform is singular") from exc

    if not np.all(np.isfinite(inverse)) or abs(np.linalg.det(mvp)) < 1e-12:
        raise InvalidTransformError("view transform is singular")
    return inverse


@njit(cache=True)
def unproject(win_x, win_y, win_z, inverse_mvp, viewport):
    """
    Экранная точка (win_x, win_y, win_z) -> точка в мировых координатах.

    win_z = 0 соответствует ближней плоскости, win_z = 1 - дальней.
    """
    ndc = np.empty(4)
    ndc[0] = (win_x - viewport[0]) * 2.0 / viewport[2] - 1.0
    ndc[1] = (win_y - viewport[1]) * 2.0 / viewport[3] - 1.0
    ndc[2] = 2.0 * win_z - 1.0
    ndc[3] = 1.0

    out = np.zeros(4)
    for r in range(4):
        s = 0.0
        for c in range(4):
            s += inverse_mvp[r, c] * ndc[c]
        out[r] = s

    w = out[3]
    out[0] /= w
    out[1] /= w
    out[2] /= w
    out[3] = 1.0
    return out


@njit(cache=True)
def find_ray(x, y, height, inverse_mvp, viewport):
    """
    Генерирует луч из камеры через пиксель (x, y).

    Параметры:
        x, y: координаты пикселя (y отсчитывается от верхней строки)
        height: высота изображения

    Возвращает:
        (origin, direction) - точка на ближней плоскости (w = 1)
        и единичное направление (w = 0)
    """
    # Ось y экрана направлена вниз, у unproject - вверх
    win_y = height - y

    near_point = unproject(x, win_y, 0.0, inverse_mvp, viewport)
    far_point = unproject(x, win_y, 1.0, inverse_mvp, viewport)

    direction = far_point - near_point
    direction[3] = 0.0
    direction = normalize(direction)

    return near_point, direction


def camera_ray(context, x, y):
    """
    Луч через пиксель (x, y) для заданного контекста.

    Бросает InvalidTransformError, если луч получился неконечным.
    """
    origin, direction = find_ray(float(x), float(y), float(context.height),
                                 context.inverse_mvp, context.view.viewport)
    if not (np.all(np.isfinite(origin)) and np.all(np.isfinite(direction))):
        raise InvalidTransformError(f"degenerate camera ray at pixel ({x}, {y})")
    if not np.any(direction[:3]):
        raise InvalidTransformError(f"zero-length camera ray at pixel ({x}, {y})")
    return Ray(origin, direction)
