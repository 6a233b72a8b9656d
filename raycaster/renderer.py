"""
Ядро рендеринга методом бросания лучей (Ray Casting).

Один луч на пиксель: камера -> пересечение со сферой -> шейдинг ->
запись 4 байт в кадровый буфер. Пиксели независимы, поэтому цикл по ним
параллелится через prange без блокировок.
"""

import time

import numba
import numpy as np
from numba import njit, prange
from .camera import camera_ray, find_ray
from .errors import ImageWriteError
from .framebuffer import CHANNELS, Framebuffer, pixel_offset
from .geometry import ray_sphere_intersect
from .image_io import write_image
from .math_utils import clamp, length
from .shading import shade

STAGINGS = ("column", "flat")


@njit(cache=True, fastmath=True)
def cast_ray(ray_origin, ray_dir, center, radius):
    """Цвет луча: пересечение со сферой + шейдинг."""
    t = ray_sphere_intersect(ray_origin, ray_dir, center, radius)
    return shade(ray_origin, ray_dir, t)


@njit(cache=True)
def render_pixel(data, i, j, width, height, inverse_mvp, viewport, center, radius):
    """Луч через пиксель (i, j) и запись его цвета в data[offset:offset + 4]."""
    origin, direction = find_ray(i, j, float(height), inverse_mvp, viewport)
    color = cast_ray(origin, direction, center, radius)

    offset = pixel_offset(i, j, width)
    for c in range(CHANNELS):
        data[offset + c] = int(clamp(color[c], 0.0, 1.0) * 255.0)


@njit(parallel=True, cache=True)
def render_column(data, column, width, height, inverse_mvp, viewport, center, radius):
    """
    Рендеринг одного столбца: строки считаются параллельно.

    Возвращает управление, когда весь столбец готов.
    """
    for j in prange(height):
        render_pixel(data, column, np.int64(j), width, height,
                     inverse_mvp, viewport, center, radius)


@njit(parallel=True, cache=True)
def render_frame(data, width, height, inverse_mvp, viewport, center, radius):
    """Рендеринг всего кадра одним параллельным циклом по пикселям."""
    for idx in prange(width * height):
        k = np.int64(idx)
        i = k % width
        j = k // width
        render_pixel(data, i, j, width, height, inverse_mvp, viewport, center, radius)


def render(context, workers=None, staging="column", chunk_size=None):
    """
    Рендеринг кадра context.width x context.height.

    Параметры:
        workers: число потоков numba (по умолчанию - все доступные,
                 больше NUMBA_NUM_THREADS не бывает)
        staging: "column" - столбцы по очереди, строки столбца параллельно;
                 "flat" - все пиксели кадра одним циклом
        chunk_size: итераций prange на одну задачу потока
                    (по умолчанию решает numba)

    Возвращает Framebuffer. Результат не зависит от workers, staging
    и chunk_size.
    """
    if staging not in STAGINGS:
        raise ValueError(f"unknown staging {staging!r}, expected one of {STAGINGS}")
    if workers is None:
        workers = numba.config.NUMBA_NUM_THREADS
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if chunk_size is not None and chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    width, height = context.width, context.height
    framebuffer = Framebuffer(width, height)

    args = (context.inverse_mvp, context.view.viewport,
            context.sphere.center, context.sphere.radius)

    previous_threads = numba.get_num_threads()
    previous_chunk = numba.set_parallel_chunksize(chunk_size or 0)
    numba.set_num_threads(min(workers, numba.config.NUMBA_NUM_THREADS))
    try:
        if staging == "column":
            for i in range(width):
                render_column(framebuffer.data, i, width, height, *args)
        else:
            render_frame(framebuffer.data, width, height, *args)
    finally:
        numba.set_num_threads(previous_threads)
        numba.set_parallel_chunksize(previous_chunk)

    return framebuffer


def ray_trace(context, filename="output.png", **render_options):
    """
    Рендеринг кадра и сохранение в файл.

    Возвращает время работы в секундах. Если кадр отрендерен, но файл
    записать не удалось, бросает ImageWriteError с заполненным elapsed.
    """
    start_time = time.perf_counter()

    framebuffer = render(context, **render_options)
    try:
        write_image(filename, framebuffer.data, framebuffer.width,
                    framebuffer.height, CHANNELS)
    except ImageWriteError as exc:
        exc.elapsed = time.perf_counter() - start_time
        raise

    return time.perf_counter() - start_time


def probe(context, x, y):
    """
    Отладочный луч через пиксель (x, y).

    Возвращает (t, hit_point, distance_from_origin) при попадании
    перед камерой (t > 0), иначе None.
    """
    ray = camera_ray(context, x, y)
    t = context.sphere.intersect(ray)
    if t <= 0:
        return None

    hit_point = ray.point_at(t)
    return t, hit_point, float(length(hit_point))
