"""
Кадровый буфер: плоский массив байтов RGBA размером width * height * 4.
"""

import numpy as np
from numba import njit

CHANNELS = 4


@njit(cache=True)
def pixel_offset(i, j, width):
    """Смещение первого байта пикселя (i, j) в буфере."""
    return CHANNELS * (j * width + i)


class Framebuffer:
    """
    Буфер RGBA8, строки подряд, строка 0 - верхняя строка изображения.

    Пиксель (i, j) занимает байты [offset(i, j), offset(i, j) + 4).
    Каждый пиксель пишется ровно одной итерацией рендеринга.
    """

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"framebuffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.data = np.zeros(width * height * CHANNELS, dtype=np.uint8)

    def offset(self, i, j):
        if not (0 <= i < self.width and 0 <= j < self.height):
            raise IndexError(f"pixel ({i}, {j}) outside {self.width}x{self.height}")
        return pixel_offset(i, j, self.width)
