"""
Математические утилиты для работы с 3D векторами.
Оптимизировано с помощью numba для ускорения.

Векторы хранятся как numpy массивы длины 3 или 4 (однородные координаты),
все операции используют только компоненты x, y, z.
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def normalize(v):
    """Нормализация вектора (приведение к единичной длине)."""
    length = np.sqrt(v[0]**2 + v[1]**2 + v[2]**2)
    if length < 1e-10:
        return np.zeros(v.shape[0])
    return v / length


@njit(cache=True, fastmath=True)
def dot(a, b):
    """Скалярное произведение двух векторов."""
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


@njit(cache=True, fastmath=True)
def length(v):
    """Длина вектора."""
    return np.sqrt(v[0]**2 + v[1]**2 + v[2]**2)


@njit(cache=True)
def near(a, b, epsilon):
    """
    Приближённое сравнение двух чисел.

    Правило:
        1. a == b - сразу True
        2. одно из чисел равно нулю - относительная ошибка не имеет
           смысла, сравниваем |a - b| с epsilon^2
        3. иначе сравниваем относительную ошибку |a - b| / (|a| + |b|)
           с epsilon

    Используется для распознавания касательных лучей (дискриминант ~ 0).
    """
    diff = abs(a - b)

    if a == b:
        return True
    elif a * b == 0:
        return diff < epsilon * epsilon
    else:
        return diff / (abs(a) + abs(b)) < epsilon


@njit(cache=True)
def clamp(value, low, high):
    """Ограничение значения отрезком [low, high]."""
    return min(max(value, low), high)
