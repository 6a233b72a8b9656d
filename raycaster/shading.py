"""
Шейдинг: цвет пикселя по результату пересечения.
"""

import numpy as np
from numba import njit

# Цвет фона (промах): непрозрачный чёрный
MISS_COLOR = (0.0, 0.0, 0.0, 1.0)


@njit(cache=True, fastmath=True)
def shade(ray_origin, ray_dir, t):
    """
    Цвет RGBA в [0, 1] для луча и параметра пересечения t.

    t < 0  - промах, непрозрачный чёрный;
    t >= 0 - попадание, красный с яркостью |z| точки попадания.
    """
    color = np.array(MISS_COLOR)

    if t < 0.0:
        return color

    hit_z = ray_origin[2] + t * ray_dir[2]
    color[0] = abs(hit_z)
    return color
