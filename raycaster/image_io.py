"""
Сохранение кадрового буфера в файл (PNG и другие форматы Pillow).
"""

import numpy as np
from PIL import Image
from .errors import ImageWriteError


def write_image(filename, buffer, width, height, channels=4):
    """
    Сохраняет плоский буфер uint8 как изображение width x height.

    Формат определяется по расширению файла.

    Параметры:
        buffer: массив длины width * height * channels, строки сверху вниз
        channels: 1 (L), 3 (RGB) или 4 (RGBA)
    """
    if channels not in (1, 3, 4):
        raise ValueError(f"unsupported channel count: {channels}")

    data = np.asarray(buffer, dtype=np.uint8)
    if data.size != width * height * channels:
        raise ValueError(
            f"buffer has {data.size} bytes, expected {width * height * channels}")

    if channels == 1:
        array = data.reshape(height, width)
    else:
        array = data.reshape(height, width, channels)

    try:
        Image.fromarray(array).save(filename)
    except (OSError, ValueError) as exc:
        raise ImageWriteError(filename, str(exc)) from exc

    print(f"Сохранено: {filename}")
