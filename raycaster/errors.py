"""
Исключения рендерера.

Промах луча и касание сферы ошибками не являются: это обычные исходы,
которые обрабатывает шейдинг.
"""


class RaycasterError(Exception):
    """Базовое исключение пакета."""


class InvalidTransformError(RaycasterError):
    """Вырожденная (необратимая) или неконечная матрица вида/проекции."""


class ImageWriteError(RaycasterError):
    """
    Кадр отрендерен, но записать изображение не удалось.

    Атрибуты:
        path: путь, по которому пытались сохранить файл
        elapsed: время рендеринга в секундах (None, если неизвестно)
    """

    def __init__(self, path, message, elapsed=None):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.elapsed = elapsed
