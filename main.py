"""
Raycaster - рендеринг сферы методом бросания лучей.

Один луч на пиксель, пиксели считаются параллельно потоками numba (prange),
результат сохраняется в PNG.

Запуск: python main.py [output.png] [--width 512 --height 512 --workers 8]
"""

import argparse
import sys

from raycaster.camera import RenderContext, ViewState, axis_angle
from raycaster.errors import ImageWriteError, InvalidTransformError
from raycaster.renderer import STAGINGS, probe, ray_trace


# ==================== КОНФИГУРАЦИЯ ====================
# Значения по умолчанию, флаги командной строки их переопределяют

CONFIG = {
    # --- Изображение ---
    'width': 512,               # ширина изображения (размер окна)
    'height': 512,              # высота изображения
    'output': 'output.png',     # файл результата

    # --- Камера ---
    'camera_distance': 3.0,     # камера на оси z, смотрит в начало координат
    'pan': (0.0, 0.0),          # сдвиг камеры по x, y
    'rotation': None,           # (ось x, y, z, угол в градусах) или None
    'zoom': 1.0,                # масштаб сцены
    'fov': 45.0,                # угол обзора по вертикали (градусы)
    'z_near': 1.0,              # ближняя плоскость отсечения
    'z_far': 5.0,               # дальняя плоскость отсечения

    # --- Параллельность ---
    'workers': None,            # потоков numba (None = NUMBA_NUM_THREADS)
    'staging': 'column',        # 'column' - по столбцам, 'flat' - весь кадр одним циклом
    'chunk_size': None,         # итераций prange на задачу (None = решает numba)
}


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Parallel ray-casting renderer")
    parser.add_argument('output', nargs='?', default=CONFIG['output'],
                        help='Output image path')
    parser.add_argument('--width', type=positive_int, default=CONFIG['width'], help='Image width')
    parser.add_argument('--height', type=positive_int, default=CONFIG['height'], help='Image height')
    parser.add_argument('--workers', type=positive_int, default=CONFIG['workers'],
                        help='Numba threads (default: NUMBA_NUM_THREADS)')
    parser.add_argument('--staging', choices=STAGINGS, default=CONFIG['staging'],
                        help='Loop layout: columns in order, or the whole frame at once')
    parser.add_argument('--chunk-size', type=positive_int, default=CONFIG['chunk_size'],
                        help='prange iterations handed to a thread at a time')
    parser.add_argument('--distance', type=float, default=CONFIG['camera_distance'],
                        help='Camera distance from the origin')
    parser.add_argument('--fov', type=float, default=CONFIG['fov'],
                        help='Vertical field of view in degrees')
    parser.add_argument('--rotate', type=float, nargs=4, default=CONFIG['rotation'],
                        metavar=('X', 'Y', 'Z', 'DEG'),
                        help='Rotate the scene by DEG degrees around axis (X, Y, Z)')
    parser.add_argument('--probe', type=int, nargs=2, metavar=('X', 'Y'),
                        help='Cast a single debug ray through pixel (X, Y)')
    return parser.parse_args(argv)


def main(argv=None):
    """Основная функция рендеринга."""
    args = parse_args(argv)

    print("=" * 60)
    print("Raycaster - бросание лучей")
    print("=" * 60)

    # 1. Камера
    print("\n[1/3] Настройка камеры...")
    try:
        rotation = None
        if args.rotate is not None:
            *axis, degrees = args.rotate
            if not any(axis):
                raise ValueError("rotation axis must be non-zero")
            rotation = axis_angle(axis, degrees)

        view = ViewState.look_from_axis(
            args.width, args.height,
            distance=args.distance,
            pan=CONFIG['pan'],
            rotation=rotation,
            zoom=CONFIG['zoom'],
            fov=args.fov,
            z_near=CONFIG['z_near'],
            z_far=CONFIG['z_far'],
        )
        context = RenderContext(args.width, args.height, view)
    except (InvalidTransformError, ValueError) as exc:
        print(f"Ошибка камеры: {exc}", file=sys.stderr)
        return 1

    if args.probe is not None:
        x, y = args.probe
        hit = probe(context, x, y)
        if hit is None:
            print(f"      Луч через ({x}, {y}): промах")
        else:
            t, point, dist = hit
            print(f"      Луч через ({x}, {y}): t = {t:.4f}, "
                  f"точка {point[:3].round(4).tolist()}, |p| = {dist:.4f}")
        return 0

    # 2. Рендеринг и сохранение
    print(f"[2/3] Рендеринг {args.width}x{args.height}, staging={args.staging}...")
    try:
        elapsed = ray_trace(
            context, args.output,
            workers=args.workers,
            staging=args.staging,
            chunk_size=args.chunk_size,
        )
    except ImageWriteError as exc:
        print(f"Кадр отрендерен за {exc.elapsed * 1000:.0f} ms, "
              f"но не сохранён: {exc}", file=sys.stderr)
        return 1

    # 3. Отчёт
    print(f"[3/3] performed in {elapsed * 1000:.0f} ms")

    print("\n" + "=" * 60)
    print("Готово!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
