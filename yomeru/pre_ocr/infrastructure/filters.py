"""
Pre-OCR Infrastructure: Фильтры и операции обработки изображений.

Утилиты низкого уровня для нормализации кадра. Все функции чистые:
на вход (H, W) uint8, на выход НОВЫЙ массив, вход не модифицируется.

Округление везде half-up (floor(x + 0.5)), края - clamp к ближайшему пикселю.
"""

import cv2
import numpy as np
import numpy.typing as npt

from config.settings import (
    BLUR_KERNEL_DIVISOR,
    BLUR_KERNEL_WEIGHTS,
    DESPECKLE_MIN_BLACK_NEIGHBORS,
)

BLACK = 0
WHITE = 255

# 8 соседей (dy, dx) без центра
_NEIGHBOR_OFFSETS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)]


def _round_half_up(values: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def _shifted_stack(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Стек из 9 сдвигов 3x3 окрестности (края clamp): shape (9, H, W)."""
    padded = np.pad(image, 1, mode="edge")
    h, w = image.shape
    return np.stack([padded[dy:dy + h, dx:dx + w] for dy in range(3) for dx in range(3)])


def rgba_to_luminance(pixels: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """
    RGBA → Grayscale по формуле 0.299R + 0.587G + 0.114B (half-up).

    Альфа-канал игнорируется.
    """
    rgb = pixels[..., :3].astype(np.float64)
    lum = 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]
    return _round_half_up(lum)


def stretch_contrast(gray: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """
    Линейная растяжка [min, max] → [0, 255].

    No-op (копия), если диапазон 0 (однотонный кадр) или уже полный.
    """
    lo = int(gray.min())
    hi = int(gray.max())
    value_range = hi - lo
    if value_range == 0 or value_range == 255:
        return gray.copy()
    scale = 255.0 / value_range
    return _round_half_up((gray.astype(np.float64) - lo) * scale)


def median_3x3(gray: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """3x3 медиана (5-й наименьший из 9), края clamp."""
    stack = _shifted_stack(gray)
    return np.partition(stack, 4, axis=0)[4].copy()


def upscale_bilinear(gray: npt.NDArray[np.uint8], factor: int) -> npt.NDArray[np.uint8]:
    """
    Билинейное увеличение в целое число раз.

    Координата источника: (d + 0.5) * src / dst - 0.5, с clamp по краям
    (совпадает с cv2.INTER_LINEAR). Считаем во float32, чтобы избежать
    fixed-point округления OpenCV для uint8.
    """
    if factor == 1:
        return gray.copy()
    h, w = gray.shape
    resized = cv2.resize(
        gray.astype(np.float32),
        (w * factor, h * factor),
        interpolation=cv2.INTER_LINEAR,
    )
    return _round_half_up(resized)


def blur_3x3(gray: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """
    3x3 сглаживание ядром [1 2 1; 2 4 2; 1 2 1] / 16, края clamp.

    Сумма считается в целых весах, деление с округлением: (sum + 8) // 16.
    """
    kernel = np.array(BLUR_KERNEL_WEIGHTS, dtype=np.float32)
    weighted = cv2.filter2D(
        gray.astype(np.float32), cv2.CV_32F, kernel, borderType=cv2.BORDER_REPLICATE
    )
    sums = np.rint(weighted).astype(np.int32)
    return ((sums + BLUR_KERNEL_DIVISOR // 2) // BLUR_KERNEL_DIVISOR).astype(np.uint8)


def integral_image(gray: npt.NDArray[np.uint8]) -> npt.NDArray[np.float64]:
    """Summed-area table (H + 1, W + 1), первая строка/столбец нулевые."""
    return cv2.integral(gray, sdepth=cv2.CV_64F)


def adaptive_threshold(gray: npt.NDArray[np.uint8], block_size: int, c: int) -> npt.NDArray[np.uint8]:
    """
    Адаптивный порог по локальному среднему.

    Окно block x block обрезается по границам изображения (не padding),
    среднее берётся по реально попавшим пикселям. O(1) на пиксель.

    pixel < mean - C → 0 (чёрный), иначе 255.
    """
    h, w = gray.shape
    half = block_size // 2
    integral = integral_image(gray)

    ys = np.arange(h)
    xs = np.arange(w)
    y1 = np.maximum(0, ys - half)
    y2 = np.minimum(h - 1, ys + half)
    x1 = np.maximum(0, xs - half)
    x2 = np.minimum(w - 1, xs + half)

    window_sum = (
        integral[np.ix_(y2 + 1, x2 + 1)]
        - integral[np.ix_(y1, x2 + 1)]
        - integral[np.ix_(y2 + 1, x1)]
        + integral[np.ix_(y1, x1)]
    )
    count = np.outer(y2 - y1 + 1, x2 - x1 + 1)
    mean = window_sum / count

    return np.where(gray.astype(np.float64) < mean - c, BLACK, WHITE).astype(np.uint8)


def count_black_neighbors(binary: npt.NDArray[np.uint8]) -> npt.NDArray[np.int32]:
    """Число чёрных соседей (из 8) для каждого пикселя; за краем - белый."""
    padded = np.pad(binary, 1, mode="constant", constant_values=WHITE)
    h, w = binary.shape
    counts = np.zeros((h, w), dtype=np.int32)
    for dy, dx in _NEIGHBOR_OFFSETS:
        counts += padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w] == BLACK
    return counts


def despeckle(binary: npt.NDArray[np.uint8], min_neighbors: int = DESPECKLE_MIN_BLACK_NEIGHBORS) -> npt.NDArray[np.uint8]:
    """
    Удаляет изолированные чёрные точки.

    Чёрный пиксель становится белым, если у него меньше min_neighbors
    чёрных соседей. Белые пиксели не меняются.
    """
    counts = count_black_neighbors(binary)
    isolated = (binary == BLACK) & (counts < min_neighbors)
    out = binary.copy()
    out[isolated] = WHITE
    return out

