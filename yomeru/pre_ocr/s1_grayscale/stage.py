"""
Stage 1: Grayscale.

RGBA кадр → одноканальная яркость (0.299R + 0.587G + 0.114B, half-up).

КОНТРАКТЫ:
  Входные: RasterImage (валидирован при создании: (H, W, 4) uint8, H, W > 0)
  Выходные: np.ndarray (H, W) uint8, новый буфер
"""

import numpy as np
import numpy.typing as npt
from loguru import logger

from yomeru.domain.contracts import RasterImage
from yomeru.domain.interfaces import IGrayscaleStage
from yomeru.pre_ocr.infrastructure.filters import rgba_to_luminance


class GrayscaleStage(IGrayscaleStage):
    """Stage 1: RGBA → Grayscale."""

    def __init__(self) -> None:
        logger.debug("[Stage 1: Grayscale] Инициализирован")

    def process(self, image: RasterImage) -> npt.NDArray[np.uint8]:
        gray = rgba_to_luminance(image.pixels)
        logger.debug(f"[Stage 1] Grayscale: {image.width}x{image.height}")
        return gray
