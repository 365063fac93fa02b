"""
Stage 4: Executor (Руки).

Применяет фильтры в ФИКСИРОВАННОМ порядке:
  contrast stretch → [median] → [upscale] → [blur] → adaptive threshold → [despeckle]

КОНТРАКТЫ:
  Входные: grayscale (H, W) uint8 + разрешённые BinarizationOptions
  Выходные: (H * upscale, W * upscale) uint8, значения только {0, 255}

Медиана применяется ДО увеличения (на нативном разрешении),
despeckle - ПОСЛЕ порога (работает с бинарным изображением).
"""

import time
from typing import List, Optional

import numpy as np
import numpy.typing as npt
from loguru import logger

from yomeru.domain.contracts import BinarizationOptions
from yomeru.domain.interfaces import IExecutorStage
from yomeru.pre_ocr.infrastructure.filters import (
    adaptive_threshold,
    blur_3x3,
    despeckle,
    median_3x3,
    stretch_contrast,
    upscale_bilinear,
)


class BinarizationExecutorStage(IExecutorStage):
    """Stage 4: Executor. Состояния между вызовами не хранит."""

    def __init__(self) -> None:
        logger.debug("[Stage 4: Executor] Инициализирован")

    def execute(
        self,
        gray: npt.NDArray[np.uint8],
        options: BinarizationOptions,
        applied: Optional[List[str]] = None
    ) -> npt.NDArray[np.uint8]:
        start_time = time.time()
        if applied is None:
            applied = []

        processed = stretch_contrast(gray)
        applied.append("contrast")

        if options.median:
            processed = median_3x3(processed)
            applied.append("median")

        if options.upscale > 1:
            processed = upscale_bilinear(processed, options.upscale)
            applied.append(f"upscale_x{options.upscale}")

        if options.blur:
            processed = blur_3x3(processed)
            applied.append("blur")

        logger.debug(
            f"[Stage 4] Adaptive threshold (block={options.adaptive_block_size}, C={options.adaptive_c})"
        )
        processed = adaptive_threshold(processed, options.adaptive_block_size, options.adaptive_c)
        applied.append("threshold")

        if options.despeckle:
            processed = despeckle(processed)
            applied.append("despeckle")

        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"[Stage 4] Готово: {processed.shape[1]}x{processed.shape[0]}, "
            f"шаги={applied}, {elapsed_ms:.1f}ms"
        )
        return processed
