"""
Stage 2: Analyzer (Анализатор шума и масштаба).

Оценивает плотность импульсного шума (salt-and-pepper) и достаточность
разрешения для уверенного распознавания. На основе этого профиля
Stage 3 (Resolver) может поднять median/despeckle/upscale.

КОНТРАКТЫ:
  Выходные: NoiseProfile (noise_level в [0, 1], recommended_upscale в [1, 4])

Алгоритм шума:
- Выборка каждого 2-го пикселя по обеим осям во внутренней области
  (рамка в 1 пиксель исключена)
- Для каждого пикселя выборки - медиана его 3x3 окрестности
- Выброс, если |pixel - median| > 30
- noise_level = выбросы / выборка (0, если выборка пуста)

Алгоритм масштаба:
- короткая сторона >= 400 → 1
- иначе min(ceil(400 / короткая сторона), 4)

Чистая функция: вход не модифицируется, побочных эффектов нет.
"""

import math

import numpy as np
import numpy.typing as npt
from loguru import logger
from pydantic import ValidationError

from config.settings import (
    MAX_UPSCALE_FACTOR,
    MIN_RELIABLE_DIMENSION,
    NOISE_LEVEL_THRESHOLD,
    NOISE_OUTLIER_DELTA,
    NOISE_SAMPLE_STEP,
)
from yomeru.domain.contracts import ContractValidationError, NoiseProfile
from yomeru.domain.interfaces import IAnalyzerStage
from yomeru.pre_ocr.infrastructure.filters import median_3x3


def estimate_noise_level(gray: npt.NDArray[np.uint8]) -> float:
    """Доля импульсных выбросов среди пикселей выборки."""
    h, w = gray.shape
    if h < 3 or w < 3:
        return 0.0

    # Медиана для внутренних пикселей не зависит от clamp по краям
    medians = median_3x3(gray)
    step = NOISE_SAMPLE_STEP
    samples = gray[1:h - 1:step, 1:w - 1:step].astype(np.int16)
    sample_medians = medians[1:h - 1:step, 1:w - 1:step].astype(np.int16)

    if samples.size == 0:
        return 0.0

    outliers = int(np.count_nonzero(np.abs(samples - sample_medians) > NOISE_OUTLIER_DELTA))
    return outliers / samples.size


def recommend_upscale(width: int, height: int) -> int:
    """Целочисленное увеличение, чтобы короткая сторона дотянула до минимума."""
    short_side = min(width, height)
    if short_side >= MIN_RELIABLE_DIMENSION:
        return 1
    return min(math.ceil(MIN_RELIABLE_DIMENSION / short_side), MAX_UPSCALE_FACTOR)


class NoiseAnalyzerStage(IAnalyzerStage):
    """
    Stage 2: Analyzer.

    Работает на СЫРОМ grayscale (до нормализации контраста),
    чтобы растяжка не усиливала шум в оценке.
    """

    def __init__(self) -> None:
        logger.debug("[Stage 2: Analyzer] Инициализирован")

    def analyze(self, gray: npt.NDArray[np.uint8]) -> NoiseProfile:
        """
        Анализирует grayscale изображение и возвращает профиль.

        Raises:
            ContractValidationError: если расчёты дали невалидный профиль
        """
        h, w = gray.shape
        noise_level = estimate_noise_level(gray)
        is_noisy = noise_level > NOISE_LEVEL_THRESHOLD
        upscale = recommend_upscale(w, h)

        try:
            profile = NoiseProfile(
                noise_level=noise_level,
                is_noisy=is_noisy,
                recommended_upscale=upscale,
                recommended_median=is_noisy,
                recommended_despeckle=is_noisy or upscale > 1,
            )
        except ValidationError as e:
            logger.error(f"[Stage 2] ❌ Контракт NoiseProfile нарушен: {e}")
            raise ContractValidationError("Stage 2: Analyzer", "NoiseProfile", e.errors())

        logger.debug(
            f"[Stage 2] Профиль: noise={profile.noise_level:.3f}, "
            f"noisy={profile.is_noisy}, upscale={profile.recommended_upscale}, "
            f"median={profile.recommended_median}, despeckle={profile.recommended_despeckle}"
        )
        return profile
