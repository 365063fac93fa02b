"""
Pipeline нормализации кадра (бинаризация) для распознавания текста.

КОНТРАКТЫ: Каждая стадия гарантирует валидность выходных данных.

4-stage оркестратор:
1. Grayscale: RGBA → luminance
2. Analyzer: шум + масштаб на СЫРОМ grayscale (только при options.auto)
3. Resolver: явные опции + рекомендации (max/OR, никогда не понижает)
4. Executor: contrast → [median] → [upscale] → [blur] → threshold → [despeckle]

Результат: новый RGBA кадр с R=G=B в {0, 255}, A=255,
размеры умножены на итоговый upscale.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np
import numpy.typing as npt
from loguru import logger
from pydantic import ValidationError

from yomeru.domain.contracts import (
    BinarizationOptions,
    ContractValidationError,
    InvalidArgumentError,
    NoiseProfile,
    RasterImage,
)
from .s1_grayscale import GrayscaleStage
from .s2_analyzer import NoiseAnalyzerStage
from .s3_resolver import OptionsResolverStage
from .s4_executor import BinarizationExecutorStage

ImageInput = Union[RasterImage, npt.NDArray[np.uint8]]
OptionsInput = Optional[Union[BinarizationOptions, Dict[str, Any]]]


@dataclass(frozen=True)
class BinarizationResult:
    """Результат пайплайна: кадр + метаданные обработки."""

    image: RasterImage
    options: BinarizationOptions
    noise_profile: Optional[NoiseProfile] = None
    applied: List[str] = field(default_factory=list)
    elapsed_ms: float = 0.0


def _as_raster(image: ImageInput) -> RasterImage:
    if isinstance(image, RasterImage):
        return image
    if isinstance(image, np.ndarray):
        return RasterImage(image)
    raise InvalidArgumentError(f"Ожидался RasterImage или numpy.ndarray, получено: {type(image).__name__}")


def _as_options(options: OptionsInput) -> BinarizationOptions:
    if options is None:
        return BinarizationOptions()
    if isinstance(options, BinarizationOptions):
        return options
    try:
        return BinarizationOptions(**options)
    except ValidationError as e:
        raise ContractValidationError("BinarizationPipeline", "BinarizationOptions", e.errors())


class BinarizationPipeline:
    """
    Пайплайн бинаризации (4 Stages) с валидационными контрактами.

    Синхронный и без состояния между вызовами: буферы и метаданные
    создаются на каждый кадр, поэтому один экземпляр можно вызывать
    из разных потоков.
    """

    def __init__(self) -> None:
        self.grayscale = GrayscaleStage()
        self.analyzer = NoiseAnalyzerStage()
        self.resolver = OptionsResolverStage()
        self.executor = BinarizationExecutorStage()
        logger.debug("[BinarizationPipeline] Инициализирован (4 stages)")

    def analyze(self, image: ImageInput) -> NoiseProfile:
        """Stage 1 + Stage 2: профиль шума/масштаба для кадра."""
        raster = _as_raster(image)
        return self.analyzer.analyze(self.grayscale.process(raster))

    def process(self, image: ImageInput, options: OptionsInput = None) -> BinarizationResult:
        """
        Прогоняет кадр через весь пайплайн.

        Raises:
            InvalidArgumentError: невалидный кадр или опции
        """
        start_time = time.time()
        raster = _as_raster(image)
        opts = _as_options(options)

        gray = self.grayscale.process(raster)

        profile: Optional[NoiseProfile] = None
        if opts.auto:
            profile = self.analyzer.analyze(gray)
            opts = self.resolver.resolve(opts, profile)

        applied: List[str] = []
        binary = self.executor.execute(gray, opts, applied)
        output = RasterImage.from_gray(binary)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[BinarizationPipeline] {raster.width}x{raster.height} → "
            f"{output.width}x{output.height} за {elapsed_ms:.0f}ms "
            f"(block={opts.adaptive_block_size}, C={opts.adaptive_c}, upscale={opts.upscale})"
        )

        return BinarizationResult(
            image=output,
            options=opts,
            noise_profile=profile,
            applied=applied,
            elapsed_ms=elapsed_ms,
        )


def analyze(image: ImageInput) -> NoiseProfile:
    """Профиль шума и масштаба кадра (чистая функция)."""
    return BinarizationPipeline().analyze(image)


def binarize(image: ImageInput, options: OptionsInput = None) -> RasterImage:
    """Бинаризует кадр; возвращает НОВЫЙ RasterImage (больше, если был upscale)."""
    return BinarizationPipeline().process(image, options).image
