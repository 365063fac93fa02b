"""
Валидационные контракты (contracts) для нормализации кадра и консолидации регионов.

Каждый контракт гарантирует:
  1. Правильный тип данных (type safety)
  2. Значения в допустимых диапазонах (data integrity)
  3. Громкий отказ на невалидных аргументах (никакого тихого clamping)

Без этих контрактов система может передавать невалидные данные:
  - adaptive_block_size = 20 (должен быть нечётным)
  - noise_level = 1.3 (должен быть [0, 1])
  - изображение 0x0 или с 3 каналами вместо 4

Модели используют Pydantic v2 с Field validators.
RasterImage - dataclass поверх numpy (Pydantic для массивов избыточен).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import (
    ADAPTIVE_BLOCK_SIZE,
    ADAPTIVE_C,
    AUTO_TUNE,
    BLUR_ENABLED,
    DESPECKLE_ENABLED,
    MAX_ASPECT_RATIO,
    MAX_UPSCALE_FACTOR,
    MEDIAN_ENABLED,
    MERGE_MAX_GAP,
    MERGE_MAX_PASSES,
    MERGE_MIN_HORIZONTAL_OVERLAP,
    MIN_ASPECT_RATIO,
    MIN_BBOX_AREA,
    MIN_BBOX_HEIGHT,
    MIN_BBOX_WIDTH,
    MIN_CHARACTERS,
    OCR_CONFIDENCE_THRESHOLD,
    OVERLAP_THRESHOLD,
    UPSCALE_FACTOR,
)
from contracts.recognition_dto import LookupEntry, RecognitionResult


# ============================================================================
# ERRORS
# ============================================================================

class InvalidArgumentError(ValueError):
    """Нарушено предусловие (размеры, нечётность окна, отрицательные пороги)."""
    pass


class ContractValidationError(InvalidArgumentError):
    """Exception для нарушения контрактов (используется вместо Pydantic ValidationError)."""

    def __init__(self, stage_name: str, contract_name: str, errors: Union[List[Dict[str, Any]], List[Any]]) -> None:
        self.stage_name = stage_name
        self.contract_name = contract_name
        self.errors = errors

        error_messages = []
        for err in errors:
            if isinstance(err, dict):
                loc = err.get('loc', [])[0] if err.get('loc') else 'unknown'
                err_type = err.get('type', 'unknown')
                msg = err.get('msg', 'unknown error')
                error_messages.append(f"  {loc} ({err_type}): {msg}")
            else:
                error_messages.append(f"  {str(err)}")

        message = (
            f"Contract violation in {stage_name} ({contract_name}):\n"
            + "\n".join(error_messages)
        )
        super().__init__(message)


# ============================================================================
# RASTER IMAGE
# ============================================================================

@dataclass(frozen=True, eq=False)
class RasterImage:
    """
    Кадр в формате RGBA (H, W, 4), uint8.

    Владение эксклюзивное: каждая стадия возвращает НОВЫЙ массив,
    две стадии никогда не делят один буфер.
    """

    pixels: npt.NDArray[np.uint8]

    def __post_init__(self) -> None:
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InvalidArgumentError(f"Ожидался numpy.ndarray, получено: {type(pixels).__name__}")
        if pixels.dtype != np.uint8:
            raise InvalidArgumentError(f"Ожидался dtype uint8, получено: {pixels.dtype}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidArgumentError(f"Ожидалась форма (H, W, 4), получено: {pixels.shape}")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise InvalidArgumentError(f"Размеры должны быть > 0, получено: {pixels.shape[1]}x{pixels.shape[0]}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int] = (128, 128, 128, 255)) -> "RasterImage":
        """Однотонный кадр (удобно для тестов и заглушек)."""
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Размеры должны быть > 0, получено: {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = rgba
        return cls(pixels)

    @classmethod
    def from_gray(cls, gray: npt.NDArray[np.uint8]) -> "RasterImage":
        """Одноканальный массив → RGBA (R=G=B=value, A=255)."""
        if gray.ndim != 2:
            raise InvalidArgumentError(f"Ожидался 2D массив, получено: {gray.shape}")
        alpha = np.full(gray.shape, 255, dtype=np.uint8)
        return cls(np.dstack([gray, gray, gray, alpha]).astype(np.uint8))


# ============================================================================
# ANALYZER: NOISE PROFILE
# ============================================================================

class NoiseProfile(BaseModel):
    """
    Выходной контракт анализатора шума/масштаба.

    Производный, не сохраняется: пересчитывается на каждом кадре.
    """

    model_config = ConfigDict(frozen=True)

    noise_level: float = Field(..., ge=0, le=1, description="Доля импульсных выбросов [0-1]")
    is_noisy: bool = Field(..., description="noise_level выше порога")
    recommended_upscale: int = Field(..., ge=1, le=MAX_UPSCALE_FACTOR, description="Рекомендованное увеличение")
    recommended_median: bool = Field(..., description="Рекомендуется медианный фильтр")
    recommended_despeckle: bool = Field(..., description="Рекомендуется despeckle")


# ============================================================================
# BINARIZATION OPTIONS
# ============================================================================

class BinarizationOptions(BaseModel):
    """
    Параметры бинаризации.

    auto=True: анализатор может ПОДНЯТЬ median/despeckle/upscale,
    но никогда не понижает явно заданные значения.
    """

    model_config = ConfigDict(frozen=True)

    adaptive_block_size: int = Field(ADAPTIVE_BLOCK_SIZE, ge=3, description="Окно адаптивного порога (нечётное)")
    adaptive_c: int = Field(ADAPTIVE_C, ge=0, description="Смещение от локального среднего")
    blur: bool = Field(BLUR_ENABLED, description="3x3 сглаживание")
    median: bool = Field(MEDIAN_ENABLED, description="3x3 медиана")
    despeckle: bool = Field(DESPECKLE_ENABLED, description="Удаление одиночных точек")
    upscale: int = Field(UPSCALE_FACTOR, ge=1, description="Целочисленное увеличение")
    auto: bool = Field(AUTO_TUNE, description="Автонастройка по NoiseProfile")

    @field_validator('adaptive_block_size')
    @classmethod
    def block_size_is_odd(cls, v: int) -> int:
        """Окно должно иметь центр."""
        if v % 2 == 0:
            raise ValueError(f"adaptive_block_size должен быть нечётным, получено: {v}")
        return v


# ============================================================================
# REGION FILTER CHAIN
# ============================================================================

class FilterParams(BaseModel):
    """
    Параметры цепочки фильтров регионов.

    ВАЖНО: min_confidence задаётся в шкале распознавателя (0-1 или 0-100).
    """

    model_config = ConfigDict(frozen=True)

    min_confidence: float = Field(OCR_CONFIDENCE_THRESHOLD, ge=0, le=100)
    require_japanese: bool = Field(True, description="Применять предикат контента")
    min_characters: int = Field(MIN_CHARACTERS, ge=0)
    min_width: float = Field(MIN_BBOX_WIDTH, ge=0)
    min_height: float = Field(MIN_BBOX_HEIGHT, ge=0)
    min_area: float = Field(MIN_BBOX_AREA, ge=0)
    min_aspect_ratio: float = Field(MIN_ASPECT_RATIO, ge=0)
    max_aspect_ratio: float = Field(MAX_ASPECT_RATIO, gt=0)
    overlap_threshold: float = Field(OVERLAP_THRESHOLD, ge=0, le=1)
    strip_non_japanese: bool = Field(False, description="Вырезать латиницу из смешанных строк")
    merge: bool = Field(True, description="Сливать соседние строки")
    merge_max_gap: float = Field(MERGE_MAX_GAP, ge=0)
    merge_min_horizontal_overlap: float = Field(MERGE_MIN_HORIZONTAL_OVERLAP, ge=0, le=1)
    merge_max_passes: int = Field(MERGE_MAX_PASSES, ge=1)

    @field_validator('max_aspect_ratio')
    @classmethod
    def aspect_range_not_empty(cls, v: float, info: Any) -> float:
        min_aspect = info.data.get('min_aspect_ratio')
        if min_aspect is not None and v < min_aspect:
            raise ValueError(f"max_aspect_ratio ({v}) < min_aspect_ratio ({min_aspect})")
        return v


# ============================================================================
# PIPELINE STATE
# ============================================================================

class PipelinePhase(str, Enum):
    """Фазы сканирования одного кадра."""
    IDLE = "idle"
    PREPROCESSING = "preprocessing"
    OCR = "ocr"
    SEGMENTING = "segmenting"
    TRANSLATING = "translating"
    DONE = "done"
    ERROR = "error"


class StageTimings(BaseModel):
    """Время выполнения стадий (мс)."""

    model_config = ConfigDict(frozen=True)

    preprocessing: float = Field(0.0, ge=0)
    ocr: float = Field(0.0, ge=0)
    filtering: float = Field(0.0, ge=0)
    translation: float = Field(0.0, ge=0)


class PipelineState(BaseModel):
    """
    Снимок состояния сканирования, отдаваемый наблюдателю.

    Неизменяемый: каждая смена фазы порождает новый снимок (model_copy).
    """

    model_config = ConfigDict(frozen=True)

    phase: PipelinePhase = PipelinePhase.IDLE
    ocr_result: Optional[RecognitionResult] = None
    translations: Optional[List[List[LookupEntry]]] = None
    error: Optional[str] = None
    image_size: Optional[tuple[int, int]] = Field(None, description="(width, height) исходного кадра")
    timings: StageTimings = Field(default_factory=StageTimings)


INITIAL_STATE = PipelineState()
