"""
Pydantic модель пресета сканирования.

Пресет объединяет параметры препроцессинга и фильтрации регионов,
подобранные под условия съёмки (блики, тусклый свет, печатный текст).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import (
    ADAPTIVE_BLOCK_SIZE,
    ADAPTIVE_C,
    AUTO_TUNE,
    BLUR_ENABLED,
    MAX_ASPECT_RATIO,
    MIN_BBOX_AREA,
    MIN_CHARACTERS,
    OCR_CONFIDENCE_THRESHOLD,
)
from yomeru.domain.contracts import BinarizationOptions, FilterParams


class PipelineParams(BaseModel):
    """Параметры одного пресета (ключи YAML совпадают с именами полей)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field("custom", description="Имя пресета")
    adaptive_block_size: int = Field(ADAPTIVE_BLOCK_SIZE, ge=3)
    adaptive_c: int = Field(ADAPTIVE_C, ge=0)
    blur: bool = BLUR_ENABLED
    auto: bool = AUTO_TUNE
    min_confidence: float = Field(OCR_CONFIDENCE_THRESHOLD, ge=0, le=100)
    min_region_area: float = Field(MIN_BBOX_AREA, gt=0)
    max_aspect_ratio: float = Field(MAX_ASPECT_RATIO, gt=0)
    require_japanese: bool = True
    min_characters: int = Field(MIN_CHARACTERS, ge=0)

    @field_validator("adaptive_block_size")
    @classmethod
    def block_size_is_odd(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError(f"adaptive_block_size должен быть нечётным, получено: {v}")
        return v

    def to_binarization_options(self) -> BinarizationOptions:
        return BinarizationOptions(
            adaptive_block_size=self.adaptive_block_size,
            adaptive_c=self.adaptive_c,
            blur=self.blur,
            auto=self.auto,
        )

    def to_filter_params(self, confidence_scale: float = 1.0) -> FilterParams:
        """
        Параметры цепочки фильтров.

        Args:
            confidence_scale: множитель порога уверенности. Пресеты хранят
                шкалу 0-100; для распознавателя со шкалой 0-1 передайте 0.01.
        """
        return FilterParams(
            min_confidence=self.min_confidence * confidence_scale,
            min_area=self.min_region_area,
            max_aspect_ratio=self.max_aspect_ratio,
            require_japanese=self.require_japanese,
            min_characters=self.min_characters,
        )
