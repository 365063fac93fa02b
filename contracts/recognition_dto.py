"""
DTO контракт: Распознаватель (внешний) -> Консолидация регионов

Сырые регионы от OCR движка и результаты поиска слов.

ВАЖНО: Это публичный контракт. Регионы неизменяемы: консолидация создаёт
новые объекты и никогда не модифицирует входные.

Уверенность хранится в НАТИВНОЙ шкале распознавателя ([0-1] или [0-100]).
Мы её не нормализуем: пороги фильтров задаются вызывающим кодом в той же шкале.
"""

import math
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BBox(BaseModel):
    """Ограничивающий прямоугольник в пикселях исходного изображения (origin = top-left)."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., ge=0, description="Левый край")
    y: float = Field(..., ge=0, description="Верхний край")
    width: float = Field(..., ge=0, description="Ширина")
    height: float = Field(..., ge=0, description="Высота")

    @field_validator("x", "y", "width", "height")
    @classmethod
    def no_special_floats(cls, v: float) -> float:
        """Не допускаются NaN или Inf значения."""
        if math.isnan(v) or math.isinf(v):
            raise ValueError(f"Координата должна быть конечным числом, получено: {v}")
        return v

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def intersection_area(self, other: "BBox") -> float:
        """Площадь пересечения двух боксов (0, если не пересекаются)."""
        ix1 = max(self.x, other.x)
        iy1 = max(self.y, other.y)
        ix2 = min(self.right, other.right)
        iy2 = min(self.bottom, other.bottom)
        if ix1 >= ix2 or iy1 >= iy2:
            return 0.0
        return (ix2 - ix1) * (iy2 - iy1)

    def union(self, other: "BBox") -> "BBox":
        """Минимальный прямоугольник, покрывающий оба бокса."""
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return BBox(
            x=x,
            y=y,
            width=max(self.right, other.right) - x,
            height=max(self.bottom, other.bottom) - y,
        )


class DetectedRegion(BaseModel):
    """Кандидат текста: строка, уверенность и бокс."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Распознанный текст (может быть пустым до фильтрации)")
    confidence: float = Field(..., ge=0, le=100, description="Уверенность в шкале распознавателя")
    bbox: BBox = Field(..., description="Положение региона")

    @field_validator("confidence")
    @classmethod
    def confidence_is_finite(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("Уверенность не может быть NaN")
        return v


class RecognitionResult(BaseModel):
    """Ответ распознавателя для одного кадра."""

    model_config = ConfigDict(frozen=True)

    regions: List[DetectedRegion] = Field(default_factory=list, description="Регионы в порядке движка")
    full_text: str = Field("", description="Полный текст кадра")


class LookupEntry(BaseModel):
    """Одна словарная статья для сегмента текста."""

    model_config = ConfigDict(frozen=True)

    original: str = Field(..., description="Исходный сегмент")
    reading: str = Field("", description="Чтение (кана)")
    translations: List[str] = Field(default_factory=list, description="Варианты перевода")
    part_of_speech: str = Field("", description="Часть речи")
