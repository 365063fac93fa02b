"""
Контракты DTO между распознавателем, консолидацией и поиском слов.

Все контракты используют Pydantic v2 для валидации.

Контракты:
- Распознаватель -> Консолидация: RecognitionResult, DetectedRegion, BBox
- Поиск слов -> Оркестратор: LookupEntry
"""

from .recognition_dto import BBox, DetectedRegion, LookupEntry, RecognitionResult

__all__ = [
    "BBox",
    "DetectedRegion",
    "RecognitionResult",
    "LookupEntry",
]
