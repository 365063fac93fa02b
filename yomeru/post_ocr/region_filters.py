"""
Post-OCR: фильтры регионов.

Каждый фильтр - чистая функция (regions) -> regions: входной список
и сами регионы не модифицируются, порядок выживших сохраняется
(кроме filter_overlapping, который упорядочивает по уверенности).

Порядок в цепочке: confidence → content → size/aspect → overlap → merge
(см. consolidation.RegionFilterChain).
"""

import math
from typing import List, Optional, Sequence

from loguru import logger

from config.settings import (
    MAX_ASPECT_RATIO,
    MIN_ASPECT_RATIO,
    MIN_BBOX_AREA,
    MIN_BBOX_HEIGHT,
    MIN_BBOX_WIDTH,
    MIN_CHARACTERS,
    OCR_CONFIDENCE_THRESHOLD,
    OVERLAP_THRESHOLD,
)
from contracts.recognition_dto import BBox, DetectedRegion
from yomeru.domain.contracts import InvalidArgumentError
from .content_filter import (
    ContentPredicate,
    JapaneseContentPredicate,
    is_junk,
    strip_non_japanese_text,
)


def filter_by_confidence(
    regions: Sequence[DetectedRegion],
    threshold: float = OCR_CONFIDENCE_THRESHOLD,
) -> List[DetectedRegion]:
    """
    Оставляет регионы с confidence >= threshold (включительно).

    ВАЖНО: threshold в шкале распознавателя (0-1 или 0-100).
    """
    if threshold < 0 or math.isnan(threshold):
        raise InvalidArgumentError(f"threshold должен быть >= 0, получено: {threshold}")
    return [r for r in regions if r.confidence >= threshold]


def filter_by_content(
    regions: Sequence[DetectedRegion],
    predicate: Optional[ContentPredicate] = None,
    min_characters: int = MIN_CHARACTERS,
) -> List[DetectedRegion]:
    """
    Отбрасывает пустой/мусорный текст, короткий текст и текст,
    не прошедший предикат.

    Args:
        predicate: (text) -> bool; по умолчанию JapaneseContentPredicate
        min_characters: минимальная длина после strip()
    """
    if min_characters < 0:
        raise InvalidArgumentError(f"min_characters должен быть >= 0, получено: {min_characters}")
    if predicate is None:
        predicate = JapaneseContentPredicate()

    kept: List[DetectedRegion] = []
    for region in regions:
        text = region.text.strip()
        if is_junk(text):
            continue
        if len(text) < min_characters:
            continue
        if not predicate(text):
            continue
        kept.append(region)
    return kept


def filter_by_size(
    regions: Sequence[DetectedRegion],
    min_width: float = MIN_BBOX_WIDTH,
    min_height: float = MIN_BBOX_HEIGHT,
    min_area: float = MIN_BBOX_AREA,
    min_aspect: float = MIN_ASPECT_RATIO,
    max_aspect: float = MAX_ASPECT_RATIO,
) -> List[DetectedRegion]:
    """Отбрасывает слишком мелкие и слишком вытянутые боксы."""
    if min(min_width, min_height, min_area, min_aspect) < 0 or max_aspect < min_aspect:
        raise InvalidArgumentError(
            f"Некорректные пороги размера: width={min_width}, height={min_height}, "
            f"area={min_area}, aspect=[{min_aspect}, {max_aspect}]"
        )

    kept: List[DetectedRegion] = []
    for region in regions:
        width = region.bbox.width
        height = region.bbox.height
        if width < min_width or height < min_height:
            continue
        if width * height < min_area:
            continue
        # Вырожденный бокс не проходит ни при каких порогах
        if width <= 0 or height <= 0:
            continue
        aspect = width / height
        if aspect > max_aspect or aspect < min_aspect:
            continue
        kept.append(region)
    return kept


def overlap_ratio(a: BBox, b: BBox) -> float:
    """
    Пересечение / площадь МЕНЬШЕГО бокса (не IoU).

    0, если боксы не пересекаются или меньшая площадь равна 0.
    """
    intersection = a.intersection_area(b)
    if intersection == 0:
        return 0.0
    smaller = min(a.area, b.area)
    return intersection / smaller if smaller > 0 else 0.0


def filter_overlapping(
    regions: Sequence[DetectedRegion],
    threshold: float = OVERLAP_THRESHOLD,
) -> List[DetectedRegion]:
    """
    Подавление дубликатов.

    Сортировка по уверенности (убывание, стабильная), затем жадно:
    регион остаётся, если его overlap_ratio с КАЖДЫМ уже оставленным <= threshold.
    Результат в порядке убывания уверенности.
    """
    if not 0 <= threshold <= 1:
        raise InvalidArgumentError(f"threshold должен быть в [0, 1], получено: {threshold}")

    ordered = sorted(regions, key=lambda r: r.confidence, reverse=True)
    kept: List[DetectedRegion] = []
    for region in ordered:
        dominated = any(overlap_ratio(region.bbox, k.bbox) > threshold for k in kept)
        if dominated:
            logger.debug(f"[RegionFilters] Дубликат подавлен: '{region.text}' ({region.confidence})")
            continue
        kept.append(region)
    return kept


def strip_non_japanese(regions: Sequence[DetectedRegion]) -> List[DetectedRegion]:
    """
    Вырезает не-японские символы из текста регионов.

    Регион с пустым после вырезания текстом отбрасывается.
    Возвращает новые объекты; бокс и уверенность не меняются.
    """
    kept: List[DetectedRegion] = []
    for region in regions:
        text = strip_non_japanese_text(region.text).strip()
        if not text:
            continue
        kept.append(region if text == region.text else region.model_copy(update={"text": text}))
    return kept
