"""
Post-OCR: цепочка консолидации регионов.

Фиксированный порядок:
  confidence → [strip_non_japanese] → content → size/aspect → overlap → merge

Входные регионы не модифицируются; результат - новые объекты
(слитые регионы создаются заново).
"""

import time
from typing import List, Optional, Sequence

from loguru import logger

from contracts.recognition_dto import DetectedRegion
from yomeru.domain.contracts import FilterParams
from .content_filter import ContentPredicate, JapaneseContentPredicate, accept_any
from .region_filters import (
    filter_by_confidence,
    filter_by_content,
    filter_by_size,
    filter_overlapping,
    strip_non_japanese,
)
from .region_merger import RegionMerger


class RegionFilterChain:
    """
    Консолидация сырого вывода распознавателя в логические строки.

    Args:
        params: пороги фильтров (шкала уверенности - как у распознавателя)
        content_predicate: (text) -> bool. Если не задан:
            JapaneseContentPredicate при require_japanese, иначе accept_any
    """

    def __init__(self, params: Optional[FilterParams] = None, content_predicate: Optional[ContentPredicate] = None):
        self.params = params or FilterParams()
        if content_predicate is None:
            content_predicate = JapaneseContentPredicate() if self.params.require_japanese else accept_any
        self.content_predicate = content_predicate
        self.merger = RegionMerger(
            max_gap=self.params.merge_max_gap,
            min_horizontal_overlap_ratio=self.params.merge_min_horizontal_overlap,
            max_passes=self.params.merge_max_passes,
        )

    def run(self, regions: Sequence[DetectedRegion]) -> List[DetectedRegion]:
        p = self.params
        start_time = time.time()
        counts = [len(regions)]

        result = filter_by_confidence(regions, p.min_confidence)
        counts.append(len(result))

        if p.strip_non_japanese:
            result = strip_non_japanese(result)

        result = filter_by_content(result, self.content_predicate, p.min_characters)
        counts.append(len(result))

        result = filter_by_size(
            result,
            min_width=p.min_width,
            min_height=p.min_height,
            min_area=p.min_area,
            min_aspect=p.min_aspect_ratio,
            max_aspect=p.max_aspect_ratio,
        )
        counts.append(len(result))

        result = filter_overlapping(result, p.overlap_threshold)
        counts.append(len(result))

        if p.merge:
            result = self.merger.merge(result)
        counts.append(len(result))

        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"[RegionFilterChain] {' → '.join(str(c) for c in counts)} "
            f"(raw → conf → content → size → overlap → merge), {elapsed_ms:.1f}ms"
        )
        return result


def filter_regions(
    regions: Sequence[DetectedRegion],
    params: Optional[FilterParams] = None,
    content_predicate: Optional[ContentPredicate] = None,
) -> List[DetectedRegion]:
    """Полная цепочка консолидации с параметрами по умолчанию из settings."""
    return RegionFilterChain(params, content_predicate).run(regions)
