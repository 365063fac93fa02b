"""
Post-OCR: слияние соседних строк в многострочные блоки.

Движки распознавания режут вывески и меню по строкам. Для поиска слов
нужна логическая единица текста, поэтому вертикально соседние регионы,
перекрывающиеся по горизонтали, сливаются.

Алгоритм (один проход вперёд):
1. Сортировка по (y, x)
2. Для каждого непоглощённого региона просматриваем последующие непоглощённые:
   - gap = next.y - current.bottom
   - gap > max_gap → слишком далеко
   - gap < -0.5 * current.height → та же строка (сильное вертикальное
     перекрытие), не сливаем
   - горизонтальное перекрытие / ширина более узкого >= ratio → сливаем
3. Слитый регион: объединённый бокс, текст через "\n", минимальная уверенность

Текущий регион растёт по мере поглощения, поэтому может забрать
несколько строк подряд.
"""

from typing import List, Sequence

from loguru import logger

from config.settings import (
    MERGE_LINE_SEPARATOR,
    MERGE_MAX_GAP,
    MERGE_MAX_PASSES,
    MERGE_MIN_HORIZONTAL_OVERLAP,
    MERGE_SAME_LINE_RATIO,
)
from contracts.recognition_dto import DetectedRegion
from yomeru.domain.contracts import InvalidArgumentError


class RegionMerger:
    """Сливает вертикально соседние регионы."""

    def __init__(
        self,
        max_gap: float = MERGE_MAX_GAP,
        min_horizontal_overlap_ratio: float = MERGE_MIN_HORIZONTAL_OVERLAP,
        max_passes: int = MERGE_MAX_PASSES,
    ):
        if max_gap < 0:
            raise InvalidArgumentError(f"max_gap должен быть >= 0, получено: {max_gap}")
        if not 0 <= min_horizontal_overlap_ratio <= 1:
            raise InvalidArgumentError(
                f"min_horizontal_overlap_ratio должен быть в [0, 1], получено: {min_horizontal_overlap_ratio}"
            )
        if max_passes < 1:
            raise InvalidArgumentError(f"max_passes должен быть >= 1, получено: {max_passes}")

        self.max_gap = max_gap
        self.min_horizontal_overlap_ratio = min_horizontal_overlap_ratio
        self.max_passes = max_passes

    def merge(self, regions: Sequence[DetectedRegion]) -> List[DetectedRegion]:
        """
        Сливает регионы.

        max_passes > 1 повторяет проход, пока число регионов уменьшается
        (слитый блок может стать соседом для региона, пропущенного раньше).
        """
        merged = list(regions)
        for pass_no in range(self.max_passes):
            before = len(merged)
            merged = self._merge_pass(merged)
            if len(merged) == before:
                break
            logger.debug(f"[RegionMerger] Проход {pass_no + 1}: {before} → {len(merged)}")
        return merged

    def should_merge(self, current: DetectedRegion, nxt: DetectedRegion) -> bool:
        cur = current.bbox
        other = nxt.bbox

        gap = other.y - cur.bottom
        if gap > self.max_gap:
            return False
        if gap < -cur.height * MERGE_SAME_LINE_RATIO:
            return False

        overlap = max(0.0, min(cur.right, other.right) - max(cur.x, other.x))
        narrower = min(cur.width, other.width)
        return narrower > 0 and overlap / narrower >= self.min_horizontal_overlap_ratio

    def _merge_pass(self, regions: List[DetectedRegion]) -> List[DetectedRegion]:
        if len(regions) <= 1:
            return list(regions)

        ordered = sorted(regions, key=lambda r: (r.bbox.y, r.bbox.x))
        consumed = [False] * len(ordered)
        result: List[DetectedRegion] = []

        for i, region in enumerate(ordered):
            if consumed[i]:
                continue
            consumed[i] = True
            current = region

            for j in range(i + 1, len(ordered)):
                if consumed[j]:
                    continue
                nxt = ordered[j]
                if self.should_merge(current, nxt):
                    current = DetectedRegion(
                        text=current.text + MERGE_LINE_SEPARATOR + nxt.text,
                        confidence=min(current.confidence, nxt.confidence),
                        bbox=current.bbox.union(nxt.bbox),
                    )
                    consumed[j] = True

            result.append(current)

        return result


def merge_regions(
    regions: Sequence[DetectedRegion],
    max_gap: float = MERGE_MAX_GAP,
    min_horizontal_overlap_ratio: float = MERGE_MIN_HORIZONTAL_OVERLAP,
    max_passes: int = MERGE_MAX_PASSES,
) -> List[DetectedRegion]:
    """Функциональная обёртка над RegionMerger."""
    return RegionMerger(max_gap, min_horizontal_overlap_ratio, max_passes).merge(regions)
