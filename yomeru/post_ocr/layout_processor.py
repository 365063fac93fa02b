"""
Layout Element: Приведение сырого вывода распознавателя к DetectedRegion.

ЦКП: Отсортированный список регионов (сверху вниз, слева направо).

Поддерживаемые форматы записи:
- {"text": ..., "confidence": ..., "bbox": {"x", "y", "width", "height"}}
- {"text": ..., "confidence": ..., "box": [[x0, y0], [x1, y1], [x2, y2], [x3, y3]]}
  (4-точечный полигон; бокс = округлённые границы полигона)
- без геометрии → бокс на весь кадр
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from contracts.recognition_dto import BBox, DetectedRegion, RecognitionResult


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def polygon_to_bbox(points: Sequence[Sequence[float]]) -> BBox:
    """
    Ось-параллельный бокс полигона.

    Округляются границы (не размеры); левый/верхний край обрезается до 0,
    правый/нижний остаются на месте.
    """
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    left = max(0, _round_half_up(min(xs)))
    top = max(0, _round_half_up(min(ys)))
    return BBox(
        x=left,
        y=top,
        width=max(0, _round_half_up(max(xs)) - left),
        height=max(0, _round_half_up(max(ys)) - top),
    )


class LayoutProcessor:
    """Отвечает за структурный анализ (Layout) сырого вывода распознавателя."""

    def __init__(self, image_size: Optional[Tuple[int, int]] = None):
        """
        Args:
            image_size: (width, height) кадра - для регионов без геометрии
        """
        self.image_size = image_size

    def process(self, records: List[Dict[str, Any]]) -> RecognitionResult:
        """
        Преобразует сырые записи в RecognitionResult.

        full_text - конкатенация текстов в порядке движка (без разделителя).
        """
        regions = self._parse_records(records)
        full_text = "".join(r.text for r in regions)
        return RecognitionResult(regions=self._sort_by_position(regions), full_text=full_text)

    def _parse_records(self, records: List[Dict[str, Any]]) -> List[DetectedRegion]:
        result = []
        for record in records:
            text = (record.get("text") or "").strip()
            if not text:
                continue

            bbox = self._parse_geometry(record)
            if bbox is None:
                logger.debug(f"[LayoutProcessor] Нет геометрии для '{text}', пропускаю")
                continue

            result.append(DetectedRegion(
                text=text,
                confidence=record.get("confidence", 0.0) or 0.0,
                bbox=bbox,
            ))
        return result

    def _parse_geometry(self, record: Dict[str, Any]) -> Optional[BBox]:
        if record.get("bbox"):
            return BBox(**record["bbox"])

        box = record.get("box")
        if box and len(box) == 4:
            return polygon_to_bbox(box)

        if self.image_size is not None:
            width, height = self.image_size
            return BBox(x=0, y=0, width=width, height=height)
        return None

    def _sort_by_position(self, regions: List[DetectedRegion]) -> List[DetectedRegion]:
        """Сортирует регионы по позиции: сверху вниз, слева направо."""
        return sorted(regions, key=lambda r: (r.bbox.y, r.bbox.x))
