"""
Post-OCR: консолидация регионов распознавателя.

Публичное API:
- filter_regions(regions, params) - полная цепочка
- filter_by_confidence / filter_by_content / filter_by_size / filter_overlapping
- merge_regions(regions, max_gap, min_horizontal_overlap_ratio)
- strip_non_japanese(regions)
"""

from .consolidation import RegionFilterChain, filter_regions
from .content_filter import JapaneseContentPredicate, has_japanese_content, is_junk
from .layout_processor import LayoutProcessor
from .region_filters import (
    filter_by_confidence,
    filter_by_content,
    filter_by_size,
    filter_overlapping,
    overlap_ratio,
    strip_non_japanese,
)
from .region_merger import RegionMerger, merge_regions

__all__ = [
    "RegionFilterChain",
    "filter_regions",
    "JapaneseContentPredicate",
    "has_japanese_content",
    "is_junk",
    "LayoutProcessor",
    "filter_by_confidence",
    "filter_by_content",
    "filter_by_size",
    "filter_overlapping",
    "overlap_ratio",
    "strip_non_japanese",
    "RegionMerger",
    "merge_regions",
]
