"""
Yomeru: нормализация кадра и консолидация регионов для распознавания
японского текста с камеры.

Основные части:
- pre_ocr: бинаризация кадра (analyze, binarize)
- post_ocr: фильтры и слияние регионов (filter_regions, merge_regions)
- application: оркестратор сканирования (ScanPipeline)
"""

from .post_ocr import filter_regions, merge_regions
from .pre_ocr import analyze, binarize

__version__ = "0.1.0"

__all__ = ["analyze", "binarize", "filter_regions", "merge_regions"]
