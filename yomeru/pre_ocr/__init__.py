"""
Pre-OCR: нормализация кадра перед распознаванием.

Публичное API:
- analyze(image) -> NoiseProfile
- binarize(image, options) -> RasterImage
- BinarizationPipeline (stage-уровень, с метаданными)
"""

from .pipeline import BinarizationPipeline, BinarizationResult, analyze, binarize

__all__ = [
    "BinarizationPipeline",
    "BinarizationResult",
    "analyze",
    "binarize",
]
