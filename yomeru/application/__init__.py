"""Application: оркестратор сканирования и фабрика компонентов."""

from .factory import ScanComponentFactory
from .scan_pipeline import ScanPipeline

__all__ = ["ScanComponentFactory", "ScanPipeline"]
