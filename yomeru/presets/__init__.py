"""Пресеты сканирования (YAML + Pydantic)."""

from .preset_config import PipelineParams
from .preset_loader import PresetLoader, PresetNotFoundError, load_preset

__all__ = ["PipelineParams", "PresetLoader", "PresetNotFoundError", "load_preset"]
