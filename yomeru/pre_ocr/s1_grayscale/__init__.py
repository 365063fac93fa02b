"""Stage 1: Grayscale."""

from .stage import GrayscaleStage

__all__ = ["GrayscaleStage"]
