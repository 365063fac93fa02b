"""Stage 4: Executor."""

from .stage import BinarizationExecutorStage

__all__ = ["BinarizationExecutorStage"]
