"""Stage 3: Resolver."""

from .stage import OptionsResolverStage

__all__ = ["OptionsResolverStage"]
