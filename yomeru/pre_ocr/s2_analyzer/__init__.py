"""Stage 2: Analyzer."""

from .stage import NoiseAnalyzerStage, estimate_noise_level, recommend_upscale

__all__ = ["NoiseAnalyzerStage", "estimate_noise_level", "recommend_upscale"]
