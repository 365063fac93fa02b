"""
Stage 3: Resolver (слоистая конфигурация).

Явные опции вызывающего кода + рекомендации анализатора.

Правило: pointwise max/OR. Анализатор может только ПОДНЯТЬ
median/despeckle/upscale, явно включённое никогда не выключается.
Остальные поля (block size, C, blur) берутся из явных опций как есть.
"""

from loguru import logger

from yomeru.domain.contracts import BinarizationOptions, NoiseProfile
from yomeru.domain.interfaces import IResolverStage


class OptionsResolverStage(IResolverStage):
    """Stage 3: Resolver."""

    def __init__(self) -> None:
        logger.debug("[Stage 3: Resolver] Инициализирован")

    def resolve(self, options: BinarizationOptions, profile: NoiseProfile) -> BinarizationOptions:
        if not options.auto:
            return options

        resolved = options.model_copy(update={
            "median": options.median or profile.recommended_median,
            "despeckle": options.despeckle or profile.recommended_despeckle,
            "upscale": max(options.upscale, profile.recommended_upscale),
        })

        if resolved != options:
            logger.info(
                f"[Stage 3] Автонастройка: median={resolved.median}, "
                f"despeckle={resolved.despeckle}, upscale={resolved.upscale}"
            )
        return resolved
