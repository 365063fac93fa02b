"""
Фабрика для создания компонентов сканирования.

Собирает пайплайн бинаризации, цепочку фильтров и оркестратор
из пресета (config/presets.yaml) или явных параметров.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from config.settings import DEFAULT_PRESET
from yomeru.domain.contracts import BinarizationOptions, FilterParams
from yomeru.domain.interfaces import ILookupProvider, IRecognizer
from yomeru.post_ocr.consolidation import RegionFilterChain
from yomeru.post_ocr.content_filter import ContentPredicate
from yomeru.pre_ocr.pipeline import BinarizationPipeline
from yomeru.presets import PipelineParams, PresetLoader
from .scan_pipeline import ScanPipeline


class ScanComponentFactory:
    """
    Фабрика для создания компонентов сканирования.

    Ядро отвечает за:
    - Нормализацию кадра (бинаризация)
    - Консолидацию регионов распознавателя
    Распознаватель и словарь передаются снаружи.
    """

    @staticmethod
    def load_params(preset_name: str = DEFAULT_PRESET, presets_file: Optional[Path] = None) -> PipelineParams:
        logger.debug(f"[ScanFactory] Загрузка пресета '{preset_name}'")
        return PresetLoader(presets_file).load(preset_name)

    @staticmethod
    def create_binarization_pipeline() -> BinarizationPipeline:
        logger.debug("[ScanFactory] Создание пайплайна бинаризации")
        return BinarizationPipeline()

    @staticmethod
    def create_filter_chain(
        params: Optional[FilterParams] = None,
        content_predicate: Optional[ContentPredicate] = None,
    ) -> RegionFilterChain:
        logger.debug("[ScanFactory] Создание цепочки фильтров")
        return RegionFilterChain(params, content_predicate)

    @staticmethod
    def create_scan_pipeline(
        recognizer: IRecognizer,
        lookup_provider: Optional[ILookupProvider] = None,
        preset_name: Optional[str] = None,
        confidence_scale: float = 1.0,
        binarization_options: Optional[BinarizationOptions] = None,
        filter_params: Optional[FilterParams] = None,
        content_predicate: Optional[ContentPredicate] = None,
        presets_file: Optional[Path] = None,
    ) -> ScanPipeline:
        """
        Создаёт оркестратор.

        Явные binarization_options / filter_params имеют приоритет над пресетом.

        Args:
            preset_name: имя пресета (None - только явные параметры или значения по умолчанию)
            confidence_scale: 0.01 для распознавателей со шкалой уверенности 0-1
        """
        if preset_name is not None:
            params = ScanComponentFactory.load_params(preset_name, presets_file)
            binarization_options = binarization_options or params.to_binarization_options()
            filter_params = filter_params or params.to_filter_params(confidence_scale)
            logger.info(f"[ScanFactory] Пресет '{preset_name}' применён")

        return ScanPipeline(
            recognizer=recognizer,
            lookup_provider=lookup_provider,
            binarization_options=binarization_options,
            filter_params=filter_params,
            content_predicate=content_predicate,
            binarizer=ScanComponentFactory.create_binarization_pipeline(),
        )
