"""
Domain: Интерфейсы и абстракции.

Определяет контракты для внешних коллабораторов (распознаватель, словарь)
и для стадий нормализации кадра.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np
import numpy.typing as npt

from contracts.recognition_dto import LookupEntry, RecognitionResult
from yomeru.domain.contracts import BinarizationOptions, NoiseProfile, RasterImage


class IRecognizer(ABC):
    """
    Интерфейс движка распознавания текста (внешний).

    initialize() может быть дорогим (загрузка модели) и может упасть.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Загружает модель. Повторный вызов должен быть no-op."""
        pass

    @abstractmethod
    def recognize(self, image: RasterImage) -> RecognitionResult:
        """
        Распознаёт текст на кадре.

        Returns:
            RecognitionResult с регионами в нативной шкале уверенности движка;
            боксы в пикселях переданного image (оркестратор сам пересчитывает
            их в координаты исходного кадра)
        """
        pass


class ILookupProvider(ABC):
    """Интерфейс поиска слов (сегментация + словарь), внешний."""

    @abstractmethod
    def initialize(self) -> None:
        pass

    @abstractmethod
    def lookup(self, text: str) -> List[LookupEntry]:
        """Возвращает словарные статьи для текста региона."""
        pass


class IPreprocessingStage(ABC):
    """Интерфейс для отдельного stage нормализации кадра."""
    pass


class IGrayscaleStage(IPreprocessingStage):
    """Stage 1: RGBA → Grayscale (luminance)."""

    @abstractmethod
    def process(self, image: RasterImage) -> npt.NDArray[np.uint8]:
        pass


class IAnalyzerStage(IPreprocessingStage):
    """Stage 2: Analyzer (шум + масштаб)."""

    @abstractmethod
    def analyze(self, gray: npt.NDArray[np.uint8]) -> NoiseProfile:
        """
        Анализирует одноканальное изображение.

        Возвращает NoiseProfile (типизированный контракт) с валидацией.
        """
        pass


class IResolverStage(IPreprocessingStage):
    """Stage 3: Resolver (явные опции + рекомендации анализатора)."""

    @abstractmethod
    def resolve(self, options: BinarizationOptions, profile: NoiseProfile) -> BinarizationOptions:
        pass


class IExecutorStage(IPreprocessingStage):
    """Stage 4: Executor (применение фильтров)."""

    @abstractmethod
    def execute(
        self,
        gray: npt.NDArray[np.uint8],
        options: BinarizationOptions,
        applied: Optional[List[str]] = None
    ) -> npt.NDArray[np.uint8]:
        """
        Применяет фильтры согласно опциям.

        Args:
            gray: np.ndarray (H, W) uint8
            options: BinarizationOptions (уже разрешённые)
            applied: если передан, сюда дописываются имена применённых шагов

        Returns:
            np.ndarray (H', W') uint8 со значениями {0, 255}
        """
        pass
