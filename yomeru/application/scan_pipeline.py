"""
Оркестратор сканирования одного кадра.

Фазы:
  idle → preprocessing → ocr → segmenting → translating → done
  (или error на любом шаге)

Каждая смена фазы отдаётся наблюдателю (on_state) как НОВЫЙ неизменяемый
снимок PipelineState. Ошибки внешних коллабораторов (распознаватель, словарь)
не пробрасываются наружу, а превращаются в состояние error с сообщением
для пользователя. Результат распознавания сохраняется в состоянии error,
если он уже был получен.

Ошибка поиска для ОДНОГО региона не роняет скан: для него возвращается [].


Распознаватель получает бинаризованный (возможно увеличенный) кадр; его боксы
пересчитываются в координаты исходного кадра ДО фильтров и слияния.
"""

import threading
import time
from typing import Callable, List, Optional

from loguru import logger

from config.settings import SCAN_TIMEOUT_SECONDS
from contracts.recognition_dto import BBox, DetectedRegion, LookupEntry, RecognitionResult
from yomeru.domain.contracts import (
    INITIAL_STATE,
    BinarizationOptions,
    FilterParams,
    PipelinePhase,
    PipelineState,
    RasterImage,
)
from yomeru.domain.exceptions import (
    LookupLoadError,
    RecognitionError,
    RecognizerLoadError,
    ScanCancelledError,
    ScanError,
    ScanTimeoutError,
)
from yomeru.domain.interfaces import ILookupProvider, IRecognizer
from yomeru.post_ocr.consolidation import RegionFilterChain
from yomeru.post_ocr.content_filter import ContentPredicate
from yomeru.pre_ocr.pipeline import BinarizationPipeline

StateListener = Callable[[PipelineState], None]


def _elapsed_ms(start: float) -> float:
    return (time.time() - start) * 1000


def _to_source_coordinates(regions: List[DetectedRegion], upscale: int) -> List[DetectedRegion]:
    """Боксы распознавателя (в увеличенном кадре) → координаты исходного кадра."""
    if upscale == 1:
        return list(regions)
    return [
        DetectedRegion(
            text=r.text,
            confidence=r.confidence,
            bbox=BBox(
                x=r.bbox.x / upscale,
                y=r.bbox.y / upscale,
                width=r.bbox.width / upscale,
                height=r.bbox.height / upscale,
            ),
        )
        for r in regions
    ]


class ScanPipeline:
    """
    Оркестратор: Binarization → Recognizer → Filter Chain → Lookup.

    Синхронный. Для дедлайна используйте run_with_timeout().
    """

    def __init__(
        self,
        recognizer: IRecognizer,
        lookup_provider: Optional[ILookupProvider] = None,
        binarization_options: Optional[BinarizationOptions] = None,
        filter_params: Optional[FilterParams] = None,
        content_predicate: Optional[ContentPredicate] = None,
        binarizer: Optional[BinarizationPipeline] = None,
    ):
        self.recognizer = recognizer
        self.lookup_provider = lookup_provider
        self.binarization_options = binarization_options or BinarizationOptions()
        self.binarizer = binarizer or BinarizationPipeline()
        self.filter_chain = RegionFilterChain(filter_params, content_predicate)
        logger.info("[ScanPipeline] Инициализирован")

    def run(
        self,
        frame: RasterImage,
        on_state: StateListener,
        ocr_only: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineState:
        """
        Прогоняет кадр через все фазы.

        Args:
            frame: исходный RGBA кадр
            on_state: наблюдатель, получает каждый снимок состояния
            ocr_only: пропустить поиск слов (словарь даже не инициализируется)
            cancel_event: если установлен, скан прерывается между фазами

        Returns:
            Финальный снимок (phase done или error)
        """
        if not isinstance(frame, RasterImage):
            frame = RasterImage(frame)

        timings = {"preprocessing": 0.0, "ocr": 0.0, "filtering": 0.0, "translation": 0.0}
        state = INITIAL_STATE.model_copy(update={
            "phase": PipelinePhase.PREPROCESSING,
            "image_size": frame.size,
        })

        def emit(**update) -> PipelineState:
            nonlocal state
            update["timings"] = state.timings.model_copy(update=timings)
            state = state.model_copy(update=update)
            on_state(state)
            return state

        def check_cancelled() -> None:
            if cancel_event is not None and cancel_event.is_set():
                raise ScanCancelledError("Scan cancelled", component="ScanPipeline")

        emit()
        try:
            # Preprocessing
            start = time.time()
            binarization = self.binarizer.process(frame, self.binarization_options)
            timings["preprocessing"] = _elapsed_ms(start)
            check_cancelled()

            # OCR
            emit(phase=PipelinePhase.OCR)
            start = time.time()
            raw_result = self._recognize(binarization.image)
            raw_regions = _to_source_coordinates(raw_result.regions, binarization.options.upscale)
            timings["ocr"] = _elapsed_ms(start)
            check_cancelled()

            start = time.time()
            regions = self.filter_chain.run(raw_regions)
            timings["filtering"] = _elapsed_ms(start)
            ocr_result = RecognitionResult(regions=regions, full_text="".join(r.text for r in regions))
            emit(ocr_result=ocr_result)

            logger.info(f"[ScanPipeline] Регионы: {len(raw_result.regions)} → {len(regions)}")

            if not regions or ocr_only:
                return emit(phase=PipelinePhase.DONE, translations=[])

            # Segmentation + lookup
            emit(phase=PipelinePhase.SEGMENTING)
            self._initialize_lookup()
            check_cancelled()

            emit(phase=PipelinePhase.TRANSLATING)
            start = time.time()
            translations = [self._lookup_region(region.text) for region in regions]
            timings["translation"] = _elapsed_ms(start)
            check_cancelled()

            final = emit(phase=PipelinePhase.DONE, translations=translations)
            logger.info(f"[ScanPipeline] ✅ Готово: {sum(timings.values()):.0f}ms")
            return final

        except ScanError as e:
            logger.error(f"[ScanPipeline] ❌ {e}")
            return emit(phase=PipelinePhase.ERROR, error=e.message)
        except Exception as e:
            logger.exception(f"[ScanPipeline] ❌ Непредвиденная ошибка: {e}")
            return emit(phase=PipelinePhase.ERROR, error=str(e) or "Unexpected error during scan")

    def run_with_timeout(
        self,
        frame: RasterImage,
        on_state: StateListener,
        timeout: float = SCAN_TIMEOUT_SECONDS,
        ocr_only: bool = False,
    ) -> PipelineState:
        """
        Запускает run() в рабочем потоке с дедлайном.

        По истечении дедлайна наблюдатель получает состояние error
        ("Scan timed out..."), рабочий поток получает сигнал отмены,
        а его дальнейшие состояния больше не доставляются.
        """
        cancel_event = threading.Event()
        lock = threading.Lock()
        last_state: List[PipelineState] = [INITIAL_STATE]
        finished: List[PipelineState] = []
        timed_out = False

        def guarded(new_state: PipelineState) -> None:
            with lock:
                if timed_out:
                    return
                last_state[0] = new_state
                on_state(new_state)

        def worker() -> None:
            finished.append(self.run(frame, guarded, ocr_only, cancel_event))

        thread = threading.Thread(target=worker, name="yomeru-scan", daemon=True)
        thread.start()
        thread.join(timeout)

        with lock:
            if finished:
                return finished[0]
            timed_out = True
            cancel_event.set()
            error = ScanTimeoutError(
                "Scan timed out. Try scanning again.", component="ScanPipeline"
            )
            logger.error(f"[ScanPipeline] ❌ {error}")
            state = last_state[0].model_copy(update={"phase": PipelinePhase.ERROR, "error": error.message})
            on_state(state)
            return state

    def _recognize(self, image: RasterImage) -> RecognitionResult:
        try:
            self.recognizer.initialize()
        except Exception as e:
            raise RecognizerLoadError(f"OCR model failed to load: {e}", "Recognizer", e) from e
        try:
            return self.recognizer.recognize(image)
        except Exception as e:
            raise RecognitionError(
                f"Text recognition failed. Try again with better lighting or a closer shot. ({e})",
                "Recognizer",
                e,
            ) from e

    def _initialize_lookup(self) -> None:
        if self.lookup_provider is None:
            raise LookupLoadError("Translation model failed to load: no lookup provider configured", "Lookup")
        try:
            self.lookup_provider.initialize()
        except Exception as e:
            raise LookupLoadError(f"Translation model failed to load: {e}", "Lookup", e) from e

    def _lookup_region(self, text: str) -> List[LookupEntry]:
        try:
            return self.lookup_provider.lookup(text)
        except Exception as e:
            logger.warning(f"[ScanPipeline] Поиск для '{text}' не удался: {e}, возвращаю []")
            return []
