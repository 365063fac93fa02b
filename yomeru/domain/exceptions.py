"""
Исключения оркестратора сканирования.

Ядро (бинаризация, фильтры, слияние) бросает только InvalidArgumentError
из yomeru.domain.contracts. Ошибки ниже возникают на границе с внешними
коллабораторами и превращаются оркестратором в состояние "error".
"""

from typing import Optional


class ScanError(Exception):
    """Базовое исключение для ошибок сканирования."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Scan Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class RecognizerLoadError(ScanError):
    """Модель распознавания не загрузилась."""
    pass


class RecognitionError(ScanError):
    """Распознавание кадра упало."""
    pass


class LookupLoadError(ScanError):
    """Словарь / модель перевода не загрузились."""
    pass


class ScanCancelledError(ScanError):
    """Сканирование отменено вызывающим кодом."""
    pass


class ScanTimeoutError(ScanError):
    """Сканирование не уложилось в дедлайн."""
    pass
