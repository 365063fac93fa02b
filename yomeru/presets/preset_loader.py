"""
Загрузчик пресетов сканирования из YAML.

Формат файла (config/presets.yaml):
  <preset_name>:
    adaptive_block_size: 21
    adaptive_c: 10
    ...

Использует Pydantic для валидации каждого пресета.
"""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from config.settings import DEFAULT_PRESET, PRESETS_FILE
from .preset_config import PipelineParams


class PresetNotFoundError(KeyError):
    """Запрошен пресет, которого нет в файле."""

    def __init__(self, name: str, available: List[str]):
        self.name = name
        self.available = available
        super().__init__(f"Пресет '{name}' не найден. Доступные пресеты: {available}")


class PresetLoader:
    """Загружает пресеты из YAML файла с валидацией через Pydantic."""

    def __init__(self, presets_file: Optional[Path] = None):
        """
        Args:
            presets_file: Путь к YAML (по умолчанию config/presets.yaml)
        """
        self.presets_file = Path(presets_file) if presets_file is not None else PRESETS_FILE
        self._raw: Optional[Dict[str, dict]] = None

    def _load_raw(self) -> Dict[str, dict]:
        if self._raw is None:
            if not self.presets_file.exists():
                raise FileNotFoundError(f"Файл пресетов не найден: {self.presets_file}")

            logger.debug(f"[PresetLoader] Загрузка пресетов: {self.presets_file}")
            with open(self.presets_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            if not isinstance(data, dict):
                raise ValueError(f"Файл пресетов должен содержать словарь, получено: {type(data).__name__}")
            self._raw = data
        return self._raw

    def available(self) -> List[str]:
        return sorted(self._load_raw().keys())

    def load(self, name: str = DEFAULT_PRESET) -> PipelineParams:
        """
        Загружает пресет по имени.

        Raises:
            PresetNotFoundError: пресета нет в файле
            ValueError: пресет невалиден (ошибки Pydantic в сообщении)
        """
        raw = self._load_raw()
        if name not in raw:
            raise PresetNotFoundError(name, self.available())

        try:
            return PipelineParams(name=name, **(raw[name] or {}))
        except ValidationError as e:
            logger.error(f"[PresetLoader] Ошибка валидации пресета '{name}'")
            logger.error(f"[PresetLoader] Ошибки Pydantic:\n{e}")
            raise ValueError(
                f"Пресет '{name}' невалиден.\n"
                f"Пожалуйста, исправьте ошибки в {self.presets_file}:\n{e}"
            ) from e

    def load_all(self) -> Dict[str, PipelineParams]:
        return {name: self.load(name) for name in self.available()}


def load_preset(name: str = DEFAULT_PRESET, presets_file: Optional[Path] = None) -> PipelineParams:
    """Удобная обёртка над PresetLoader(presets_file).load(name)."""
    return PresetLoader(presets_file).load(name)
