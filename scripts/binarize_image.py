#!/usr/bin/env python3
"""
Бинаризация изображения с диска (для подбора пресетов и отладки).

Использование:
    python scripts/binarize_image.py photo.jpg
    python scripts/binarize_image.py photo.jpg -o out.png --preset reflective
    python scripts/binarize_image.py photo.jpg --auto --median --despeckle --upscale 2
"""

import argparse
import sys
from pathlib import Path

import cv2
import numpy as np
from loguru import logger
from PIL import Image

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import DEFAULT_PRESET
from yomeru.domain.contracts import InvalidArgumentError, RasterImage
from yomeru.logging_setup import configure_logging
from yomeru.pre_ocr import BinarizationPipeline
from yomeru.presets import PresetLoader, PresetNotFoundError


def load_rgba(path: Path) -> RasterImage:
    """Загружает файл через Pillow и приводит к RGBA."""
    with Image.open(path) as img:
        return RasterImage(np.array(img.convert("RGBA"), dtype=np.uint8))


def main() -> int:
    parser = argparse.ArgumentParser(description="Yomeru: бинаризация кадра")
    parser.add_argument("image", type=Path, help="Путь к изображению")
    parser.add_argument("-o", "--output", type=Path, help="Куда сохранить (по умолчанию <имя>_binary.png)")
    parser.add_argument("--preset", default=DEFAULT_PRESET, help="Имя пресета из config/presets.yaml")
    parser.add_argument("--auto", action="store_true", help="Автонастройка по профилю шума")
    parser.add_argument("--median", action="store_true", help="3x3 медиана")
    parser.add_argument("--despeckle", action="store_true", help="Удаление одиночных точек")
    parser.add_argument("--upscale", type=int, default=1, help="Целочисленное увеличение")
    parser.add_argument("--log-level", default=None, help="Уровень логирования (DEBUG, INFO, ...)")
    args = parser.parse_args()

    configure_logging(args.log_level)

    if not args.image.exists():
        logger.error(f"Файл не найден: {args.image}")
        return 1

    try:
        params = PresetLoader().load(args.preset)
    except PresetNotFoundError as e:
        logger.error(str(e))
        return 1

    # dict валидируется пайплайном (ContractValidationError при ошибке)
    options = {
        **params.to_binarization_options().model_dump(),
        "auto": args.auto or params.auto,
        "median": args.median,
        "despeckle": args.despeckle,
        "upscale": args.upscale,
    }

    pipeline = BinarizationPipeline()
    try:
        frame = load_rgba(args.image)
        profile = pipeline.analyze(frame)
        result = pipeline.process(frame, options)
    except InvalidArgumentError as e:
        logger.error(f"Невалидные параметры: {e}")
        return 1

    logger.info(
        f"Профиль шума: noise={profile.noise_level:.3f}, noisy={profile.is_noisy}, "
        f"upscale={profile.recommended_upscale}"
    )
    logger.info(f"Применено: {', '.join(result.applied)}")

    output = args.output or args.image.with_name(f"{args.image.stem}_binary.png")
    cv2.imwrite(str(output), result.image.pixels[:, :, 0])
    logger.info(f"✅ Сохранено: {output} ({result.image.width}x{result.image.height})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
