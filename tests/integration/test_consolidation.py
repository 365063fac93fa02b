"""
Интеграционные тесты: бинаризация → (тестовый распознаватель) → консолидация.

Проверяем связку модулей целиком, без реального OCR движка.
"""

import numpy as np
import pytest

from contracts.recognition_dto import BBox, DetectedRegion
from yomeru import analyze, binarize, filter_regions
from yomeru.domain.contracts import FilterParams, RasterImage
from yomeru.post_ocr import LayoutProcessor, is_junk


def region(text, confidence, x, y, w, h):
    return DetectedRegion(text=text, confidence=confidence, bbox=BBox(x=x, y=y, width=w, height=h))


def test_keeps_only_confident_meaningful_region():
    regions = [
        region("OK text", 0.9, 0, 0, 200, 40),
        region("noise", 0.2, 0, 100, 200, 40),
        region("", 0.9, 0, 200, 200, 40),
    ]
    params = FilterParams(min_confidence=0.6, require_japanese=False)

    result = filter_regions(regions, params, content_predicate=lambda t: not is_junk(t))

    assert len(result) == 1
    assert result[0].text == "OK text"
    assert result[0].bbox == regions[0].bbox


def test_signboard_consolidation():
    """Тест: табличка с часами работы → один логический блок."""
    regions = [
        region("営業時間", 0.9, 0, 0, 300, 40),
        region("10:00〜22:00", 0.9, 0, 45, 300, 40),   # мусор: цифры и пунктуация
        region("年中無休", 0.9, 0, 50, 300, 40),         # следующая строка, зазор 10
        region("営業時", 0.7, 10, 5, 100, 30),           # дубликат внутри первой строки
        region("EXIT", 0.95, 400, 300, 100, 40),         # не японский текст
        region("ラーメン", 0.3, 0, 400, 300, 40),         # низкая уверенность
        region("駅", 0.9, 0, 500, 300, 40),              # слишком короткий
    ]

    result = filter_regions(regions, FilterParams(min_confidence=0.6))

    assert len(result) == 1
    block = result[0]
    assert block.text == "営業時間\n年中無休"
    assert block.confidence == pytest.approx(0.9)
    assert block.bbox == BBox(x=0, y=0, width=300, height=90)


def test_inputs_not_mutated():
    regions = [
        region("営業時間", 0.9, 0, 0, 300, 40),
        region("年中無休", 0.9, 0, 50, 300, 40),
    ]
    snapshot = [r.model_copy() for r in regions]

    filter_regions(regions, FilterParams(min_confidence=0.6))

    assert regions == snapshot


def test_strip_non_japanese_in_chain():
    regions = [region("Exit 非常口 Emergency", 0.9, 0, 0, 300, 40)]
    params = FilterParams(min_confidence=0.6, strip_non_japanese=True)

    result = filter_regions(regions, params)

    assert [r.text for r in result] == ["非常口"]


def test_binarize_then_consolidate_raw_records():
    """Тест: кадр бинаризуется, сырые записи движка приводятся и фильтруются."""
    pixels = np.full((120, 320, 4), 200, dtype=np.uint8)
    pixels[..., 3] = 255
    pixels[30:60, 20:300, :3] = 40
    frame = RasterImage(pixels)

    profile = analyze(frame)
    binary = binarize(frame, {"auto": True})

    assert profile.recommended_upscale == 4
    assert binary.size == (1280, 480)
    assert set(np.unique(binary.pixels[..., 0])) <= {0, 255}

    records = [
        {"text": " 出口 ", "confidence": 0.92, "box": [[20, 30], [300, 30], [300, 60], [20, 60]]},
        {"text": "///", "confidence": 0.99, "bbox": {"x": 0, "y": 80, "width": 100, "height": 20}},
        {"text": "", "confidence": 0.99},
    ]
    ocr = LayoutProcessor(image_size=binary.size).process(records)
    result = filter_regions(ocr.regions, FilterParams(min_confidence=0.6))

    assert [r.text for r in result] == ["出口"]
    assert result[0].bbox == BBox(x=20, y=30, width=280, height=30)
