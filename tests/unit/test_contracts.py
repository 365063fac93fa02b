"""
Unit тесты контрактов.

Проверяют:
1. RasterImage отклоняет невалидные буферы
2. BBox: неотрицательные конечные координаты, пересечение, объединение
3. Модели неизменяемы
4. ContractValidationError - это InvalidArgumentError (ValueError)
"""

import math

import numpy as np
import pytest
from pydantic import ValidationError

from contracts.recognition_dto import BBox, DetectedRegion, RecognitionResult
from yomeru.domain.contracts import (
    INITIAL_STATE,
    ContractValidationError,
    FilterParams,
    InvalidArgumentError,
    NoiseProfile,
    PipelinePhase,
    RasterImage,
)


class TestRasterImage:
    """Тесты RasterImage."""

    def test_dimensions(self):
        image = RasterImage(np.zeros((20, 30, 4), dtype=np.uint8))
        assert image.width == 30
        assert image.height == 20
        assert image.size == (30, 20)

    def test_filled(self):
        image = RasterImage.filled(3, 2, (1, 2, 3, 4))
        assert image.pixels.shape == (2, 3, 4)
        assert image.pixels[1, 2].tolist() == [1, 2, 3, 4]

    def test_from_gray(self):
        image = RasterImage.from_gray(np.array([[0, 255]], dtype=np.uint8))
        assert image.pixels.tolist() == [[[0, 0, 0, 255], [255, 255, 255, 255]]]

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
    def test_filled_rejects_bad_size(self, width, height):
        with pytest.raises(InvalidArgumentError):
            RasterImage.filled(width, height)

    def test_rejects_non_array(self):
        with pytest.raises(InvalidArgumentError):
            RasterImage([[1, 2, 3, 4]])


class TestBBox:
    """Тесты BBox."""

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            BBox(x=-1, y=0, width=10, height=10)

    @pytest.mark.parametrize("value", [math.nan, math.inf])
    def test_rejects_special_floats(self, value):
        with pytest.raises(ValidationError):
            BBox(x=0, y=0, width=value, height=10)

    def test_geometry(self):
        bbox = BBox(x=10, y=20, width=30, height=40)
        assert bbox.right == 40
        assert bbox.bottom == 60
        assert bbox.area == 1200

    def test_intersection(self):
        a = BBox(x=0, y=0, width=10, height=10)
        b = BBox(x=5, y=5, width=10, height=10)
        assert a.intersection_area(b) == 25
        assert a.intersection_area(BBox(x=20, y=20, width=5, height=5)) == 0

    def test_union_is_minimal_cover(self):
        a = BBox(x=10, y=10, width=100, height=20)
        b = BBox(x=5, y=32, width=50, height=20)
        assert a.union(b) == BBox(x=5, y=10, width=105, height=42)

    def test_frozen(self):
        bbox = BBox(x=0, y=0, width=1, height=1)
        with pytest.raises(ValidationError):
            bbox.x = 5


class TestDetectedRegion:
    """Тесты DetectedRegion."""

    def test_confidence_bounds(self):
        bbox = BBox(x=0, y=0, width=1, height=1)
        with pytest.raises(ValidationError):
            DetectedRegion(text="a", confidence=101, bbox=bbox)
        with pytest.raises(ValidationError):
            DetectedRegion(text="a", confidence=math.nan, bbox=bbox)

    def test_recognition_result_defaults(self):
        result = RecognitionResult()
        assert result.regions == []
        assert result.full_text == ""


def test_noise_profile_bounds():
    with pytest.raises(ValidationError):
        NoiseProfile(
            noise_level=1.3,
            is_noisy=True,
            recommended_upscale=1,
            recommended_median=True,
            recommended_despeckle=True,
        )
    with pytest.raises(ValidationError):
        NoiseProfile(
            noise_level=0.0,
            is_noisy=False,
            recommended_upscale=5,
            recommended_median=False,
            recommended_despeckle=False,
        )


def test_filter_params_aspect_range():
    with pytest.raises(ValidationError):
        FilterParams(min_aspect_ratio=10, max_aspect_ratio=5)


def test_contract_validation_error_message():
    error = ContractValidationError(
        "Stage 2: Analyzer", "NoiseProfile", [{"loc": ("noise_level",), "type": "less_than_equal", "msg": "too big"}]
    )

    assert isinstance(error, InvalidArgumentError)
    assert isinstance(error, ValueError)
    assert "Stage 2: Analyzer" in str(error)
    assert "noise_level (less_than_equal): too big" in str(error)


def test_initial_state():
    assert INITIAL_STATE.phase == PipelinePhase.IDLE
    assert INITIAL_STATE.ocr_result is None
    assert INITIAL_STATE.translations is None
    assert INITIAL_STATE.error is None
    assert INITIAL_STATE.image_size is None
