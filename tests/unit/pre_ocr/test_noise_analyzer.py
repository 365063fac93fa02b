import numpy as np
import pytest

from yomeru.domain.contracts import NoiseProfile, RasterImage
from yomeru.pre_ocr import analyze
from yomeru.pre_ocr.s2_analyzer import NoiseAnalyzerStage, estimate_noise_level, recommend_upscale


@pytest.fixture
def analyzer():
    """Fixture для NoiseAnalyzerStage."""
    return NoiseAnalyzerStage()


def salt_and_pepper(width, height, density, seed=42):
    """Серый фон 128 + доля density пикселей 0/255."""
    rng = np.random.default_rng(seed)
    gray = np.full((height, width), 128, dtype=np.uint8)
    mask = rng.random((height, width)) < density
    gray[mask] = rng.choice([0, 255], size=int(mask.sum())).astype(np.uint8)
    return gray


def test_uniform_image_has_zero_noise(analyzer):
    """Тест: однотонное изображение → noise_level == 0, не шумное."""
    gray = np.full((120, 120), 200, dtype=np.uint8)

    profile = analyzer.analyze(gray)

    assert isinstance(profile, NoiseProfile)
    assert profile.noise_level == 0
    assert profile.is_noisy is False
    assert profile.recommended_median is False


def test_salt_and_pepper_is_noisy(analyzer):
    """Тест: 10% salt-and-pepper → noise_level > 0.05."""
    gray = salt_and_pepper(200, 200, 0.10)

    profile = analyzer.analyze(gray)

    assert profile.noise_level > 0.05
    assert profile.is_noisy is True
    assert profile.recommended_median is True
    assert profile.recommended_despeckle is True


def test_light_noise_below_threshold(analyzer):
    gray = salt_and_pepper(200, 200, 0.01)

    profile = analyzer.analyze(gray)

    assert 0 < profile.noise_level < 0.05
    assert profile.is_noisy is False


def test_no_interior_samples_means_zero_noise():
    """Тест: изображения меньше 3x3 не имеют внутренней выборки."""
    assert estimate_noise_level(np.zeros((2, 2), dtype=np.uint8)) == 0.0
    assert estimate_noise_level(np.zeros((1, 50), dtype=np.uint8)) == 0.0


@pytest.mark.parametrize("width,height,expected", [
    (400, 400, 1),
    (1920, 1080, 1),
    (300, 800, 2),
    (150, 150, 3),
    (100, 100, 4),
    (50, 50, 4),
    (1, 1, 4),
])
def test_recommended_upscale(width, height, expected):
    """Тест: min(ceil(400 / короткая сторона), 4), 1 если сторона >= 400."""
    assert recommend_upscale(width, height) == expected


def test_small_clean_image_recommends_despeckle(analyzer):
    """Тест: upscale > 1 → despeckle рекомендуется даже без шума."""
    profile = analyzer.analyze(np.full((100, 100), 50, dtype=np.uint8))

    assert profile.recommended_upscale == 4
    assert profile.recommended_despeckle is True
    assert profile.recommended_median is False


def test_large_clean_image_needs_nothing(analyzer):
    profile = analyzer.analyze(np.full((400, 500), 50, dtype=np.uint8))

    assert profile.recommended_upscale == 1
    assert profile.recommended_despeckle is False


def test_analyze_accepts_raster_image():
    """Тест: публичный analyze() принимает RGBA кадр."""
    frame = RasterImage.filled(64, 48, (10, 20, 30, 255))

    profile = analyze(frame)

    assert profile.noise_level == 0
    assert profile.recommended_upscale == 4


def test_analyze_does_not_modify_input():
    pixels = np.dstack([salt_and_pepper(40, 40, 0.2)] * 3 + [np.full((40, 40), 255, dtype=np.uint8)])
    before = pixels.copy()

    analyze(pixels)

    assert np.array_equal(pixels, before)
