import pytest

from yomeru.domain.contracts import BinarizationOptions, FilterParams
from yomeru.presets import PipelineParams, PresetLoader, PresetNotFoundError, load_preset


@pytest.fixture
def loader():
    """Fixture для PresetLoader (config/presets.yaml)."""
    return PresetLoader()


def test_builtin_presets_available(loader):
    assert loader.available() == ["default", "dim_light", "high_contrast", "reflective"]


def test_default_preset_values(loader):
    params = loader.load("default")

    assert params.name == "default"
    assert params.adaptive_block_size == 21
    assert params.adaptive_c == 10
    assert params.blur is True
    assert params.min_confidence == 60
    assert params.min_region_area == 300
    assert params.max_aspect_ratio == 30
    assert params.require_japanese is True
    assert params.min_characters == 2


def test_all_presets_valid(loader):
    """Тест: нечётное окно, уверенность в [0, 100], площадь > 0."""
    for name, params in loader.load_all().items():
        assert params.adaptive_block_size % 2 == 1, name
        assert 0 <= params.min_confidence <= 100, name
        assert params.min_region_area > 0, name


def test_high_contrast_disables_blur():
    assert load_preset("high_contrast").blur is False


def test_dim_light_enables_auto():
    assert load_preset("dim_light").auto is True


def test_unknown_preset(loader):
    with pytest.raises(PresetNotFoundError) as exc_info:
        loader.load("underwater")

    assert "underwater" in str(exc_info.value)
    assert "reflective" in str(exc_info.value)


def test_invalid_preset_file(tmp_path):
    """Тест: чётное окно в YAML → ValueError с ошибками Pydantic."""
    presets_file = tmp_path / "presets.yaml"
    presets_file.write_text("broken:\n  adaptive_block_size: 20\n", encoding="utf-8")

    with pytest.raises(ValueError, match="broken"):
        PresetLoader(presets_file).load("broken")


def test_unknown_key_rejected(tmp_path):
    presets_file = tmp_path / "presets.yaml"
    presets_file.write_text("typo:\n  adaptve_c: 5\n", encoding="utf-8")

    with pytest.raises(ValueError):
        PresetLoader(presets_file).load("typo")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        PresetLoader(tmp_path / "nope.yaml").load("default")


def test_empty_preset_uses_defaults(tmp_path):
    presets_file = tmp_path / "presets.yaml"
    presets_file.write_text("plain:\n", encoding="utf-8")

    params = PresetLoader(presets_file).load("plain")

    assert params.adaptive_block_size == 21
    assert params.min_confidence == 60


def test_conversion_to_options():
    params = PipelineParams(adaptive_block_size=31, adaptive_c=15, blur=False, auto=True)

    options = params.to_binarization_options()

    assert isinstance(options, BinarizationOptions)
    assert options.adaptive_block_size == 31
    assert options.adaptive_c == 15
    assert options.blur is False
    assert options.auto is True


def test_conversion_to_filter_params_with_unit_scale():
    params = PipelineParams(min_confidence=60, min_region_area=500, require_japanese=False, min_characters=3)

    filter_params = params.to_filter_params(confidence_scale=0.01)

    assert isinstance(filter_params, FilterParams)
    assert filter_params.min_confidence == pytest.approx(0.6)
    assert filter_params.min_area == 500
    assert filter_params.require_japanese is False
    assert filter_params.min_characters == 3
