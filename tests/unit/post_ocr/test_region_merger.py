import pytest

from contracts.recognition_dto import BBox, DetectedRegion
from yomeru.domain.contracts import InvalidArgumentError
from yomeru.post_ocr import RegionMerger, merge_regions


def make_region(text, confidence, bbox):
    x, y, width, height = bbox
    return DetectedRegion(text=text, confidence=confidence, bbox=BBox(x=x, y=y, width=width, height=height))


def test_merges_vertically_adjacent_lines():
    """Тест: {10,10,100,20} + {10,32,100,20} → 'a\\nb', бокс {10,10,100,42}."""
    regions = [
        make_region("a", 90, (10, 10, 100, 20)),
        make_region("b", 85, (10, 32, 100, 20)),
    ]

    result = merge_regions(regions)

    assert len(result) == 1
    assert result[0].text == "a\nb"
    assert result[0].bbox == BBox(x=10, y=10, width=100, height=42)
    assert result[0].confidence == 85


def test_distant_lines_stay_separate():
    regions = [
        make_region("遠い一", 90, (10, 10, 100, 20)),
        make_region("遠い二", 85, (10, 200, 100, 20)),
    ]
    assert len(merge_regions(regions)) == 2


def test_same_line_not_merged():
    """Тест: сильное вертикальное перекрытие = та же строка, не сливаем."""
    regions = [
        make_region("左", 90, (0, 10, 100, 30)),
        make_region("右", 90, (50, 12, 100, 30)),
    ]
    assert len(merge_regions(regions)) == 2


def test_no_horizontal_overlap_not_merged():
    regions = [
        make_region("左", 90, (0, 0, 100, 20)),
        make_region("右", 90, (200, 25, 100, 20)),
    ]
    assert len(merge_regions(regions)) == 2


def test_horizontal_overlap_ratio_uses_narrower_box():
    """Тест: узкий бокс целиком под широким → перекрытие 100% узкого."""
    regions = [
        make_region("見出し", 90, (0, 0, 300, 30)),
        make_region("小", 80, (100, 35, 40, 20)),
    ]

    result = merge_regions(regions)

    assert len(result) == 1
    assert result[0].bbox == BBox(x=0, y=0, width=300, height=55)


def test_absorbs_several_lines():
    regions = [
        make_region("三", 70, (0, 60, 100, 20)),
        make_region("一", 90, (0, 0, 100, 20)),
        make_region("二", 80, (0, 30, 100, 20)),
    ]

    result = merge_regions(regions)

    assert len(result) == 1
    assert result[0].text == "一\n二\n三"
    assert result[0].confidence == 70
    assert result[0].bbox == BBox(x=0, y=0, width=100, height=80)


def test_gap_boundary_inclusive():
    regions = [
        make_region("上", 90, (0, 0, 100, 20)),
        make_region("下", 90, (0, 30, 100, 20)),
    ]
    assert len(merge_regions(regions, max_gap=10)) == 1
    assert len(merge_regions(regions, max_gap=9)) == 2


def test_inputs_not_mutated():
    regions = [
        make_region("a", 90, (10, 10, 100, 20)),
        make_region("b", 85, (10, 32, 100, 20)),
    ]
    snapshot = [r.model_copy() for r in regions]

    merge_regions(regions)

    assert regions == snapshot


@pytest.mark.parametrize("count", [0, 1])
def test_trivial_inputs(count):
    regions = [make_region("一", 90, (0, 0, 100, 20))][:count]
    assert merge_regions(regions) == regions


def test_single_pass_by_default_and_fixpoint_optional():
    """
    Тест: второй проход находит слияние, ставшее возможным после первого.

    A и C сливаются (A поглощает C), B к этому моменту уже пропущен.
    На втором проходе AC перекрывает B по горизонтали.
    """
    regions = [
        make_region("A", 90, (0, 0, 100, 20)),
        make_region("B", 90, (150, 25, 100, 20)),
        make_region("C", 90, (0, 30, 250, 20)),
    ]

    assert len(merge_regions(regions)) == 2
    merged = merge_regions(regions, max_passes=2)
    assert len(merged) == 1
    assert merged[0].bbox == BBox(x=0, y=0, width=250, height=50)


@pytest.mark.parametrize("kwargs", [
    {"max_gap": -1},
    {"min_horizontal_overlap_ratio": 1.5},
    {"max_passes": 0},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(InvalidArgumentError):
        RegionMerger(**kwargs)
