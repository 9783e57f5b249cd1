import pytest

from domain.models import ResizeInstructions
from parsing.errors import ConfigurationError
from planning.widths import (
    filter_sizes,
    get_widths_from_instructions,
    get_widths_from_sizes,
    instructions_to_width,
)


def test_filter_sizes_keeps_widths_saving_enough_pixels():
    assert filter_sizes([1600, 1400, 1200, 1000, 800, 600, 400], 0.8) == [1600, 1400, 1200, 1000, 800, 600, 400]


def test_filter_sizes_compares_against_last_kept():
    assert filter_sizes([950, 1000, 850, 900], 0.8) == [1000, 850]


def test_filter_sizes_without_factor_sorts():
    assert filter_sizes([400, 1600, 800], 0) == [1600, 800, 400]
    assert filter_sizes([400, 1600, 800]) == [1600, 800, 400]
    assert filter_sizes([], 0.8) == []


def test_filter_sizes_custom_calculation():
    assert filter_sizes([100, 90, 75, 50], 0.8, calculate=lambda n: n) == [100, 75, 50]


def test_filter_sizes_dedup_invariant():
    kept = filter_sizes(range(100, 2000, 37), 0.8)
    for a, b in zip(kept, kept[1:]):
        assert (b * b) / (a * a) < 0.8


@pytest.mark.parametrize(
    "resize,aspect,expected",
    [
        (ResizeInstructions(width=400), 1.5, 400),
        (ResizeInstructions(height=400), 1.5, 600),
        (ResizeInstructions(width=800, height=400, fit="cover"), 1.5, 800),
        (ResizeInstructions(width=400, height=400, fit="cover"), 1.5, 600),
        (ResizeInstructions(width=800, height=400, fit="contain"), 1.5, 600),
        (ResizeInstructions(width=400, height=400, fit="contain"), 1.5, 400),
    ],
)
def test_instructions_to_width(resize, aspect, expected):
    assert instructions_to_width(resize, aspect) == expected


def test_widths_from_instructions():
    targets = [ResizeInstructions(width=w) for w in (1200, 500, 400, 500)]
    assert get_widths_from_instructions(targets, 0.8) == [1200, 500, 400]


def test_widths_capped_by_source_width():
    targets = [ResizeInstructions(width=w) for w in (1200, 500, 400)]
    assert get_widths_from_instructions(targets, 0.8, width=800) == [800, 500, 400]


def test_source_width_is_not_added_above_targets():
    targets = [ResizeInstructions(width=w) for w in (600, 400)]
    assert get_widths_from_instructions(targets, 0.8, width=3000) == [600, 400]


def test_height_targets_need_aspect_ratio():
    targets = [ResizeInstructions(height=400)]
    with pytest.raises(ConfigurationError):
        get_widths_from_instructions(targets, 0.8)
    assert get_widths_from_instructions(targets, 0.8, width=3000, height=2000) == [600]


def test_no_targets_no_widths():
    assert get_widths_from_instructions([], 0.8, width=1000, height=500) == []


def test_widths_from_sizes_on_custom_devices():
    devices = [{"w": 800, "h": 600, "dppx": [2]}]
    assert get_widths_from_sizes("50vw", devices=devices, scaling_factor=0.8) == [800, 400]


def test_widths_from_sizes_default_devices():
    widths = get_widths_from_sizes("(min-width: 680px) 400px, 100vw", width=2400, height=1600)
    assert widths == sorted(widths, reverse=True)
    assert max(widths) <= 2400
    assert len(set(widths)) == len(widths)
