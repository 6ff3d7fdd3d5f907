"""
Tests for the color science helpers.
"""
import numpy as np
import pytest

from palette_colors import (
    calculate_luminance,
    color_distance,
    contrast_ratio,
    delta_e_cie2000,
    parse_color,
    rgb_to_lab,
    to_hex,
)


def test_white_maps_to_reference_lab():
    L, a, b = rgb_to_lab([255, 255, 255])
    assert L == pytest.approx(100.0, abs=1e-3)
    assert a == pytest.approx(0.0, abs=1e-2)
    assert b == pytest.approx(0.0, abs=1e-2)


def test_black_maps_to_zero_lightness():
    assert rgb_to_lab(np.array([0, 0, 0]))[0] == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize('lab1, lab2, expected', [
    ((50.0, 2.6772, -79.7751), (50.0, 0.0, -82.7485), 2.0425),
    ((50.0, 2.5, 0.0), (50.0, 0.0, -2.5), 4.3065),
    ((50.0, 2.5, 0.0), (73.0, 25.0, -18.0), 27.1492),
    ((60.2574, -34.0099, 36.2677), (60.4626, -34.1751, 39.4387), 1.2644),
])
def test_ciede2000_reference_pairs(lab1, lab2, expected):
    assert delta_e_cie2000(lab1, lab2) == pytest.approx(expected, abs=1e-4)


def test_identical_colors_have_zero_distance():
    assert color_distance((12, 200, 90), (12, 200, 90)) == pytest.approx(0.0, abs=1e-9)


def test_luminance_and_contrast_extremes():
    assert calculate_luminance([255, 255, 255]) == pytest.approx(1.0)
    assert calculate_luminance([0, 0, 0]) == pytest.approx(0.0)
    assert contrast_ratio([0, 0, 0], [255, 255, 255]) == pytest.approx(21.0)
    assert contrast_ratio([120, 40, 200], [120, 40, 200]) == pytest.approx(1.0)


def test_contrast_is_symmetric():
    assert contrast_ratio((10, 120, 80), (240, 230, 200)) == pytest.approx(
        contrast_ratio((240, 230, 200), (10, 120, 80)))


def test_to_hex():
    assert to_hex((51, 102, 204)) == '#3366CC'
    assert to_hex(np.array([0, 0, 255])) == '#0000FF'


@pytest.mark.parametrize('value, expected', [
    ('#3366CC', (51, 102, 204)),
    ('3366cc', (51, 102, 204)),
    ('#36C', (51, 102, 204)),
    ('  #000000 ', (0, 0, 0)),
    ((1, 2, 3), (1, 2, 3)),
    (np.array([255, 0, 10]), (255, 0, 10)),
])
def test_parse_color_accepts(value, expected):
    assert parse_color(value) == expected


@pytest.mark.parametrize('value', ['', '#GGGGGG', '#1234', (0, 0), (0, 0, 256), (0, -1, 0), (0.5, 1, 2), (True, 0, 0), 42])
def test_parse_color_rejects(value):
    with pytest.raises(ValueError):
        parse_color(value)
