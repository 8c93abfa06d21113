import pytest

from fractal_explorer.core.math_functions import Escaped, Interior, InteriorWithDetail
from fractal_explorer.core.viewport import ColoringMode, ViewportState
from fractal_explorer.rendering.coloring import INTERIOR_COLOR, ColorMapper
from fractal_explorer.rendering.palettes import ColorRGB


@pytest.fixture
def smooth_mapper(two_color_palette):
    return ColorMapper(two_color_palette, ColoringMode.SMOOTH, color_density=1.0)


def test_interior_is_black(smooth_mapper):
    assert smooth_mapper.map(Interior()) == INTERIOR_COLOR == ColorRGB(0, 0, 0)


def test_integer_position_hits_palette_entry(smooth_mapper, two_color_palette):
    assert smooth_mapper.map(Escaped(5, 1.0, 0.0)) == two_color_palette[1]
    # wraps modulo the palette length
    assert smooth_mapper.map(Escaped(5, 2.0, 0.0)) == two_color_palette[0]
    assert smooth_mapper.map(Escaped(5, 3.0, 0.0)) == two_color_palette[1]


def test_fractional_position_blends_linearly(smooth_mapper):
    assert smooth_mapper.map(Escaped(5, 0.5, 0.0)) == ColorRGB(50, 100, 25)


def test_color_density_scales_position(two_color_palette):
    mapper = ColorMapper(two_color_palette, ColoringMode.SMOOTH, color_density=0.5)
    assert mapper.map(Escaped(5, 1.0, 0.0)) == ColorRGB(50, 100, 25)


def test_stripe_average_uses_mean_stripe_value(two_color_palette):
    mapper = ColorMapper(two_color_palette, ColoringMode.STRIPE_AVERAGE, stripe_intensity=1.0)
    # t = 1.0 * 1.0 / 2
    assert mapper.map(Escaped(2, 17.0, 1.0)) == ColorRGB(50, 100, 25)


def test_stripe_average_with_no_iterations_uses_first_entry(two_color_palette):
    mapper = ColorMapper(two_color_palette, ColoringMode.STRIPE_AVERAGE, stripe_intensity=10.0)
    assert mapper.map(Escaped(0, 1.0, 0.0)) == two_color_palette[0]


def test_negative_position_wraps_from_palette_end(two_color_palette):
    mapper = ColorMapper(two_color_palette, ColoringMode.STRIPE_AVERAGE, stripe_intensity=-1.0)
    # t = -0.5: floor -1 -> last entry, blended halfway towards the first
    assert mapper.map(Escaped(2, 0.0, 1.0)) == ColorRGB(50, 100, 25)


def test_interior_with_detail_is_colored(smooth_mapper):
    assert smooth_mapper.map(InteriorWithDetail(100, 101.0, 0.0)) == ColorRGB(100, 200, 50)


def test_mapping_is_pure(smooth_mapper):
    result = Escaped(7, 3.25, 0.0)
    assert smooth_mapper.map(result) == smooth_mapper.map(result)


def test_from_viewport_selects_palette_cyclically(palettes):
    view = ViewportState(color_scheme=len(palettes) + 1, coloring_mode=ColoringMode.SMOOTH)
    mapper = ColorMapper.from_viewport(view, palettes)

    assert mapper.palette is palettes.get(1)
    assert mapper.coloring_mode == ColoringMode.SMOOTH
