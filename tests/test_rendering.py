import numpy as np
import pytest

from fractal_explorer.core.math_functions import iterate_point
from fractal_explorer.core.pixel_buffer import PixelBuffer
from fractal_explorer.core.viewport import ColoringMode, ViewportState
from fractal_explorer.rendering.coloring import ColorMapper
from fractal_explorer.rendering.preview import PreviewRenderer, render_preview
from fractal_explorer.rendering.region import RegionRenderer, render_region


def test_region_split_matches_single_pass(small_view):
    whole = PixelBuffer(4, 4)
    render_region(whole, small_view, 0, 4)

    split = PixelBuffer(4, 4)
    render_region(split, small_view, 0, 2)
    render_region(split, small_view, 2, 4)

    assert whole.to_bytes() == split.to_bytes()


def test_every_pixel_is_opaque(small_view):
    buffer = PixelBuffer(20, 15)
    render_region(buffer, small_view, 0, 15)
    assert np.all(buffer.pixels[:, :, 3] == 255)


def test_pixels_match_per_point_iteration(small_view, palettes):
    width = 16
    buffer = PixelBuffer(width, 8)
    render_region(buffer, small_view, 0, 8, palettes)
    mapper = ColorMapper.from_viewport(small_view, palettes)

    for px, py in [(0, 0), (5, 3), (15, 7), (8, 4)]:
        cr, ci = small_view.pixel_to_complex(px, py, width)
        result = iterate_point(cr, ci, max_iter=small_view.max_iterations)
        assert tuple(buffer.pixels[py, px, :3]) == mapper.map(result).to_tuple()


def test_interior_pixel_is_black():
    view = ViewportState(center_x=0.0, center_y=0.0, size=4.0, max_iterations=100)
    buffer = PixelBuffer(4, 4)
    render_region(buffer, view, 0, 4)

    # pixel (2, 2) samples c = 0
    assert tuple(buffer.pixels[2, 2]) == (0, 0, 0, 255)
    assert tuple(buffer.pixels[0, 0, :3]) != (0, 0, 0)


def test_rows_outside_range_untouched(small_view):
    buffer = PixelBuffer(8, 8)
    render_region(buffer, small_view, 2, 5)

    assert not buffer.pixels[:2].any()
    assert not buffer.pixels[5:].any()
    assert np.all(buffer.pixels[2:5, :, 3] == 255)


def test_empty_range_is_noop(small_view):
    buffer = PixelBuffer(8, 8)
    render_region(buffer, small_view, 3, 3)
    assert not buffer.pixels.any()


@pytest.mark.parametrize("start,end", [(-1, 2), (3, 2), (0, 9)])
def test_invalid_row_range(small_view, start, end):
    with pytest.raises(ValueError):
        render_region(PixelBuffer(8, 8), small_view, start, end)


def test_renders_into_wrapped_bytearray(small_view):
    storage = bytearray(6 * 5 * 4)
    buffer = PixelBuffer.wrap(storage, 6, 5)
    RegionRenderer().render(buffer, small_view)

    assert storage[3] == 255
    assert storage[-1] == 255
    assert bytes(storage) == buffer.to_bytes()


def test_wrap_rejects_wrong_size():
    with pytest.raises(ValueError):
        PixelBuffer.wrap(bytearray(10), 2, 2)


def test_preview_with_unit_blocks_equals_full_render(small_view):
    full = PixelBuffer(20, 14)
    render_region(full, small_view, 0, 14)

    preview = PixelBuffer(20, 14)
    render_preview(preview, small_view, block_size=1)

    assert full.to_bytes() == preview.to_bytes()


def test_preview_blocks_take_top_left_sample(small_view):
    full = RegionRenderer().render_array(small_view, 10, 10)

    buffer = PixelBuffer(10, 10)
    PreviewRenderer(block_size=4).render(buffer, small_view)
    pixels = buffer.pixels

    for by in (0, 4, 8):
        for bx in (0, 4, 8):
            block = pixels[by:by + 4, bx:bx + 4]
            # edge blocks are clipped to the buffer
            assert np.all(block == full[by, bx])


def test_preview_block_size_validated(small_view):
    with pytest.raises(ValueError):
        render_preview(PixelBuffer(4, 4), small_view, block_size=0)
    with pytest.raises(ValueError):
        PreviewRenderer(block_size=0)


def test_stripe_coloring_renders(small_view):
    striped = small_view.replace(coloring_mode=ColoringMode.STRIPE_AVERAGE)
    smooth = RegionRenderer().render_array(small_view, 12, 12)
    stripes = RegionRenderer().render_array(striped, 12, 12)
    assert not np.array_equal(smooth, stripes)
