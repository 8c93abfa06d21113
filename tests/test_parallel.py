import pytest

from fractal_explorer.acceleration import parallel
from fractal_explorer.acceleration.parallel import (
    ParallelRenderScheduler,
    RowBand,
    create_row_bands,
    get_optimal_thread_count,
)
from fractal_explorer.core.pixel_buffer import PixelBuffer
from fractal_explorer.core.viewport import FractalType
from fractal_explorer.rendering.region import render_region


def test_bands_cover_every_row_once():
    bands = create_row_bands(10, 3)
    assert [(b.start_row, b.end_row) for b in bands] == [(0, 3), (3, 6), (6, 10)]
    assert sum(b.height for b in bands) == 10


def test_last_band_takes_remainder_when_height_is_small():
    bands = create_row_bands(2, 4)
    assert bands[-1] == RowBand(band_id=3, start_row=0, end_row=2)
    assert all(b.height == 0 for b in bands[:-1])


@pytest.mark.parametrize("height,count", [(0, 2), (5, 0), (-1, 1)])
def test_invalid_band_arguments(height, count):
    with pytest.raises(ValueError):
        create_row_bands(height, count)


def test_thread_count_is_positive():
    assert get_optimal_thread_count() >= 1


def test_output_independent_of_band_count(small_view):
    view = small_view.replace(fractal_type=FractalType.FOLDED, center_y=-0.5)
    reference = PixelBuffer(37, 29)
    render_region(reference, view, 0, 29)

    for count in (1, 2, 3, 4, 8, 64):
        buffer = PixelBuffer(37, 29)
        ParallelRenderScheduler(num_threads=count).render(buffer, view)
        assert buffer.to_bytes() == reference.to_bytes(), f"{count} bands differ"


def test_invalid_thread_count():
    with pytest.raises(ValueError):
        ParallelRenderScheduler(num_threads=0)


def test_worker_errors_propagate(monkeypatch, small_view):
    def failing_region(*args):
        raise RuntimeError("band failed")

    monkeypatch.setattr(parallel, "render_region", failing_region)

    with pytest.raises(RuntimeError, match="band failed"):
        ParallelRenderScheduler(num_threads=2).render(PixelBuffer(4, 4), small_view)
