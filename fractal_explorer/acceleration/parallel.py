"""
Thread-based fork-join scheduler for full-resolution renders.

The image is split into horizontal row bands, one per hardware thread. Each
band is rendered by a JIT kernel that releases the GIL, so the bands run in
parallel while writing into disjoint rows of the same buffer. Output is
independent of the band count.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional
import logging
import os
import time

from ..core.pixel_buffer import PixelBuffer
from ..core.viewport import ViewportState
from ..rendering.palettes import PaletteRegistry
from ..rendering.region import render_region

logger = logging.getLogger(__name__)

FALLBACK_THREAD_COUNT = 8


@dataclass(frozen=True)
class RowBand:
    """Contiguous range of rows rendered by one worker."""
    band_id: int
    start_row: int
    end_row: int

    @property
    def height(self) -> int:
        return self.end_row - self.start_row


def create_row_bands(height: int, count: int) -> List[RowBand]:
    """
    Split ``[0, height)`` into ``count`` contiguous bands.

    Every band gets ``height // count`` rows and the last band absorbs the
    remainder, so some bands are empty when ``height < count``.

    Args:
        height: Total image height
        count: Number of bands

    Returns:
        List of RowBand objects covering every row exactly once
    """
    if height <= 0:
        raise ValueError("height must be positive")
    if count <= 0:
        raise ValueError("band count must be positive")

    rows_per_band = height // count
    bands = []
    for i in range(count):
        start = i * rows_per_band
        end = height if i == count - 1 else (i + 1) * rows_per_band
        bands.append(RowBand(band_id=i, start_row=start, end_row=end))
    return bands


def get_optimal_thread_count() -> int:
    """Detected hardware parallelism, or a fixed fallback when unknown."""
    return os.cpu_count() or FALLBACK_THREAD_COUNT


class ParallelRenderScheduler:
    """Fork-join renderer: one short-lived worker per row band and call."""

    def __init__(self, palettes: Optional[PaletteRegistry] = None,
                 num_threads: Optional[int] = None):
        """
        Initialize the scheduler.

        Args:
            palettes: Palette registry shared read-only by all workers
            num_threads: Number of bands (None for hardware parallelism)
        """
        if num_threads is not None and num_threads <= 0:
            raise ValueError("num_threads must be positive")
        self.palettes = palettes or PaletteRegistry.default()
        self.num_threads = num_threads or get_optimal_thread_count()

    def render(self, buffer: PixelBuffer, viewport: ViewportState) -> None:
        """Render the whole buffer and block until every band is done."""
        start_time = time.perf_counter()
        bands = [b for b in create_row_bands(buffer.height, self.num_threads) if b.height > 0]

        logger.debug(f"Rendering {buffer.width}x{buffer.height} in {len(bands)} bands")

        with ThreadPoolExecutor(max_workers=len(bands)) as executor:
            futures = {
                executor.submit(render_region, buffer, viewport,
                                band.start_row, band.end_row, self.palettes): band
                for band in bands
            }
            errors = []
            for future, band in futures.items():
                try:
                    future.result()
                except Exception as e:
                    logger.error(f"Band {band.band_id} (rows {band.start_row}-{band.end_row}) failed: {e}")
                    errors.append(e)

        if errors:
            raise errors[0]

        elapsed = time.perf_counter() - start_time
        logger.debug(f"Parallel render complete: {elapsed:.3f}s with {len(bands)} bands")
