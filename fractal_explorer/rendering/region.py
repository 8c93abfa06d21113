"""
Full-resolution rendering of a contiguous row range.

Each pixel ``(x, y)`` samples the complex coordinate
``center - size/2 + index * size/width`` on both axes, so the plane is
mapped with square pixels. Rows are independent, which lets the parallel
scheduler hand disjoint ranges of the same buffer to different threads.
"""

from typing import Optional, Tuple
import logging

import numpy as np

from ..acceleration.numba_backend import render_rows_kernel
from ..core.pixel_buffer import PixelBuffer
from ..core.viewport import ColoringMode, FractalType, ViewportState
from .palettes import PaletteRegistry

logger = logging.getLogger(__name__)


def kernel_arguments(viewport: ViewportState, palettes: PaletteRegistry) -> Tuple:
    """
    Unpack a viewport snapshot into the scalar arguments shared by the row
    and block kernels, starting with the view center.
    """
    palette = palettes.get(viewport.color_scheme)
    return (
        float(viewport.center_x),
        float(viewport.center_y),
        float(viewport.size),
        int(viewport.max_iterations),
        bool(viewport.is_julia),
        viewport.fractal_type == FractalType.FOLDED,
        float(viewport.julia_x),
        float(viewport.julia_y),
        viewport.coloring_mode == ColoringMode.STRIPE_AVERAGE,
        float(viewport.stripe_frequency),
        float(viewport.stripe_intensity),
        float(viewport.color_density),
        bool(viewport.inner_calculation),
        palette.as_array(),
    )


def render_region(buffer: PixelBuffer, viewport: ViewportState, start_row: int, end_row: int,
                  palettes: Optional[PaletteRegistry] = None) -> None:
    """
    Render rows ``[start_row, end_row)`` of the buffer.

    Args:
        buffer: Destination pixels
        viewport: Render snapshot
        start_row: First row to write
        end_row: One past the last row to write
        palettes: Palette registry (built-in palettes when omitted)
    """
    if not 0 <= start_row <= end_row <= buffer.height:
        raise ValueError(f"Invalid row range [{start_row}, {end_row}) for height {buffer.height}")
    if start_row == end_row:
        return

    registry = palettes or PaletteRegistry.default()
    render_rows_kernel(buffer.pixels, int(start_row), int(end_row),
                       *kernel_arguments(viewport, registry))


class RegionRenderer:
    """Row-range renderer bound to a palette registry."""

    def __init__(self, palettes: Optional[PaletteRegistry] = None):
        self.palettes = palettes or PaletteRegistry.default()

    def render(self, buffer: PixelBuffer, viewport: ViewportState,
               start_row: int = 0, end_row: Optional[int] = None) -> None:
        if end_row is None:
            end_row = buffer.height
        render_region(buffer, viewport, start_row, end_row, self.palettes)

    def render_array(self, viewport: ViewportState, width: int, height: int) -> np.ndarray:
        """Render a whole image on the calling thread and return its RGBA array."""
        buffer = PixelBuffer(width, height)
        self.render(buffer, viewport)
        return buffer.pixels
