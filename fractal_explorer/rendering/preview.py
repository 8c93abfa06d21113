"""
Coarse block-sampled preview rendering for interactive feedback.
"""

from typing import Optional
import logging

from ..acceleration.numba_backend import render_blocks_kernel
from ..core.pixel_buffer import PixelBuffer
from ..core.viewport import ViewportState
from .palettes import PaletteRegistry
from .region import kernel_arguments

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 12


def render_preview(buffer: PixelBuffer, viewport: ViewportState,
                   block_size: int = DEFAULT_BLOCK_SIZE,
                   palettes: Optional[PaletteRegistry] = None) -> None:
    """
    Fill the buffer with one sample per ``block_size`` square.

    The color of each block comes from its top-left pixel; blocks on the
    right and bottom edges are clipped to the buffer. A block size of 1 is
    identical to a full render.
    """
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")

    registry = palettes or PaletteRegistry.default()
    render_blocks_kernel(buffer.pixels, int(block_size), *kernel_arguments(viewport, registry))


class PreviewRenderer:
    """Runs synchronously on the calling thread."""

    def __init__(self, palettes: Optional[PaletteRegistry] = None,
                 block_size: int = DEFAULT_BLOCK_SIZE):
        if block_size < 1:
            raise ValueError(f"block_size must be >= 1, got {block_size}")
        self.palettes = palettes or PaletteRegistry.default()
        self.block_size = block_size

    def render(self, buffer: PixelBuffer, viewport: ViewportState) -> None:
        logger.debug(f"Preview render {buffer.width}x{buffer.height}, block {self.block_size}")
        render_preview(buffer, viewport, self.block_size, self.palettes)
