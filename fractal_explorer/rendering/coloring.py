"""
Mapping of iteration results to colors.

Two coloring modes are supported:

- smooth: palette position is ``smooth_iteration * color_density``
- stripe average: palette position is
  ``stripe_intensity * stripe_sum / iteration_count``

The palette position ``t`` is split into ``floor(t) mod n`` and the
fractional part ``t - floor(t)``, then the two neighbouring palette entries
are blended linearly and truncated to integers. Negative positions (possible
with a negative stripe intensity) wrap around from the end of the palette.
Interior points without detail are always black.
"""

from typing import Optional
import logging

from ..acceleration.numba_backend import shade_kernel
from ..core.math_functions import IterationResult
from ..core.viewport import ColoringMode, ViewportState
from .palettes import ColorRGB, Palette, PaletteRegistry

logger = logging.getLogger(__name__)

INTERIOR_COLOR = ColorRGB(0, 0, 0)


class ColorMapper:
    """Pure mapping from an iteration result to an RGB color."""

    def __init__(self, palette: Palette,
                 coloring_mode: ColoringMode = ColoringMode.SMOOTH,
                 color_density: float = 0.2, stripe_intensity: float = 10.0):
        """
        Initialize the mapper.

        Args:
            palette: Color ramp to sample
            coloring_mode: Smooth or stripe-average coloring
            color_density: Palette steps per smooth iteration
            stripe_intensity: Scale of the stripe average
        """
        self.palette = palette
        self.coloring_mode = coloring_mode
        self.color_density = float(color_density)
        self.stripe_intensity = float(stripe_intensity)

    @classmethod
    def from_viewport(cls, viewport: ViewportState,
                      palettes: Optional[PaletteRegistry] = None) -> 'ColorMapper':
        registry = palettes or PaletteRegistry.default()
        return cls(registry.get(viewport.color_scheme), viewport.coloring_mode,
                   viewport.color_density, viewport.stripe_intensity)

    def map(self, result: IterationResult) -> ColorRGB:
        """Color for a single iteration result."""
        status, iteration, smooth, stripe_sum = result.as_kernel_tuple()
        r, g, b = shade_kernel(
            status, iteration, smooth, stripe_sum,
            self.coloring_mode == ColoringMode.STRIPE_AVERAGE,
            self.stripe_intensity, self.color_density, self.palette.as_array())
        return ColorRGB(int(r), int(g), int(b))
