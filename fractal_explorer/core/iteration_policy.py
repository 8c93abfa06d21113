"""
Adaptive iteration-count policy.

Deeper zooms need more iterations before boundary detail resolves. While
auto mode is on, the cap follows ``100 * log10(1 + zoom)``; any manual
adjustment switches auto mode off.
"""

import math
import logging

from .viewport import DEFAULT_SIZE, MAX_ITERATIONS, MIN_ITERATIONS, ViewportState

logger = logging.getLogger(__name__)


def clamp_iterations(value: int) -> int:
    """Clamp an iteration count to the supported range."""
    return max(MIN_ITERATIONS, min(MAX_ITERATIONS, int(value)))


def compute_max_iterations(size: float, base_size: float = DEFAULT_SIZE) -> int:
    """
    Iteration cap for a view of the given width.

    Args:
        size: Complex-plane width of the view
        base_size: Width of the unzoomed view

    Returns:
        ``floor(100 * log10(1 + base_size / size))`` clamped to [100, 10000]
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")
    zoom = base_size / size
    return clamp_iterations(math.floor(100 * math.log10(1 + zoom)))


class AdaptiveIterationPolicy:
    """Tracks auto mode and derives the iteration cap of a viewport."""

    def __init__(self, auto: bool = True, base_size: float = DEFAULT_SIZE):
        self.auto = auto
        self.base_size = base_size

    def apply(self, viewport: ViewportState) -> ViewportState:
        """Return the viewport with its cap recomputed when auto mode is on."""
        if not self.auto:
            return viewport
        iterations = compute_max_iterations(viewport.size, self.base_size)
        if iterations == viewport.max_iterations:
            return viewport
        logger.debug(f"Auto iterations: {viewport.max_iterations} -> {iterations}")
        return viewport.replace(max_iterations=iterations)

    def set_iterations(self, viewport: ViewportState, value: int) -> ViewportState:
        """Manual override: disables auto mode and clamps the new value."""
        self.auto = False
        return viewport.replace(max_iterations=clamp_iterations(value))

    def increase(self, viewport: ViewportState) -> ViewportState:
        return self.set_iterations(viewport, viewport.max_iterations * 2)

    def decrease(self, viewport: ViewportState) -> ViewportState:
        return self.set_iterations(viewport, viewport.max_iterations // 2)

    def toggle_auto(self, viewport: ViewportState) -> ViewportState:
        """Flip auto mode; switching it on applies it immediately."""
        self.auto = not self.auto
        logger.info(f"Auto iterations {'enabled' if self.auto else 'disabled'}")
        return self.apply(viewport)
