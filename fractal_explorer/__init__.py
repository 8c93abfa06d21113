"""
Interactive escape-time fractal rendering library.

This library renders Mandelbrot and Julia sets (standard and folded
recurrences) with smooth or stripe-average coloring, using JIT-compiled
kernels and a fork-join thread scheduler.

Key Features:
- Explicit Escaped / Interior / InteriorWithDetail iteration results
- Cardioid and period-2 bulb early exits
- Deterministic output independent of the thread count
- Coarse block previews for interactive feedback
- Zoom-adaptive iteration caps
- PNG/JPEG export with embedded render metadata

Example usage:
    >>> from fractal_explorer import FractalRenderer, ViewportState
    >>> renderer = FractalRenderer()
    >>> buffer = renderer.render(ViewportState(center_x=-0.75, size=0.5))
"""

__version__ = "1.0.0"
__author__ = "Fractal Explorer Team"

from fractal_explorer.core.viewport import ViewportState, FractalType, ColoringMode, JULIA_PRESETS
from fractal_explorer.core.pixel_buffer import PixelBuffer
from fractal_explorer.core.math_functions import (
    IterationEngine,
    IterationResult,
    Escaped,
    Interior,
    InteriorWithDetail,
    iterate_point,
)
from fractal_explorer.core.iteration_policy import AdaptiveIterationPolicy, compute_max_iterations
from fractal_explorer.rendering.palettes import ColorRGB, Palette, PaletteRegistry
from fractal_explorer.rendering.coloring import ColorMapper
from fractal_explorer.rendering.region import RegionRenderer, render_region
from fractal_explorer.rendering.preview import PreviewRenderer, render_preview
from fractal_explorer.rendering.image_output import ImageExporter, RenderMetadata
from fractal_explorer.acceleration.parallel import ParallelRenderScheduler
from fractal_explorer.io.config import ConfigManager, ExplorerConfig, RenderConfig

# Main API classes
from fractal_explorer.api import FractalRenderer, FractalExplorer

__all__ = [
    "FractalRenderer",
    "FractalExplorer",
    "RenderConfig",
    "ExplorerConfig",
    "ConfigManager",
    "ViewportState",
    "FractalType",
    "ColoringMode",
    "JULIA_PRESETS",
    "PixelBuffer",
    "IterationEngine",
    "IterationResult",
    "Escaped",
    "Interior",
    "InteriorWithDetail",
    "iterate_point",
    "AdaptiveIterationPolicy",
    "compute_max_iterations",
    "ColorRGB",
    "Palette",
    "PaletteRegistry",
    "ColorMapper",
    "RegionRenderer",
    "render_region",
    "PreviewRenderer",
    "render_preview",
    "ParallelRenderScheduler",
    "ImageExporter",
    "RenderMetadata",
]
