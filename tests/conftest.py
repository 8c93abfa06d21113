import pytest

from fractal_explorer.core.viewport import ColoringMode, FractalType, ViewportState
from fractal_explorer.io.config import RenderConfig
from fractal_explorer.rendering.palettes import Palette, PaletteRegistry


@pytest.fixture
def small_view():
    """Default Mandelbrot framing with smooth coloring."""
    return ViewportState(center_x=-0.5, center_y=0.0, size=3.0, max_iterations=128,
                         fractal_type=FractalType.STANDARD, is_julia=False,
                         coloring_mode=ColoringMode.SMOOTH)


@pytest.fixture
def palettes():
    return PaletteRegistry.default()


@pytest.fixture
def two_color_palette():
    return Palette([(0, 0, 0), (100, 200, 50)], name="Ramp")


@pytest.fixture
def render_config(tmp_path):
    return RenderConfig(width=48, height=40, num_threads=2, preview_block_size=4,
                        output_dir=str(tmp_path))
