"""
Main API classes for fractal exploration.

This module combines the render backends into two entry points:

- :class:`FractalRenderer` renders viewport snapshots (full parallel,
  coarse preview, high-resolution export).
- :class:`FractalExplorer` owns the live interactive state, applies
  navigation and tuning commands to it and decides when a full-quality
  render is due.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import logging
import time

from .acceleration.parallel import ParallelRenderScheduler
from .core.iteration_policy import AdaptiveIterationPolicy
from .core.pixel_buffer import PixelBuffer
from .core.viewport import DEFAULT_CENTER, DEFAULT_SIZE, ColoringMode, ViewportState
from .io.config import RenderConfig
from .rendering.image_output import ImageExporter, RenderMetadata, screenshot_filename
from .rendering.palettes import PaletteRegistry
from .rendering.preview import PreviewRenderer

logger = logging.getLogger(__name__)

ZOOM_IN_FACTOR = 0.5
ZOOM_OUT_FACTOR = 2.0
STRIPE_FREQUENCY_STEP = 0.1
STRIPE_INTENSITY_STEP = 1.0
COLOR_DENSITY_FACTOR = 1.1


class FractalRenderer:
    """Renders viewport snapshots into pixel buffers."""

    def __init__(self, config: Optional[RenderConfig] = None,
                 palettes: Optional[PaletteRegistry] = None):
        """
        Initialize fractal renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
            palettes: Palette registry built at startup (built-ins if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()
        self.palettes = palettes or PaletteRegistry.default()

        self.scheduler = ParallelRenderScheduler(self.palettes, self.config.num_threads)
        self.preview_renderer = PreviewRenderer(self.palettes, self.config.preview_block_size)
        self.image_exporter = ImageExporter()

        logger.info(f"FractalRenderer initialized: {self.config.width}x{self.config.height}, "
                    f"{self.scheduler.num_threads} threads")

    def _buffer(self, buffer: Optional[PixelBuffer]) -> PixelBuffer:
        return buffer if buffer is not None else PixelBuffer(self.config.width, self.config.height)

    def render(self, viewport: ViewportState, buffer: Optional[PixelBuffer] = None) -> PixelBuffer:
        """Full-resolution render on all threads; blocks until complete."""
        buffer = self._buffer(buffer)
        start_time = time.perf_counter()
        self.scheduler.render(buffer, viewport)
        logger.info(f"Render complete: {buffer.width}x{buffer.height} "
                    f"in {time.perf_counter() - start_time:.3f}s")
        return buffer

    def render_preview(self, viewport: ViewportState,
                       buffer: Optional[PixelBuffer] = None) -> PixelBuffer:
        """Low-latency block preview on the calling thread."""
        buffer = self._buffer(buffer)
        self.preview_renderer.render(buffer, viewport)
        return buffer

    def render_high_resolution(self, viewport: ViewportState, scale: Optional[int] = None,
                               width: Optional[int] = None,
                               height: Optional[int] = None) -> PixelBuffer:
        """
        Render the same view with ``scale`` times more samples per axis.

        The center and size are unchanged, so the plane is sampled more
        densely instead of resizing an existing image.
        """
        if scale is None:
            scale = self.config.screenshot_scale
        if scale < 1:
            raise ValueError("scale must be >= 1")
        width = (width or self.config.width) * scale
        height = (height or self.config.height) * scale

        logger.info(f"Rendering high-resolution image ({width}x{height})...")
        return self.render(viewport, PixelBuffer(width, height))

    def save(self, viewport: ViewportState, directory: Optional[Union[str, Path]] = None,
             scale: int = 1, filename: Optional[str] = None) -> Path:
        """
        Render and write an image named after the view.

        Args:
            viewport: View to render
            directory: Output directory (config output_dir if None)
            scale: Supersampling factor; 1 renders at the configured size
            filename: Explicit file name instead of the derived one

        Returns:
            Path of the written image
        """
        start_time = time.perf_counter()
        buffer = self.render_high_resolution(viewport, scale)
        render_time = time.perf_counter() - start_time

        resolution = (buffer.width, buffer.height)
        if filename is None:
            filename = screenshot_filename(viewport, resolution=resolution if scale > 1 else None)
        path = Path(directory or self.config.output_dir) / filename

        metadata = None
        if self.config.save_metadata:
            metadata = RenderMetadata(
                viewport=viewport.to_dict(),
                resolution=resolution,
                palette_name=self.palettes.get(viewport.color_scheme).name,
                render_time_seconds=render_time,
                scale=scale,
            )

        return self.image_exporter.save_image(buffer, path, metadata, self.config.jpeg_quality)


@dataclass
class InteractionState:
    """Debounce bookkeeping for interactive rendering."""
    dragging: bool = False
    view_changed: bool = False
    pending_full_render: bool = False
    last_event_time: float = 0.0


class FractalExplorer:
    """Interactive fractal exploration with zoom and parameter adjustment."""

    def __init__(self, config: Optional[RenderConfig] = None,
                 palettes: Optional[PaletteRegistry] = None,
                 initial_viewport: Optional[ViewportState] = None,
                 renderer: Optional[FractalRenderer] = None):
        self.config = config or RenderConfig()
        self.renderer = renderer or FractalRenderer(self.config, palettes)
        self.palettes = self.renderer.palettes
        self.policy = AdaptiveIterationPolicy(auto=self.config.auto_iterations)
        self.history: List[ViewportState] = []
        self.interaction = InteractionState()
        self._state = self.policy.apply(initial_viewport or ViewportState())

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def snapshot(self) -> ViewportState:
        """Immutable state to hand to a render."""
        return self._state

    def _update(self, state: ViewportState, interactive: bool = False,
                now: Optional[float] = None) -> ViewportState:
        self._state = state
        if interactive:
            self.interaction.view_changed = True
            self.mark_interaction(now)
        else:
            # Discrete commands trigger an immediate full render
            self.interaction.view_changed = False
            self.interaction.pending_full_render = False
        return state

    def pixel_to_complex(self, px: float, py: float) -> Tuple[float, float]:
        """
        Complex coordinate under a window pixel. Each axis is scaled by its
        own window dimension.
        """
        state = self._state
        half = state.size / 2
        return (state.center_x - half + px * state.size / self.width,
                state.center_y - half + py * state.size / self.height)

    # Navigation

    def pan(self, dx: float, dy: float, now: Optional[float] = None) -> ViewportState:
        """
        Pan the view by a pixel delta.

        Args:
            dx, dy: Movement in pixels (previous minus current cursor position)
        """
        state = self._state
        return self._update(state.replace(
            center_x=state.center_x + dx * state.size / self.width,
            center_y=state.center_y + dy * state.size / self.height,
        ), interactive=True, now=now)

    def zoom_at(self, px: float, py: float, zoom_in: bool = True,
                now: Optional[float] = None) -> ViewportState:
        """Zoom by a factor of two keeping the point under the cursor fixed."""
        state = self._state
        if px < 0 or px >= self.width or py < 0 or py >= self.height:
            logger.debug(f"Ignoring zoom outside the view at ({px}, {py})")
            return state

        self.history.append(state)
        mouse_x, mouse_y = self.pixel_to_complex(px, py)
        factor = ZOOM_IN_FACTOR if zoom_in else ZOOM_OUT_FACTOR
        zoomed = state.replace(
            center_x=mouse_x + (state.center_x - mouse_x) * factor,
            center_y=mouse_y + (state.center_y - mouse_y) * factor,
            size=state.size * factor,
        )
        return self._update(self.policy.apply(zoomed), interactive=True, now=now)

    def go_back(self) -> ViewportState:
        """Return to the view before the last zoom."""
        if not self.history:
            logger.warning("No history available")
            return self._state
        logger.info("Returned to previous view")
        return self._update(self.policy.apply(self.history.pop()))

    def reset(self) -> ViewportState:
        """Restore the default position and size, keeping other settings."""
        self.history.clear()
        state = self._state.replace(center_x=DEFAULT_CENTER[0], center_y=DEFAULT_CENTER[1],
                                    size=DEFAULT_SIZE)
        logger.info("Reset to default view")
        return self._update(self.policy.apply(state))

    # Mode and coloring

    def toggle_julia(self, px: Optional[float] = None, py: Optional[float] = None) -> ViewportState:
        """Switch Mandelbrot/Julia; entering Julia takes the seed under the cursor."""
        state = self._state
        if not state.is_julia and px is not None and py is not None:
            seed_x, seed_y = self.pixel_to_complex(px, py)
            state = state.replace(julia_x=seed_x, julia_y=seed_y)
        return self._update(state.replace(is_julia=not state.is_julia))

    def cycle_palette(self) -> ViewportState:
        state = self._state
        return self._update(state.replace(color_scheme=(state.color_scheme + 1) % len(self.palettes)))

    def toggle_fractal_type(self) -> ViewportState:
        return self._update(self._state.replace(fractal_type=self._state.fractal_type.next()))

    def toggle_coloring_mode(self) -> ViewportState:
        state = self._state
        mode = ColoringMode.SMOOTH if state.stripes else ColoringMode.STRIPE_AVERAGE
        return self._update(state.replace(coloring_mode=mode))

    def toggle_inner_calculation(self) -> ViewportState:
        return self._update(self._state.replace(inner_calculation=not self._state.inner_calculation))

    def adjust_stripe_frequency(self, increase: bool = True) -> ViewportState:
        step = STRIPE_FREQUENCY_STEP if increase else -STRIPE_FREQUENCY_STEP
        return self._update(self._state.replace(stripe_frequency=self._state.stripe_frequency + step))

    def adjust_stripe_intensity(self, increase: bool = True) -> ViewportState:
        step = STRIPE_INTENSITY_STEP if increase else -STRIPE_INTENSITY_STEP
        return self._update(self._state.replace(stripe_intensity=self._state.stripe_intensity + step))

    def scale_color_density(self, increase: bool = True) -> ViewportState:
        density = self._state.color_density
        density = density * COLOR_DENSITY_FACTOR if increase else density / COLOR_DENSITY_FACTOR
        return self._update(self._state.replace(color_density=density))

    # Iterations

    def increase_iterations(self) -> ViewportState:
        return self._update(self.policy.increase(self._state))

    def decrease_iterations(self) -> ViewportState:
        return self._update(self.policy.decrease(self._state))

    def set_iterations(self, value: int) -> ViewportState:
        return self._update(self.policy.set_iterations(self._state, value))

    def toggle_auto_iterations(self) -> ViewportState:
        return self._update(self.policy.toggle_auto(self._state))

    # Debounce

    def begin_drag(self, now: Optional[float] = None) -> None:
        self.interaction.dragging = True
        self.mark_interaction(now)

    def end_drag(self, now: Optional[float] = None) -> None:
        self.interaction.dragging = False
        self.interaction.pending_full_render = True
        self.mark_interaction(now)

    def mark_interaction(self, now: Optional[float] = None) -> None:
        self.interaction.last_event_time = time.monotonic() if now is None else now

    def full_render_due(self, now: Optional[float] = None) -> bool:
        """
        True once the render delay has passed since the last interactive
        event. Returning True consumes the pending request.
        """
        interaction = self.interaction
        if not (interaction.view_changed or interaction.pending_full_render) or interaction.dragging:
            return False
        now = time.monotonic() if now is None else now
        if now - interaction.last_event_time <= self.config.render_delay:
            return False
        interaction.view_changed = False
        interaction.pending_full_render = False
        return True

    # Rendering

    def render(self, buffer: PixelBuffer, preview: bool = False) -> float:
        """Render the current snapshot; returns elapsed seconds."""
        state = self.snapshot()
        start_time = time.perf_counter()
        if preview:
            self.renderer.render_preview(state, buffer)
        else:
            self.renderer.render(state, buffer)
        return time.perf_counter() - start_time

    def save_screenshot(self, directory: Optional[Union[str, Path]] = None,
                        high_resolution: bool = False) -> Path:
        scale = self.config.screenshot_scale if high_resolution else 1
        return self.renderer.save(self.snapshot(), directory, scale=scale)

    def info_text(self, mouse_px: float = 0, mouse_py: float = 0) -> str:
        """Overlay text describing the current view."""
        state = self._state
        mouse_x, mouse_y = self.pixel_to_complex(mouse_px, mouse_py)
        lines = [
            f"Mode: {'Julia' if state.is_julia else 'Mandelbrot'}",
            f"Position: ({state.center_x:.10f}, {state.center_y:.10f})",
            f"Zoom: {state.zoom:.2f}x",
            f"Iterations: {state.max_iterations}{' (auto)' if self.policy.auto else ''}",
        ]
        if state.is_julia:
            lines.append(f"Julia seed: ({state.julia_x:.6f}, {state.julia_y:.6f})")
        lines.append(f"Color scheme: {state.color_scheme % len(self.palettes) + 1}/{len(self.palettes)}")
        lines.append(f"Mouse: ({mouse_x:.6f}, {mouse_y:.6f})")
        return "\n".join(lines)

    def get_exploration_info(self) -> Dict[str, object]:
        return {
            'viewport': self._state.to_dict(),
            'auto_iterations': self.policy.auto,
            'history_depth': len(self.history),
            'palette': self.palettes.get(self._state.color_scheme).name,
        }
