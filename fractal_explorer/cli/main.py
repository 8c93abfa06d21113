"""
Command-line interface for fractal rendering.

The interactive window is a separate front end; this CLI exposes the same
render engine for scripted use: full renders, previews, palette listings
and benchmarks.
"""

import click
import sys
import json
from pathlib import Path
from typing import Tuple
import logging
import time

from .. import __version__
from ..acceleration.parallel import ParallelRenderScheduler, get_optimal_thread_count
from ..api import FractalRenderer
from ..core.iteration_policy import clamp_iterations, compute_max_iterations
from ..core.pixel_buffer import PixelBuffer
from ..core.viewport import JULIA_PRESETS, ViewportState, parse_coloring_mode, parse_fractal_type
from ..io.config import ConfigError, ConfigManager, ExplorerConfig, load_config
from ..rendering.preview import render_preview

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    Fractal Explorer - escape-time Mandelbrot and Julia renderer.

    Render smooth or stripe-colored fractal images with a multi-threaded
    engine.
    """
    # Setup logging
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"Fractal Explorer v{__version__}")
        click.echo(f"Python: {sys.version}")
        click.echo(f"Render threads: {get_optimal_thread_count()}")
        if ctx.invoked_subcommand is None:
            ctx.exit(0)

    try:
        explorer_config = load_config(config)
    except ConfigError as e:
        raise click.ClickException(str(e))

    ctx.ensure_object(dict)
    ctx.obj['config'] = explorer_config

    if ctx.invoked_subcommand is None and not version:
        click.echo(ctx.get_help())


def _parse_pair(value: str, what: str) -> Tuple[float, float]:
    try:
        parts = [float(x.strip()) for x in value.split(',')]
    except ValueError:
        raise click.BadParameter(f"Invalid {what} format. Use 'real,imag'")
    if len(parts) != 2:
        raise click.BadParameter(f"Invalid {what} format. Use 'real,imag'")
    return parts[0], parts[1]


def view_options(func):
    """Options shared by the render commands."""
    options = [
        click.option('--width', '-w', type=int, help='Image width'),
        click.option('--height', '-h', type=int, help='Image height'),
        click.option('--center', type=str, help='View center "real,imag"'),
        click.option('--size', type=float, help='Complex-plane width of the view'),
        click.option('--max-iter', type=int, help='Maximum iterations (disables auto)'),
        click.option('--auto-iter/--no-auto-iter', default=None,
                     help='Derive iterations from zoom'),
        click.option('--julia', 'julia_seed', type=str,
                     help='Render a Julia set: seed "real,imag" or preset name'),
        click.option('--fractal-type', type=click.Choice(['standard', 'folded']),
                     help='Recurrence variant'),
        click.option('--coloring', type=click.Choice(['smooth', 'stripe_average']),
                     help='Coloring mode'),
        click.option('--palette', 'color_scheme', type=int, help='Color scheme index'),
        click.option('--density', type=float, help='Color density for smooth coloring'),
        click.option('--stripe-frequency', type=float, help='Stripe frequency'),
        click.option('--stripe-intensity', type=float, help='Stripe intensity'),
        click.option('--inner/--no-inner', default=None, help='Inner calculation'),
        click.option('--threads', type=int, help='Number of render threads'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_viewport(base: ViewportState, auto_iterations: bool, **kwargs) -> ViewportState:
    """Apply command-line overrides to the configured initial view."""
    changes = {}

    if kwargs.get('center'):
        changes['center_x'], changes['center_y'] = _parse_pair(kwargs['center'], 'center')
    if kwargs.get('size') is not None:
        changes['size'] = kwargs['size']

    julia_seed = kwargs.get('julia_seed')
    if julia_seed:
        if julia_seed in JULIA_PRESETS:
            changes['julia_x'], changes['julia_y'] = JULIA_PRESETS[julia_seed]
            click.echo(f"Using Julia preset: {julia_seed}")
        else:
            changes['julia_x'], changes['julia_y'] = _parse_pair(julia_seed, 'Julia seed')
        changes['is_julia'] = True

    if kwargs.get('fractal_type'):
        changes['fractal_type'] = parse_fractal_type(kwargs['fractal_type'])
    if kwargs.get('coloring'):
        changes['coloring_mode'] = parse_coloring_mode(kwargs['coloring'])

    for option, field_name in (('color_scheme', 'color_scheme'),
                               ('density', 'color_density'),
                               ('stripe_frequency', 'stripe_frequency'),
                               ('stripe_intensity', 'stripe_intensity'),
                               ('inner', 'inner_calculation')):
        if kwargs.get(option) is not None:
            changes[field_name] = kwargs[option]

    if kwargs.get('max_iter') is not None:
        changes['max_iterations'] = clamp_iterations(kwargs['max_iter'])
    elif auto_iterations:
        changes['max_iterations'] = compute_max_iterations(changes.get('size', base.size))

    try:
        return base.replace(**changes)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _prepare(ctx, kwargs) -> Tuple[ExplorerConfig, ViewportState]:
    config: ExplorerConfig = ctx.obj['config']
    render_config = config.render
    for option, field_name in (('width', 'width'), ('height', 'height'), ('threads', 'num_threads')):
        if kwargs.get(option) is not None:
            setattr(render_config, field_name, kwargs[option])
    try:
        render_config.validate()
    except ConfigError as e:
        raise click.BadParameter(str(e))

    auto = kwargs.get('auto_iter')
    if auto is None:
        auto = render_config.auto_iterations and kwargs.get('max_iter') is None
    return config, build_viewport(config.viewport, auto, **kwargs)


@main.command()
@click.argument('output', type=click.Path())
@view_options
@click.option('--scale', type=click.IntRange(min=1), default=1, show_default=True,
              help='Supersampling factor (same view, more samples)')
@click.pass_context
def render(ctx, output, scale, **kwargs):
    """
    Render a full-quality image.

    OUTPUT: Output image file path (.png, .jpg)
    """
    config, viewport = _prepare(ctx, kwargs)

    try:
        palettes = config.build_palettes()
        renderer = FractalRenderer(config.render, palettes)
        output_path = Path(output)
        path = renderer.save(viewport, output_path.parent, scale=scale, filename=output_path.name)
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Saved {path}")


@main.command()
@click.argument('output', type=click.Path())
@view_options
@click.option('--block-size', type=int, help='Preview block size in pixels')
@click.pass_context
def preview(ctx, output, block_size, **kwargs):
    """
    Render a coarse block preview.

    OUTPUT: Output image file path (.png, .jpg)
    """
    config, viewport = _prepare(ctx, kwargs)
    if block_size is not None:
        config.render.preview_block_size = block_size

    try:
        renderer = FractalRenderer(config.render, config.build_palettes())
        buffer = renderer.render_preview(viewport)
        path = renderer.image_exporter.save_image(buffer, Path(output))
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Saved {path}")


@main.command(name='palettes')
@click.pass_context
def list_palettes(ctx):
    """List available color palettes."""
    try:
        registry = ctx.obj['config'].build_palettes()
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))
    click.echo("Available color palettes:")
    for index, palette in enumerate(registry):
        click.echo(f"  {index}: {palette.name} ({len(palette)} colors)")


@main.command(name='presets')
def list_presets():
    """List Julia seed presets."""
    click.echo("Julia presets:")
    for name, (real, imag) in JULIA_PRESETS.items():
        click.echo(f"  {name}: {real:+.6f} {imag:+.6f}i")


@main.command()
@click.option('--size', type=int, default=400, show_default=True, help='Square image size')
@click.option('--iterations', type=int, default=256, show_default=True, help='Maximum iterations')
@click.option('--bands', type=str, default=None, help='Comma separated band counts to compare')
def benchmark(size, iterations, bands):
    """Time full, preview and multi-band renders."""
    viewport = ViewportState(max_iterations=iterations)
    counts = [int(b) for b in bands.split(',')] if bands else [1, get_optimal_thread_count()]

    # Warm up JIT compiler
    render_preview(PixelBuffer(16, 16), viewport, 4)

    results = {'resolution': f'{size}x{size}', 'max_iterations': iterations, 'bands': {}}
    for count in counts:
        buffer = PixelBuffer(size, size)
        start_time = time.perf_counter()
        ParallelRenderScheduler(num_threads=count).render(buffer, viewport)
        results['bands'][count] = round(time.perf_counter() - start_time, 4)

    buffer = PixelBuffer(size, size)
    start_time = time.perf_counter()
    render_preview(buffer, viewport)
    results['preview'] = round(time.perf_counter() - start_time, 4)

    click.echo(json.dumps(results, indent=2))


@main.command(name='init-config')
@click.argument('output', type=click.Path())
@click.pass_context
def init_config(ctx, output):
    """Write the effective configuration to a JSON file."""
    try:
        ConfigManager.save(ctx.obj['config'], output)
    except OSError as e:
        raise click.ClickException(str(e))
    click.echo(f"Configuration written to {output}")


if __name__ == '__main__':
    main()
