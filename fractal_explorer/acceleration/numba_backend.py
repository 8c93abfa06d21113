"""
Numba JIT compilation backend for escape-time fractal computation.

This module holds the per-pixel kernels used by every renderer. They are
compiled with ``nogil=True`` so that the row bands dispatched by the parallel
scheduler run concurrently on plain Python threads.

Status codes returned by :func:`escape_time_kernel`:

- ``ESCAPED``: the orbit left the escape radius
- ``INTERIOR``: the point was classified as interior without detail
- ``INTERIOR_DETAIL``: the cap was reached with inner calculation enabled
"""

import math
import logging

import numba
from numba import jit

logger = logging.getLogger(__name__)
logger.debug(f"Numba available: {numba.__version__}")

ESCAPED = 0
INTERIOR = 1
INTERIOR_DETAIL = 2

ESCAPE_RADIUS_SQUARED = 100.0 * 100.0
LOG2 = math.log(2.0)


@jit(nopython=True, nogil=True, cache=True)
def in_main_cardioid(cr, ci):
    """Return True when c lies strictly inside the main cardioid."""
    xr = cr - 0.25
    q = xr * xr + ci * ci
    return q * (q + xr) < 0.25 * ci * ci


@jit(nopython=True, nogil=True, cache=True)
def in_period2_bulb(cr, ci):
    """Return True when c lies strictly inside the period-2 bulb."""
    return (cr + 1.0) * (cr + 1.0) + ci * ci < 0.0625


@jit(nopython=True, nogil=True, cache=True)
def smooth_count(iteration, magnitude_sq):
    """Continuous iteration count for the final orbit magnitude."""
    # log(log(x)/2) needs x > 1; only detailed interior points can get here
    if magnitude_sq <= 1.0:
        return float(iteration + 1)
    return iteration + 1 - math.log(math.log(magnitude_sq) / 2.0) / LOG2


@jit(nopython=True, nogil=True, cache=True)
def escape_time_kernel(cr, ci, jr, ji, max_iter, is_julia, folded,
                       stripes, stripe_frequency, inner_calculation):
    """
    Iterate a single point of the plane.

    Args:
        cr, ci: Complex coordinate of the sample point
        jr, ji: Julia seed (only used in Julia mode)
        max_iter: Iteration cap
        is_julia: Iterate from the point against the seed instead of from 0
        folded: Use ``2*|zr*zi|`` for the imaginary update
        stripes: Accumulate the stripe average sum
        stripe_frequency: Angular frequency of the stripe function
        inner_calculation: Enable early exits and detailed interior values

    Returns:
        Tuple of (status, iteration, smooth_iteration, stripe_sum)
    """
    if is_julia:
        zr = cr
        zi = ci
        ar = jr
        ai = ji
    else:
        zr = 0.0
        zi = 0.0
        ar = cr
        ai = ci

    if inner_calculation and not is_julia and not folded:
        if in_main_cardioid(cr, ci) or in_period2_bulb(cr, ci):
            return INTERIOR, 0, 0.0, 0.0

    zr2 = zr * zr
    zi2 = zi * zi
    stripe_sum = 0.0
    i = 0

    while zr2 + zi2 < ESCAPE_RADIUS_SQUARED:
        if folded:
            zi = 2.0 * abs(zr * zi)
        else:
            zi = 2.0 * zr * zi
        zi += ai
        zr = zr2 - zi2 + ar
        zr2 = zr * zr
        zi2 = zi * zi
        if stripes:
            s = math.sin(math.atan2(zi, zr) * stripe_frequency)
            stripe_sum += s * s
        i += 1
        if i == max_iter:
            if inner_calculation:
                return INTERIOR_DETAIL, i, smooth_count(i, zr2 + zi2), stripe_sum
            return INTERIOR, 0, 0.0, 0.0

    return ESCAPED, i, smooth_count(i, zr2 + zi2), stripe_sum


@jit(nopython=True, nogil=True, cache=True)
def shade_kernel(status, iteration, smooth, stripe_sum, stripes,
                 stripe_intensity, color_density, palette):
    """
    Map an iteration result to an RGB triple.

    ``t`` is resolved with floor semantics: the palette index is
    ``floor(t) mod n`` (never negative) and the blend factor is
    ``t - floor(t)``.
    """
    if status == INTERIOR:
        return 0, 0, 0

    if stripes:
        if iteration > 0:
            t = stripe_intensity * (stripe_sum / iteration)
        else:
            t = 0.0
    else:
        t = smooth * color_density

    n = palette.shape[0]
    base = math.floor(t)
    frac = t - base
    index = int(base) % n
    following = (index + 1) % n

    r0 = float(palette[index, 0])
    g0 = float(palette[index, 1])
    b0 = float(palette[index, 2])
    r = int(r0 + frac * (float(palette[following, 0]) - r0))
    g = int(g0 + frac * (float(palette[following, 1]) - g0))
    b = int(b0 + frac * (float(palette[following, 2]) - b0))
    return r, g, b


@jit(nopython=True, nogil=True, cache=True)
def render_rows_kernel(pixels, start_row, end_row, center_x, center_y, size,
                       max_iter, is_julia, folded, jr, ji, stripes,
                       stripe_frequency, stripe_intensity, color_density,
                       inner_calculation, palette):
    """Fill rows ``[start_row, end_row)`` of an RGBA pixel array."""
    width = pixels.shape[1]
    pixel_size = size / width
    half = size / 2.0

    for y in range(start_row, end_row):
        ci = center_y - half + y * pixel_size
        for x in range(width):
            cr = center_x - half + x * pixel_size
            status, iteration, smooth, stripe_sum = escape_time_kernel(
                cr, ci, jr, ji, max_iter, is_julia, folded,
                stripes, stripe_frequency, inner_calculation)
            r, g, b = shade_kernel(status, iteration, smooth, stripe_sum, stripes,
                                   stripe_intensity, color_density, palette)
            pixels[y, x, 0] = r
            pixels[y, x, 1] = g
            pixels[y, x, 2] = b
            pixels[y, x, 3] = 255


@jit(nopython=True, nogil=True, cache=True)
def render_blocks_kernel(pixels, block_size, center_x, center_y, size,
                         max_iter, is_julia, folded, jr, ji, stripes,
                         stripe_frequency, stripe_intensity, color_density,
                         inner_calculation, palette):
    """Sample the top-left pixel of every block and flood-fill the block."""
    height = pixels.shape[0]
    width = pixels.shape[1]
    pixel_size = size / width
    half = size / 2.0

    for y in range(0, height, block_size):
        ci = center_y - half + y * pixel_size
        y_end = min(y + block_size, height)
        for x in range(0, width, block_size):
            cr = center_x - half + x * pixel_size
            status, iteration, smooth, stripe_sum = escape_time_kernel(
                cr, ci, jr, ji, max_iter, is_julia, folded,
                stripes, stripe_frequency, inner_calculation)
            r, g, b = shade_kernel(status, iteration, smooth, stripe_sum, stripes,
                                   stripe_intensity, color_density, palette)
            x_end = min(x + block_size, width)
            for by in range(y, y_end):
                for bx in range(x, x_end):
                    pixels[by, bx, 0] = r
                    pixels[by, bx, 1] = g
                    pixels[by, bx, 2] = b
                    pixels[by, bx, 3] = 255

