"""
Core mathematical functions for escape-time iteration.

This module exposes the per-point iteration as a pure function returning an
explicit tagged result, plus the early-exit membership tests used for the
Mandelbrot interior. The heavy lifting happens in the JIT kernels of
:mod:`fractal_explorer.acceleration.numba_backend`; everything here is a thin,
thread-safe wrapper around them.
"""

from dataclasses import dataclass
from typing import Tuple
import logging

from ..acceleration.numba_backend import (
    ESCAPED,
    INTERIOR,
    INTERIOR_DETAIL,
    escape_time_kernel,
    in_main_cardioid as _in_main_cardioid,
    in_period2_bulb as _in_period2_bulb,
)
from .viewport import FractalType, ViewportState

logger = logging.getLogger(__name__)


class IterationResult:
    """Base class for the outcome of iterating one point."""

    status: int = INTERIOR

    @property
    def escaped(self) -> bool:
        return self.status == ESCAPED

    @property
    def has_detail(self) -> bool:
        return self.status != INTERIOR

    def as_kernel_tuple(self) -> Tuple[int, int, float, float]:
        """Flatten into the (status, iteration, smooth, stripe_sum) layout of the kernels."""
        return INTERIOR, 0, 0.0, 0.0


@dataclass(frozen=True)
class Escaped(IterationResult):
    """The orbit left the escape radius after ``iteration_count`` steps."""

    iteration_count: int
    smooth_iteration: float
    stripe_sum: float

    status = ESCAPED

    def as_kernel_tuple(self) -> Tuple[int, int, float, float]:
        return self.status, self.iteration_count, self.smooth_iteration, self.stripe_sum


@dataclass(frozen=True)
class Interior(IterationResult):
    """The point never escaped (or was caught by an early-exit test)."""

    status = INTERIOR


@dataclass(frozen=True)
class InteriorWithDetail(IterationResult):
    """Capped point with detail values, produced only with inner calculation enabled."""

    iteration_count: int
    smooth_iteration: float
    stripe_sum: float

    status = INTERIOR_DETAIL

    def as_kernel_tuple(self) -> Tuple[int, int, float, float]:
        return self.status, self.iteration_count, self.smooth_iteration, self.stripe_sum


def result_from_kernel(status: int, iteration: int, smooth: float, stripe_sum: float) -> IterationResult:
    """Build a tagged result from raw kernel output."""
    if status == ESCAPED:
        return Escaped(int(iteration), float(smooth), float(stripe_sum))
    if status == INTERIOR_DETAIL:
        return InteriorWithDetail(int(iteration), float(smooth), float(stripe_sum))
    return Interior()


def in_main_cardioid(cr: float, ci: float) -> bool:
    """Check membership in the main cardioid of the Mandelbrot set."""
    return bool(_in_main_cardioid(float(cr), float(ci)))


def in_period2_bulb(cr: float, ci: float) -> bool:
    """Check membership in the period-2 bulb centered at -1."""
    return bool(_in_period2_bulb(float(cr), float(ci)))


def iterate_point(cr: float, ci: float, julia_seed: Tuple[float, float] = (0.0, 0.0),
                  max_iter: int = 128, is_julia: bool = False,
                  fractal_type: FractalType = FractalType.STANDARD,
                  stripes: bool = False, stripe_frequency: float = 5.0,
                  inner_calculation: bool = False) -> IterationResult:
    """
    Iterate a single point of the complex plane.

    Args:
        cr, ci: Sample coordinate
        julia_seed: Constant used in Julia mode
        max_iter: Iteration cap
        is_julia: Iterate the point against ``julia_seed`` instead of from zero
        fractal_type: Recurrence variant
        stripes: Accumulate the stripe average sum
        stripe_frequency: Angular frequency of the stripe function
        inner_calculation: Enable early exits and detailed interior values

    Returns:
        Escaped, Interior or InteriorWithDetail
    """
    if max_iter <= 0:
        raise ValueError("max_iter must be positive")

    raw = escape_time_kernel(
        float(cr), float(ci), float(julia_seed[0]), float(julia_seed[1]),
        int(max_iter), bool(is_julia), fractal_type == FractalType.FOLDED,
        bool(stripes), float(stripe_frequency), bool(inner_calculation))
    return result_from_kernel(*raw)


class IterationEngine:
    """Iteration function with the parameters of one viewport bound in."""

    def __init__(self, max_iter: int = 128, julia_seed: Tuple[float, float] = (0.0, 0.0),
                 is_julia: bool = False, fractal_type: FractalType = FractalType.STANDARD,
                 stripes: bool = False, stripe_frequency: float = 5.0,
                 inner_calculation: bool = False):
        if max_iter <= 0:
            raise ValueError("max_iter must be positive")
        self.max_iter = max_iter
        self.julia_seed = julia_seed
        self.is_julia = is_julia
        self.fractal_type = fractal_type
        self.stripes = stripes
        self.stripe_frequency = stripe_frequency
        self.inner_calculation = inner_calculation

    @classmethod
    def from_viewport(cls, viewport: ViewportState) -> 'IterationEngine':
        return cls(
            max_iter=viewport.max_iterations,
            julia_seed=(viewport.julia_x, viewport.julia_y),
            is_julia=viewport.is_julia,
            fractal_type=viewport.fractal_type,
            stripes=viewport.stripes,
            stripe_frequency=viewport.stripe_frequency,
            inner_calculation=viewport.inner_calculation,
        )

    def iterate(self, cr: float, ci: float) -> IterationResult:
        return iterate_point(cr, ci, self.julia_seed, self.max_iter, self.is_julia,
                             self.fractal_type, self.stripes, self.stripe_frequency,
                             self.inner_calculation)
