import math

import numpy as np
import pytest

from fractal_explorer.core.math_functions import (
    Escaped,
    Interior,
    InteriorWithDetail,
    IterationEngine,
    in_main_cardioid,
    in_period2_bulb,
    iterate_point,
)
from fractal_explorer.core.viewport import FractalType, ViewportState


def test_far_point_escapes_quickly():
    result = iterate_point(2.0, 2.0, max_iter=100)

    assert isinstance(result, Escaped)
    assert result.escaped
    # |z|^2 goes 8, 104, 10600
    assert result.iteration_count == 3
    expected = 4 - math.log(math.log(10600.0) / 2) / math.log(2)
    assert result.smooth_iteration == pytest.approx(expected)


@pytest.mark.parametrize("max_iter", [100, 1000])
def test_origin_is_interior(max_iter):
    assert iterate_point(0.0, 0.0, max_iter=max_iter) == Interior()


def test_early_exit_gives_plain_interior_even_with_inner_calculation():
    result = iterate_point(0.0, 0.0, max_iter=100, inner_calculation=True)
    assert isinstance(result, Interior)
    assert not result.has_detail


def test_inner_calculation_outside_early_exit_region_has_detail():
    # Julia mode skips the cardioid test; z -> z^2 from 0.5 stays bounded
    result = iterate_point(0.5, 0.0, julia_seed=(0.0, 0.0), max_iter=100,
                           is_julia=True, inner_calculation=True)

    assert isinstance(result, InteriorWithDetail)
    assert result.iteration_count == 100
    assert result.smooth_iteration == pytest.approx(101.0)


def test_julia_iterates_from_the_point():
    # 2 -> 4 -> 16 -> 256
    result = iterate_point(2.0, 0.0, julia_seed=(0.0, 0.0), max_iter=100, is_julia=True)
    assert isinstance(result, Escaped)
    assert result.iteration_count == 3


def test_folded_variant_changes_the_orbit():
    standard = iterate_point(-1.0, 1.0, max_iter=100)
    folded = iterate_point(-1.0, 1.0, max_iter=100, fractal_type=FractalType.FOLDED)

    assert standard.iteration_count == 5
    assert folded.iteration_count == 4


def test_standard_recurrence_is_conjugate_symmetric():
    upper = iterate_point(-0.75, 0.1, max_iter=200)
    lower = iterate_point(-0.75, -0.1, max_iter=200)
    assert upper.iteration_count == lower.iteration_count
    assert upper.smooth_iteration == pytest.approx(lower.smooth_iteration)


def test_escape_count_independent_of_larger_cap():
    low = iterate_point(0.5, 0.5, max_iter=200)
    high = iterate_point(0.5, 0.5, max_iter=5000)
    assert low.escaped
    assert low == high


def test_stripe_sum_only_accumulated_when_requested():
    plain = iterate_point(2.0, 2.0, max_iter=100)
    striped = iterate_point(2.0, 2.0, max_iter=100, stripes=True, stripe_frequency=5.0)

    assert plain.stripe_sum == 0.0
    assert 0.0 < striped.stripe_sum <= striped.iteration_count
    assert striped.iteration_count == plain.iteration_count


def test_invalid_cap_rejected():
    with pytest.raises(ValueError):
        iterate_point(0.0, 0.0, max_iter=0)


@pytest.mark.parametrize("point,inside", [
    ((0.0, 0.0), True),
    ((-0.5, 0.3), True),
    ((0.3, 0.0), False),
    ((-1.0, 0.0), False),
])
def test_main_cardioid(point, inside):
    assert in_main_cardioid(*point) is inside


@pytest.mark.parametrize("point,inside", [
    ((-1.0, 0.0), True),
    ((-1.2, 0.1), True),
    ((-0.5, 0.0), False),
])
def test_period2_bulb(point, inside):
    assert in_period2_bulb(*point) is inside


def test_engine_binds_viewport_parameters():
    view = ViewportState(is_julia=True, julia_x=0.0, julia_y=0.0, max_iterations=100)
    engine = IterationEngine.from_viewport(view)

    assert engine.is_julia
    assert engine.iterate(2.0, 0.0).iteration_count == 3


def test_early_exit_regions_never_escape():
    checked = 0
    for cr in np.linspace(-2.0, 0.5, 101):
        for ci in np.linspace(-1.2, 1.2, 101):
            if in_main_cardioid(cr, ci) or in_period2_bulb(cr, ci):
                assert iterate_point(cr, ci, max_iter=10000) == Interior(), (cr, ci)
                checked += 1
    assert checked > 0
