import pytest

from fractal_explorer.core.iteration_policy import (
    AdaptiveIterationPolicy,
    clamp_iterations,
    compute_max_iterations,
)
from fractal_explorer.core.viewport import ViewportState


@pytest.mark.parametrize("size,expected", [
    (3.0, 100),
    (3e-4, 400),
    (3e-6, 600),
    (1e-10, 1047),
    (1e-120, 10000),
])
def test_compute_max_iterations(size, expected):
    assert compute_max_iterations(size) == expected


def test_compute_max_iterations_rejects_non_positive_size():
    with pytest.raises(ValueError):
        compute_max_iterations(0.0)


def test_clamp_iterations():
    assert clamp_iterations(5) == 100
    assert clamp_iterations(500) == 500
    assert clamp_iterations(50000) == 10000


def test_auto_policy_applies_to_viewport():
    policy = AdaptiveIterationPolicy()
    view = policy.apply(ViewportState(size=3e-4))
    assert view.max_iterations == 400


def test_manual_policy_leaves_viewport_alone():
    policy = AdaptiveIterationPolicy(auto=False)
    view = ViewportState(size=3e-4, max_iterations=128)
    assert policy.apply(view) is view


def test_manual_adjustment_disables_auto():
    policy = AdaptiveIterationPolicy()
    view = policy.apply(ViewportState())

    view = policy.increase(view)
    assert not policy.auto
    assert view.max_iterations == 200

    # zooming no longer changes the cap
    assert policy.apply(view.replace(size=3e-4)).max_iterations == 200


def test_adjustments_are_clamped():
    policy = AdaptiveIterationPolicy()
    assert policy.decrease(ViewportState(max_iterations=100)).max_iterations == 100
    assert policy.increase(ViewportState(max_iterations=8000)).max_iterations == 10000
    assert policy.set_iterations(ViewportState(), 3).max_iterations == 100


def test_toggle_auto_reapplies():
    policy = AdaptiveIterationPolicy(auto=False)
    view = policy.toggle_auto(ViewportState(size=3e-4, max_iterations=128))

    assert policy.auto
    assert view.max_iterations == 400
