import pytest

from pyceltic.field import JULIA, SELF_MAP
from pyceltic.orbit import (
    ESCAPED,
    EXHAUSTED,
    PERIOD_FOUND,
    GridRecurrenceDetector,
    LinearRecurrenceDetector,
    Orbit,
    orbit_at,
    trace_orbit,
)
from pyceltic.viewport import Viewport

SEEDS = [
    complex(re / 8, im / 8)
    for re in range(-16, 17, 3)
    for im in range(-12, 13, 3)
]


def test_two_cycle_reports_first_recurrence():
    # formula 1 with c = -1: 0 -> -1 -> 0 -> -1
    orbit = trace_orbit(0j, complex(-1, 0), 1, 100)
    assert orbit.status == PERIOD_FOUND
    assert orbit.steps == 2
    assert orbit.period == 2
    assert len(orbit.points) == orbit.steps + 1
    assert orbit.visited == orbit.steps + 1 == 3
    assert orbit.points == (-1 + 0j, 0j, -1 + 0j)


def test_fixed_point_recurs_on_second_step():
    orbit = trace_orbit(0j, 0j, 1, 100)
    assert orbit.status == PERIOD_FOUND
    assert orbit.period == 1
    assert len(orbit) == 2


def test_escape_on_first_step():
    orbit = trace_orbit(2 + 0j, 2 + 0j, 1, 100)
    assert orbit.status == ESCAPED
    assert orbit.escaped
    assert orbit.steps == 0
    assert orbit.points == (6 + 0j,)
    assert orbit.period is None


def test_exhausted_when_budget_runs_out():
    # formula 3 on a real seed is plain squaring: 0.81, 0.6561, 0.43...
    orbit = trace_orbit(0.9 + 0j, 0j, 3, 3)
    assert orbit.status == EXHAUSTED
    assert orbit.steps == 3
    assert len(orbit.points) == 3
    assert orbit.visited == 3
    assert orbit.period is None


@pytest.mark.parametrize("formula", [1, 2, 3, 4])
@pytest.mark.parametrize("seed", SEEDS)
def test_termination_and_escape_consistency(formula, seed):
    max_steps = 200
    orbit = trace_orbit(seed, seed, formula, max_steps)
    assert orbit.status in (ESCAPED, PERIOD_FOUND, EXHAUSTED)
    assert 1 <= len(orbit.points) <= max_steps
    if orbit.status == EXHAUSTED:
        assert orbit.steps == max_steps
        assert len(orbit.points) == max_steps
    else:
        assert len(orbit.points) == orbit.steps + 1
    if orbit.status == ESCAPED:
        assert abs(orbit.points[-1]) > 2.0
        assert all(abs(p) <= 2.0 for p in orbit.points[:-1])


@pytest.mark.parametrize("formula", [1, 2, 3, 4])
def test_grid_detector_agrees_with_linear_scan(formula):
    for seed in SEEDS:
        for c in (seed, complex(-0.7, 0.27015)):
            linear = trace_orbit(seed, c, formula, 120, detector=LinearRecurrenceDetector())
            grid = trace_orbit(seed, c, formula, 120, detector=GridRecurrenceDetector())
            assert grid == linear


def test_detector_is_reset_between_traces():
    detector = GridRecurrenceDetector()
    first = trace_orbit(0j, complex(-1, 0), 1, 50, detector=detector)
    second = trace_orbit(0j, complex(-1, 0), 1, 50, detector=detector)
    assert first == second


def test_detectors_use_strict_tolerance():
    for detector in (LinearRecurrenceDetector(0.5), GridRecurrenceDetector(0.5)):
        assert not detector.add(0j)
        assert not detector.add(0.5 + 0j)
        assert detector.add(0.9 + 0j)


def test_trace_is_deterministic():
    seed, c = complex(0.1, -0.3), complex(-0.4, 0.6)
    for formula in (1, 2, 3, 4):
        assert trace_orbit(seed, c, formula, 500) == trace_orbit(seed, c, formula, 500)


def test_tolerance_is_a_parameter():
    # The first two points, 0.81 and 0.6561, are about 0.15 apart
    loose = trace_orbit(0.9 + 0j, 0j, 3, 10, tolerance=0.2)
    assert loose.status == PERIOD_FOUND
    assert loose.steps == 1


def test_non_finite_seed_escapes():
    orbit = trace_orbit(complex("nan"), 0j, 1, 10)
    assert orbit.status == ESCAPED
    assert orbit.steps == 0


def test_huge_iterate_does_not_overflow():
    # Both components stay finite but abs() of the iterate would overflow
    orbit = trace_orbit(complex(1.25e154, 0.6e154), 0j, 2, 10)
    assert orbit.status == ESCAPED


def test_orbit_is_immutable():
    orbit = trace_orbit(0j, 0j, 1, 10)
    assert isinstance(orbit, Orbit)
    with pytest.raises(AttributeError):
        orbit.status = ESCAPED


def test_orbit_at_self_map():
    viewport = Viewport(zoom=100.0, width=400, height=300)
    c = viewport.to_complex(150, 160)
    assert orbit_at(viewport, 150, 160, SELF_MAP, None, 4, 250) == trace_orbit(c, c, 4, 250)


def test_orbit_at_julia():
    viewport = Viewport(zoom=100.0, width=400, height=300)
    julia_c = complex(-0.8, 0.156)
    seed = viewport.to_complex(220, 90)
    expected = trace_orbit(seed, julia_c, 2, 250)
    assert orbit_at(viewport, 220, 90, JULIA, julia_c, 2, 250) == expected


def test_orbit_at_julia_needs_constant():
    with pytest.raises(ValueError, match="julia_c"):
        orbit_at(Viewport(), 0, 0, JULIA, None, 1, 10)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"formula": 0},
        {"formula": 5},
        {"max_orbit_steps": 0},
        {"escape_radius": -2.0},
        {"tolerance": 0.0},
    ],
)
def test_rejects_bad_arguments(kwargs):
    args = {"formula": 1, "max_orbit_steps": 10}
    args.update(kwargs)
    with pytest.raises(ValueError):
        trace_orbit(0j, 0j, **args)


def test_grid_detector_finds_neighbours_across_cells():
    # Cells are 1.0 wide for a tolerance of 0.5
    detector = GridRecurrenceDetector(0.5)
    assert not detector.add(complex(0.99, -0.01))
    assert detector.add(complex(1.3, 0.3))
    assert not detector.add(complex(3.2, 0.0))
