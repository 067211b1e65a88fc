"""
Tests for the two-body force model and the fixed-step RK4 propagator.
"""
import math

import numpy as np
import pytest

from orbits.config.settings import GRAV, SOL_MASS
from orbits.physics.errors import PropagationError
from orbits.physics.forces import NewtonianGravity
from orbits.physics.kepler import KeplerElements, kepler_to_state_vectors
from orbits.physics.solver import RK4Solver, propagate_two_body
from orbits.physics.state import State
from orbits.physics.utils import mean_motion, orbital_period, specific_energy

MU_SOL = SOL_MASS * GRAV


def _state(elements, central_mass=SOL_MASS):
    return State.from_vectors(*kepler_to_state_vectors(elements, central_mass))


def _exact_state(elements, t):
    """Analytic two-body state after t days: advance the mean anomaly."""
    n = mean_motion(elements.semimajor_axis, MU_SOL)
    advanced = KeplerElements(
        elements.eccentricity, elements.semimajor_axis, elements.periapsis,
        elements.ascending_node, elements.inclination, elements.mean_anomaly + n * t,
    )
    return _state(advanced)


ORBIT = KeplerElements(0.1, 1.0, 0.3, 0.7, 0.1, 0.5)


class TestNewtonianGravity:

    def test_points_at_origin_with_inverse_square_magnitude(self):
        g = NewtonianGravity.from_mass(SOL_MASS)
        a = g.acceleration(State([2.0, 0.0, 0.0], [0.0, 0.0, 0.0]))
        np.testing.assert_allclose(a, [-MU_SOL / 4.0, 0.0, 0.0])

    def test_zero_radius_is_degenerate(self):
        g = NewtonianGravity(1.0)
        with pytest.raises(PropagationError):
            g.acceleration(State([0.0, 0.0, 0.0], [0.0, 1.0, 0.0]))


class TestRK4Solver:

    def test_rejects_non_positive_step(self):
        with pytest.raises(ValueError):
            RK4Solver(NewtonianGravity(1.0), step_size=0.0)

    def test_step_count(self):
        solver = RK4Solver(NewtonianGravity(1.0), step_size=1e-2)
        assert solver.num_steps(10.0) == 1000
        assert solver.num_steps(0.015) == 2
        assert solver.num_steps(-0.5) == 50
        assert solver.num_steps(1e-5) == 1

    def test_zero_duration_returns_copy(self):
        s0 = _state(ORBIT)
        out = propagate_two_body(s0, SOL_MASS, 0.0)
        assert out is not s0
        np.testing.assert_array_equal(out.as_vector(), s0.as_vector())

    def test_input_state_is_not_modified(self):
        s0 = _state(ORBIT)
        before = s0.as_vector().copy()
        propagate_two_body(s0, SOL_MASS, 3.0)
        np.testing.assert_array_equal(s0.as_vector(), before)

    def test_matches_analytic_solution(self):
        s0 = _state(ORBIT)
        out = propagate_two_body(s0, SOL_MASS, 50.0)
        exact = _exact_state(ORBIT, 50.0)
        np.testing.assert_allclose(out.r, exact.r, atol=1e-9)
        np.testing.assert_allclose(out.v, exact.v, atol=1e-11)

    def test_two_halves_equal_one_whole(self):
        s0 = _state(ORBIT)
        whole = propagate_two_body(s0, SOL_MASS, 10.0)
        halves = propagate_two_body(propagate_two_body(s0, SOL_MASS, 5.0), SOL_MASS, 5.0)
        np.testing.assert_allclose(halves.as_vector(), whole.as_vector(), rtol=0, atol=1e-12)

    def test_forward_then_backward_returns_to_start(self):
        s0 = _state(ORBIT)
        there = propagate_two_body(s0, SOL_MASS, 20.0)
        back = propagate_two_body(there, SOL_MASS, -20.0)
        np.testing.assert_allclose(back.r, s0.r, atol=1e-10)
        np.testing.assert_allclose(back.v, s0.v, atol=1e-12)

    def test_global_error_is_fourth_order(self):
        s0 = _state(ORBIT)
        exact = _exact_state(ORBIT, 80.0)
        coarse = propagate_two_body(s0, SOL_MASS, 80.0, step_size=4.0)
        fine = propagate_two_body(s0, SOL_MASS, 80.0, step_size=2.0)
        err_coarse = np.linalg.norm(coarse.r - exact.r)
        err_fine = np.linalg.norm(fine.r - exact.r)
        assert 12.0 < err_coarse / err_fine < 20.0

    def test_non_finite_result_raises(self):
        bad = State([float("nan"), 1.0, 0.0], [0.0, 0.01, 0.0])
        with pytest.raises(PropagationError):
            propagate_two_body(bad, SOL_MASS, 1.0)


class TestConservation:

    def test_circular_orbit_keeps_its_radius_over_a_period(self):
        el = KeplerElements(0.0, 0.1, 0.0, 0.0, 0.0, 0.0)
        period = orbital_period(0.1, MU_SOL)
        s = _state(el)
        s0 = s.copy()
        n_ticks = 40
        for _ in range(n_ticks):
            s = propagate_two_body(s, SOL_MASS, period / n_ticks)
            assert np.linalg.norm(s.r) == pytest.approx(0.1, rel=1e-8)
        np.testing.assert_allclose(s.r, s0.r, atol=1e-7)

    def test_energy_is_conserved(self):
        el = KeplerElements(0.4, 1.2, 1.0, 0.2, 0.3, 0.0)
        s0 = _state(el)
        s1 = propagate_two_body(s0, SOL_MASS, 100.0)
        e0 = specific_energy(s0, MU_SOL)
        assert e0 == pytest.approx(-MU_SOL / (2 * 1.2), rel=1e-12)
        assert specific_energy(s1, MU_SOL) == pytest.approx(e0, rel=1e-9)

    def test_period_matches_keplers_third_law(self):
        assert orbital_period(1.0, MU_SOL) == pytest.approx(365.25, rel=2e-3)
        assert mean_motion(1.0, MU_SOL) == pytest.approx(2 * math.pi / orbital_period(1.0, MU_SOL))
