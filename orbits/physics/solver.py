# orbits/physics/solver.py
import logging
import math

import numpy as np

from orbits.config.settings import GRAV, MAX_STEPS_PER_TICK, RK4_STEP
from orbits.physics.errors import PropagationError
from orbits.physics.forces import NewtonianGravity
from orbits.physics.state import State

logger = logging.getLogger(__name__)


class RK4Solver:
    """
    Runge-Kutta 4th order solver for state integration.
    """
    def __init__(self, force_model, step_size: float = RK4_STEP):
        if step_size <= 0:
            raise ValueError("step_size must be > 0")
        self.force = force_model
        self.step_size = float(step_size)

    def _deriv(self, s, t):
        a = self.force.acceleration(s, t)
        return np.hstack((s.v, a))

    def step(self, state, dt, t0: float = 0.0):
        """
        Perform a single RK4 step.
        """
        y0 = np.hstack((state.r, state.v))

        k1 = self._deriv(state, t0)
        k2_state = State(y0[:3] + 0.5 * dt * k1[:3], y0[3:] + 0.5 * dt * k1[3:])
        k2 = self._deriv(k2_state, t0 + 0.5 * dt)
        k3_state = State(y0[:3] + 0.5 * dt * k2[:3], y0[3:] + 0.5 * dt * k2[3:])
        k3 = self._deriv(k3_state, t0 + 0.5 * dt)
        k4_state = State(y0[:3] + dt * k3[:3], y0[3:] + dt * k3[3:])
        k4 = self._deriv(k4_state, t0 + dt)

        y_next = y0 + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)

        return State(y_next[:3], y_next[3:])

    def num_steps(self, duration: float) -> int:
        # 1e-9 keeps durations that are exact multiples of the step from
        # picking up an extra step through rounding
        return max(1, math.ceil(abs(duration) / self.step_size - 1e-9))

    def integrate(self, state, duration: float, t0: float = 0.0):
        """
        Integrate from t0 to t0 + duration with fixed steps and return the
        final state only. The step count is ceil(|duration| / step_size)
        and the steps are equal, so the end time is hit exactly and no step
        is longer than step_size. A negative duration integrates backwards.
        """
        duration = float(duration)
        if duration == 0.0:
            return state.copy()

        n = self.num_steps(duration)
        if n > MAX_STEPS_PER_TICK:
            logger.warning(
                "Integrating %.4g days takes %d RK4 steps (limit %d); consider shorter ticks.",
                duration, n, MAX_STEPS_PER_TICK,
            )
        h = duration / n

        s = state
        t = float(t0)
        for _ in range(n):
            s = self.step(s, h, t)
            t += h

        if not s.is_finite():
            raise PropagationError(
                f"Propagation over {duration} days produced a non-finite state: {s!r}"
            )
        return s


def propagate_two_body(state, central_mass: float, duration: float,
                       grav: float = GRAV, step_size: float = RK4_STEP, t0: float = 0.0):
    """
    Advance a relative state vector under the gravity of a single central
    mass. Returns a new State; the input is not modified.
    """
    solver = RK4Solver(NewtonianGravity.from_mass(central_mass, grav), step_size=step_size)
    return solver.integrate(state, duration, t0=t0)
