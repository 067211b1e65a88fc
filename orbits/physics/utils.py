# orbits/physics/utils.py
import math

import numpy as np


def specific_energy(state, mu: float) -> float:
    """
    Two-body specific mechanical energy (kinetic + potential).
    Used as a numerical stability diagnostic for the integrator.
    """
    r = np.linalg.norm(state.r)
    kinetic = 0.5 * np.dot(state.v, state.v)
    return float(kinetic - mu / r)


def mean_motion(a: float, mu: float) -> float:
    return math.sqrt(mu / a**3)


def orbital_period(a: float, mu: float) -> float:
    """Period (days) of an elliptical orbit with semi-major axis a (AU)."""
    return 2.0 * math.pi / mean_motion(a, mu)
