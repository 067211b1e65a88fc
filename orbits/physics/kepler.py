# orbits/physics/kepler.py
"""
Keplerian elements and their conversion to Cartesian state vectors.

Angles are radians, the semi-major axis is in AU and the gravitational
parameter mu = central_mass * GRAV is in AU^3/day^2, so positions come out
in AU and velocities in AU/day.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from orbits.config.settings import AU_M, DEG2RAD, GRAV, KEPLER_MAX_ITER, KEPLER_TOLERANCE
from orbits.physics.errors import ConvergenceError
from orbits.physics.vector3 import Vector3


@dataclass(frozen=True)
class KeplerElements:
    """Classical orbital elements at epoch."""
    eccentricity: float
    semimajor_axis: float  # AU
    periapsis: float       # argument of periapsis
    ascending_node: float  # longitude of ascending node
    inclination: float
    mean_anomaly: float

    def __post_init__(self):
        if not (0.0 <= self.eccentricity < 1.0):
            raise ValueError(
                f"Eccentricity e={self.eccentricity} is out of bounds [0, 1) for an elliptical orbit."
            )
        if not self.semimajor_axis > 0.0:
            raise ValueError(f"Semi-major axis must be > 0 (got {self.semimajor_axis}).")

    @classmethod
    def from_degrees(cls, eccentricity, semimajor_axis, periapsis_deg, ascending_node_deg,
                     inclination_deg, mean_anomaly_deg, semimajor_axis_in_meters: bool = False):
        """Build elements from angles in degrees, optionally with a in meters."""
        a = semimajor_axis / AU_M if semimajor_axis_in_meters else semimajor_axis
        return cls(
            eccentricity=float(eccentricity),
            semimajor_axis=float(a),
            periapsis=periapsis_deg * DEG2RAD,
            ascending_node=ascending_node_deg * DEG2RAD,
            inclination=inclination_deg * DEG2RAD,
            mean_anomaly=mean_anomaly_deg * DEG2RAD,
        )

    @classmethod
    def from_config(cls, cfg: dict) -> "KeplerElements":
        """
        Accepts either radians/AU keys (the field names) or the
        "<field>_deg" / "semimajor_axis_m" spellings used in settings.
        """
        if "semimajor_axis_m" in cfg:
            a, in_m = cfg["semimajor_axis_m"], True
        else:
            a, in_m = cfg["semimajor_axis"], False
        if "mean_anomaly_deg" in cfg:
            return cls.from_degrees(
                cfg["eccentricity"], a,
                cfg["periapsis_deg"], cfg["ascending_node_deg"],
                cfg["inclination_deg"], cfg["mean_anomaly_deg"],
                semimajor_axis_in_meters=in_m,
            )
        return cls(
            eccentricity=float(cfg["eccentricity"]),
            semimajor_axis=float(a / AU_M if in_m else a),
            periapsis=float(cfg["periapsis"]),
            ascending_node=float(cfg["ascending_node"]),
            inclination=float(cfg["inclination"]),
            mean_anomaly=float(cfg["mean_anomaly"]),
        )


def eccentric_anomaly(e: float, M: float, tolerance: float = KEPLER_TOLERANCE,
                      max_iterations: int = KEPLER_MAX_ITER) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly E
    using Newton-Raphson started at E0 = M.

    Stops once the Newton step |dE| <= tolerance.

    Raises:
        ConvergenceError: if max_iterations is exceeded or an iterate
            stops being finite.
    """
    E = float(M)
    for _ in range(max_iterations):
        delta_M = M - (E - e * math.sin(E))
        delta_E = delta_M / (1.0 - e * math.cos(E))
        E += delta_E
        if not math.isfinite(E):
            raise ConvergenceError(f"Kepler solver diverged for M={M}, e={e}.")
        if abs(delta_E) <= tolerance:
            return E
    raise ConvergenceError(
        f"Kepler's equation did not converge after {max_iterations} iterations "
        f"for M={M}, e={e} (last E={E})."
    )


def true_anomaly(E: float, e: float) -> float:
    return 2.0 * math.atan2(math.sqrt(1.0 + e) * math.sin(E / 2.0),
                            math.sqrt(1.0 - e) * math.cos(E / 2.0))


def perifocal_to_reference(periapsis: float, ascending_node: float, inclination: float):
    """Rotation matrix (rows) taking perifocal coordinates to the reference frame."""
    cO = math.cos(ascending_node)
    sO = math.sin(ascending_node)
    co = math.cos(periapsis)
    so = math.sin(periapsis)
    ci = math.cos(inclination)
    si = math.sin(inclination)

    return [
        [cO * co - sO * so * ci, -cO * so - sO * co * ci, sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si, co * si, ci],
    ]


def _rotate(rotation, v: Vector3) -> Vector3:
    p = v.as_tuple()
    return Vector3(*(sum(rotation[j][k] * p[k] for k in range(3)) for j in range(3)))


def kepler_to_state_vectors(elements: KeplerElements, central_mass: float,
                            grav: float = GRAV) -> Tuple[Vector3, Vector3]:
    """
    Convert Keplerian elements to a position/velocity pair relative to the
    central body.

    Args:
        elements: orbital elements (angles in radians, a in AU)
        central_mass: mass of the central body (kg)
        grav: gravitational constant (AU^3 kg^-1 day^-2)

    Returns:
        (position [AU], velocity [AU/day])
    """
    e = elements.eccentricity
    a = elements.semimajor_axis
    mu = central_mass * grav

    E = eccentric_anomaly(e, elements.mean_anomaly)
    nu = true_anomaly(E, e)
    r = a * (1.0 - e * math.cos(E))

    o = Vector3(math.cos(nu), math.sin(nu), 0.0) * r
    odot = Vector3(-math.sin(E), math.sqrt(1.0 - e * e) * math.cos(E), 0.0) * (math.sqrt(mu * a) / r)

    rotation = perifocal_to_reference(elements.periapsis, elements.ascending_node, elements.inclination)
    return _rotate(rotation, o), _rotate(rotation, odot)
