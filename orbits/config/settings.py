"""
Project settings (constants + small helpers).
Units: astronomical units (AU), days (d), kilograms (kg), AU/day.
"""
from __future__ import annotations

import math
import os
from typing import Optional

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
OUTPUT_DIR = os.environ.get("ORBITS_OUTPUT_DIR", os.path.join(BASE_DIR, "outputs"))

# Run
RUN_ID_PREFIX = "positions"
VALIDATE_ON_IMPORT = False

# Gravity in AU^3 / (kg * day^2)
GRAV = 1.488e-34
AU_M = 1.49597870691e11  # meters per AU
DEG2RAD = math.pi / 180.0

# Sol
SOL_NAME = "Sol"
SOL_MASS = 1.98847e30

# Ephemeris planets (kg)
PLANET_MASSES = {
    "mercury": 3.285e23,
    "venus": 4.867e24,
    "earth": 5.972e24,
    "mars": 6.39e23,
    "jupiter": 1.89813e27,
    "saturn": 5.683e26,
    "uranus": 8.681e25,
    "neptune": 1.024e26,
}
PLANETS = tuple(PLANET_MASSES)

# J2000 mean obliquity of the ecliptic (IAU 2006), radians
OBLIQUITY_J2000 = 84381.406 / 3600.0 * DEG2RAD

# Clock
START_JD = 2459642.5  # 2022-03-01 00:00 TT
DEFAULT_TICK_DAYS = 10.0
DEFAULT_RUN_DAYS = 365.0

# Integrator
RK4_STEP = 1e-2  # days
MAX_STEPS_PER_TICK = 100_000
MIN_STEPS_PER_ORBIT = 100

# Kepler solver
KEPLER_TOLERANCE = 1e-6
KEPLER_MAX_ITER = 100

# Default system: Sol, Mars from the ephemeris, and a Keplerian Mars
# started from its osculating elements at START_JD.
DEFAULT_SYSTEM = {
    "time": START_JD,
    "anchor": {"name": SOL_NAME, "mass": SOL_MASS},
    "ephemeris": ["mars"],
    "keplerian": [
        {
            "name": "mars-kep",
            "mass": 12.0,
            "central": SOL_NAME,
            "elements": {
                "eccentricity": 9.340419574613645e-02,
                "semimajor_axis_m": 2.279286491077153e11,
                "periapsis_deg": 2.867429735262922e02,
                "ascending_node_deg": 4.949033037641041e01,
                "inclination_deg": 1.847932354966402e00,
                "mean_anomaly_deg": 3.025677836626235e02,
            },
        },
    ],
}


def clamp_tick(val: Optional[float]) -> float:
    out = float(DEFAULT_TICK_DAYS if val is None else val)
    return max(float(RK4_STEP), out)


def validate_settings() -> None:
    if GRAV <= 0:
        raise ValueError("GRAV must be > 0")
    if AU_M <= 0:
        raise ValueError("AU_M must be > 0")
    if SOL_MASS <= 0:
        raise ValueError("SOL_MASS must be > 0")
    if any(m <= 0 for m in PLANET_MASSES.values()):
        raise ValueError("PLANET_MASSES must all be > 0")
    if RK4_STEP <= 0:
        raise ValueError("RK4_STEP must be > 0")
    if MAX_STEPS_PER_TICK <= 0:
        raise ValueError("MAX_STEPS_PER_TICK must be > 0")
    if MIN_STEPS_PER_ORBIT <= 0:
        raise ValueError("MIN_STEPS_PER_ORBIT must be > 0")
    if KEPLER_TOLERANCE <= 0:
        raise ValueError("KEPLER_TOLERANCE must be > 0")
    if KEPLER_MAX_ITER <= 0:
        raise ValueError("KEPLER_MAX_ITER must be > 0")
    if DEFAULT_TICK_DAYS <= 0:
        raise ValueError("DEFAULT_TICK_DAYS must be > 0")


if VALIDATE_ON_IMPORT:
    validate_settings()
