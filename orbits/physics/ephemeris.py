# orbits/physics/ephemeris.py
import math

import erfa
import numpy as np

from orbits.config.settings import OBLIQUITY_J2000, PLANETS
from orbits.physics.vector3 import Vector3

# Analytic planetary ephemeris (Simon et al. 1994, via ERFA plan94).
# plan94 is heliocentric, J2000 equatorial, AU; positions here are rotated
# into the J2000 ecliptic, the frame the rest of the engine works in.
# Accuracy is a few arcseconds for 1800-2050; outside 1000-3000 AD ERFA
# issues an ErfaWarning.

_PLAN94_INDEX = {name: i + 1 for i, name in enumerate(PLANETS)}

_COS_EPS = math.cos(OBLIQUITY_J2000)
_SIN_EPS = math.sin(OBLIQUITY_J2000)


def equatorial_to_ecliptic(p) -> np.ndarray:
    x, y, z = np.asarray(p, dtype=float)
    return np.array([x, _COS_EPS * y + _SIN_EPS * z, -_SIN_EPS * y + _COS_EPS * z], dtype=float)


def _plan94(species: str, jd: float):
    key = species.lower()
    if key not in _PLAN94_INDEX:
        raise ValueError(f"Unknown ephemeris body '{species}' (known: {', '.join(PLANETS)})")
    return erfa.plan94(float(jd), 0.0, _PLAN94_INDEX[key])


def planet_position(species: str, jd: float) -> Vector3:
    """
    Heliocentric ecliptic position (AU) of a major planet at Julian date jd.
    """
    pv = _plan94(species, jd)
    return Vector3.from_array(equatorial_to_ecliptic(pv["p"]))

