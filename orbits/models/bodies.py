# orbits/models/bodies.py
import logging
from typing import Optional

from orbits.config.settings import GRAV, MIN_STEPS_PER_ORBIT, PLANET_MASSES, RK4_STEP, SOL_MASS, SOL_NAME
from orbits.physics.entity import Entity
from orbits.physics.ephemeris import planet_position
from orbits.physics.kepler import KeplerElements, kepler_to_state_vectors
from orbits.physics.solver import propagate_two_body
from orbits.physics.state import State
from orbits.physics.utils import orbital_period
from orbits.physics.vector3 import Vector3

logger = logging.getLogger(__name__)


class Anchor(Entity):
    """
    Fixed body at the origin of the system frame (the central star).
    """
    def __init__(self, name: str = SOL_NAME, mass: float = SOL_MASS, time: float = 0.0):
        super().__init__(name, mass, time)

    def relative_position(self) -> Vector3:
        return Vector3.zero()


class EphemerisBody(Entity):
    """
    Planet whose heliocentric position comes from the analytic ephemeris.
    Only the time cursor is stored; coordinates are evaluated on demand.
    """
    def __init__(self, species: str, time: float, mass: Optional[float] = None, name: Optional[str] = None):
        key = species.lower()
        if key not in PLANET_MASSES:
            raise ValueError(f"Unknown ephemeris body '{species}'")
        self.species = key
        super().__init__(
            name if name is not None else key.capitalize(),
            PLANET_MASSES[key] if mass is None else mass,
            time,
        )

    def relative_position(self) -> Vector3:
        return planet_position(self.species, self.time)


class KeplerianBody(Entity):
    """
    Body on a two-body orbit around the registry body `central`.

    The elements are converted to a state vector once, at construction;
    afterwards the body only evolves through propagation.
    """
    def __init__(self, name: str, elements: KeplerElements, mass: float, central: int,
                 central_mass: float, time: float, grav: float = GRAV, step_size: float = RK4_STEP):
        super().__init__(name, mass, time)
        self.elements = elements
        self.central = int(central)
        self.grav = float(grav)
        self.step_size = float(step_size)

        pos, vel = kepler_to_state_vectors(elements, central_mass, grav=self.grav)
        self.state = State.from_vectors(pos, vel)

        mu = central_mass * self.grav
        # no period around a massless central body
        if mu > 0.0:
            period = orbital_period(elements.semimajor_axis, mu)
            if period < MIN_STEPS_PER_ORBIT * self.step_size:
                logger.warning(
                    "%s: orbital period %.4g days spans fewer than %d RK4 steps of %.4g days; "
                    "propagation will be inaccurate.",
                    self.name, period, MIN_STEPS_PER_ORBIT, self.step_size,
                )

    @property
    def eccentricity(self) -> float:
        return self.elements.eccentricity

    @property
    def velocity(self) -> Vector3:
        return self.state.velocity

    def relative_position(self) -> Vector3:
        return self.state.position

    def preview(self, dt: float, central_mass: float) -> State:
        """Propagated state after dt days, without touching the body."""
        return propagate_two_body(
            self.state, central_mass, dt,
            grav=self.grav, step_size=self.step_size, t0=self.time,
        )

    def commit(self, state: State, dt: float) -> None:
        self.state = state
        self.time += dt

    def advance(self, dt: float, central_mass: Optional[float] = None) -> None:
        if central_mass is None:
            raise ValueError(f"{self.name} needs its central body's mass to advance.")
        self.commit(self.preview(dt, central_mass), dt)
