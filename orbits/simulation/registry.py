# orbits/simulation/registry.py
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from orbits.config.settings import DEFAULT_SYSTEM, GRAV, RK4_STEP, SOL_MASS, SOL_NAME, START_JD
from orbits.models.bodies import Anchor, EphemerisBody, KeplerianBody
from orbits.physics.entity import Entity
from orbits.physics.errors import UnknownBodyError
from orbits.physics.kepler import KeplerElements
from orbits.physics.vector3 import Vector3

logger = logging.getLogger(__name__)


@dataclass
class SystemSnapshot:
    """
    Positions of every body at one instant, in registration order.
    coordinates[i] belongs to names[i].
    """
    time: float
    coordinates: List[Tuple[float, float, float]] = field(default_factory=list)
    names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "coords": [list(c) for c in self.coordinates],
            "names": list(self.names),
        }


class SolarSystem:
    """
    Registry of every body in the simulation.

    Bodies live in a list and are addressed by their index (the handle).
    A Keplerian body stores the handle of its central body, which must
    already be registered, so every chain of central bodies points
    backwards and ends at a body with no central body.
    """
    def __init__(self, time: float = START_JD, grav: float = GRAV, step_size: float = RK4_STEP):
        self.time = float(time)
        self.grav = float(grav)
        self.step_size = float(step_size)
        self._bodies: List[Entity] = []

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]] = None, **kwargs) -> "SolarSystem":
        """
        Build a system from a mapping shaped like settings.DEFAULT_SYSTEM:
        an anchor, a list of ephemeris species and a list of Keplerian
        bodies whose central bodies are looked up by name in order.
        """
        cfg = DEFAULT_SYSTEM if cfg is None else cfg
        system = cls(time=cfg.get("time", START_JD), **kwargs)

        anchor = cfg.get("anchor") or {}
        system.add_anchor(anchor.get("name", SOL_NAME), anchor.get("mass", SOL_MASS))

        for species in cfg.get("ephemeris", []):
            system.add_ephemeris(species)

        for kep in cfg.get("keplerian", []):
            system.add_keplerian(
                kep["name"], kep["mass"], kep["central"],
                KeplerElements.from_config(kep["elements"]),
            )

        logger.info("Built system with %d bodies at JD %.1f", len(system), system.time)
        return system

    def add_body(self, body: Entity) -> int:
        """Register a body and return its handle."""
        if body.central is not None and not (0 <= body.central < len(self._bodies)):
            raise UnknownBodyError(
                f"{body.name}: central handle {body.central} is not registered before it"
            )
        if body.time != self.time:
            raise ValueError(
                f"{body.name} is at JD {body.time} but the system clock is at JD {self.time}"
            )
        self._bodies.append(body)
        handle = len(self._bodies) - 1
        logger.debug("Registered %r as handle %d", body, handle)
        return handle

    def add_anchor(self, name: str = SOL_NAME, mass: float = SOL_MASS) -> int:
        return self.add_body(Anchor(name, mass, self.time))

    def add_ephemeris(self, species: str) -> int:
        return self.add_body(EphemerisBody(species, self.time))

    def add_keplerian(self, name: str, mass: float, central_name: str, elements: KeplerElements) -> int:
        """
        Add a body orbiting the first registered body called central_name,
        starting at the current system time.

        Raises:
            UnknownBodyError: no body has that name; nothing is registered.
        """
        central = self.find(central_name)
        body = KeplerianBody(
            name, elements, mass, central,
            central_mass=self._bodies[central].mass,
            time=self.time,
            grav=self.grav,
            step_size=self.step_size,
        )
        return self.add_body(body)

    def add_keplerian_elements(self, name: str, mass: float, central_name: str,
                               e: float, a: float, w: float, U: float, i: float, M: float) -> int:
        """add_keplerian with bare element values (radians, AU)."""
        return self.add_keplerian(name, mass, central_name, KeplerElements(e, a, w, U, i, M))

    # ------------------------------------------------------------------
    # lookup
    # ------------------------------------------------------------------
    def find(self, name: str) -> int:
        for handle, body in enumerate(self._bodies):
            if body.name == name:
                return handle
        raise UnknownBodyError(f"No body named '{name}' in the system")

    def body(self, handle: int) -> Entity:
        if not (0 <= handle < len(self._bodies)):
            raise UnknownBodyError(f"No body with handle {handle}")
        return self._bodies[handle]

    def names(self) -> List[str]:
        return [b.name for b in self._bodies]

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._bodies)

    # ------------------------------------------------------------------
    # simulation
    # ------------------------------------------------------------------
    def coords(self, handle: int) -> Vector3:
        """Absolute coordinates: own position plus every central body's, up the chain."""
        body = self.body(handle)
        pos = body.relative_position()
        while body.central is not None:
            body = self._bodies[body.central]
            pos = pos + body.relative_position()
        return pos

    def tick(self, dt: float) -> None:
        """
        Advance every body by dt days.

        New Keplerian states are all computed first, in registration order,
        from the states at the start of the tick; only then is anything
        committed. If propagation fails for any body the error is raised
        and the whole system stays at its previous time.
        """
        dt = float(dt)
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite, non-negative number of days (got {dt})")

        pending = {}
        for handle, body in enumerate(self._bodies):
            if isinstance(body, KeplerianBody):
                pending[handle] = body.preview(dt, self._bodies[body.central].mass)

        for handle, body in enumerate(self._bodies):
            if handle in pending:
                body.commit(pending[handle], dt)
            else:
                body.advance(dt)
        self.time += dt
        logger.debug("Advanced %d bodies by %.4g days to JD %.4f", len(self._bodies), dt, self.time)

    def positions(self) -> SystemSnapshot:
        snapshot = SystemSnapshot(time=self.time)
        for handle, body in enumerate(self._bodies):
            snapshot.coordinates.append(self.coords(handle).as_tuple())
            snapshot.names.append(body.name)
        return snapshot


def build_default_system(**kwargs) -> SolarSystem:
    return SolarSystem.from_config(DEFAULT_SYSTEM, **kwargs)
