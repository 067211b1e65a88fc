# orbits/physics/entity.py
from typing import Optional

from orbits.physics.vector3 import Vector3


class Entity:
    """
    Base class for every body the registry can hold.

    A body knows its name, its mass (kg), its time cursor (Julian date) and
    its position in its own frame. Bodies that orbit another body carry the
    registry handle of that body in `central`; everything else has
    central = None and reports absolute (Sol-centred) coordinates directly.
    """
    central: Optional[int] = None

    def __init__(self, name: str, mass: float, time: float):
        self.name = str(name)
        self.mass = float(mass)
        self.time = float(time)

    def relative_position(self) -> Vector3:
        raise NotImplementedError

    def advance(self, dt: float, central_mass: Optional[float] = None) -> None:
        """Move the body forward by dt days."""
        self.time += dt

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, t={self.time})"
