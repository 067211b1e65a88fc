# orbits/physics/forces.py
import numpy as np

from orbits.config.settings import GRAV
from orbits.physics.errors import PropagationError


class ForceModel:
    """
    Base force model. Acceleration signature accepts optional time t (days).
    """
    def acceleration(self, state, t: float = 0.0) -> np.ndarray:
        raise NotImplementedError


class NewtonianGravity(ForceModel):
    """
    Inverse-square gravity of a point mass sitting at the origin of the
    body's local frame. The central body's own motion is not fed back.
    """
    def __init__(self, mu: float):
        self.mu = float(mu)

    @classmethod
    def from_mass(cls, central_mass: float, grav: float = GRAV) -> "NewtonianGravity":
        return cls(float(central_mass) * float(grav))

    def acceleration(self, state, t: float = 0.0) -> np.ndarray:
        r = state.r
        norm = np.linalg.norm(r)
        if norm == 0:
            raise PropagationError("Body sits on its central mass (|r| = 0).")
        return -(self.mu / norm**3) * r
