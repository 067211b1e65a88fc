# orbits/physics/state.py
import numpy as np

from orbits.physics.vector3 import Vector3


class State:
    """
    State vector for orbital motion in 3D, relative to the central body.
    [x, y, z, vx, vy, vz] in AU and AU/day.
    """
    def __init__(self, position, velocity):
        if len(position) != 3 or len(velocity) != 3:
            raise ValueError("Position and velocity must be 3D vectors.")
        self.r = np.array(position, dtype=float)
        self.v = np.array(velocity, dtype=float)

    @classmethod
    def from_vectors(cls, position: Vector3, velocity: Vector3) -> "State":
        return cls(position.as_array(), velocity.as_array())

    def as_vector(self) -> np.ndarray:
        return np.hstack((self.r, self.v))

    def is_finite(self) -> bool:
        return self.position.is_finite() and self.velocity.is_finite()

    @property
    def position(self) -> Vector3:
        return Vector3.from_array(self.r)

    @property
    def velocity(self) -> Vector3:
        return Vector3.from_array(self.v)

    def copy(self):
        return State(self.r.copy(), self.v.copy())

    def __repr__(self):
        return f"State(r={self.r}, v={self.v})"
