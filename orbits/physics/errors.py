# orbits/physics/errors.py


class PhysicsError(RuntimeError):
    """Numerical failure inside the orbital state engine."""


class ConvergenceError(PhysicsError):
    """Kepler's equation did not converge within the iteration bound."""


class PropagationError(PhysicsError):
    """Propagation produced a degenerate or non-finite state."""


class UnknownBodyError(LookupError):
    """No body registered under the requested name or handle."""
