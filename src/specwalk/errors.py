"""Exceptions raised while building or sampling spectrahedra."""


class SpectrahedronError(Exception):
    """Base class for all errors raised by this package."""


class DimensionMismatch(SpectrahedronError, ValueError):
    """A matrix, point or direction has the wrong shape."""


class Infeasible(SpectrahedronError):
    """The LMI has no strictly feasible point."""


class UnboundedDirection(SpectrahedronError):
    """The body does not cross its boundary along a ray.

    Spectrahedra are assumed to be bounded, so this signals a malformed
    problem instance (or a broken coordinate transform).
    """


class ReflectionBudgetExceeded(SpectrahedronError):
    """A walk trajectory hit the maximum number of reflections, or a Boltzmann
    trajectory left the body.

    Only raised by walkers called with ``strict=True``; otherwise the walker
    emits its current point and marks the sample as degraded.
    """
