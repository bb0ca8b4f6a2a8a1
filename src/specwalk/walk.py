"""Random walks in spectrahedra.

The billiard walk travels along straight lines and reflects specularly off
the boundary; its stationary distribution is uniform. The Boltzmann walk is a
Hamiltonian Monte Carlo walk under the linear potential :math:`\\langle c, x
\\rangle / T`, so its trajectories are parabolas; its stationary distribution
is proportional to :math:`\\exp(-\\langle c, x\\rangle / T)` on the body. The
hit-and-run Boltzmann walk targets the same distribution by sampling along
random chords.
"""
from dataclasses import dataclass
import logging

import numpy as np

from .errors import DimensionMismatch, ReflectionBudgetExceeded
from .oracle import (
    DEFAULT_EPSILON,
    DEFAULT_TOL,
    BilliardOracleSettings,
    BoltzmannOracleSettings,
    reflect,
)
from .random import random_points_on_hypersphere

logger = logging.getLogger(__name__)


@dataclass
class WalkState:
    """State of a single walk trajectory.

    Parameters
    ----------
    point : np.ndarray
        The current point.
    direction : np.ndarray
        The current direction (unit vector) for the billiard walk, or the
        current velocity for the Boltzmann walk.
    remaining : float
        The remaining path length (billiard) or time (Boltzmann).
    reflections : int
        The number of reflections so far.
    left_body : bool
        ``True`` if the trajectory was stopped because it left the body.
    """

    point: np.ndarray
    direction: np.ndarray
    remaining: float
    reflections: int = 0
    left_body: bool = False


@dataclass
class WalkResult:
    """Result of a walk invocation.

    Parameters
    ----------
    point : np.ndarray
        The sampled point.
    direction : np.ndarray
        The direction (or velocity) at the end of the last trajectory. It can
        be used to continue the walk.
    reflections : int
        Total number of reflections over all trajectories.
    degraded : bool
        ``True`` if any trajectory was cut short: it exceeded its reflection
        budget or, for the Boltzmann walk, left the body.
    """

    point: np.ndarray
    direction: np.ndarray
    reflections: int
    degraded: bool


def _default_max_reflections(dim):
    return 50 * dim


def _cut_short(state, max_reflections, strict):
    if state.left_body:
        msg = "Trajectory left the body; emitting its last feasible point."
    else:
        msg = f"Trajectory exceeded {max_reflections} reflections; emitting current point."
    if strict:
        raise ReflectionBudgetExceeded(msg)
    logger.warning(msg)


def _check_start(spectrahedron, start, tol):
    point = spectrahedron._check_point(start, name="Start point")
    if not spectrahedron.contains(point, tol=tol):
        raise ValueError("Start point must be inside the spectrahedron.")
    return point


def _check_objective(spectrahedron, objective, temperature):
    objective = np.array(objective, dtype=float)
    if objective.shape != (spectrahedron.dim,):
        raise DimensionMismatch(
            f"Objective has shape {objective.shape}, expected ({spectrahedron.dim},)."
        )
    if temperature <= 0:
        raise ValueError("Temperature must be positive.")
    return objective


def billiard_trajectory(spectrahedron, state, max_reflections, tol=DEFAULT_TOL):
    """Run one billiard trajectory, updating ``state`` in place.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to walk in.
    state : WalkState
        The starting state. ``state.direction`` must be a unit vector.
    max_reflections : int
        Maximum number of reflections.
    tol : float, positive
        Numerical tolerance for the boundary.

    Returns
    -------
    : bool
        ``True`` if the trajectory finished within the reflection budget.
    """
    settings = BilliardOracleSettings(
        lmi_at_p=spectrahedron.lmi.evaluate(state.point)
    )
    while True:
        t = spectrahedron.line_intersection(
            state.point, state.direction, settings=settings, tol=tol
        )
        if state.remaining <= t:
            state.point = state.point + state.remaining * state.direction
            state.remaining = 0.0
            return True

        # move to the boundary
        state.point = state.point + t * state.direction
        settings.advance(t)
        state.remaining -= t

        if state.reflections >= max_reflections:
            return False

        normal = spectrahedron.boundary_normal(
            state.point, lmi_at_point=settings.lmi_at_p
        )
        if np.all(normal == 0):
            state.direction = -state.direction
        else:
            state.direction = reflect(state.direction, normal)
        state.reflections += 1


def billiard_walk(
    spectrahedron,
    start,
    walk_length=1,
    diameter=None,
    path_length=None,
    direction=None,
    max_reflections=None,
    tol=DEFAULT_TOL,
    rng=None,
    strict=False,
):
    """Sample a point with the billiard walk.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to sample from.
    start : np.ndarray, shape (n,)
        A point in the body.
    walk_length : int, non-negative
        Number of trajectories to chain together.
    diameter : float, positive
        Diameter estimate. Path lengths are exponentially distributed with
        this mean. If ``None`` and ``path_length`` is not given, it is computed
        with :meth:`Spectrahedron.diameter_bound`.
    path_length : float, non-negative
        Fixed path length for every trajectory instead of a random one.
    direction : np.ndarray, shape (n,)
        Initial direction of the first trajectory. Later trajectories always
        use a uniformly random direction.
    max_reflections : int
        Maximum number of reflections per trajectory. Defaults to ``50 * n``.
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.
    strict : bool
        If ``True``, raise :class:`ReflectionBudgetExceeded` instead of
        returning a degraded sample.

    Returns
    -------
    : WalkResult
        The sampled point and walk diagnostics.
    """
    rng = np.random.default_rng(rng)
    n = spectrahedron.dim
    point = _check_start(spectrahedron, start, tol)
    if direction is not None:
        direction = spectrahedron._check_point(direction, name="Direction")
        direction = direction / np.linalg.norm(direction)
    if path_length is not None and path_length < 0:
        raise ValueError("Path length must be non-negative.")
    if path_length is None and diameter is None:
        diameter = spectrahedron.diameter_bound()
    if max_reflections is None:
        max_reflections = _default_max_reflections(n)

    reflections = 0
    degraded = False
    for i in range(walk_length):
        if i > 0 or direction is None:
            direction = random_points_on_hypersphere(dim=n - 1, rng=rng)
        length = path_length if path_length is not None else rng.exponential(diameter)

        state = WalkState(point=point, direction=direction, remaining=length)
        if not billiard_trajectory(spectrahedron, state, max_reflections, tol=tol):
            _cut_short(state, max_reflections, strict)
            degraded = True
        point, direction = state.point, state.direction
        reflections += state.reflections

    return WalkResult(
        point=point, direction=direction, reflections=reflections, degraded=degraded
    )


def boltzmann_trajectory(
    spectrahedron,
    state,
    acceleration,
    max_reflections,
    epsilon=DEFAULT_EPSILON,
    tol=DEFAULT_TOL,
):
    """Run one Boltzmann trajectory, updating ``state`` in place.

    The trajectory is :math:`p + vt + \\frac{1}{2}at^2` between reflections.
    At the boundary the velocity is reflected about the tangent hyperplane.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to walk in.
    state : WalkState
        The starting state. ``state.direction`` is the initial velocity and
        ``state.remaining`` the total time.
    acceleration : np.ndarray, shape (n,)
        The constant acceleration.
    max_reflections : int
        Maximum number of reflections.
    epsilon : float, positive
        Minimum flight time after a reflection.
    tol : float, positive
        Numerical tolerance for the boundary.

    Roots closer than ``epsilon`` after a reflection are ignored, so a
    trajectory grazing the boundary can cross it. Every segment is checked,
    and a trajectory that leaves the body is stopped at the end of its last
    feasible segment with ``state.left_body`` set.

    Returns
    -------
    : bool
        ``True`` if the trajectory finished within the reflection budget and
        inside the body.
    """
    settings = BoltzmannOracleSettings(first=True, epsilon=epsilon)
    while True:
        t = spectrahedron.parabola_intersection(
            state.point, state.direction, acceleration, settings=settings, tol=tol
        )
        τ = min(t, state.remaining)
        point = state.point + τ * state.direction + 0.5 * τ**2 * acceleration
        if spectrahedron.lmi.min_eigenvalue(point) < -tol:
            state.remaining = 0.0
            state.left_body = True
            return False

        state.point = point
        state.direction = state.direction + τ * acceleration
        state.remaining -= τ
        if state.remaining <= 0:
            state.remaining = 0.0
            return True

        if state.reflections >= max_reflections:
            return False

        normal = spectrahedron.boundary_normal(state.point)
        if np.all(normal == 0):
            state.direction = -state.direction
        else:
            state.direction = reflect(state.direction, normal)
        state.reflections += 1
        settings.first = False


def boltzmann_walk(
    spectrahedron,
    start,
    objective,
    temperature=1.0,
    total_time=None,
    walk_length=1,
    diameter=None,
    max_reflections=None,
    epsilon=DEFAULT_EPSILON,
    tol=DEFAULT_TOL,
    rng=None,
    strict=False,
):
    """Sample a point with the Boltzmann HMC walk.

    The target density is proportional to
    :math:`\\exp(-\\langle c, x\\rangle / T)` on the body, where ``c`` is the
    objective and ``T`` the temperature.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to sample from.
    start : np.ndarray, shape (n,)
        A point in the body.
    objective : np.ndarray, shape (n,)
        The direction ``c`` of the linear potential.
    temperature : float, positive
        The temperature ``T``.
    total_time : float, non-negative
        Duration of each trajectory. Defaults to twice the diameter.
    walk_length : int, non-negative
        Number of trajectories to chain together. The velocity is resampled
        from a standard normal distribution for each trajectory.
    diameter : float, positive
        Diameter estimate, only used if ``total_time`` is not given. If
        ``None``, it is computed with :meth:`Spectrahedron.diameter_bound`.
    max_reflections : int
        Maximum number of reflections per trajectory. Defaults to ``50 * n``.
    epsilon : float, positive
        Minimum flight time after a reflection.
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.
    strict : bool
        If ``True``, raise :class:`ReflectionBudgetExceeded` instead of
        returning a degraded sample.

    Returns
    -------
    : WalkResult
        The sampled point and walk diagnostics.
    """
    rng = np.random.default_rng(rng)
    n = spectrahedron.dim
    point = _check_start(spectrahedron, start, tol)
    objective = _check_objective(spectrahedron, objective, temperature)
    if total_time is None:
        if diameter is None:
            diameter = spectrahedron.diameter_bound()
        total_time = 2 * diameter
    if total_time < 0:
        raise ValueError("Total time must be non-negative.")
    if max_reflections is None:
        max_reflections = _default_max_reflections(n)

    acceleration = -objective / temperature

    velocity = np.zeros(n)
    reflections = 0
    degraded = False
    for _ in range(walk_length):
        velocity = rng.normal(size=n)
        state = WalkState(point=point, direction=velocity, remaining=total_time)
        if not boltzmann_trajectory(
            spectrahedron,
            state,
            acceleration,
            max_reflections,
            epsilon=epsilon,
            tol=tol,
        ):
            _cut_short(state, max_reflections, strict)
            degraded = True
        point, velocity = state.point, state.direction
        reflections += state.reflections

    return WalkResult(
        point=point, direction=velocity, reflections=reflections, degraded=degraded
    )


def _sample_on_chord(lower, upper, rate, rng):
    """Sample ``s`` in ``[lower, upper]`` with density proportional to
    ``exp(-rate * s)``."""
    length = upper - lower
    a = abs(rate) * length
    u = rng.random()
    if a < 1e-12:
        return lower + u * length

    # inverse CDF of the truncated exponential on [0, length]
    s = -np.log1p(u * np.expm1(-a)) / a * length
    if rate < 0:
        s = length - s
    return lower + s


def hit_and_run_boltzmann_walk(
    spectrahedron,
    start,
    objective,
    temperature=1.0,
    walk_length=1,
    tol=DEFAULT_TOL,
    rng=None,
):
    """Sample a point with the hit-and-run walk for the Boltzmann distribution.

    Each step draws a uniformly random line through the current point, finds
    the chord it cuts from the body with the boundary oracle, and moves to a
    point on the chord drawn from :math:`\\exp(-\\langle c, x\\rangle / T)`
    restricted to it.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to sample from. It must be bounded.
    start : np.ndarray, shape (n,)
        A point in the body.
    objective : np.ndarray, shape (n,)
        The direction ``c`` of the linear potential. Use zeros for the
        uniform distribution.
    temperature : float, positive
        The temperature ``T``.
    walk_length : int, non-negative
        Number of steps.
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.

    Returns
    -------
    : WalkResult
        The sampled point and the direction of the last line. The walk never
        reflects, so it is never degraded.
    """
    rng = np.random.default_rng(rng)
    n = spectrahedron.dim
    point = _check_start(spectrahedron, start, tol)
    objective = _check_objective(spectrahedron, objective, temperature)

    direction = np.zeros(n)
    for _ in range(walk_length):
        direction = random_points_on_hypersphere(dim=n - 1, rng=rng)
        upper = spectrahedron.line_intersection(point, direction, tol=tol)
        lower = -spectrahedron.line_intersection(point, -direction, tol=tol)
        s = _sample_on_chord(lower, upper, objective @ direction / temperature, rng)
        point = point + s * direction

    return WalkResult(point=point, direction=direction, reflections=0, degraded=False)
