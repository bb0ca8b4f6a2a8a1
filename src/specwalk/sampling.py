"""Draw sequences of samples from a spectrahedron."""
from dataclasses import dataclass
import logging

import numpy as np

from .oracle import DEFAULT_EPSILON, DEFAULT_TOL
from .preprocess import prepare
from .walk import billiard_walk, boltzmann_walk, hit_and_run_boltzmann_walk

logger = logging.getLogger(__name__)

WALKS = ("billiard", "boltzmann", "hit_and_run_boltzmann")


@dataclass
class SamplingResult:
    """Samples drawn by :func:`sample_points`.

    Parameters
    ----------
    points : np.ndarray, shape (N, n)
        The samples in generation order, in the original coordinates.
    degraded : np.ndarray of bool, shape (N,)
        ``True`` where the sample's walk was cut short (see :class:`WalkResult`).
    """

    points: np.ndarray
    degraded: np.ndarray

    @property
    def n_degraded(self):
        """Number of degraded samples."""
        return int(np.count_nonzero(self.degraded))


def sample_points(
    spectrahedron,
    n_samples,
    walk="billiard",
    walk_length=1,
    burn_in=0,
    start=None,
    diameter=None,
    rounding=False,
    preprocessed=None,
    objective=None,
    temperature=1.0,
    total_time=None,
    max_reflections=None,
    epsilon=DEFAULT_EPSILON,
    tol=DEFAULT_TOL,
    rng=None,
    solver=None,
):
    """Sample points from a spectrahedron with a random walk.

    The samples form a single chain: each sample's walk starts at the previous
    sample.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to sample from.
    n_samples : int, non-negative
        Number of samples to return.
    walk : str
        ``"billiard"`` (uniform target), ``"boltzmann"`` (HMC with
        reflections) or ``"hit_and_run_boltzmann"``.
    walk_length : int, positive
        Number of walk trajectories between consecutive samples.
    burn_in : int, non-negative
        Number of initial samples to discard.
    start : np.ndarray, shape (n,)
        Starting point, in original coordinates. Defaults to the interior
        point found by :func:`prepare`.
    diameter : float
        Diameter estimate. Defaults to the bound found by :func:`prepare`.
    rounding : bool
        If ``True``, sample in rounded coordinates (see :func:`prepare`).
    preprocessed : PreprocessResult
        Result of an earlier call to :func:`prepare` to reuse, for example
        to draw several batches with the same rounding.
    objective : np.ndarray, shape (n,)
        Direction of the linear potential for the Boltzmann walks, in original
        coordinates.
    temperature : float, positive
        Temperature of the Boltzmann walk.
    total_time : float
        Trajectory duration of the Boltzmann walk.
    max_reflections : int
        Maximum reflections per trajectory.
    epsilon : float, positive
        Minimum flight time after a reflection (Boltzmann walk).
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.
    solver : str or None
        The solver for cvxpy to use during preprocessing.

    Returns
    -------
    : SamplingResult
        The samples.
    """
    if walk not in WALKS:
        raise ValueError(f"Unknown walk {walk}, expected one of {WALKS}.")
    boltzmann = walk != "billiard"
    if boltzmann and objective is None:
        raise ValueError(f"The {walk} walk requires an objective.")
    if n_samples < 0:
        raise ValueError("Number of samples must be non-negative.")
    if walk_length < 1:
        raise ValueError("Walk length must be positive.")
    if burn_in < 0:
        raise ValueError("Burn-in must be non-negative.")

    rng = np.random.default_rng(rng)

    # hit-and-run finds chords with the oracle and needs no diameter
    needs_diameter = diameter is None and walk != "hit_and_run_boltzmann"
    if preprocessed is None and (rounding or start is None or needs_diameter):
        preprocessed = prepare(
            spectrahedron, rounding=rounding, tol=tol, rng=rng, solver=solver
        )

    if preprocessed is None:
        body = spectrahedron
        transform = None
    else:
        body = preprocessed.spectrahedron
        transform = preprocessed.transform
        if diameter is None:
            diameter = preprocessed.diameter

    if start is None:
        point = preprocessed.inner_point
    else:
        point = body._check_point(start, name="Start point")
        if transform is not None:
            point = transform.apply_inverse(point)
        if not body.contains(point, tol=tol):
            raise ValueError("Start point must be inside the spectrahedron.")

    if boltzmann:
        objective = np.array(objective, dtype=float)
        if transform is not None:
            # <c, My + t> = <M^T c, y> + const
            objective = transform.matrix.T @ objective

    points = np.zeros((n_samples, body.dim))
    degraded = np.zeros(n_samples, dtype=bool)
    for i in range(burn_in + n_samples):
        if walk == "billiard":
            result = billiard_walk(
                body,
                point,
                walk_length=walk_length,
                diameter=diameter,
                max_reflections=max_reflections,
                tol=tol,
                rng=rng,
            )
        elif walk == "boltzmann":
            result = boltzmann_walk(
                body,
                point,
                objective,
                temperature=temperature,
                total_time=total_time,
                walk_length=walk_length,
                diameter=diameter,
                max_reflections=max_reflections,
                epsilon=epsilon,
                tol=tol,
                rng=rng,
            )
        else:
            result = hit_and_run_boltzmann_walk(
                body,
                point,
                objective,
                temperature=temperature,
                walk_length=walk_length,
                tol=tol,
                rng=rng,
            )
        point = result.point
        if i >= burn_in:
            points[i - burn_in] = point
            degraded[i - burn_in] = result.degraded

    if transform is not None:
        points = transform.apply(points)

    result = SamplingResult(points=points, degraded=degraded)
    if result.n_degraded > 0:
        logger.warning(f"{result.n_degraded} of {n_samples} samples are degraded.")
    return result
