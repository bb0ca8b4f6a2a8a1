"""Preprocessing of spectrahedra before sampling."""
from dataclasses import dataclass
import logging

import numpy as np

from .ellipsoid import mbe_of_points
from .oracle import DEFAULT_TOL
from .random import random_points_on_hypersphere
from .spectrahedron import Spectrahedron
from .transform import AffineMap
from .walk import billiard_walk

logger = logging.getLogger(__name__)

# stop rounding once the bounding ellipsoid of the samples is this round
DEFAULT_RATIO_THRESHOLD = 2.0


@dataclass
class PreprocessResult:
    """Result of preprocessing a spectrahedron.

    All quantities are expressed in the coordinates of ``spectrahedron``,
    which is the rounded body if rounding was applied. Use ``transform`` to
    map points back to the original coordinates.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The (possibly rounded) body to sample from.
    inner_point : np.ndarray
        A strictly interior point.
    inner_radius : float
        Radius of a ball around ``inner_point`` contained in the body.
    diameter : float
        Upper bound on the diameter of the body.
    transform : AffineMap
        Map from the coordinates of ``spectrahedron`` to the original ones.
    round_value : float
        Absolute determinant of ``transform``.
    axis_ratio : float
        Ratio of longest to shortest axis of the bounding ellipsoid of
        samples in the final coordinates. ``np.nan`` without rounding.
    """

    spectrahedron: Spectrahedron
    inner_point: np.ndarray
    inner_radius: float
    diameter: float
    transform: AffineMap
    round_value: float = 1.0
    axis_ratio: float = np.nan


def certified_radius(spectrahedron, center):
    """Radius of a ball around ``center`` that is guaranteed to be contained.

    For :math:`\\|u\\|\\leq r`, we have
    :math:`\\lambda_{\\min}(A(c + u)) \\geq \\lambda_{\\min}(A(c)) - r\\sqrt{\\sum_i\\|A_i\\|_2^2}`,
    so the ball is contained when the right side is non-negative.
    """
    norms = np.linalg.norm(spectrahedron.lmi.coefficients, ord=2, axis=(1, 2))
    eigenvalue = spectrahedron.lmi.min_eigenvalue(center)
    return max(0.0, eigenvalue / np.linalg.norm(norms))


def inner_ball(spectrahedron, center, n_directions=None, tol=DEFAULT_TOL, rng=None):
    """Estimate the radius of the largest ball centered at ``center`` inside
    the spectrahedron.

    The estimate is the smallest boundary distance along a set of random
    directions (in both senses), so it over-estimates the true radius by an
    amount that shrinks with ``n_directions``. It is never smaller than
    :func:`certified_radius`.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body.
    center : np.ndarray, shape (n,)
        A strictly interior point.
    n_directions : int
        Number of random directions. Defaults to ``10 * n``.
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.

    Returns
    -------
    : float
        The radius estimate.
    """
    n = spectrahedron.dim
    if n_directions is None:
        n_directions = 10 * n
    random_directions = random_points_on_hypersphere(
        shape=n_directions, dim=n - 1, rng=rng
    )
    directions = np.vstack((np.eye(n), random_directions))

    radius = np.inf
    for d in directions:
        for s in (d, -d):
            radius = min(radius, spectrahedron.line_intersection(center, s, tol=tol))
    return max(radius, certified_radius(spectrahedron, center))


def round_spectrahedron(
    spectrahedron,
    start,
    diameter,
    n_points=None,
    walk_length=1,
    max_iters=10,
    ratio_threshold=DEFAULT_RATIO_THRESHOLD,
    tol=DEFAULT_TOL,
    rng=None,
    solver=None,
):
    """Round a spectrahedron with minimum-volume bounding ellipsoids.

    Each iteration samples a chain of points with the billiard walk, fits the
    minimum-volume ellipsoid around them, and maps that ellipsoid to the unit
    ball. Iteration stops when the ellipsoid's axis ratio drops below
    ``ratio_threshold``.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body to round. It is not modified.
    start : np.ndarray, shape (n,)
        A strictly interior point.
    diameter : float, positive
        Diameter estimate of ``spectrahedron``.
    n_points : int
        Number of samples per iteration. Defaults to ``20 * n``.
    walk_length : int
        Billiard trajectories per sample.
    max_iters : int
        Maximum number of rounding iterations.
    ratio_threshold : float, at least 1
        Target axis ratio.
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.
    solver : str or None
        The solver for cvxpy to use.

    Returns
    -------
    : tuple
        A tuple ``(rounded, transform, start, ratio)`` where ``rounded`` is the
        rounded spectrahedron, ``transform`` maps its coordinates to those of
        the input, ``start`` is the input start point in the new coordinates,
        and ``ratio`` is the last measured axis ratio.
    """
    if ratio_threshold < 1:
        raise ValueError("Axis ratio threshold must be at least 1.")
    rng = np.random.default_rng(rng)
    n = spectrahedron.dim
    if n_points is None:
        n_points = 20 * n

    body = spectrahedron
    transform = AffineMap.identity(n)
    point = np.array(start, dtype=float)
    ratio = np.nan
    for i in range(max_iters):
        points = np.zeros((n_points, n))
        x = point
        for j in range(n_points):
            x = billiard_walk(
                body, x, walk_length=walk_length, diameter=diameter, tol=tol, rng=rng
            ).point
            points[j] = x

        ellipsoid = mbe_of_points(points, solver=solver)
        if ellipsoid.is_degenerate():
            logger.warning("Rounding stopped: bounding ellipsoid is degenerate.")
            break

        ratio = ellipsoid.axis_ratio
        logger.debug(f"Rounding iteration {i}: axis ratio {ratio}")
        if ratio <= ratio_threshold:
            break

        step = ellipsoid.affine_map()
        inv = step.inverse()
        body = body.transform(inv.matrix, inv.translation)
        transform = transform.compose(step)
        point = step.apply_inverse(point)

        # the unit ball now approximately bounds the body
        diameter = 2.0
    return body, transform, point, ratio


def prepare(
    spectrahedron,
    rounding=False,
    n_directions=None,
    rounding_points=None,
    max_rounding_iters=10,
    ratio_threshold=DEFAULT_RATIO_THRESHOLD,
    tol=DEFAULT_TOL,
    rng=None,
    solver=None,
):
    """Compute an interior point, inner radius and diameter bound, and
    optionally round the spectrahedron.

    Rounding is applied once; all samples drawn from the result share the
    same transform.

    Parameters
    ----------
    spectrahedron : Spectrahedron
        The body. It is not modified.
    rounding : bool
        If ``True``, round the body with :func:`round_spectrahedron`.
    n_directions : int
        Number of directions used by :func:`inner_ball`.
    rounding_points : int
        Samples per rounding iteration.
    max_rounding_iters : int
        Maximum number of rounding iterations.
    ratio_threshold : float
        Target axis ratio for rounding.
    tol : float, positive
        Numerical tolerance for the boundary.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.
    solver : str or None
        The solver for cvxpy to use.

    Returns
    -------
    : PreprocessResult
        The preprocessing result.

    Raises
    ------
    Infeasible
        If the body has no strictly interior point.
    UnboundedDirection
        If the body is unbounded.
    """
    rng = np.random.default_rng(rng)

    point, eigenvalue = spectrahedron.interior_point(solver=solver, tol=tol)
    diameter = spectrahedron.diameter_bound(solver=solver)
    logger.debug(f"Interior point {point} with eigenvalue {eigenvalue}, diameter {diameter}")

    body = spectrahedron
    transform = AffineMap.identity(spectrahedron.dim)
    ratio = np.nan
    if rounding:
        body, transform, point, ratio = round_spectrahedron(
            spectrahedron,
            point,
            diameter,
            n_points=rounding_points,
            max_iters=max_rounding_iters,
            ratio_threshold=ratio_threshold,
            tol=tol,
            rng=rng,
            solver=solver,
        )
        diameter = body.diameter_bound(solver=solver)

    radius = inner_ball(body, point, n_directions=n_directions, tol=tol, rng=rng)
    logger.debug(f"Inner radius {radius}")

    return PreprocessResult(
        spectrahedron=body,
        inner_point=point,
        inner_radius=radius,
        diameter=diameter,
        transform=transform,
        round_value=abs(transform.det),
        axis_ratio=ratio,
    )
