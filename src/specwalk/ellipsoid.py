"""Ellipsoids used to round spectrahedra."""
import numpy as np
import cvxpy as cp
from scipy.linalg import orth, null_space

from .transform import AffineMap


class Ellipsoid:
    """Ellipsoid :math:`\\{Ru + c \\mid \\|D^{-1}u\\| \\leq 1\\}` in ``dim``
    dimensions, where ``D`` is the diagonal matrix of half extents.

    A half extent may be zero, in which case the ellipsoid is degenerate.
    """

    def __init__(self, half_extents, rotation=None, center=None):
        self.half_extents = np.atleast_1d(np.array(half_extents, dtype=float))
        if np.any(self.half_extents < 0):
            raise ValueError("Half extents cannot be negative.")

        if rotation is None:
            rotation = np.eye(self.dim)
        self.rotation = np.array(rotation, dtype=float)
        assert self.rotation.shape == (self.dim, self.dim)

        if center is None:
            center = np.zeros(self.dim)
        self.center = np.atleast_1d(np.array(center, dtype=float))
        assert self.center.shape == (self.dim,)

    @property
    def dim(self):
        return self.half_extents.shape[0]

    @property
    def E(self):
        """The matrix :math:`RD^2R^T`; the ellipsoid is
        :math:`\\{x \\mid (x-c)^TE^{-1}(x-c)\\leq 1\\}` when it is not
        degenerate."""
        return self.rotation @ np.diag(self.half_extents**2) @ self.rotation.T

    @property
    def rank(self):
        return np.count_nonzero(self.half_extents)

    @property
    def axis_ratio(self):
        """Ratio of the longest to the shortest half extent."""
        return np.max(self.half_extents) / np.min(self.half_extents)

    def __repr__(self):
        return f"Ellipsoid(half_extents={self.half_extents}, center={self.center})"

    @classmethod
    def sphere(cls, radius, center):
        """Construct a sphere; ``center`` also sets the dimension."""
        center = np.array(center, dtype=float)
        return cls(half_extents=radius * np.ones(center.shape[0]), center=center)

    def affine_map(self):
        """The affine map that takes the unit ball onto this ellipsoid."""
        matrix = self.rotation @ np.diag(self.half_extents) @ self.rotation.T
        return AffineMap(matrix=matrix, translation=self.center)

    def is_degenerate(self):
        """``True`` if the ellipsoid has zero volume."""
        return self.rank < self.dim


def mbe_of_points(points, rcond=None, solver=None):
    """Compute the minimum-volume bounding ellipsoid for a set of points.

    See :cite:t:`boyd2004convex`, Section 8.4.1. Points that span only a
    subspace produce a degenerate ellipsoid.

    Parameters
    ----------
    points : np.ndarray, shape (N, n)
        The points to bound.
    rcond : float, optional
        Conditioning number used to find the span of the points.
    solver : str or None
        The solver for cvxpy to use.

    Returns
    -------
    : Ellipsoid
        The minimum-volume bounding ellipsoid.
    """
    points = np.array(points, dtype=float)

    # work in the affine span of the points so that the problem stays
    # well-posed when they are degenerate
    r = points[0]
    R = orth((points - r).T, rcond=rcond)
    rank = R.shape[1]
    P = (points - r) @ R

    # ||Ax + b|| <= 1
    A = cp.Variable((rank, rank), PSD=True)
    b = cp.Variable(rank)
    problem = cp.Problem(
        cp.Minimize(-cp.log_det(A)), [cp.norm2(A @ x + b) <= 1 for x in P]
    )
    problem.solve(solver=solver)

    eigs, V = np.linalg.eigh(A.value)
    half_extents = np.zeros(points.shape[1])
    half_extents[:rank] = 1.0 / eigs

    N = null_space((R @ V).T, rcond=rcond)
    rotation = np.hstack((R @ V, N))
    center = R @ np.linalg.solve(A.value, -b.value) + r
    return Ellipsoid(half_extents=half_extents, rotation=rotation, center=center)
