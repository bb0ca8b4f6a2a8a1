"""Boundary oracle for spectrahedra.

Every boundary query reduces to finding the smallest positive root ``t`` of

.. math::
   \\det(K + tC + t^2M) = 0,

where ``K = A(p)`` is the LMI at the current point and ``C`` and ``M`` are
directional derivatives of the LMI. For straight lines ``M = 0`` and this is a
generalized eigenvalue problem of the pencil ``(K, -C)``; for the parabolic
trajectories of the Boltzmann walk it is a quadratic eigenvalue problem,
which we solve through its companion linearization.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.linalg import eig

# eigenvalues with magnitude below this are treated as the boundary
DEFAULT_TOL = 1e-8

# minimum time between two reflections of the Boltzmann walk
DEFAULT_EPSILON = 1e-4


@dataclass
class BilliardOracleSettings:
    """Per-trajectory cache for the billiard walk's oracle queries.

    Parameters
    ----------
    lmi_at_p : np.ndarray, shape (m, m)
        The value of the LMI at the walk's current point.
    lmi_direction : np.ndarray, shape (m, m) or None
        The LMI derivative along the direction of the last query.
    """

    lmi_at_p: np.ndarray
    lmi_direction: Optional[np.ndarray] = None

    def advance(self, t):
        """Refresh the cache after the point has moved ``t`` along the last
        queried direction."""
        assert self.lmi_direction is not None
        self.lmi_at_p = self.lmi_at_p + t * self.lmi_direction


@dataclass
class BoltzmannOracleSettings:
    """Per-trajectory settings for the Boltzmann walk's oracle queries.

    Parameters
    ----------
    first : bool
        ``True`` until the trajectory has reflected once. Afterwards the
        trajectory starts on the boundary and roots smaller than ``epsilon``
        are attributed to that boundary.
    epsilon : float, positive
        Minimum flight time accepted after a reflection.
    """

    first: bool = True
    epsilon: float = DEFAULT_EPSILON


def pencil_roots(K, C, M=None, tol=DEFAULT_TOL):
    """Compute the real roots of :math:`\\det(K + tC + t^2M) = 0`.

    Parameters
    ----------
    K : np.ndarray, shape (m, m)
        Constant term.
    C : np.ndarray, shape (m, m)
        Linear term.
    M : np.ndarray, shape (m, m) or None
        Quadratic term. If ``None``, the pencil is linear.
    tol : float, positive
        Roots with magnitude at least ``1 / tol`` are treated as infinite and
        roots with relative imaginary part above ``tol`` are discarded.

    Returns
    -------
    : np.ndarray
        The sorted finite real roots.
    """
    m = K.shape[0]
    if M is None:
        A, B = K, -C
    else:
        # companion form: z = [x, t x]
        I = np.eye(m)
        Z = np.zeros((m, m))
        A = np.block([[Z, I], [-K, -C]])
        B = np.block([[I, Z], [Z, M]])

    # homogeneous eigenvalues (alpha, beta) with root alpha / beta, so that
    # infinite roots show up as beta = 0 instead of overflowing
    alpha, beta = eig(A, B, right=False, homogeneous_eigvals=True)

    finite = np.abs(beta) > tol * np.abs(alpha)
    roots = alpha[finite] / beta[finite]
    real = np.abs(roots.imag) <= tol * np.maximum(1.0, np.abs(roots.real))
    return np.sort(roots[real].real)


def _smallest_root_above(roots, lower):
    roots = roots[roots > lower]
    if roots.size == 0:
        return np.inf
    return roots[0]


def first_exit(lmi_at_p, lmi_direction, tol=DEFAULT_TOL):
    """Distance to the boundary along a straight line.

    Parameters
    ----------
    lmi_at_p : np.ndarray, shape (m, m)
        The LMI at the (feasible) starting point.
    lmi_direction : np.ndarray, shape (m, m)
        The LMI derivative along the direction of travel.
    tol : float, positive
        Roots smaller than ``tol`` are treated as the boundary the point
        already lies on.

    Returns
    -------
    : float
        The smallest ``t > tol`` such that ``A(p + t * d)`` is singular, or
        ``np.inf`` if the line never leaves the body.
    """
    scale = max(1.0, np.max(np.abs(lmi_at_p)))
    if np.allclose(lmi_direction, 0, rtol=0, atol=tol * scale):
        return np.inf
    roots = pencil_roots(lmi_at_p, lmi_direction, tol=tol)
    return _smallest_root_above(roots, tol)


def first_exit_curved(
    lmi_at_p, lmi_velocity, lmi_acceleration, lower=DEFAULT_TOL, tol=DEFAULT_TOL
):
    """Time until the parabola :math:`p + vt + \\frac{1}{2}at^2` hits the boundary.

    Parameters
    ----------
    lmi_at_p : np.ndarray, shape (m, m)
        The LMI at the (feasible) starting point.
    lmi_velocity : np.ndarray, shape (m, m)
        The LMI derivative along the velocity ``v``.
    lmi_acceleration : np.ndarray, shape (m, m)
        The LMI derivative along ``a / 2``.
    lower : float, non-negative
        Only roots larger than this are considered.
    tol : float, positive
        Numerical tolerance passed to :func:`pencil_roots`.

    Returns
    -------
    : float
        The first crossing time, or ``np.inf`` if there is none.
    """
    roots = pencil_roots(lmi_at_p, lmi_velocity, lmi_acceleration, tol=tol)
    return _smallest_root_above(roots, lower)


def reflect(direction, normal):
    """Specular reflection of ``direction`` about the hyperplane with the
    given normal. The norm of ``direction`` is preserved."""
    n = normal / np.linalg.norm(normal)
    return direction - 2 * (direction @ n) * n
