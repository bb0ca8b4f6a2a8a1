"""Spectrahedra: feasible sets of linear matrix inequalities."""
import numpy as np
import cvxpy as cp

from .errors import DimensionMismatch, Infeasible, UnboundedDirection
from .lmi import LMI
from .oracle import (
    DEFAULT_TOL,
    BilliardOracleSettings,
    BoltzmannOracleSettings,
    first_exit,
    first_exit_curved,
)
from .util import clean_transform, unit


class Spectrahedron:
    """The convex body :math:`\\{x\\in\\mathbb{R}^n \\mid A(x)\\succcurlyeq 0\\}`.

    Parameters
    ----------
    lmi : LMI or Iterable[np.ndarray]
        The LMI defining the body, or the list of matrices ``[A0, ..., An]``.

    Attributes
    ----------
    lmi : LMI
        The LMI defining the body.
    """

    def __init__(self, lmi):
        if not isinstance(lmi, LMI):
            lmi = LMI(lmi)
        self.lmi = lmi

    @property
    def dim(self):
        """Dimension of the ambient space."""
        return self.lmi.dim

    @property
    def size(self):
        """Side length of the LMI's matrices."""
        return self.lmi.size

    def __repr__(self):
        return f"Spectrahedron(dim={self.dim}, size={self.size})"

    @classmethod
    def from_polytope(cls, A, b):
        """Construct the polytope :math:`\\{x \\mid Ax \\leq b\\}` as a diagonal LMI.

        Parameters
        ----------
        A : np.ndarray, shape (k, n)
            The inequality matrix.
        b : np.ndarray, shape (k,)
            The inequality vector.
        """
        A = np.atleast_2d(np.array(A, dtype=float))
        b = np.array(b, dtype=float)
        if b.shape != (A.shape[0],):
            raise DimensionMismatch(
                f"Inequality matrix has shape {A.shape} but vector has shape {b.shape}."
            )
        matrices = [np.diag(b)] + [np.diag(-a) for a in A.T]
        return cls(LMI(matrices))

    @classmethod
    def from_ellipsoid(cls, ellipsoid):
        """Construct a non-degenerate ellipsoid as an LMI.

        The Schur complement of

        .. math::
           \\begin{bmatrix} E & x - c \\\\ (x - c)^T & 1 \\end{bmatrix}

        is :math:`1 - (x-c)^TE^{-1}(x-c)`, so the matrix is positive
        semidefinite exactly on the ellipsoid.
        """
        if ellipsoid.is_degenerate():
            raise ValueError("Ellipsoid must be non-degenerate.")
        if not np.all(np.isfinite(ellipsoid.half_extents)):
            raise ValueError("Ellipsoid must be bounded.")
        n = ellipsoid.dim
        c = ellipsoid.center

        A0 = np.zeros((n + 1, n + 1))
        A0[:n, :n] = ellipsoid.E
        A0[:n, n] = -c
        A0[n, :n] = -c
        A0[n, n] = 1

        coefficients = []
        for i in range(n):
            Ai = np.zeros((n + 1, n + 1))
            Ai[i, n] = 1
            Ai[n, i] = 1
            coefficients.append(Ai)
        return cls(LMI([A0] + coefficients))

    @classmethod
    def ball(cls, radius, center):
        """Construct a ball as an LMI."""
        from .ellipsoid import Ellipsoid

        return cls.from_ellipsoid(Ellipsoid.sphere(radius=radius, center=center))

    def _check_point(self, point, name="Point"):
        point = np.array(point, dtype=float)
        if point.shape != (self.dim,):
            raise DimensionMismatch(
                f"{name} has shape {point.shape}, expected ({self.dim},)."
            )
        return point

    def contains(self, points, tol=1e-8):
        """Check if points are contained in the spectrahedron.

        A point is contained if the smallest eigenvalue of the LMI at that
        point is at least ``-tol``.

        Parameters
        ----------
        points : iterable
            Points to check. May be a single point or a list or array of points.
        tol : float, non-negative
            Numerical tolerance for qualifying as inside the spectrahedron.

        Returns
        -------
        :
            Given a single point, return ``True`` if the point is contained, or
            ``False`` if not. For multiple points, return a boolean array with
            one value per point.
        """
        points = np.array(points, dtype=float)
        ndim = points.ndim
        assert ndim <= 2, f"points must have 1 or 2 dimensions, but has {ndim}."
        res = self.lmi.min_eigenvalue(np.atleast_2d(points)) >= -tol
        if ndim == 1:
            return res[0]
        return res

    def must_contain(self, points, scale=1.0):
        """Generate cvxpy constraints to keep the points inside the body.

        ``must_contain(s * x, scale=s)`` is equivalent to ``must_contain(x)``.
        """
        if points.ndim == 1:
            points = [points]
        return [self.lmi.expression(point, scale=scale) >> 0 for point in points]

    def interior_point(self, solver=None, tol=DEFAULT_TOL):
        """Find the point that maximizes the smallest eigenvalue of the LMI.

        Parameters
        ----------
        solver : str or None
            The solver for cvxpy to use.
        tol : float, non-negative
            The point must have smallest eigenvalue greater than ``tol``.

        Returns
        -------
        : tuple
            A tuple ``(point, eigenvalue)``.

        Raises
        ------
        Infeasible
            If the LMI has no strictly feasible point.
        UnboundedDirection
            If the smallest eigenvalue is unbounded, which means the
            spectrahedron is unbounded.
        """
        x = cp.Variable(self.dim)
        t = cp.Variable()

        objective = cp.Maximize(t)
        constraints = [self.lmi.expression(x) >> t * np.eye(self.size)]
        problem = cp.Problem(objective, constraints)
        problem.solve(solver=solver)

        if problem.status in (cp.UNBOUNDED, cp.UNBOUNDED_INACCURATE):
            raise UnboundedDirection("Spectrahedron is unbounded.")
        if problem.status not in (cp.OPTIMAL, cp.OPTIMAL_INACCURATE):
            raise Infeasible(f"Interior point search failed with status {problem.status}.")

        point = x.value
        eigenvalue = self.lmi.min_eigenvalue(point)
        if eigenvalue <= tol:
            raise Infeasible("Spectrahedron has no strictly feasible point.")
        return point, eigenvalue

    def aabb(self, solver=None):
        """Compute the axis-aligned bounding box of the spectrahedron.

        This requires solving ``2 * dim`` semidefinite programs.

        Returns
        -------
        : tuple
            A tuple ``(lower, upper)`` of the box's extreme vertices.

        Raises
        ------
        UnboundedDirection
            If the spectrahedron is unbounded along some axis.
        """
        x = cp.Variable(self.dim)
        constraints = self.must_contain(x)

        lower = np.zeros(self.dim)
        upper = np.zeros(self.dim)
        for i in range(self.dim):
            for sign, out in [(1, upper), (-1, lower)]:
                problem = cp.Problem(cp.Maximize(sign * x[i]), constraints)
                problem.solve(solver=solver)
                if problem.status in (cp.UNBOUNDED, cp.UNBOUNDED_INACCURATE):
                    raise UnboundedDirection(
                        f"Spectrahedron is unbounded along axis {i}."
                    )
                if problem.status not in (cp.OPTIMAL, cp.OPTIMAL_INACCURATE):
                    raise Infeasible(
                        f"Bounding box problem failed with status {problem.status}."
                    )
                out[i] = x.value[i]
        return lower, upper

    def diameter_bound(self, solver=None):
        """An upper bound on the diameter: the diagonal of the bounding box."""
        lower, upper = self.aabb(solver=solver)
        return np.linalg.norm(upper - lower)

    def line_intersection(self, point, direction, settings=None, tol=DEFAULT_TOL):
        """Distance from ``point`` to the boundary along ``direction``.

        Parameters
        ----------
        point : np.ndarray, shape (n,)
            A point in the spectrahedron.
        direction : np.ndarray, shape (n,)
            The direction of travel.
        settings : BilliardOracleSettings or None
            If given, the cached value of the LMI at ``point`` is used and the
            LMI derivative along ``direction`` is stored for the caller.
        tol : float, positive
            Numerical tolerance for the boundary.

        Returns
        -------
        : float
            The largest ``t`` such that ``point + s * direction`` is contained
            for all ``0 <= s <= t``.

        Raises
        ------
        UnboundedDirection
            If the ray never leaves the spectrahedron.
        """
        point = self._check_point(point)
        direction = self._check_point(direction, name="Direction")
        if settings is None:
            settings = BilliardOracleSettings(lmi_at_p=self.lmi.evaluate(point))
        settings.lmi_direction = self.lmi.derivative(direction)

        if self._leaves_immediately(point, settings.lmi_at_p, direction, tol):
            return 0.0

        t = first_exit(settings.lmi_at_p, settings.lmi_direction, tol=tol)
        if np.isinf(t):
            raise UnboundedDirection(
                f"Spectrahedron is unbounded along direction {direction}."
            )
        return t

    def parabola_intersection(
        self, point, velocity, acceleration, settings=None, tol=DEFAULT_TOL
    ):
        """Time until the trajectory :math:`p + vt + \\frac{1}{2}at^2` hits the
        boundary.

        Parameters
        ----------
        point : np.ndarray, shape (n,)
            A point in the spectrahedron.
        velocity : np.ndarray, shape (n,)
            The initial velocity.
        acceleration : np.ndarray, shape (n,)
            The constant acceleration.
        settings : BoltzmannOracleSettings or None
            Settings of the current trajectory. After the first reflection,
            crossings earlier than ``settings.epsilon`` are ignored.
        tol : float, positive
            Numerical tolerance for the boundary.

        Returns
        -------
        : float
            The first crossing time, or ``np.inf`` if there is none.
        """
        if settings is None:
            settings = BoltzmannOracleSettings()
        lower = tol if settings.first else max(tol, settings.epsilon)

        point = self._check_point(point)
        velocity = self._check_point(velocity, name="Velocity")
        K = self.lmi.evaluate(point)
        C = self.lmi.derivative(velocity)
        M = 0.5 * self.lmi.derivative(
            self._check_point(acceleration, name="Acceleration")
        )
        if self._leaves_immediately(point, K, velocity, tol):
            return 0.0
        return first_exit_curved(K, C, M, lower=lower, tol=tol)

    def _leaves_immediately(self, point, lmi_at_point, direction, tol):
        # a root at t = 0 is dropped by the oracle, so a boundary point with an
        # outward direction has to be caught here
        if np.linalg.eigvalsh(lmi_at_point)[0] > tol:
            return False
        gradient = self.lmi.gradient_of_min_eigenvalue(point, lmi_at_x=lmi_at_point)
        return gradient @ direction < 0

    def boundary_normal(self, point, lmi_at_point=None):
        """Unit inward normal of the boundary at a boundary point.

        This is the normalized gradient of the smallest eigenvalue of the LMI.
        If the gradient vanishes, the zero vector is returned.
        """
        return unit(self.lmi.gradient_of_min_eigenvalue(point, lmi_at_x=lmi_at_point))

    def random_points(self, shape=1, rng=None):
        """Sample approximately uniform points with the billiard walk."""
        from .sampling import sample_points

        if np.isscalar(shape):
            shape = (shape,)
        shape = tuple(shape)
        n = int(np.prod(shape))

        result = sample_points(self, n, walk="billiard", rng=rng)
        if shape == (1,):
            return result.points[0]
        return result.points.reshape(shape + (self.dim,))

    def transform(self, matrix=None, translation=None):
        """Apply an affine transform :math:`x \\mapsto Mx + c` to the body.

        The image is :math:`\\{y \\mid A(M^{-1}(y - c))\\succcurlyeq 0\\}`.
        """
        matrix, translation = clean_transform(
            matrix=matrix, translation=translation, dim=self.dim
        )
        Minv = np.linalg.inv(matrix)
        return Spectrahedron(self.lmi.pullback(Minv, -Minv @ translation))

    def is_same(self, other, tol=1e-8):
        if not isinstance(other, self.__class__):
            return False
        return self.lmi.is_same(other.lmi, tol=tol)
