"""Linear matrix inequalities."""
import numpy as np
import cvxpy as cp

from .errors import DimensionMismatch
from .util import is_symmetric


class LMI:
    """Linear matrix inequality :math:`A(x) = A_0 + \\sum_i x_iA_i \\succcurlyeq 0`.

    Parameters
    ----------
    matrices : Iterable[np.ndarray]
        The matrices ``[A0, A1, ..., An]``. Each must be symmetric and all
        must have the same shape ``(m, m)``.
    tol : float, non-negative
        Tolerance for the symmetry check.

    Attributes
    ----------
    A0 : np.ndarray, shape (m, m)
        The constant term.
    coefficients : np.ndarray, shape (n, m, m)
        The coefficient matrices ``A1, ..., An`` stacked along the first axis.
    """

    def __init__(self, matrices, tol=1e-8):
        matrices = [np.array(A, dtype=float) for A in matrices]
        if len(matrices) < 2:
            raise DimensionMismatch(
                "An LMI needs a constant term and at least one coefficient matrix."
            )

        shape = matrices[0].shape
        for i, A in enumerate(matrices):
            if A.ndim != 2 or A.shape[0] != A.shape[1]:
                raise DimensionMismatch(f"Matrix A{i} is not square: {A.shape}.")
            if A.shape != shape:
                raise DimensionMismatch(
                    f"Matrix A{i} has shape {A.shape}, expected {shape}."
                )
            if not is_symmetric(A, tol=tol):
                raise DimensionMismatch(f"Matrix A{i} is not symmetric.")

        # symmetrize exactly so eigensolvers see symmetric input
        matrices = [0.5 * (A + A.T) for A in matrices]

        self.A0 = matrices[0]
        self.coefficients = np.array(matrices[1:])
        self.A0.flags.writeable = False
        self.coefficients.flags.writeable = False

    @property
    def dim(self):
        """Dimension of the ambient space (number of variables)."""
        return self.coefficients.shape[0]

    @property
    def size(self):
        """Side length of the matrices."""
        return self.A0.shape[0]

    @property
    def matrices(self):
        """All matrices ``[A0, A1, ..., An]``."""
        return [self.A0] + list(self.coefficients)

    def __repr__(self):
        return f"LMI(dim={self.dim}, size={self.size})"

    def _check_vector(self, x, name):
        x = np.array(x, dtype=float)
        if x.ndim not in (1, 2) or x.shape[-1] != self.dim:
            raise DimensionMismatch(
                f"{name} has shape {x.shape}, but the LMI has dimension {self.dim}."
            )
        return x

    def evaluate(self, x):
        """Evaluate :math:`A(x)`.

        Parameters
        ----------
        x : np.ndarray, shape (n,) or (N, n)
            A point or a set of points.

        Returns
        -------
        : np.ndarray, shape (m, m) or (N, m, m)
            The value of the LMI at each point.
        """
        x = self._check_vector(x, "Point")
        return self.A0 + np.tensordot(x, self.coefficients, axes=1)

    def derivative(self, direction):
        """The directional derivative :math:`\\sum_i d_iA_i` of the LMI.

        This does not depend on the point at which the LMI is evaluated.
        """
        d = self._check_vector(direction, "Direction")
        if d.ndim != 1:
            raise DimensionMismatch("Direction must be a single vector.")
        return np.tensordot(d, self.coefficients, axes=1)

    def min_eigenvalue(self, x):
        """Smallest eigenvalue of :math:`A(x)` for a point or set of points."""
        return np.linalg.eigvalsh(self.evaluate(x))[..., 0]

    def gradient_of_min_eigenvalue(self, x, lmi_at_x=None):
        """Gradient of the smallest eigenvalue of :math:`A(x)` with respect to ``x``.

        Parameters
        ----------
        x : np.ndarray, shape (n,)
            The point.
        lmi_at_x : np.ndarray, shape (m, m), optional
            The value of ``A(x)`` if it is already known.

        Returns
        -------
        : np.ndarray, shape (n,)
            The vector with entries :math:`u^TA_iu`, where :math:`u` is a unit
            eigenvector of the smallest eigenvalue.
        """
        if lmi_at_x is None:
            lmi_at_x = self.evaluate(x)
        _, V = np.linalg.eigh(lmi_at_x)
        u = V[:, 0]
        return np.einsum("j,ijk,k->i", u, self.coefficients, u)

    def expression(self, x, scale=1.0):
        """Generate the cvxpy expression ``scale * A0 + sum(x[i] * A[i])``.

        Parameters
        ----------
        x : cp.Expression, shape (n,)
            The variable.
        scale : float or cp.Expression
            Multiplier for the constant term. With ``x = s * y`` and
            ``scale = s``, the expression is ``s * A(y)``.

        Returns
        -------
        : cp.Expression, shape (m, m)
            The affine matrix expression.
        """
        assert x.shape == (self.dim,)
        return scale * self.A0 + cp.sum(
            [x[i] * A for i, A in enumerate(self.coefficients)]
        )

    def pullback(self, matrix=None, translation=None):
        """The LMI of :math:`y \\mapsto A(My + c)`.

        Parameters
        ----------
        matrix : np.ndarray, shape (n, k)
            The linear part ``M``. Defaults to identity.
        translation : np.ndarray, shape (n,)
            The offset ``c``. Defaults to zero.

        Returns
        -------
        : LMI
            A new LMI in the ``k`` variables ``y``.
        """
        if matrix is None:
            matrix = np.eye(self.dim)
        matrix = np.array(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != self.dim:
            raise DimensionMismatch(
                f"Transform has shape {matrix.shape}, but the LMI has dimension {self.dim}."
            )
        if translation is None:
            A0 = self.A0.copy()
        else:
            A0 = self.evaluate(translation)
        coefficients = np.tensordot(matrix.T, self.coefficients, axes=1)
        return LMI([A0] + list(coefficients))

    def is_same(self, other, tol=1e-8):
        """Check if this LMI has the same matrices as another one."""
        if not isinstance(other, LMI):
            return False
        if self.A0.shape != other.A0.shape or self.dim != other.dim:
            return False
        return np.allclose(self.A0, other.A0, atol=tol) and np.allclose(
            self.coefficients, other.coefficients, atol=tol
        )
