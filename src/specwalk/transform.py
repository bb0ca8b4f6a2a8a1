"""Affine coordinate maps used for rounding."""
import numpy as np

from .errors import DimensionMismatch
from .util import clean_transform


class AffineMap:
    """The affine map :math:`y \\mapsto My + c`.

    For rounding, ``y`` are the coordinates of the rounded body and
    ``My + c`` are the original coordinates.

    Parameters
    ----------
    matrix : np.ndarray, shape (d, d)
        The (invertible) linear part. Defaults to identity.
    translation : np.ndarray, shape (d,)
        The offset. Defaults to zero.
    dim : int
        Dimension, only needed if both ``matrix`` and ``translation`` are
        ``None``.
    """

    def __init__(self, matrix=None, translation=None, dim=None):
        if dim is None:
            if matrix is not None:
                dim = np.shape(matrix)[0]
            elif translation is not None:
                dim = np.shape(translation)[0]
            else:
                raise ValueError("Cannot infer the dimension of the map.")
        self.matrix, self.translation = clean_transform(
            matrix=matrix, translation=translation, dim=dim
        )
        if self.matrix.shape != (dim, dim) or self.translation.shape != (dim,):
            raise DimensionMismatch(
                f"Map has matrix shape {self.matrix.shape} and translation shape {self.translation.shape}."
            )

    @classmethod
    def identity(cls, dim):
        """The identity map in ``dim`` dimensions."""
        return cls(dim=dim)

    @property
    def dim(self):
        return self.translation.shape[0]

    @property
    def det(self):
        """Determinant of the linear part: the map's volume scaling factor."""
        return np.linalg.det(self.matrix)

    def __repr__(self):
        return f"AffineMap(matrix={self.matrix}, translation={self.translation})"

    def apply(self, points):
        """Map a point ``(d,)`` or a set of points ``(N, d)``."""
        points = np.asarray(points, dtype=float)
        return points @ self.matrix.T + self.translation

    def apply_inverse(self, points):
        """Map a point or set of points back through the inverse map."""
        points = np.asarray(points, dtype=float)
        y = np.linalg.solve(self.matrix, (points - self.translation).T)
        return y.T

    def inverse(self):
        """The inverse map :math:`x \\mapsto M^{-1}(x - c)`."""
        Minv = np.linalg.inv(self.matrix)
        return AffineMap(matrix=Minv, translation=-Minv @ self.translation)

    def compose(self, other):
        """The map ``self(other(y))``."""
        assert other.dim == self.dim
        return AffineMap(
            matrix=self.matrix @ other.matrix,
            translation=self.matrix @ other.translation + self.translation,
        )
