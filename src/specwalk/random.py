"""Generate random values."""
import numpy as np

from .lmi import LMI


def random_symmetric_matrix(n, rng=None):
    """Generate a random symmetric matrix with entries in ``[-1, 1]``.

    Parameters
    ----------
    n : int
        Dimension of the matrix.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.

    Returns
    -------
    : np.ndarray, shape (n, n)
        A symmetric matrix.
    """
    rng = np.random.default_rng(rng)
    A = rng.uniform(low=-1, high=1, size=(n, n))
    return 0.5 * (A + A.T)


def random_points_on_hypersphere(shape=1, dim=2, rng=None):
    """Sample random uniform-distributed points on the ``dim``-sphere.

    The points live in ``dim + 1`` dimensions. The 0-sphere is the set
    ``{-1, 1}``.

    See https://compneuro.uwaterloo.ca/files/publications/voelker.2017.pdf
    """
    assert dim >= 0
    if np.isscalar(shape):
        shape = (shape,)
    full_shape = tuple(shape) + (dim + 1,)

    rng = np.random.default_rng(rng)
    X = rng.normal(size=full_shape)

    # make dimension compatible with X
    r = np.expand_dims(np.linalg.norm(X, axis=-1), axis=X.ndim - 1)

    points = X / r

    # drop the extra dimension if shape = 1
    if shape == (1,):
        return points[0]
    return points


def random_lmi(dim, size, rng=None):
    """Generate a random LMI whose feasible set is bounded and contains the
    origin in its interior.

    The constant term is the identity and the coefficient matrices are random
    symmetric matrices with zero trace. Any nonzero combination of traceless
    matrices has a negative eigenvalue, so no direction is unbounded as long
    as the coefficients are linearly independent (which holds almost surely).

    Parameters
    ----------
    dim : int, positive
        Number of variables ``n``.
    size : int, at least 2
        Side length ``m`` of the matrices. Must satisfy
        ``dim <= size * (size + 1) / 2 - 1``.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.

    Returns
    -------
    : LMI
        The random LMI.
    """
    if dim < 1:
        raise ValueError("Number of variables must be positive.")
    if dim > size * (size + 1) // 2 - 1:
        raise ValueError(
            f"Cannot generate {dim} independent traceless {size}x{size} matrices."
        )

    rng = np.random.default_rng(rng)
    I = np.eye(size)
    coefficients = []
    for _ in range(dim):
        S = random_symmetric_matrix(size, rng=rng)
        coefficients.append(S - np.trace(S) / size * I)
    return LMI([I] + coefficients)
