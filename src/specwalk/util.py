import numpy as np


def is_symmetric(A, tol=1e-8):
    """Check if a square matrix is symmetric to within ``tol``."""
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        return False
    return np.allclose(A, A.T, rtol=0, atol=tol)


def unit(v):
    """Normalize a vector; the zero vector is returned unchanged."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0:
        return v
    return v / norm


def clean_transform(matrix, translation, dim):
    """Fill in defaults for an affine transform ``x -> matrix @ x + translation``."""
    if matrix is None:
        matrix = np.eye(dim)
    else:
        matrix = np.array(matrix, dtype=float)

    if translation is None:
        translation = np.zeros(dim)
    else:
        translation = np.array(translation, dtype=float)

    return matrix, translation
