import numpy as np
import pytest

import specwalk as sw


def test_random_symmetric_matrix():
    rng = np.random.default_rng(0)

    for n in range(1, 6):
        A = sw.random_symmetric_matrix(n, rng=rng)
        assert A.shape == (n, n)
        assert np.allclose(A, A.T)
        assert np.all(np.abs(A) <= 1)


def test_random_points_on_hypersphere():
    rng = np.random.default_rng(0)

    # one point
    point = sw.random_points_on_hypersphere(dim=2, rng=rng)
    assert point.shape == (3,)
    assert np.isclose(np.linalg.norm(point), 1.0)

    # multiple points
    points = sw.random_points_on_hypersphere(shape=10, dim=2, rng=rng)
    assert points.shape == (10, 3)
    assert np.allclose(np.linalg.norm(points, axis=-1), 1.0)

    # hypersphere
    points = sw.random_points_on_hypersphere(shape=10, dim=3, rng=rng)
    assert np.allclose(np.linalg.norm(points, axis=-1), 1.0)

    # grid of points
    points = sw.random_points_on_hypersphere(shape=(10, 10), dim=2, rng=rng)
    assert points.shape == (10, 10, 3)
    assert np.allclose(np.linalg.norm(points, axis=-1), 1.0)

    # the 0-sphere is {-1, 1}
    points = sw.random_points_on_hypersphere(shape=20, dim=0, rng=rng)
    assert points.shape == (20, 1)
    assert np.allclose(np.abs(points), 1.0)


def test_random_lmi():
    rng = np.random.default_rng(0)

    lmi = sw.random_lmi(dim=4, size=5, rng=rng)
    assert lmi.dim == 4
    assert lmi.size == 5
    assert np.allclose(lmi.A0, np.eye(5))
    for A in lmi.coefficients:
        assert np.allclose(A, A.T)
        assert np.isclose(np.trace(A), 0)

    # the origin is strictly inside and the body is bounded in every direction
    body = sw.Spectrahedron(lmi)
    assert body.contains(np.zeros(4))
    directions = sw.random_points_on_hypersphere(shape=20, dim=3, rng=rng)
    for d in directions:
        assert np.isfinite(body.line_intersection(np.zeros(4), d))


def test_random_lmi_invalid():
    # only 2 independent traceless symmetric 2x2 matrices exist
    with pytest.raises(ValueError):
        sw.random_lmi(dim=3, size=2)
    with pytest.raises(ValueError):
        sw.random_lmi(dim=0, size=2)
