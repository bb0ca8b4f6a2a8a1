import numpy as np
import pytest
from scipy.spatial.transform import Rotation

import specwalk as sw


def rotation():
    return Rotation.from_euler("xy", [np.pi / 4, np.pi / 6]).as_matrix()


def quadratic_form(ell, points):
    d = points - ell.center
    return np.sum((d @ np.linalg.inv(ell.E)) * d, axis=1)


def test_ellipsoid_sphere():
    ell = sw.Ellipsoid.sphere(radius=0.5, center=np.zeros(3))
    assert ell.dim == 3
    assert ell.rank == 3
    assert not ell.is_degenerate()
    assert np.isclose(ell.axis_ratio, 1)
    assert np.allclose(ell.E, 0.25 * np.eye(3))


def test_ellipsoid_degenerate():
    ell = sw.Ellipsoid(half_extents=[1, 1, 0])
    assert ell.rank == 2
    assert ell.is_degenerate()

    with pytest.raises(ValueError):
        sw.Ellipsoid(half_extents=[1, -1])


def test_ellipsoid_affine_map():
    C = rotation()
    ell = sw.Ellipsoid(half_extents=[1, 0.5, 0.25], center=[1, 0, 1], rotation=C)
    assert np.isclose(ell.axis_ratio, 4)

    T = ell.affine_map()
    assert np.isclose(abs(T.det), 1 * 0.5 * 0.25)
    assert np.allclose(T.apply(np.zeros(3)), ell.center)

    # the unit sphere is mapped onto the boundary
    rng = np.random.default_rng(0)
    points = T.apply(sw.random_points_on_hypersphere(shape=50, dim=2, rng=rng))
    assert np.allclose(quadratic_form(ell, points), 1)

    # and the principal axes onto the half extents
    for i, h in enumerate(ell.half_extents):
        assert np.allclose(T.apply(C[:, i]), ell.center + h * C[:, i])


def test_bounding_ellipsoid_square():
    # the smallest ellipse around a square is its circumscribed circle
    vertices = np.array([[1, 1], [1, -1], [-1, 1], [-1, -1]])
    ell = sw.mbe_of_points(vertices)
    assert np.allclose(ell.half_extents, np.sqrt(2), atol=1e-4)
    assert np.allclose(ell.center, 0, atol=1e-4)


def test_bounding_ellipsoid_4d():
    rng = np.random.default_rng(0)

    dim = 4
    points = rng.random((20, dim))
    ell = sw.mbe_of_points(points)
    assert not ell.is_degenerate()

    # solver accuracy limits how tightly the points are enclosed
    assert np.all(quadratic_form(ell, points) <= 1 + 1e-4)


def test_bounding_ellipsoid_degenerate():
    points = np.array([[0.5, 0, 0], [-0.5, 0, 0]])
    ell = sw.mbe_of_points(points)
    assert ell.rank == 1
    assert ell.is_degenerate()
    assert np.isclose(np.max(ell.half_extents), 0.5, atol=1e-4)
    assert np.allclose(ell.center, 0, atol=1e-4)
