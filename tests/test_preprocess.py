import numpy as np
import pytest

import specwalk as sw


def disk():
    return sw.Spectrahedron([np.eye(2), np.diag([1.0, -1.0]), [[0.0, 1.0], [1.0, 0.0]]])


def square():
    A = np.vstack((np.eye(2), -np.eye(2)))
    return sw.Spectrahedron.from_polytope(A, np.ones(4))


def test_certified_radius():
    # lambda_min = 1 at the center, and both coefficients have unit norm
    r = sw.certified_radius(disk(), np.zeros(2))
    assert np.isclose(r, 1 / np.sqrt(2))

    # the certified ball is really inside
    rng = np.random.default_rng(0)
    body = sw.Spectrahedron(sw.random_lmi(dim=3, size=4, rng=rng))
    r = sw.certified_radius(body, np.zeros(3))
    assert r > 0
    points = r * sw.random_points_on_hypersphere(shape=100, dim=2, rng=rng)
    assert np.all(body.contains(points))

    # zero on the boundary
    assert np.isclose(sw.certified_radius(disk(), [1, 0]), 0)


def test_inner_ball():
    r = sw.inner_ball(disk(), np.zeros(2), rng=0)
    assert np.isclose(r, 1)

    # the coordinate directions are always checked, so the box gives its
    # exact inscribed radius
    r = sw.inner_ball(square(), np.zeros(2), rng=0)
    assert np.isclose(r, 1)

    r = sw.inner_ball(square(), [0.5, 0], rng=0)
    assert np.isclose(r, 0.5)


def test_inner_ball_bounds():
    rng = np.random.default_rng(0)
    body = sw.Spectrahedron(sw.random_lmi(dim=4, size=5, rng=rng))
    center = np.zeros(4)
    r = sw.inner_ball(body, center, n_directions=100, rng=rng)
    assert r >= sw.certified_radius(body, center)

    # the certified ball is inside along every direction
    directions = sw.random_points_on_hypersphere(shape=20, dim=3, rng=rng)
    for d in directions:
        assert body.line_intersection(center, d) >= sw.certified_radius(body, center)


def test_prepare():
    result = sw.prepare(disk(), rng=0)
    assert np.allclose(result.inner_point, 0, atol=1e-4)
    assert np.isclose(result.inner_radius, 1, atol=1e-3)
    assert np.isclose(result.diameter, 2 * np.sqrt(2), atol=1e-3)
    assert result.spectrahedron.is_same(disk())
    assert np.allclose(result.transform.matrix, np.eye(2))
    assert np.isclose(result.round_value, 1)
    assert np.isnan(result.axis_ratio)


def test_prepare_with_rounding():
    rng = np.random.default_rng(0)
    θ = 0.5
    C = np.array([[np.cos(θ), -np.sin(θ)], [np.sin(θ), np.cos(θ)]])
    ell = sw.Ellipsoid(half_extents=[10, 0.5], rotation=C, center=[2, 1])
    body = sw.Spectrahedron.from_ellipsoid(ell)

    result = sw.prepare(body, rounding=True, rng=rng)
    rounded = result.spectrahedron
    assert rounded.contains(result.inner_point)
    assert result.inner_radius > 0

    # the transform maps the rounded body back onto the original one
    lmi_at_center = rounded.transform(
        result.transform.matrix, result.transform.translation
    ).lmi.evaluate(ell.center)
    assert np.min(np.linalg.eigvalsh(lmi_at_center)) > 0
    inner = result.transform.apply(result.inner_point)
    assert body.contains(inner)
    assert np.isclose(result.round_value, abs(np.linalg.det(result.transform.matrix)))

    # the rounded body is much better conditioned than the original
    lower, upper = rounded.aabb()
    widths = upper - lower
    assert np.max(widths) / np.min(widths) < 5
    assert result.axis_ratio < 20


def test_round_spectrahedron_already_round():
    # a ball needs no rounding beyond one measurement
    body = sw.Spectrahedron.ball(radius=1, center=[0, 0, 0])
    rounded, transform, point, ratio = sw.round_spectrahedron(
        body, np.zeros(3), diameter=2, n_points=100, ratio_threshold=3, rng=0
    )
    assert ratio <= 3
    assert rounded.is_same(body)
    assert np.allclose(transform.matrix, np.eye(3))
    assert np.allclose(point, 0)

    with pytest.raises(ValueError):
        sw.round_spectrahedron(body, np.zeros(3), diameter=2, ratio_threshold=0.5)
