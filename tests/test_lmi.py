import numpy as np
import cvxpy as cp
import pytest

import specwalk as sw


def disk_lmi():
    # A(x) has eigenvalues 1 +- ||x||, so A(x) >= 0 is the unit disk
    return sw.LMI([np.eye(2), np.diag([1.0, -1.0]), [[0.0, 1.0], [1.0, 0.0]]])


def test_lmi_shape():
    lmi = disk_lmi()
    assert lmi.dim == 2
    assert lmi.size == 2
    assert lmi.coefficients.shape == (2, 2, 2)
    assert len(lmi.matrices) == 3
    assert np.allclose(lmi.matrices[0], np.eye(2))


def test_lmi_invalid_matrices():
    with pytest.raises(sw.DimensionMismatch):
        sw.LMI([np.eye(2)])

    with pytest.raises(sw.DimensionMismatch):
        sw.LMI([np.eye(2), np.eye(3)])

    with pytest.raises(sw.DimensionMismatch):
        sw.LMI([np.eye(2), np.ones((2, 3))])

    with pytest.raises(sw.DimensionMismatch):
        sw.LMI([np.eye(2), [[0, 1], [0, 0]]])

    # dimension mismatches are also value errors
    with pytest.raises(ValueError):
        sw.LMI([np.eye(2), np.eye(3)])


def test_lmi_is_read_only():
    lmi = disk_lmi()
    with pytest.raises(ValueError):
        lmi.A0[0, 0] = 2
    with pytest.raises(ValueError):
        lmi.coefficients[0, 0, 0] = 2


def test_lmi_evaluate():
    lmi = disk_lmi()
    x = np.array([0.3, -0.2])
    A = lmi.evaluate(x)
    assert np.allclose(A, [[1.3, -0.2], [-0.2, 0.7]])

    # multiple points at once
    X = np.array([x, np.zeros(2)])
    As = lmi.evaluate(X)
    assert As.shape == (2, 2, 2)
    assert np.allclose(As[0], A)
    assert np.allclose(As[1], np.eye(2))

    with pytest.raises(sw.DimensionMismatch):
        lmi.evaluate([1, 2, 3])


def test_lmi_derivative():
    rng = np.random.default_rng(0)
    lmi = sw.random_lmi(dim=3, size=4, rng=rng)
    x = rng.normal(size=3)
    d = rng.normal(size=3)
    assert np.allclose(lmi.evaluate(x + d) - lmi.evaluate(x), lmi.derivative(d))

    with pytest.raises(sw.DimensionMismatch):
        lmi.derivative([1, 0])


def test_lmi_min_eigenvalue():
    lmi = disk_lmi()
    rng = np.random.default_rng(0)
    X = rng.uniform(-2, 2, size=(20, 2))
    λs = lmi.min_eigenvalue(X)
    assert np.allclose(λs, 1 - np.linalg.norm(X, axis=1))


def test_lmi_gradient_of_min_eigenvalue():
    lmi = disk_lmi()

    # lambda_min = 1 - ||x||, so the gradient is -x / ||x||
    g = lmi.gradient_of_min_eigenvalue([0.5, 0])
    assert np.allclose(g, [-1, 0])

    # compare against finite differences at a generic point
    rng = np.random.default_rng(0)
    lmi = sw.random_lmi(dim=3, size=4, rng=rng)
    x = 0.1 * rng.normal(size=3)
    g = lmi.gradient_of_min_eigenvalue(x)

    h = 1e-6
    g_fd = np.zeros(3)
    for i in range(3):
        e = np.zeros(3)
        e[i] = h
        g_fd[i] = (lmi.min_eigenvalue(x + e) - lmi.min_eigenvalue(x - e)) / (2 * h)
    assert np.allclose(g, g_fd, rtol=1e-4, atol=1e-6)


def test_lmi_pullback():
    rng = np.random.default_rng(0)
    lmi = sw.random_lmi(dim=3, size=4, rng=rng)
    M = rng.normal(size=(3, 3))
    c = rng.normal(size=3)
    pulled = lmi.pullback(M, c)

    for _ in range(5):
        y = rng.normal(size=3)
        assert np.allclose(pulled.evaluate(y), lmi.evaluate(M @ y + c))

    # pulling back along the identity does nothing
    assert lmi.pullback().is_same(lmi)


def test_lmi_expression():
    lmi = disk_lmi()
    x = cp.Variable(2)
    objective = cp.Maximize(x[0] + x[1])
    problem = cp.Problem(objective, [lmi.expression(x) >> 0])
    problem.solve()
    assert np.isclose(problem.value, np.sqrt(2), rtol=0, atol=1e-4)
