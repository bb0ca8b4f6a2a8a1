import numpy as np

import specwalk as sw


def test_is_symmetric():
    assert sw.is_symmetric(np.eye(3))
    assert sw.is_symmetric([[1, 2], [2, 1]])
    assert not sw.is_symmetric([[1, 2], [0, 1]])
    assert not sw.is_symmetric(np.ones((2, 3)))
    assert sw.is_symmetric([[1, 2], [2 + 1e-10, 1]], tol=1e-8)


def test_unit():
    v = sw.unit([3, 4])
    assert np.allclose(v, [0.6, 0.8])

    z = sw.unit(np.zeros(3))
    assert np.allclose(z, 0)


def test_clean_transform():
    matrix, translation = sw.clean_transform(matrix=None, translation=None, dim=3)
    assert np.allclose(matrix, np.eye(3))
    assert np.allclose(translation, np.zeros(3))

    matrix, translation = sw.clean_transform(
        matrix=[[2, 0], [0, 1]], translation=[1, 1], dim=2
    )
    assert matrix.dtype == float
    assert np.allclose(matrix @ [1, 1] + translation, [3, 2])
