"""Example of sampling points from a spectrahedron with the billiard and
Boltzmann walks."""
import numpy as np
import matplotlib.pyplot as plt

import specwalk as sw


def disk():
    """The unit disk: A(x) has eigenvalues 1 +- ||x||."""
    return sw.Spectrahedron(
        [np.eye(2), np.diag([1.0, -1.0]), np.array([[0.0, 1.0], [1.0, 0.0]])]
    )


def plot_points(points, title):
    plt.figure()
    plt.scatter(points[:, 0], points[:, 1], s=1, alpha=0.5)
    ax = plt.gca()
    ax.set_aspect("equal")
    plt.grid()
    plt.xlabel("x")
    plt.ylabel("y")
    plt.title(title)


def sample_uniform():
    """Uniformly sample points from a random 2D spectrahedron."""
    N = 5000

    rng = np.random.default_rng(0)
    body = sw.Spectrahedron(sw.random_lmi(dim=2, size=4, rng=rng))
    result = sw.sample_points(body, N, burn_in=100, rng=rng)
    plot_points(result.points, "Billiard walk")


def sample_boltzmann():
    """Sample points from the Boltzmann distribution on the unit disk."""
    N = 5000

    rng = np.random.default_rng(0)
    c = np.array([1.0, 1.0])
    result = sw.sample_points(
        disk(),
        N,
        walk="boltzmann",
        objective=c,
        temperature=0.2,
        start=np.zeros(2),
        diameter=2.0,
        rng=rng,
    )
    plot_points(result.points, "Boltzmann walk (T = 0.2)")


def sample_rounded():
    """Sample a thin rotated ellipse after rounding it."""
    N = 5000

    rng = np.random.default_rng(0)
    θ = np.pi / 6
    C = np.array([[np.cos(θ), -np.sin(θ)], [np.sin(θ), np.cos(θ)]])
    ell = sw.Ellipsoid(half_extents=[5, 0.2], rotation=C)
    body = sw.Spectrahedron.from_ellipsoid(ell)

    result = sw.sample_points(body, N, rounding=True, rng=rng)
    plot_points(result.points, "Billiard walk with rounding")


if __name__ == "__main__":
    sample_uniform()
    sample_boltzmann()
    sample_rounded()
    plt.show()
