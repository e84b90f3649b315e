"""Complex arithmetic on numpy scalars and arrays."""

import numpy as np

TWO_PI = 2.0 * np.pi


def add(a, b):
    return np.add(a, b)


def multiply(a, b):
    return np.multiply(a, b)


def conjugate(z):
    return np.conjugate(z)


def magnitude_squared(z) -> np.ndarray:
    """|z|² computed as re² + im² (no square root)."""
    z = np.asarray(z)
    return z.real * z.real + z.imag * z.imag


def reduce_phase(theta):
    """Map finite angles into [-π, π).

    Phases such as E·t/ħ can span many periods; reducing them before
    taking cos/sin keeps the rotation accurate.
    """
    return np.remainder(np.add(theta, np.pi), TWO_PI) - np.pi


def from_polar(r, theta) -> np.ndarray:
    """r·(cos θ + i·sin θ). Expects theta already reduced."""
    return np.multiply(r, np.cos(theta) + 1j * np.sin(theta))


def phase_rotation(theta) -> complex:
    """exp(iθ) for a scalar angle, reduced first."""
    return complex(from_polar(1.0, reduce_phase(theta)))
