import warnings
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .complex_math import magnitude_squared
from .errors import NumericalDegeneracyWarning
from .parameters import SimulationParameters
from . import systems


def _create_grid(grid_size: int, half_width: float) -> Tuple[np.ndarray, float]:
    """Evenly spaced points on [-L, L], endpoints included, and their spacing."""
    if grid_size < 2:
        raise ValueError("Grid needs at least 2 points.")
    if not half_width > 0:
        raise ValueError("Spatial domain half-width must be positive.")
    coords, delta = np.linspace(-half_width, half_width, grid_size, retstep=True)
    return coords, float(delta)


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class WavefunctionSample:
    """ψ(xᵢ, t) on the grid for one parameter set. Arrays are read-only."""

    parameters: SimulationParameters
    positions: np.ndarray
    amplitudes: np.ndarray
    dx: float

    def __len__(self) -> int:
        return len(self.amplitudes)

    @property
    def domain_width(self) -> float:
        return 2.0 * self.parameters.half_width

    @property
    def probability_density(self) -> np.ndarray:
        """|ψ|² in 1/m; integrates to 1 with spacing dx."""
        return magnitude_squared(self.amplitudes)

    @property
    def real(self) -> np.ndarray:
        return self.amplitudes.real

    @property
    def imag(self) -> np.ndarray:
        return self.amplitudes.imag

    @property
    def phase(self) -> np.ndarray:
        return np.angle(self.amplitudes)

    def norm(self) -> float:
        """Σ|ψᵢ|²·Δx; 1 within rounding for every sample the sampler returns."""
        return float(np.sum(self.probability_density) * self.dx)


class GridSampler:
    """Evaluates a system model over the grid and normalizes the result."""

    def evaluate(self, parameters: SimulationParameters, config) -> WavefunctionSample:
        positions, dx = _create_grid(parameters.grid_size, parameters.half_width)
        psi = np.asarray(systems.wavefunction(
            parameters.system_type,
            positions,
            parameters.energy_level,
            parameters.simulation_time,
            parameters.particle_mass,
            parameters.half_width,
            parameters.potential_height,
            config,
        ), dtype=complex)

        total = float(np.sum(magnitude_squared(psi)) * dx)
        if np.isfinite(total) and total > 0.0 and np.all(np.isfinite(psi)):
            psi = psi / np.sqrt(total)
        else:
            warnings.warn(
                f"{parameters.system_type.display_name} sample underflowed on the grid; "
                "using the uniform state instead.",
                NumericalDegeneracyWarning,
                stacklevel=2,
            )
            psi = np.full(positions.shape, 1.0 / np.sqrt(dx * len(positions)), dtype=complex)

        return WavefunctionSample(
            parameters=parameters,
            positions=_read_only(positions),
            amplitudes=_read_only(psi),
            dx=dx,
        )
