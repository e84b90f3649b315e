import math
import warnings
from dataclasses import replace
from typing import Optional, Tuple, Union

import numpy as np

from ..config import SimulatorConfig
from .errors import ParameterClampWarning
from .grid_sampler import GridSampler, WavefunctionSample
from .parameters import SimulationParameters
from .systems import (
    PLANCK,
    SystemType,
    de_broglie_wavelength,
    eigenenergy,
    parse_system_type,
)

_MIN_ENERGY = 1e-300  # floor for |E| when deriving the period


def _as_float(value) -> float:
    """float(value), saturating to +/-inf for integers too large for a double."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _clamp(name: str, value, lower, upper, nan_value):
    """Clamp ``value`` into [lower, upper]; NaN maps to ``nan_value``.

    Emits a ParameterClampWarning whenever the stored value differs from
    the requested one.
    """
    value = _as_float(value)
    if math.isnan(value):
        result = nan_value
    else:
        result = min(max(value, lower), upper)
    if result != value:
        warnings.warn(
            f"{name}={value!r} is out of range; clamped to {result!r}.",
            ParameterClampWarning,
            stacklevel=3,
        )
    return result


class QuantumSimulator:
    """
    Simulator for a single particle in one of four 1-D quantum systems.

    Holds the mutable simulation parameters and at most one cached
    ``WavefunctionSample``. Setters replace the parameters and drop the
    cache (dirty); queries re-evaluate through the ``GridSampler`` only when
    dirty (clean afterwards).

    Setters never raise for numeric input: out-of-range values are clamped
    to the nearest valid value (bounds come from ``SimulatorConfig``) and a
    ``ParameterClampWarning`` is emitted. The simulator is not thread-safe;
    serialize access when sharing an instance.
    """

    def __init__(self, config: Optional[SimulatorConfig] = None, sampler: Optional[GridSampler] = None):
        self.config = config if config is not None else SimulatorConfig()
        self._sampler = sampler if sampler is not None else GridSampler()
        self._half_widths = dict(self.config.half_widths)

        system = self.config.default_system
        self._params = SimulationParameters(
            system_type=system,
            particle_mass=self.config.default_mass,
            energy_level=self.config.default_energy_level,
            potential_height=0.0,
            simulation_time=0.0,
            grid_size=self.config.grid_size,
            half_width=self._half_widths[system],
        )
        self._cache: Optional[Tuple[SimulationParameters, WavefunctionSample]] = None

    # --- State ---

    @property
    def parameters(self) -> SimulationParameters:
        return self._params

    @property
    def system_type(self) -> SystemType:
        return self._params.system_type

    @property
    def is_dirty(self) -> bool:
        return self._cache is None or self._cache[0] != self._params

    def _update(self, **changes):
        self._params = replace(self._params, **changes)
        self._cache = None

    # --- Mutators ---

    def set_system_type(self, system_type: Union[SystemType, str, int]):
        """Select the model; the domain switches to that system's half-width."""
        system = parse_system_type(system_type)
        self._update(system_type=system, half_width=self._half_widths[system])

    def set_particle_mass(self, mass: float):
        cfg = self.config
        self._update(particle_mass=_clamp("particle_mass", mass, cfg.min_mass, cfg.max_mass, cfg.default_mass))

    def set_energy_level(self, level: Union[int, float]):
        """Nearest integer, clamped to [1, max_energy_level]; NaN becomes 1."""
        clamped = _clamp("energy_level", level, 1, self.config.max_energy_level, 1)
        self._update(energy_level=int(round(clamped)))

    def set_potential_height(self, height: float):
        """Barrier height in eV; NaN and negative values become 0."""
        cfg = self.config
        self._update(potential_height=_clamp("potential_height", height, 0.0, cfg.max_potential_height, 0.0))

    def set_time(self, t: float):
        """Simulation time in seconds; NaN becomes 0, +/-inf the time bound."""
        bound = self.config.max_abs_time
        self._update(simulation_time=_clamp("simulation_time", t, -bound, bound, 0.0))

    def advance_time(self, dt: Optional[float] = None):
        """Step the simulation time by ``dt`` (default ``config.time_step``)."""
        step = self.config.time_step if dt is None else _as_float(dt)
        if math.isnan(step):
            step = 0.0
        self.set_time(self._params.simulation_time + step)

    def set_grid_size(self, grid_size: Union[int, float]):
        cfg = self.config
        clamped = _clamp("grid_size", grid_size, cfg.min_grid_size, cfg.max_grid_size, cfg.grid_size)
        self._update(grid_size=int(round(clamped)))

    def set_spatial_domain(self, half_width: float):
        """Set L for the current system; the domain becomes [-L, L]."""
        cfg = self.config
        width = _clamp("half_width", half_width, cfg.min_half_width, cfg.max_half_width, cfg.min_half_width)
        self._half_widths[self._params.system_type] = width
        self._update(half_width=width)

    # --- Queries ---

    def get_sample(self) -> WavefunctionSample:
        """The normalized sample for the current parameters (cached)."""
        if self.is_dirty:
            sample = self._sampler.evaluate(self._params, self.config)
            self._cache = (self._params, sample)
        return self._cache[1]

    def get_probability_density_grid(self) -> np.ndarray:
        """
        |ψᵢ|² expressed per unit of the fractional coordinate u = (x + L)/2L.

        The grid is not rescaled to sum to 1: its mean over the grid
        approximates ∫|ψ|²dx and equals 1 up to the endpoint factor (N-1)/N.
        """
        sample = self.get_sample()
        return sample.probability_density * sample.domain_width

    def get_real_grid(self) -> np.ndarray:
        return self.get_sample().real

    def get_imaginary_grid(self) -> np.ndarray:
        return self.get_sample().imag

    def get_phase_grid(self) -> np.ndarray:
        return self.get_sample().phase

    def get_spatial_grid(self) -> np.ndarray:
        return self.get_sample().positions

    def get_wave_function(self, position: float) -> complex:
        """ψ at the grid point nearest to ``position`` (clipped to the domain)."""
        sample = self.get_sample()
        half_width = self._params.half_width
        position = _as_float(position)
        if math.isnan(position):
            position = 0.0
        position = min(max(position, -half_width), half_width)
        index = int(round((position + half_width) / sample.dx))
        return complex(sample.amplitudes[min(index, len(sample) - 1)])

    def get_energy(self, level: int) -> float:
        """Eigenenergy of ``level`` for the current system and parameters."""
        level = _as_float(level)
        if math.isnan(level):
            level = 1
        n = int(round(min(max(level, 1), self.config.max_energy_level)))
        p = self._params
        return eigenenergy(p.system_type, n, p.particle_mass, p.half_width, p.potential_height, self.config)

    def get_expected_energy(self) -> float:
        return self.get_energy(self._params.energy_level)

    def calculate_de_broglie_wavelength(self) -> float:
        """λ = h/p from the free-particle wavenumber k_n, whatever the system."""
        p = self._params
        return float(de_broglie_wavelength(p.energy_level, p.particle_mass, self.config))

    def transition_frequency(self, from_level: int, to_level: int) -> float:
        """|E_to - E_from|/h in Hz; the current state is left untouched."""
        return abs(self.get_energy(to_level) - self.get_energy(from_level)) / PLANCK

    @property
    def wavelength(self) -> float:
        return self.calculate_de_broglie_wavelength()

    @property
    def quantum_energy(self) -> float:
        return self.get_expected_energy()

    @property
    def period(self) -> float:
        """h/|E|: the period of the phase factor exp(-iEt/ħ)."""
        return PLANCK / max(abs(self.get_expected_energy()), _MIN_ENERGY)
