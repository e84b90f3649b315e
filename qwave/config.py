"""
Configuration for the quantum waveform simulator.

A ``SimulatorConfig`` is handed to ``QuantumSimulator`` by the host
application. It carries the grid resolution, the per-system spatial
domains, the model constants and the bounds used to clamp setter input.
Nothing here is process-wide; two simulators may run with different
configurations side by side.
"""

import json
import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

import scipy.constants as const

from .simulator.systems import BOHR_RADIUS, SystemType, parse_system_type


def _default_half_widths() -> Dict[SystemType, float]:
    return {
        SystemType.FREE_PARTICLE: 20e-9,        # 20 nm
        SystemType.POTENTIAL_WELL: 10e-9,       # 10 nm
        SystemType.HARMONIC_OSCILLATOR: 15e-9,  # 15 nm
        SystemType.HYDROGEN_ATOM: 30 * BOHR_RADIUS,
    }


@dataclass(frozen=True)
class SimulatorConfig:
    """Settings for one simulator instance (SI units unless noted)."""

    grid_size: int = 1024
    half_widths: Dict[SystemType, float] = field(default_factory=_default_half_widths)

    default_system: SystemType = SystemType.FREE_PARTICLE
    default_energy_level: int = 1
    default_mass: float = const.m_e

    # Model constants
    free_particle_base_energy_ev: float = 10.0
    oscillator_length_ratio: float = 10.0   # oscillator length = L / ratio
    packet_center_fraction: float = 0.25    # packet starts at 25% of the domain
    packet_width_fraction: float = 0.05     # sigma = 5% of the domain width
    barrier_position_fraction: float = 0.6
    barrier_width_fraction: float = 0.05

    time_step: float = 1e-16

    # Clamp bounds for setter input
    min_mass: float = 1e-35
    max_mass: float = 1e-20
    max_energy_level: int = 100
    max_potential_height: float = 1000.0    # eV
    max_abs_time: float = 1e6
    min_half_width: float = 1e-15
    max_half_width: float = 1.0
    min_grid_size: int = 2
    max_grid_size: int = 1 << 20

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not (self.min_grid_size >= 2 and self.min_grid_size <= self.grid_size <= self.max_grid_size):
            raise ValueError(
                f"grid_size must lie in [{self.min_grid_size}, {self.max_grid_size}] "
                f"(and min_grid_size >= 2), got {self.grid_size}."
            )
        missing = [s.name for s in SystemType if s not in self.half_widths]
        if missing:
            raise ValueError(f"Missing half-width for system(s): {', '.join(missing)}.")
        for system, width in self.half_widths.items():
            if not (self.min_half_width <= width <= self.max_half_width):
                raise ValueError(
                    f"Half-width for {system.name} must lie in [{self.min_half_width}, {self.max_half_width}]."
                )
        if not (0 < self.min_mass <= self.default_mass <= self.max_mass):
            raise ValueError("Mass bounds must satisfy 0 < min_mass <= default_mass <= max_mass.")
        if not (1 <= self.default_energy_level <= self.max_energy_level):
            raise ValueError("default_energy_level must lie in [1, max_energy_level].")
        if not (self.free_particle_base_energy_ev > 0 and self.oscillator_length_ratio > 0):
            raise ValueError("free_particle_base_energy_ev and oscillator_length_ratio must be positive.")
        for name in ("packet_center_fraction", "barrier_position_fraction"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"'{name}' must lie in [0, 1].")
        for name in ("packet_width_fraction", "barrier_width_fraction"):
            if not 0.0 < getattr(self, name) <= 1.0:
                raise ValueError(f"'{name}' must lie in (0, 1].")
        if not (self.max_potential_height >= 0 and self.max_abs_time > 0 and self.time_step > 0):
            raise ValueError("max_potential_height, max_abs_time and time_step must be positive.")

    def half_width(self, system_type: SystemType) -> float:
        return self.half_widths[system_type]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulatorConfig":
        """Build a config from plain values (e.g. a loaded JSON document).

        Unknown keys are rejected. ``half_widths`` may be keyed by system
        name or alias; a ``domain_settings`` block of the form
        ``{"points": [N], "ranges": [[-L, L]]}`` sets the grid size and the
        half-width of ``default_system`` (or of ``domain_settings["system"]``).
        """
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary.")
        data = dict(data)
        known = {f.name for f in fields(cls)}
        domain = data.pop("domain_settings", None)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration key(s): {', '.join(sorted(unknown))}.")

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "half_widths":
                widths = _default_half_widths()
                for name, width in value.items():
                    widths[parse_system_type(name)] = float(width)
                kwargs[key] = widths
            elif key == "default_system":
                kwargs[key] = parse_system_type(value)
            else:
                kwargs[key] = value

        config = cls(**kwargs)
        if domain is not None:
            config = config._with_domain_settings(domain)
        return config

    def _with_domain_settings(self, domain: Dict[str, Any]) -> "SimulatorConfig":
        points = domain.get("points")
        ranges = domain.get("ranges")
        if points is None and ranges is None:
            raise ValueError("domain_settings needs 'points' and/or 'ranges'.")
        updates: Dict[str, Any] = {}
        if points is not None:
            if len(points) != 1:
                raise ValueError("Only one-dimensional domains are supported.")
            updates["grid_size"] = int(points[0])
        if ranges is not None:
            if len(ranges) != 1 or len(ranges[0]) != 2:
                raise ValueError("Only one-dimensional domains are supported.")
            lower, upper = (float(v) for v in ranges[0])
            if not math.isclose(lower, -upper, rel_tol=1e-9):
                raise ValueError(f"Spatial domain must be symmetric [-L, L], got [{lower}, {upper}].")
            system = parse_system_type(domain.get("system", self.default_system))
            widths = dict(self.half_widths)
            widths[system] = upper
            updates["half_widths"] = widths
        return replace(self, **updates)

    @classmethod
    def from_json(cls, path: str) -> "SimulatorConfig":
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["half_widths"] = {s.name.lower(): w for s, w in self.half_widths.items()}
        data["default_system"] = self.default_system.name.lower()
        return data


def load_config(path: Optional[str] = None) -> SimulatorConfig:
    """Load a config from JSON, or return the defaults when no path is given."""
    if path is None:
        return SimulatorConfig()
    return SimulatorConfig.from_json(path)
