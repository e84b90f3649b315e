"""
API for qwave - Quantum Waveform Simulation

This module provides programmatic access to the simulator, allowing
developers to sample wavefunctions, collect energies and observables as
JSON-ready data, and hand samples to a renderer.
"""

from typing import Any, Dict, Optional

import numpy as np

from .config import SimulatorConfig
from .simulator.observables import describe
from .simulator.quantum_simulator import QuantumSimulator
from .simulator.systems import SystemType
from .visualizer.base_visualizer import GridConsumer

# Public API
__all__ = [
    'create_simulator',
    'sample_system',
    'collect_results',
    'render',
    'to_serializable',
    'QuantumSimulator',
    'SimulatorConfig',
    'SystemType',
]

# Keyword -> setter used by create_simulator. The system goes first since it
# also resets the spatial domain.
_SETTERS = (
    ("system", "set_system_type"),
    ("half_width", "set_spatial_domain"),
    ("mass", "set_particle_mass"),
    ("energy_level", "set_energy_level"),
    ("potential_height", "set_potential_height"),
    ("time", "set_time"),
    ("grid_size", "set_grid_size"),
)


def create_simulator(config: Optional[SimulatorConfig] = None, **params) -> QuantumSimulator:
    """
    Create a simulator and apply initial parameters.

    Args:
        config (SimulatorConfig): Settings for the instance (defaults if None).
        **params: Any of ``system``, ``half_width``, ``mass``, ``energy_level``,
                  ``potential_height``, ``time`` and ``grid_size``. ``None``
                  values are skipped.

    Returns:
        QuantumSimulator: The configured simulator.
    """
    known = {key for key, _ in _SETTERS}
    unknown = set(params) - known
    if unknown:
        raise ValueError(f"Unknown simulator parameter(s): {', '.join(sorted(unknown))}")

    simulator = QuantumSimulator(config)
    for key, setter in _SETTERS:
        value = params.get(key)
        if value is not None:
            getattr(simulator, setter)(value)
    return simulator


def sample_system(system="free", energy_level=1, mass=None, time=0.0, potential_height=0.0,
                  grid_size=None, config: Optional[SimulatorConfig] = None,
                  include_amplitudes: bool = True) -> Dict[str, Any]:
    """
    Sample one system and collect everything a front end needs.

    Returns:
        dict: Structured results with keys ``parameters``, ``grids``,
              ``energies`` and ``observables``. Arrays are kept as numpy
              arrays; pass the result through ``to_serializable`` before
              writing JSON.
    """
    simulator = create_simulator(
        config,
        system=system,
        energy_level=energy_level,
        mass=mass,
        time=time,
        potential_height=potential_height,
        grid_size=grid_size,
    )
    return collect_results(simulator, include_amplitudes=include_amplitudes)


def collect_results(simulator: QuantumSimulator, include_amplitudes: bool = True) -> Dict[str, Any]:
    """Snapshot the simulator's current state as a results dictionary."""
    params = simulator.parameters
    sample = simulator.get_sample()

    grids = {
        "positions": sample.positions,
        "probability_density": simulator.get_probability_density_grid(),
        "real": simulator.get_real_grid(),
        "imaginary": simulator.get_imaginary_grid(),
        "phase": simulator.get_phase_grid(),
    }
    if include_amplitudes:
        grids["amplitudes"] = sample.amplitudes

    return {
        "parameters": {
            "system": params.system_type.name.lower(),
            "display_name": params.system_type.display_name,
            "energy_level": params.energy_level,
            "particle_mass": params.particle_mass,
            "potential_height_ev": params.potential_height,
            "simulation_time": params.simulation_time,
            "grid_size": params.grid_size,
            "spatial_domain": list(params.spatial_domain),
            "dx": sample.dx,
        },
        "grids": grids,
        "energies": {
            "energy": simulator.quantum_energy,
            "period": simulator.period,
            "de_broglie_wavelength": simulator.wavelength,
        },
        "observables": describe(simulator),
    }


def render(simulator: QuantumSimulator, consumer: GridConsumer):
    """
    Hand the simulator's current sample to a grid consumer.

    Args:
        simulator (QuantumSimulator): Source of the sample (evaluated if dirty).
        consumer (GridConsumer): Renderer, e.g. ``DensityPlotter``.

    Returns:
        Whatever the consumer's ``render`` returns.
    """
    return consumer.consume(simulator.get_sample())


def to_serializable(obj):
    """Convert NumPy arrays and scalars into JSON-compatible values."""
    if isinstance(obj, np.ndarray):
        if np.iscomplexobj(obj):
            # Complex arrays are stored as a dict of real/imag lists
            return {
                "__complex__": True,
                "real": obj.real.tolist(),
                "imag": obj.imag.tolist(),
            }
        return obj.tolist()
    elif isinstance(obj, dict):
        return {k: to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    elif isinstance(obj, (complex, np.complexfloating)):
        return {"__complex__": True, "real": float(obj.real), "imag": float(obj.imag)}
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, SystemType):
        return obj.name.lower()
    return obj
