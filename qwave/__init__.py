"""
qwave - Quantum Waveform Simulation

Closed-form wavefunctions and eigenenergies for four one-dimensional
quantum systems, sampled on a uniform grid.
"""

from .config import SimulatorConfig, load_config
from .simulator.errors import NumericalDegeneracyWarning, ParameterClampWarning, QuantumWaveformWarning
from .simulator.grid_sampler import GridSampler, WavefunctionSample
from .simulator.quantum_simulator import QuantumSimulator
from .simulator.systems import SystemType

__version__ = "0.1.0"

__all__ = [
    'SimulatorConfig',
    'load_config',
    'QuantumSimulator',
    'GridSampler',
    'WavefunctionSample',
    'SystemType',
    'QuantumWaveformWarning',
    'ParameterClampWarning',
    'NumericalDegeneracyWarning',
]
