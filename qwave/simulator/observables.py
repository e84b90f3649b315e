"""
Observables derived from a sampled wavefunction.

Expectation values use the discretized integrals ⟨A⟩ = Σ ψ*·Aψ·Δx on the
sample's grid. The frequency helpers turn eigenenergies into the
frequency-equivalent scalars consumed by audio collaborators.
"""

import math
from typing import Callable, Dict, Union

import numpy as np

from ..config import SimulatorConfig
from .complex_math import conjugate, magnitude_squared
from .grid_sampler import WavefunctionSample
from .systems import (
    BOHR_RADIUS,
    ELECTRON_VOLT,
    HBAR,
    PLANCK,
    SystemType,
    oscillator_angular_frequency,
    potential_energy,
    transmission_probability,
)

MIN_AUDIBLE_FREQUENCY = 20.0
MAX_AUDIBLE_FREQUENCY = 20000.0
MIN_QUANTUM_FREQUENCY = 1e12  # 1 THz
MAX_QUANTUM_FREQUENCY = 1e18  # 1 EHz
_MIN_ENERGY = 1e-300


def _weights(sample: WavefunctionSample) -> np.ndarray:
    density = sample.probability_density
    total = np.sum(density)
    return density / total if total > 0 else np.full(density.shape, 1.0 / len(density))


def expectation_position(sample: WavefunctionSample) -> float:
    return float(np.sum(sample.positions * _weights(sample)))


def uncertainty_position(sample: WavefunctionSample) -> float:
    weights = _weights(sample)
    mean = np.sum(sample.positions * weights)
    variance = np.sum((sample.positions - mean) ** 2 * weights)
    return float(np.sqrt(max(variance, 0.0)))


def expectation_momentum(sample: WavefunctionSample) -> float:
    """⟨p⟩ = -iħ·Σ ψ*·∂ψ/∂x·Δx (central differences)."""
    psi = sample.amplitudes
    dpsi = np.gradient(psi, sample.dx)
    norm = np.sum(magnitude_squared(psi)) * sample.dx
    if norm <= 0:
        return 0.0
    value = -1j * HBAR * np.sum(conjugate(psi) * dpsi) * sample.dx / norm
    return float(value.real)


def uncertainty_momentum(sample: WavefunctionSample) -> float:
    """Δp from ⟨p²⟩ = ħ²·Σ|∂ψ/∂x|²·Δx and ⟨p⟩."""
    psi = sample.amplitudes
    dpsi = np.gradient(psi, sample.dx)
    norm = np.sum(magnitude_squared(psi)) * sample.dx
    if norm <= 0:
        return 0.0
    p2 = HBAR ** 2 * np.sum(magnitude_squared(dpsi)) * sample.dx / norm
    p = expectation_momentum(sample)
    return float(np.sqrt(max(p2 - p * p, 0.0)))


def expectation_energy(sample: WavefunctionSample,
                       potential: Union[None, np.ndarray, Callable[[np.ndarray], np.ndarray]] = None,
                       config=None) -> float:
    """
    ⟨H⟩ = Σ (ħ²/2m·|∂ψ/∂x|² + V·|ψ|²)·Δx / Σ |ψ|²·Δx.

    The kinetic term is the integrated-by-parts form of ⟨-ħ²/2m·∂²ψ/∂x²⟩,
    so ψ need not be twice differentiable at walls or barrier edges.
    ``potential`` is V in joules, either sampled on ``sample.positions`` or
    as a callable of the positions; by default the sampled system's own
    potential is used (``config`` supplies its geometry).
    """
    params = sample.parameters
    psi = sample.amplitudes
    density = magnitude_squared(psi)
    norm = np.sum(density) * sample.dx
    if norm <= 0:
        return 0.0

    if potential is None:
        if config is None:
            config = SimulatorConfig()
        potential = potential_energy(params.system_type, sample.positions, params.particle_mass,
                                     params.half_width, params.potential_height, config)
    elif callable(potential):
        potential = potential(sample.positions)
    potential = np.broadcast_to(np.asarray(potential, dtype=float), density.shape)

    dpsi = np.gradient(psi, sample.dx)
    kinetic = HBAR ** 2 / (2.0 * params.particle_mass) * np.sum(magnitude_squared(dpsi)) * sample.dx
    return float((kinetic + np.sum(potential * density) * sample.dx) / norm)


def frequency_from_energy(energy: float) -> float:
    """E = h·f."""
    return energy / PLANCK


def map_to_audible_frequency(frequency: float) -> float:
    """
    Map a (quantum) frequency in Hz onto the audible band.

    Values already inside 20 Hz-20 kHz pass through. Smaller values are
    scaled linearly up into the band; larger ones are mapped
    logarithmically from [1 THz, 1 EHz] onto [20 Hz, 20 kHz] and clamped.
    """
    frequency = abs(float(frequency))
    if math.isnan(frequency):
        return MIN_AUDIBLE_FREQUENCY
    if MIN_AUDIBLE_FREQUENCY <= frequency <= MAX_AUDIBLE_FREQUENCY:
        return frequency
    if frequency < MIN_AUDIBLE_FREQUENCY:
        return MIN_AUDIBLE_FREQUENCY + (MAX_AUDIBLE_FREQUENCY - MIN_AUDIBLE_FREQUENCY) * (
            frequency / MIN_AUDIBLE_FREQUENCY
        )

    log_min_q, log_max_q = math.log10(MIN_QUANTUM_FREQUENCY), math.log10(MAX_QUANTUM_FREQUENCY)
    fraction = (math.log10(frequency) - log_min_q) / (log_max_q - log_min_q) if math.isfinite(frequency) else 1.0
    fraction = min(max(fraction, 0.0), 1.0)
    log_min_a, log_max_a = math.log10(MIN_AUDIBLE_FREQUENCY), math.log10(MAX_AUDIBLE_FREQUENCY)
    return 10.0 ** (log_min_a + fraction * (log_max_a - log_min_a))


def describe(simulator) -> Dict[str, float]:
    """Per-system observables for display alongside the plots."""
    params = simulator.parameters
    config = simulator.config
    sample = simulator.get_sample()
    energy = simulator.get_expected_energy()

    observables: Dict[str, float] = {
        "energy_level": float(params.energy_level),
        "energy": energy,
        "energy_ev": energy / ELECTRON_VOLT,
        "period": simulator.period,
        "de_broglie_wavelength": simulator.calculate_de_broglie_wavelength(),
    }

    if params.system_type is SystemType.FREE_PARTICLE:
        observables["momentum"] = PLANCK / observables["de_broglie_wavelength"]
        observables["kinetic_energy"] = energy
        observables["transmission_probability"] = transmission_probability(
            params.energy_level, params.particle_mass, params.half_width, params.potential_height, config
        )
    elif params.system_type is SystemType.POTENTIAL_WELL:
        observables["confinement_width"] = 2.0 * params.half_width
    elif params.system_type is SystemType.HARMONIC_OSCILLATOR:
        omega = oscillator_angular_frequency(params.particle_mass, params.half_width, config)
        observables["angular_frequency"] = omega
        observables["classical_amplitude"] = math.sqrt(2.0 * energy / (params.particle_mass * omega ** 2))
    elif params.system_type is SystemType.HYDROGEN_ATOM:
        observables["orbital_radius"] = BOHR_RADIUS * params.energy_level ** 2
        observables["ionization_energy_ev"] = -energy / ELECTRON_VOLT

    dx = uncertainty_position(sample)
    dp = uncertainty_momentum(sample)
    observables["expected_position"] = expectation_position(sample)
    observables["expected_momentum"] = expectation_momentum(sample)
    observables["uncertainty_position"] = dx
    observables["uncertainty_momentum"] = dp
    observables["uncertainty_product"] = dx * dp
    observables["uncertainty_bound"] = HBAR / 2.0

    # Sampled ⟨H⟩ against the closed-form level energy
    expected = expectation_energy(sample, config=config)
    observables["expected_energy"] = expected
    observables["energy_deviation"] = (expected - energy) / max(abs(energy), _MIN_ENERGY)
    return observables
