import numpy as np
import pytest
import scipy.constants as const

from qwave.config import SimulatorConfig
from qwave.simulator import observables
from qwave.simulator.quantum_simulator import QuantumSimulator
from qwave.simulator.systems import BOHR_RADIUS, SystemType

hbar = const.hbar


@pytest.fixture
def well_simulator():
    simulator = QuantumSimulator()
    simulator.set_system_type(SystemType.POTENTIAL_WELL)
    return simulator


@pytest.fixture
def fine_free_simulator():
    # Fine enough grid that central differences resolve the carrier wave
    return QuantumSimulator(SimulatorConfig(grid_size=8192))


# --- Expectation values ---

def test_well_ground_state_expectations(well_simulator):
    sample = well_simulator.get_sample()
    L = well_simulator.parameters.half_width
    assert abs(observables.expectation_position(sample)) < 1e-6 * L
    assert abs(observables.expectation_momentum(sample)) < 1e-6 * hbar / L
    # Δx for the ground state of a box of width W is W·√(1/12 - 1/(2π²))
    width = 2 * L
    expected = width * np.sqrt(1 / 12 - 1 / (2 * np.pi ** 2))
    assert np.isclose(observables.uncertainty_position(sample), expected, rtol=1e-3)


def test_well_uncertainty_respects_bound(well_simulator):
    sample = well_simulator.get_sample()
    product = observables.uncertainty_position(sample) * observables.uncertainty_momentum(sample)
    assert product >= hbar / 2


def test_free_packet_expectations(fine_free_simulator):
    sample = fine_free_simulator.get_sample()
    cfg = fine_free_simulator.config
    L = fine_free_simulator.parameters.half_width
    sigma = cfg.packet_width_fraction * 2 * L
    assert np.isclose(observables.expectation_position(sample), -L / 2, atol=1e-3 * L)
    assert np.isclose(observables.uncertainty_position(sample), sigma / np.sqrt(2), rtol=1e-2)

    p0 = np.sqrt(2 * const.m_e * cfg.free_particle_base_energy_ev * const.e)
    assert np.isclose(observables.expectation_momentum(sample), p0, rtol=1e-2)


def test_gaussian_packet_is_minimum_uncertainty(fine_free_simulator):
    sample = fine_free_simulator.get_sample()
    product = observables.uncertainty_position(sample) * observables.uncertainty_momentum(sample)
    assert np.isclose(product, hbar / 2, rtol=0.02)


def test_expectation_energy_matches_well_level(well_simulator):
    sample = well_simulator.get_sample()
    energy = well_simulator.get_expected_energy()
    assert np.isclose(observables.expectation_energy(sample), energy, rtol=1e-2, atol=0)
    well_simulator.set_energy_level(3)
    assert np.isclose(observables.expectation_energy(well_simulator.get_sample()),
                      well_simulator.get_expected_energy(), rtol=1e-2, atol=0)


def test_expectation_energy_of_oscillator_ground_state():
    simulator = QuantumSimulator()
    simulator.set_system_type(SystemType.HARMONIC_OSCILLATOR)
    L = simulator.parameters.half_width
    omega = hbar / (const.m_e * (L / 10) ** 2)
    assert np.isclose(observables.expectation_energy(simulator.get_sample()), 0.5 * hbar * omega, rtol=1e-2, atol=0)


def test_expectation_energy_of_free_packet(fine_free_simulator):
    sample = fine_free_simulator.get_sample()
    cfg = fine_free_simulator.config
    k = np.sqrt(2 * const.m_e * cfg.free_particle_base_energy_ev * const.e) / hbar
    sigma = cfg.packet_width_fraction * 2 * fine_free_simulator.parameters.half_width
    # ⟨p²⟩ = ħ²k² + ħ²/(2σ²) for the Gaussian envelope
    expected = fine_free_simulator.get_expected_energy() * (1 + 1 / (2 * (k * sigma) ** 2))
    assert np.isclose(observables.expectation_energy(sample), expected, rtol=1e-2, atol=0)


def test_expectation_energy_accepts_explicit_potential(well_simulator):
    sample = well_simulator.get_sample()
    kinetic = observables.expectation_energy(sample)
    shift = 1e-20
    assert np.isclose(observables.expectation_energy(sample, np.full(len(sample), shift)), kinetic + shift, atol=0)
    assert np.isclose(observables.expectation_energy(sample, lambda x: np.full(x.shape, shift)), kinetic + shift, atol=0)


# --- Frequencies ---

def test_frequency_from_energy():
    assert np.isclose(observables.frequency_from_energy(const.h), 1.0)


@pytest.mark.parametrize("frequency,expected", [
    (440.0, 440.0),
    (20.0, 20.0),
    (20000.0, 20000.0),
    (10.0, 10010.0),
    (0.0, 20.0),
    (1e12, 20.0),
    (1e18, 20000.0),
    (1e15, np.sqrt(20.0 * 20000.0)),
    (1e30, 20000.0),
    (float("inf"), 20000.0),
    (float("nan"), 20.0),
    (-440.0, 440.0),
])
def test_map_to_audible_frequency(frequency, expected):
    assert np.isclose(observables.map_to_audible_frequency(frequency), expected)


def test_audible_mapping_is_monotonic_above_band():
    mapped = [observables.map_to_audible_frequency(f) for f in np.logspace(12, 18, 25)]
    assert all(a <= b for a, b in zip(mapped, mapped[1:]))


# --- describe ---

def test_describe_common_keys():
    info = observables.describe(QuantumSimulator())
    for key in ("energy_level", "energy", "energy_ev", "period", "de_broglie_wavelength",
                "expected_position", "expected_momentum", "uncertainty_position",
                "uncertainty_momentum", "uncertainty_product", "uncertainty_bound",
                "expected_energy", "energy_deviation"):
        assert key in info
        assert np.isfinite(info[key])
    assert info["uncertainty_bound"] == hbar / 2


def test_describe_compares_sampled_and_level_energy(well_simulator):
    info = observables.describe(well_simulator)
    assert np.isclose(info["expected_energy"], info["energy"], rtol=1e-2, atol=0)
    assert abs(info["energy_deviation"]) < 1e-2


def test_describe_free_particle():
    simulator = QuantumSimulator()
    simulator.set_potential_height(5.0)
    info = observables.describe(simulator)
    assert np.isclose(info["energy_ev"], 10.0)
    assert np.isclose(info["momentum"], const.h / info["de_broglie_wavelength"])
    assert 0.0 < info["transmission_probability"] < 1.0


def test_describe_well(well_simulator):
    info = observables.describe(well_simulator)
    assert info["confinement_width"] == 2 * well_simulator.parameters.half_width


def test_describe_oscillator():
    simulator = QuantumSimulator()
    simulator.set_system_type(SystemType.HARMONIC_OSCILLATOR)
    info = observables.describe(simulator)
    L = simulator.parameters.half_width
    assert np.isclose(info["angular_frequency"], hbar / (const.m_e * (L / 10) ** 2))
    # Ground state turning point equals the oscillator length
    assert np.isclose(info["classical_amplitude"], L / 10)


def test_describe_hydrogen():
    simulator = QuantumSimulator()
    simulator.set_system_type(SystemType.HYDROGEN_ATOM)
    simulator.set_energy_level(2)
    info = observables.describe(simulator)
    assert np.isclose(info["orbital_radius"], 4 * BOHR_RADIUS)
    assert np.isclose(info["ionization_energy_ev"], 13.6057 / 4, rtol=1e-4)
