import numpy as np
import pytest
import scipy.constants as const

from qwave.config import SimulatorConfig
from qwave.simulator import systems
from qwave.simulator.errors import NumericalDegeneracyWarning
from qwave.simulator.grid_sampler import GridSampler, WavefunctionSample, _create_grid
from qwave.simulator.parameters import SimulationParameters
from qwave.simulator.systems import SystemType


@pytest.fixture
def config():
    return SimulatorConfig()


def make_parameters(system=SystemType.POTENTIAL_WELL, level=1, grid_size=128, half_width=10e-9,
                    time=0.0, potential_height=0.0):
    return SimulationParameters(
        system_type=system,
        particle_mass=const.m_e,
        energy_level=level,
        potential_height=potential_height,
        simulation_time=time,
        grid_size=grid_size,
        half_width=half_width,
    )


# --- Grid construction ---

def test_create_grid():
    coords, delta = _create_grid(11, 5.0)
    assert len(coords) == 11
    assert np.isclose(delta, 1.0)  # (max - min) / (n - 1)
    assert coords[0] == -5.0
    assert coords[-1] == 5.0


@pytest.mark.parametrize("grid_size,half_width", [(1, 1.0), (0, 1.0), (10, 0.0), (10, -1.0)])
def test_create_grid_rejects_invalid(grid_size, half_width):
    with pytest.raises(ValueError):
        _create_grid(grid_size, half_width)


# --- Sampling ---

@pytest.mark.parametrize("system", list(SystemType))
def test_samples_are_normalized(config, system):
    params = make_parameters(system=system, level=3, half_width=config.half_width(system))
    sample = GridSampler().evaluate(params, config)
    assert isinstance(sample, WavefunctionSample)
    assert len(sample) == params.grid_size
    assert np.isclose(sample.norm(), 1.0)
    assert sample.parameters is params
    assert np.isclose(sample.dx, 2 * params.half_width / (params.grid_size - 1))


def test_sample_views(config):
    sample = GridSampler().evaluate(make_parameters(time=1e-14), config)
    assert np.allclose(sample.real + 1j * sample.imag, sample.amplitudes)
    assert np.allclose(sample.probability_density, np.abs(sample.amplitudes) ** 2)
    assert np.all(sample.phase >= -np.pi) and np.all(sample.phase <= np.pi)
    assert sample.domain_width == 20e-9


def test_sample_arrays_are_read_only(config):
    sample = GridSampler().evaluate(make_parameters(), config)
    with pytest.raises(ValueError):
        sample.amplitudes[0] = 0.0
    with pytest.raises(ValueError):
        sample.positions[0] = 0.0


def test_well_ground_state_matches_analytic(config):
    L = 10e-9
    sample = GridSampler().evaluate(make_parameters(grid_size=257, half_width=L), config)
    expected = np.sqrt(1.0 / L) * np.sin(np.pi * (sample.positions + L) / (2 * L))
    assert np.allclose(np.abs(sample.amplitudes), np.abs(expected), rtol=1e-6, atol=1e-6 * np.max(expected))


# --- Underflow fallback ---

@pytest.mark.parametrize("bad_value", [0.0, np.nan])
def test_uniform_fallback_on_degenerate_model(config, monkeypatch, bad_value):
    monkeypatch.setattr(systems, "wavefunction", lambda system, x, *args: np.full(x.shape, bad_value, dtype=complex))
    params = make_parameters(grid_size=16)
    with pytest.warns(NumericalDegeneracyWarning):
        sample = GridSampler().evaluate(params, config)
    assert np.all(np.isfinite(sample.amplitudes))
    assert np.allclose(sample.amplitudes, sample.amplitudes[0])
    assert np.isclose(sample.norm(), 1.0)
