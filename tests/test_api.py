import json

import numpy as np
import pytest

from qwave.api import create_simulator, render, sample_system, to_serializable
from qwave.config import SimulatorConfig
from qwave.simulator.errors import ParameterClampWarning
from qwave.simulator.systems import SystemType
from qwave.visualizer import DensityPlotter, GridConsumer


class RecordingConsumer(GridConsumer):
    def __init__(self):
        self.samples = []

    def render(self, sample):
        self.samples.append(sample)
        return len(sample)


def test_create_simulator_applies_parameters():
    simulator = create_simulator(system="hydrogen", energy_level=3, grid_size=64, time=1e-15)
    params = simulator.parameters
    assert params.system_type is SystemType.HYDROGEN_ATOM
    assert params.energy_level == 3
    assert params.grid_size == 64
    assert params.simulation_time == 1e-15


def test_create_simulator_half_width_applies_to_selected_system():
    simulator = create_simulator(system="well", half_width=3e-9)
    assert simulator.parameters.half_width == 3e-9


def test_create_simulator_clamps_and_rejects_unknown():
    with pytest.warns(ParameterClampWarning):
        simulator = create_simulator(energy_level=-4)
    assert simulator.parameters.energy_level == 1
    with pytest.raises(ValueError):
        create_simulator(spin=0.5)


def test_sample_system_structure():
    results = sample_system("well", energy_level=2, grid_size=32, config=SimulatorConfig())
    assert results["parameters"]["system"] == "potential_well"
    assert results["parameters"]["grid_size"] == 32
    for key in ("positions", "probability_density", "real", "imaginary", "phase", "amplitudes"):
        assert len(results["grids"][key]) == 32
    assert np.isclose(results["energies"]["energy"], results["observables"]["energy"])
    assert "confinement_width" in results["observables"]


def test_sample_system_without_amplitudes():
    results = sample_system("free", grid_size=16, include_amplitudes=False)
    assert "amplitudes" not in results["grids"]


def test_to_serializable():
    data = {
        "array": np.arange(3),
        "complex_array": np.array([1 + 2j, 3 - 1j]),
        "scalar": np.float64(1.5),
        "integer": np.int64(7),
        "complex": 2 - 3j,
        "flag": np.bool_(True),
        "system": SystemType.HYDROGEN_ATOM,
        "nested": [(np.float32(0.5),)],
    }
    result = to_serializable(data)
    assert result["array"] == [0, 1, 2]
    assert result["complex_array"] == {"__complex__": True, "real": [1.0, 3.0], "imag": [2.0, -1.0]}
    assert result["scalar"] == 1.5 and type(result["scalar"]) is float
    assert result["integer"] == 7 and type(result["integer"]) is int
    assert result["complex"] == {"__complex__": True, "real": 2.0, "imag": -3.0}
    assert result["flag"] is True
    assert result["system"] == "hydrogen_atom"
    assert result["nested"] == [[0.5]]
    json.dumps(result)


def test_sample_results_are_json_serializable():
    results = to_serializable(sample_system("oscillator", grid_size=16))
    text = json.dumps(results)
    assert json.loads(text)["grids"]["amplitudes"]["__complex__"] is True


def test_render_hands_sample_to_consumer():
    simulator = create_simulator(grid_size=48)
    consumer = RecordingConsumer()
    assert render(simulator, consumer) == 48
    assert consumer.samples[0] is simulator.get_sample()


def test_render_to_png_bytes():
    simulator = create_simulator(system="free", potential_height=5.0, grid_size=64)
    image = render(simulator, DensityPlotter(config=simulator.config))
    assert image.startswith(b"\x89PNG")
