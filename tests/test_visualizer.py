import numpy as np
import pytest

from qwave.simulator.quantum_simulator import QuantumSimulator
from qwave.simulator.systems import SystemType
from qwave.visualizer.base_visualizer import GridConsumer
from qwave.visualizer.density_plot import DensityPlotter


@pytest.fixture
def sample():
    simulator = QuantumSimulator()
    simulator.set_grid_size(128)
    return simulator.get_sample()


def test_base_consumer_requires_render(sample):
    with pytest.raises(NotImplementedError):
        GridConsumer().consume(sample)


@pytest.mark.parametrize("bad", [None, {"positions": np.zeros(4)}, np.zeros(4)])
def test_consume_rejects_invalid_data(bad):
    with pytest.raises(ValueError):
        DensityPlotter().consume(bad)


def test_plot_saved_to_file(tmp_path, sample):
    output = tmp_path / "density.png"
    result = DensityPlotter(output_path=str(output)).consume(sample)
    assert result == str(output)
    assert output.read_bytes().startswith(b"\x89PNG")


@pytest.mark.parametrize("system", list(SystemType))
def test_figure_layout(system):
    simulator = QuantumSimulator()
    simulator.set_system_type(system)
    simulator.set_grid_size(64)
    plotter = DensityPlotter()
    fig = plotter.create_figure(simulator.get_sample())
    try:
        ax_density, ax_parts = fig.axes
        assert system.display_name in ax_density.get_title()
        assert len(ax_parts.get_lines()) == 2
    finally:
        import matplotlib.pyplot as plt
        plt.close(fig)
