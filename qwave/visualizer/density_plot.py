import io
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .base_visualizer import GridConsumer
from ..simulator.grid_sampler import WavefunctionSample
from ..simulator.systems import barrier_geometry, SystemType


class DensityPlotter(GridConsumer):
    """Renders probability density and the real/imaginary parts of ψ with matplotlib."""

    def __init__(self, output_path: Optional[str] = None, length_unit: float = 1e-9,
                 unit_label: str = "nm", dpi: int = 120, config=None):
        self.output_path = output_path
        self.length_unit = length_unit
        self.unit_label = unit_label
        self.dpi = dpi
        self.config = config

        self.colors = {
            'density': '#d62728',  # red
            'real': '#1f77b4',     # blue
            'imag': '#ff7f0e',     # orange
            'barrier': '#7f7f7f',  # gray
        }

    def render(self, sample: WavefunctionSample):
        """Draw the sample; save to ``output_path`` if set, else return PNG bytes."""
        fig = self.create_figure(sample)
        try:
            if self.output_path:
                fig.savefig(self.output_path, dpi=self.dpi)
                return self.output_path
            buffer = io.BytesIO()
            fig.savefig(buffer, format="png", dpi=self.dpi)
            return buffer.getvalue()
        finally:
            plt.close(fig)

    def create_figure(self, sample: WavefunctionSample):
        params = sample.parameters
        x = sample.positions / self.length_unit
        density = sample.probability_density * sample.domain_width

        fig, (ax_density, ax_parts) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

        ax_density.plot(x, density, color=self.colors['density'], label="|ψ|²")
        ax_density.fill_between(x, density, alpha=0.2, color=self.colors['density'])
        ax_density.set_ylabel("Probability density (per unit u)")
        ax_density.legend(loc="upper right")

        ax_parts.plot(x, sample.real, color=self.colors['real'], label="Re ψ")
        ax_parts.plot(x, sample.imag, color=self.colors['imag'], label="Im ψ", alpha=0.8)
        ax_parts.set_xlabel(f"Position ({self.unit_label})")
        ax_parts.set_ylabel("Amplitude (1/√m)")
        ax_parts.legend(loc="upper right")

        if (params.system_type is SystemType.FREE_PARTICLE and params.potential_height > 0
                and self.config is not None):
            left, width = barrier_geometry(params.half_width, self.config)
            for ax in (ax_density, ax_parts):
                ax.axvspan(left / self.length_unit, (left + width) / self.length_unit,
                           color=self.colors['barrier'], alpha=0.25,
                           label=f"Barrier {params.potential_height:g} eV" if ax is ax_density else None)
            ax_density.legend(loc="upper right")

        ax_density.set_title(
            f"{params.system_type.display_name}: n={params.energy_level}, "
            f"t={params.simulation_time:.3e} s"
        )
        for ax in (ax_density, ax_parts):
            ax.grid(True, alpha=0.3)
            ax.set_xlim(np.min(x), np.max(x))
        fig.tight_layout()
        return fig
