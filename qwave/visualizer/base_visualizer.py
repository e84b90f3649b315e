import numpy as np

from ..simulator.grid_sampler import WavefunctionSample


class GridConsumer:
    """Base class for anything that consumes a sampled wavefunction grid."""

    def consume(self, sample: WavefunctionSample):
        """Validate the sample and hand it to ``render``."""
        if not self._validate_data(sample):
            raise ValueError("Invalid wavefunction sample provided.")
        return self.render(sample)

    def render(self, sample: WavefunctionSample):
        """Should be implemented by subclasses."""
        raise NotImplementedError("Base class does not implement render().")

    def _validate_data(self, sample) -> bool:
        """Basic validation of the sample structure."""
        if not isinstance(sample, WavefunctionSample):
            return False
        if sample.positions.shape != sample.amplitudes.shape or len(sample) < 2:
            return False
        return bool(np.all(np.isfinite(sample.amplitudes)))
