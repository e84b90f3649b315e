"""Warning categories emitted by the simulation engine.

The engine never raises for out-of-range numeric input; it clamps and warns
so that hosts driven by continuous controls can filter these categories.
"""


class QuantumWaveformWarning(UserWarning):
    """Base class for warnings emitted by qwave."""


class ParameterClampWarning(QuantumWaveformWarning):
    """A setter received an out-of-range value and clamped it."""


class NumericalDegeneracyWarning(QuantumWaveformWarning):
    """A sample underflowed and was replaced by the uniform state."""
