from .base_visualizer import GridConsumer
from .density_plot import DensityPlotter

__all__ = ['GridConsumer', 'DensityPlotter']
