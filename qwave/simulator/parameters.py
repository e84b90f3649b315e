from dataclasses import dataclass

from .systems import SystemType


@dataclass(frozen=True)
class SimulationParameters:
    """
    The full parameter set of a simulation.

    Instances are immutable and hashable; the simulator replaces its
    parameters on every setter call and uses the instance as the cache key.

    Attributes:
        system_type: Which closed-form model to evaluate.
        particle_mass: Mass in kg (> 0).
        energy_level: Quantum number n (>= 1).
        potential_height: Barrier height in eV (>= 0); free particle only.
        simulation_time: Time in seconds.
        grid_size: Number of grid points.
        half_width: L in metres; the domain is [-L, L].
    """

    system_type: SystemType
    particle_mass: float
    energy_level: int
    potential_height: float
    simulation_time: float
    grid_size: int
    half_width: float

    @property
    def spatial_domain(self):
        return (-self.half_width, self.half_width)
