"""
Closed-form models for the four supported one-dimensional systems.

Each system provides two pure functions:

    energy(n, mass, half_width, potential_height, config) -> float
    wavefunction(x, n, t, mass, half_width, potential_height, config) -> complex array

``wavefunction`` returns unnormalized amplitudes ψ(x, t) on the positions
``x``; normalization is the grid sampler's job. ``config`` supplies the model
constants (see ``qwave.config.SimulatorConfig``). The functions are looked up
through ``MODEL_TABLE`` keyed by ``SystemType``.
"""

import numbers
from enum import Enum
from typing import Callable, Dict, NamedTuple, Union

import numpy as np
import scipy.constants as const
from scipy.linalg import solve

from .complex_math import add, from_polar, multiply, phase_rotation, reduce_phase

HBAR = const.hbar
PLANCK = const.h
ELECTRON_VOLT = const.e
BOHR_RADIUS = const.physical_constants["Bohr radius"][0]
RYDBERG_ENERGY = const.physical_constants["Rydberg constant times hc in J"][0]  # ~13.6 eV

_MIN_LENGTH = 1e-30  # floor for lengths used as denominators
_MIN_WAVENUMBER_RATIO = 1e-9  # floor for |q| / k in the barrier solve
_COULOMB_SOFTENING = 1e-2  # ε / a₀ for the regularized Coulomb potential


class SystemType(Enum):
    FREE_PARTICLE = 0
    POTENTIAL_WELL = 1
    HARMONIC_OSCILLATOR = 2
    HYDROGEN_ATOM = 3

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def is_stationary(self) -> bool:
        """True for eigenstates whose density does not change with time."""
        return self is not SystemType.FREE_PARTICLE


_DISPLAY_NAMES = {
    SystemType.FREE_PARTICLE: "Free Particle",
    SystemType.POTENTIAL_WELL: "Infinite Potential Well",
    SystemType.HARMONIC_OSCILLATOR: "Harmonic Oscillator",
    SystemType.HYDROGEN_ATOM: "Hydrogen Atom",
}

_DESCRIPTIONS = {
    SystemType.FREE_PARTICLE:
        "A quantum particle that moves freely in space, represented by a wave packet.",
    SystemType.POTENTIAL_WELL:
        "A particle confined to a region with infinite potential barriers, resulting in standing waves.",
    SystemType.HARMONIC_OSCILLATOR:
        "A particle in a parabolic potential, similar to a mass on a spring in quantum mechanics.",
    SystemType.HYDROGEN_ATOM:
        "An electron bound to a proton, the simplest atomic system with characteristic energy levels.",
}

_ALIASES = {
    "free": SystemType.FREE_PARTICLE,
    "free_particle": SystemType.FREE_PARTICLE,
    "well": SystemType.POTENTIAL_WELL,
    "potential_well": SystemType.POTENTIAL_WELL,
    "box": SystemType.POTENTIAL_WELL,
    "oscillator": SystemType.HARMONIC_OSCILLATOR,
    "harmonic": SystemType.HARMONIC_OSCILLATOR,
    "harmonic_oscillator": SystemType.HARMONIC_OSCILLATOR,
    "hydrogen": SystemType.HYDROGEN_ATOM,
    "hydrogen_atom": SystemType.HYDROGEN_ATOM,
}


def parse_system_type(value: Union[SystemType, str, int]) -> SystemType:
    """Accept a SystemType, its name or alias (case-insensitive), or its integer value."""
    if isinstance(value, SystemType):
        return value
    if isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_)):
        try:
            return SystemType(int(value))
        except ValueError:
            raise ValueError(f"Unknown system type value: {value}") from None
    if isinstance(value, str):
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        if key in _ALIASES:
            return _ALIASES[key]
    raise ValueError(
        f"Unknown system type '{value}'. Expected one of: {', '.join(sorted(_ALIASES))}."
    )


def _floor(length: float) -> float:
    return max(abs(length), _MIN_LENGTH)


def _stationary(phi: np.ndarray, energy: float, t: float) -> np.ndarray:
    """Eigenstate time evolution: φ(x)·exp(-i·E·t/ħ)."""
    return phi * phase_rotation(-energy * t / HBAR)


# --- Free particle ---

def free_particle_wavenumber(n: int, mass: float, config) -> float:
    """k_n = n·√(2·m·E_ref)/ħ; grows linearly with the quantum number."""
    base_energy = config.free_particle_base_energy_ev * ELECTRON_VOLT
    return n * np.sqrt(2.0 * mass * base_energy) / HBAR


def free_particle_energy(n, mass, half_width, potential_height, config) -> float:
    k = free_particle_wavenumber(n, mass, config)
    return (HBAR * k) ** 2 / (2.0 * mass)


def de_broglie_wavelength(n: int, mass: float, config) -> float:
    """λ = h/p with p = ħ·k_n."""
    return PLANCK / (HBAR * free_particle_wavenumber(n, mass, config))


def _spreading_factors(tau: float):
    """Return 1/(1+τ²) and τ/(1+τ²) without overflowing for large |τ|."""
    if abs(tau) <= 1.0:
        denom = 1.0 + tau * tau
        return 1.0 / denom, tau / denom
    inv = 1.0 / tau
    denom = 1.0 + inv * inv
    return inv * inv / denom, inv / denom


class PacketMotion(NamedTuple):
    width: float       # domain width W = 2L
    sigma: float
    start: float       # packet centre at t = 0
    k: float
    omega: float
    tau: float         # ħt/(mσ²)
    travelled: float   # v·t reduced modulo W


def packet_motion(n, t, mass, half_width, config) -> PacketMotion:
    width = 2.0 * _floor(half_width)
    sigma = config.packet_width_fraction * width
    k = free_particle_wavenumber(n, mass, config)
    velocity = HBAR * k / mass
    return PacketMotion(
        width=width,
        sigma=sigma,
        start=-width / 2.0 + config.packet_center_fraction * width,
        k=k,
        omega=HBAR * k * k / (2.0 * mass),
        tau=HBAR * t / (mass * sigma * sigma),
        travelled=float(np.remainder(velocity * t, width)),
    )


def packet_envelope(d, sigma: float, tau: float):
    """Spreading Gaussian exp(-d²/(2σ²(1+iτ))) with its Gouy phase -atan(τ)/2.

    The common magnitude (1+τ²)^(-1/4) is left to normalization.
    """
    inv, chirp = _spreading_factors(tau)
    scaled = np.square(d) / (2.0 * sigma * sigma)
    return from_polar(np.exp(-scaled * inv), reduce_phase(scaled * chirp - 0.5 * np.arctan(tau)))


def free_particle_wavefunction(x, n, t, mass, half_width, potential_height, config) -> np.ndarray:
    """
    Freely spreading Gaussian wave packet.

    ψ(x,t) ∝ G(d, t) · exp(i(k·d + ω·t))

    with d = x - x₀ - v·t, v = ħk/m, ω = ħk²/2m and G the spreading
    envelope. The packet centre wraps around the periodic domain so it never
    leaves the grid. With a barrier present see ``barrier_wave_packet``.
    """
    if potential_height > 0:
        return barrier_wave_packet(x, n, t, mass, half_width, potential_height, config)

    x = np.asarray(x, dtype=float)
    motion = packet_motion(n, t, mass, half_width, config)
    width = motion.width
    centre = motion.start + motion.travelled
    d = np.remainder(x - centre + width / 2.0, width) - width / 2.0

    envelope = packet_envelope(d, motion.sigma, motion.tau)
    carrier = from_polar(1.0, reduce_phase(reduce_phase(motion.k * d) + reduce_phase(motion.omega * t)))
    return envelope * carrier


def barrier_geometry(half_width: float, config):
    """Left edge and width of the rectangular barrier on [-L, L]."""
    width = 2.0 * _floor(half_width)
    left = -width / 2.0 + config.barrier_position_fraction * width
    return left, config.barrier_width_fraction * width


def barrier_coefficients(k: float, q: complex, barrier_width: float):
    """
    Solve for (r, A, B, t) of the scattering state

        x < x1:        e^{ik(x-x1)} + r·e^{-ik(x-x1)}
        x1 <= x <= x2: A·e^{iq(x-x1)} + B·e^{-iq(x-x2)}
        x > x2:        t·e^{ik(x-x2)}

    by matching ψ and ψ' at x1 and x2 = x1 + a. Anchoring the two inner
    exponentials at opposite edges keeps |e^{iq·a}| <= 1 when q is imaginary
    (tunnelling); the derivative rows are divided by k.
    """
    p = np.exp(1j * q * barrier_width)
    ratio = q / k
    matrix = np.array([
        [-1.0, 1.0, p, 0.0],
        [1.0, ratio, -ratio * p, 0.0],
        [0.0, p, 1.0, -1.0],
        [0.0, ratio * p, -ratio, -1.0],
    ], dtype=complex)
    rhs = np.array([1.0, 1.0, 0.0, 0.0], dtype=complex)
    return solve(matrix, rhs)


class BarrierSolution(NamedTuple):
    k: float
    q: complex
    left: float
    width: float
    coefficients: np.ndarray  # (r, A, B, t)


def barrier_solution(n, mass, half_width, potential_height, config) -> BarrierSolution:
    k = free_particle_wavenumber(n, mass, config)
    energy = free_particle_energy(n, mass, half_width, potential_height, config)
    q = np.sqrt(complex(2.0 * mass * (energy - potential_height * ELECTRON_VOLT))) / HBAR
    if abs(q) < _MIN_WAVENUMBER_RATIO * k:
        q = complex(_MIN_WAVENUMBER_RATIO * k)
    left, width = barrier_geometry(half_width, config)
    return BarrierSolution(k, q, left, width, barrier_coefficients(k, q, width))


def barrier_wave_packet(x, n, t, mass, half_width, potential_height, config) -> np.ndarray:
    """
    Gaussian packet scattering off the rectangular barrier.

    At t = 0 the state is the envelope G times the stationary scattering
    state at k_n, i.e. the incident packet plus an r-weighted copy already
    heading left. Each piece then moves on its own:

        x < x1:        G(x-c)·e^{ik(x-x1)} + r·[G(x-c') + G(2x1-x-c)]·e^{-ik(x-x1)}
        x1 <= x <= x2: G(x1-c)·(A·e^{iq(x-x1)} + B·e^{-iq(x-x2)})
        x > x2:        t·G(x-a-c)·e^{ik(x-x2)}

    with c = x₀ + v·t, c' = x₀ - v·t, all times e^{-iωt}. The reflected
    packet is the incident one mirrored about x1 and the transmitted one
    is delayed by the barrier width, so once the packet has crossed, |r|²
    and |t|² of its probability sit on either side. The scattering event
    repeats every W/v.
    """
    x = np.asarray(x, dtype=float)
    motion = packet_motion(n, t, mass, half_width, config)
    barrier = barrier_solution(n, mass, half_width, potential_height, config)
    r, amp_a, amp_b, amp_t = barrier.coefficients
    k, q, x1, a = barrier.k, barrier.q, barrier.left, barrier.width
    x2 = x1 + a
    forward = motion.start + motion.travelled
    backward = motion.start - motion.travelled

    def envelope(d):
        return packet_envelope(d, motion.sigma, motion.tau)

    state = np.zeros(x.shape, dtype=complex)
    left = x < x1
    right = x > x2
    inside = ~(left | right)

    s = x[left] - x1
    incident = multiply(envelope(x[left] - forward), from_polar(1.0, reduce_phase(k * s)))
    reflected = multiply(
        r * add(envelope(x[left] - backward), envelope(x1 - s - forward)),
        from_polar(1.0, reduce_phase(-k * s)),
    )
    state[left] = add(incident, reflected)

    xi = x[inside]
    state[inside] = envelope(x1 - forward) * (amp_a * np.exp(1j * q * (xi - x1)) + amp_b * np.exp(-1j * q * (xi - x2)))

    xr = x[right]
    state[right] = amp_t * envelope(xr - a - forward) * from_polar(1.0, reduce_phase(k * (xr - x2)))
    return state * phase_rotation(-motion.omega * t)


def transmission_probability(n, mass, half_width, potential_height, config) -> float:
    """|t|² for the packet's central wavenumber (1.0 without a barrier)."""
    if potential_height <= 0:
        return 1.0
    return float(abs(barrier_solution(n, mass, half_width, potential_height, config).coefficients[3]) ** 2)


def free_particle_potential(x, mass, half_width, potential_height, config) -> np.ndarray:
    """Barrier height (J) over [x1, x2], zero elsewhere."""
    x = np.asarray(x, dtype=float)
    if potential_height <= 0:
        return np.zeros(x.shape)
    left, width = barrier_geometry(half_width, config)
    inside = (x >= left) & (x <= left + width)
    return np.where(inside, potential_height * ELECTRON_VOLT, 0.0)


# --- Infinite potential well ---

def potential_well_energy(n, mass, half_width, potential_height, config) -> float:
    """E_n = n²π²ħ²/(2mW²) for a well of full width W = 2L."""
    width = 2.0 * _floor(half_width)
    return (n * np.pi * HBAR) ** 2 / (2.0 * mass * width * width)


def potential_well_wavefunction(x, n, t, mass, half_width, potential_height, config) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    half = _floor(half_width)
    inside = np.abs(x) <= half
    phi = np.where(inside, np.sin(n * np.pi * (x + half) / (2.0 * half)), 0.0)
    energy = potential_well_energy(n, mass, half_width, potential_height, config)
    return _stationary(phi.astype(complex), energy, t)


def potential_well_potential(x, mass, half_width, potential_height, config) -> np.ndarray:
    """Zero inside the walls; the walls themselves enter only as ψ = 0 there."""
    return np.zeros(np.shape(x))


# --- Harmonic oscillator ---

def oscillator_length(half_width: float, config) -> float:
    return _floor(half_width) / config.oscillator_length_ratio


def oscillator_angular_frequency(mass: float, half_width: float, config) -> float:
    """ω chosen so that the oscillator length √(ħ/mω) is a fixed fraction of L."""
    length = oscillator_length(half_width, config)
    return HBAR / (mass * length * length)


def harmonic_oscillator_energy(n, mass, half_width, potential_height, config) -> float:
    """E = (v + 1/2)ħω with v = n - 1, so level 1 is the ground state."""
    omega = oscillator_angular_frequency(mass, half_width, config)
    return (n - 0.5) * HBAR * omega


def hermite_function(order: int, xi: np.ndarray) -> np.ndarray:
    """Normalized Hermite function H_v(ξ)·exp(-ξ²/2)/√(2^v·v!·√π).

    Uses the three-term recurrence on the normalized functions so that
    neither H_v nor v! is formed explicitly.
    """
    xi = np.asarray(xi, dtype=float)
    psi_prev = np.pi ** -0.25 * np.exp(-xi * xi / 2.0)
    if order == 0:
        return psi_prev
    psi = np.sqrt(2.0) * xi * psi_prev
    for v in range(1, order):
        psi_next = np.sqrt(2.0 / (v + 1)) * xi * psi - np.sqrt(v / (v + 1)) * psi_prev
        psi_prev, psi = psi, psi_next
    return psi


def harmonic_oscillator_wavefunction(x, n, t, mass, half_width, potential_height, config) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    phi = hermite_function(n - 1, x / oscillator_length(half_width, config))
    energy = harmonic_oscillator_energy(n, mass, half_width, potential_height, config)
    return _stationary(phi.astype(complex), energy, t)


def harmonic_oscillator_potential(x, mass, half_width, potential_height, config) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    omega = oscillator_angular_frequency(mass, half_width, config)
    return 0.5 * mass * omega * omega * x * x


# --- Hydrogen atom (reduced 1-D radial model) ---

def hydrogen_energy(n, mass, half_width, potential_height, config) -> float:
    """E_n = -E_Ry/n²; always negative (bound state)."""
    return -RYDBERG_ENERGY / (n * n)


def hydrogen_wavefunction(x, n, t, mass, half_width, potential_height, config) -> np.ndarray:
    """|x|^(n-1)·exp(-|x|/(n·a₀)) on the symmetric domain.

    Evaluated in log space and scaled so the largest value is 1; the power
    would otherwise underflow for large n.
    """
    rho = np.abs(np.asarray(x, dtype=float)) / BOHR_RADIUS
    if n == 1:
        log_phi = -rho
    else:
        with np.errstate(divide="ignore"):
            log_phi = (n - 1) * np.log(rho) - rho / n
    peak = np.max(log_phi) if log_phi.size else 0.0
    if not np.isfinite(peak):
        peak = 0.0
    phi = np.exp(log_phi - peak)
    energy = hydrogen_energy(n, mass, half_width, potential_height, config)
    return _stationary(phi.astype(complex), energy, t)


def hydrogen_potential(x, mass, half_width, potential_height, config) -> np.ndarray:
    """Regularized Coulomb attraction -e²/(4πε₀·√(x² + ε²)) with ε = a₀/100."""
    x = np.asarray(x, dtype=float)
    k_coulomb = 1.0 / (4.0 * np.pi * const.epsilon_0)
    epsilon = _COULOMB_SOFTENING * BOHR_RADIUS
    return -k_coulomb * ELECTRON_VOLT ** 2 / np.sqrt(x * x + epsilon ** 2)


class SystemModel(NamedTuple):
    energy: Callable[..., float]
    wavefunction: Callable[..., np.ndarray]
    potential: Callable[..., np.ndarray]


MODEL_TABLE: Dict[SystemType, SystemModel] = {
    SystemType.FREE_PARTICLE: SystemModel(free_particle_energy, free_particle_wavefunction, free_particle_potential),
    SystemType.POTENTIAL_WELL: SystemModel(potential_well_energy, potential_well_wavefunction, potential_well_potential),
    SystemType.HARMONIC_OSCILLATOR: SystemModel(
        harmonic_oscillator_energy, harmonic_oscillator_wavefunction, harmonic_oscillator_potential),
    SystemType.HYDROGEN_ATOM: SystemModel(hydrogen_energy, hydrogen_wavefunction, hydrogen_potential),
}


def eigenenergy(system_type: SystemType, n: int, mass: float, half_width: float,
                potential_height: float, config) -> float:
    return float(MODEL_TABLE[system_type].energy(n, mass, half_width, potential_height, config))


def wavefunction(system_type: SystemType, x: np.ndarray, n: int, t: float, mass: float,
                 half_width: float, potential_height: float, config) -> np.ndarray:
    return MODEL_TABLE[system_type].wavefunction(x, n, t, mass, half_width, potential_height, config)


def potential_energy(system_type: SystemType, x: np.ndarray, mass: float, half_width: float,
                     potential_height: float, config) -> np.ndarray:
    """V(x) in joules for the given system."""
    return MODEL_TABLE[system_type].potential(x, mass, half_width, potential_height, config)
