#!/usr/bin/env python3
import argparse
import json
import os
import sys

from .api import collect_results, create_simulator, to_serializable
from .config import load_config
from .simulator.systems import ELECTRON_VOLT
from .visualizer.density_plot import DensityPlotter


class QuantumWaveformCLI:
    """Command-line interface for qwave"""

    def run(self, args=None):
        """Run the CLI with the given arguments"""
        parser = self.create_argument_parser()
        parsed_args = parser.parse_args(args)

        if parsed_args.subcommand == "sample":
            self.sample(parsed_args)
        elif parsed_args.subcommand == "energies":
            self.energies(parsed_args)
        elif parsed_args.subcommand == "plot":
            self.plot(parsed_args)
        else:
            parser.print_help()

    def create_argument_parser(self):
        """Create the command-line argument parser"""
        parser = argparse.ArgumentParser(
            description="qwave - Closed-form wavefunctions for one-dimensional quantum systems"
        )
        subparsers = parser.add_subparsers(dest="subcommand", help="Subcommands")

        sample_parser = subparsers.add_parser("sample", help="Sample a wavefunction and save the results as JSON")
        self._add_common_arguments(sample_parser)
        sample_parser.add_argument(
            "--output", "-o", default="results.json",
            help="Output file for sampled results (default: results.json)"
        )
        sample_parser.add_argument(
            "--no-amplitudes", action="store_true",
            help="Omit the complex amplitudes from the output"
        )

        energies_parser = subparsers.add_parser("energies", help="Print the energy levels of a system")
        self._add_common_arguments(energies_parser)
        energies_parser.add_argument(
            "--levels", "-k", type=int, default=5,
            help="Number of levels to list, starting at n=1 (default: 5)"
        )

        plot_parser = subparsers.add_parser("plot", help="Plot the probability density to a PNG file")
        self._add_common_arguments(plot_parser)
        plot_parser.add_argument(
            "--output", "-o", default="wavefunction.png",
            help="Output image file (default: wavefunction.png)"
        )

        return parser

    def _add_common_arguments(self, parser):
        parser.add_argument("--system", "-s", default=None,
                            help="free, well, oscillator or hydrogen (default: from config)")
        parser.add_argument("--level", "-n", type=float, default=None, help="Energy level n (>= 1)")
        parser.add_argument("--mass", "-m", type=float, default=None, help="Particle mass in kg")
        parser.add_argument("--time", "-t", type=float, default=None, help="Simulation time in seconds")
        parser.add_argument("--barrier", "-b", type=float, default=None,
                            help="Barrier height in eV (free particle only)")
        parser.add_argument("--grid-size", "-g", type=int, default=None, help="Number of grid points")
        parser.add_argument("--config", "-c", default=None, help="JSON configuration file")

    def _build_simulator(self, parsed_args):
        if parsed_args.config is not None and not os.path.exists(parsed_args.config):
            raise FileNotFoundError(f"Config file '{parsed_args.config}' not found")
        config = load_config(parsed_args.config)
        return create_simulator(
            config,
            system=parsed_args.system,
            mass=parsed_args.mass,
            energy_level=parsed_args.level,
            potential_height=parsed_args.barrier,
            time=parsed_args.time,
            grid_size=parsed_args.grid_size,
        )

    def sample(self, parsed_args):
        """Sample the configured system and save the results as JSON"""
        try:
            simulator = self._build_simulator(parsed_args)
            params = simulator.parameters
            print(f"Sampling {params.system_type.display_name} (n={params.energy_level}, "
                  f"{params.grid_size} points)...")
            results = collect_results(simulator, include_amplitudes=not parsed_args.no_amplitudes)

            output_file = parsed_args.output
            os.makedirs(os.path.dirname(output_file) or '.', exist_ok=True)
            with open(output_file, "w") as f:
                json.dump(to_serializable(results), f, indent=2)

            print(f"Sampling completed. Results saved to {output_file}")
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)

    def energies(self, parsed_args):
        """Print Eₙ for levels 1..K in joules and electronvolts"""
        try:
            simulator = self._build_simulator(parsed_args)
            levels = min(max(parsed_args.levels, 1), simulator.config.max_energy_level)
            print(f"{simulator.system_type.display_name} energy levels")
            print(f"{'n':>4}  {'E (J)':>14}  {'E (eV)':>14}")
            for n in range(1, levels + 1):
                energy = simulator.get_energy(n)
                print(f"{n:>4}  {energy:>14.6e}  {energy / ELECTRON_VOLT:>14.6e}")
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)

    def plot(self, parsed_args):
        """Render the density and real/imaginary parts to an image file"""
        try:
            simulator = self._build_simulator(parsed_args)
            output_file = parsed_args.output
            os.makedirs(os.path.dirname(output_file) or '.', exist_ok=True)
            plotter = DensityPlotter(output_path=output_file, config=simulator.config)
            plotter.consume(simulator.get_sample())
            print(f"Plot saved to {output_file}")
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)


def main(args=None):
    """Main entry point for the CLI"""
    cli = QuantumWaveformCLI()
    cli.run(args)


if __name__ == "__main__":
    main()
