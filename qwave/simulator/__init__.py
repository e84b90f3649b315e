"""Simulation engine: system models, grid sampling and the simulator facade."""
