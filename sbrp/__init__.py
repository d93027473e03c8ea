"""ALNS heuristic for the stochastic bike-sharing rebalancing problem: instance loading, route costing, insertion and removal operators, and a command line."""

__version__ = "0.1.0"