"""Final DFS projections built from draftables, simulations and market odds."""

__version__ = "0.1.0"
