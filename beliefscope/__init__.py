"""Bayesian belief updating for personal decisions."""

__version__ = "0.1.0"
