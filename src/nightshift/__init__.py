"""NIGHTSHIFT — anomaly lifecycle and shift simulation engine."""

__version__ = "0.1.0"
