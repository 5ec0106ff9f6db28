"""Infrastructure layer for the flight aggregator."""

__version__ = "0.1.0"
