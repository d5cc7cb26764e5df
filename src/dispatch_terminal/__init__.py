"""Dispatch Terminal: queue and exit tracking for delivery drivers."""

__version__ = "0.1.0"
