"""Utility functions and helpers."""

from .logger import setup_logger
from .visualization import count_per_minute, plot_cold_starts, plot_multiple_cold_starts

__all__ = ["setup_logger", "count_per_minute", "plot_cold_starts", "plot_multiple_cold_starts"]
