"""Trace loading and arrival expansion."""

from .arrival_process import InterArrivalGenerator
from .trace_loader import TraceLoader

__all__ = ["InterArrivalGenerator", "TraceLoader"]
