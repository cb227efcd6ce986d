"""Cold start simulation and periodicity analysis."""

from .periodicity import PeriodicityClassifier, dominant_interval
from .cold_start_simulator import ColdStartSimulator, ColdStartPolicy
from .aligner import ResultAligner
from .analyzer import TraceAnalyzer, AnalysisResult, analyze

__all__ = [
    "PeriodicityClassifier",
    "dominant_interval",
    "ColdStartSimulator",
    "ColdStartPolicy",
    "ResultAligner",
    "TraceAnalyzer",
    "AnalysisResult",
    "analyze",
]
