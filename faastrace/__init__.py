"""faastrace: offline cold start analysis of serverless invocation traces."""

from .core.errors import (
    TraceAnalysisError,
    InconsistentRecordError,
    InvalidParameterError,
    TraceFormatError,
)
from .core.records import InvocationRecord, LabeledEvent, AlignedRow
from .analysis.periodicity import PeriodicityClassifier
from .analysis.cold_start_simulator import ColdStartSimulator, ColdStartPolicy
from .analysis.aligner import ResultAligner
from .analysis.analyzer import TraceAnalyzer, AnalysisResult, analyze
from .workload.trace_loader import TraceLoader
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "TraceAnalysisError",
    "InconsistentRecordError",
    "InvalidParameterError",
    "TraceFormatError",
    "InvocationRecord",
    "LabeledEvent",
    "AlignedRow",
    "PeriodicityClassifier",
    "ColdStartSimulator",
    "ColdStartPolicy",
    "ResultAligner",
    "TraceAnalyzer",
    "AnalysisResult",
    "analyze",
    "TraceLoader",
    "setup_logger",
]
