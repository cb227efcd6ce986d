"""Core data model and errors."""

from .errors import (
    TraceAnalysisError,
    InconsistentRecordError,
    InvalidParameterError,
    TraceFormatError,
)
from .records import InvocationRecord, LabeledEvent, AlignedRow, validate_records

__all__ = [
    "TraceAnalysisError",
    "InconsistentRecordError",
    "InvalidParameterError",
    "TraceFormatError",
    "InvocationRecord",
    "LabeledEvent",
    "AlignedRow",
    "validate_records",
]
