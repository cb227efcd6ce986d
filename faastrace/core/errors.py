"""Exceptions raised by the trace analysis engine."""


class TraceAnalysisError(Exception):
    """Base class for all faastrace errors."""


class InconsistentRecordError(TraceAnalysisError, ValueError):
    """A function record has a different number of timestamps and durations."""


class InvalidParameterError(TraceAnalysisError, ValueError):
    """An analysis parameter is out of its valid range."""


class TraceFormatError(InconsistentRecordError):
    """A trace file could not be turned into invocation records."""
