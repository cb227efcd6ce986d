"""Cold start analysis pipeline."""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .aligner import ResultAligner
from .cold_start_simulator import ColdStartSimulator
from .periodicity import PeriodicityClassifier
from ..core.records import (
    AlignedRow, InvocationRecord, LabeledEvent, total_invocations, validate_records
)
from ..utils.logger import setup_logger

DEFAULT_KEEP_ALIVE_SECONDS = 60.0
DEFAULT_TOLERANCE_MS = 100.0


@dataclass
class AnalysisResult:
    """Everything produced by one analysis run."""
    rows: List[AlignedRow]
    all_cold_starts: List[LabeledEvent]
    cold_starts_from_zero: List[LabeledEvent]
    periodic_cold_starts: List[LabeledEvent]
    periodic: List[InvocationRecord] = field(default_factory=list)
    non_periodic: List[InvocationRecord] = field(default_factory=list)
    total_invocations: int = 0

    def summary(self) -> Dict:
        """Counts and ratios of the run.

        Returns:
            Dictionary of plain Python numbers
        """
        num_functions = len(self.periodic) + len(self.non_periodic)
        num_cold_starts = len(self.all_cold_starts)
        ratio = num_cold_starts / self.total_invocations if self.total_invocations else 0.0

        return {
            'num_functions': num_functions,
            'num_periodic_functions': len(self.periodic),
            'num_non_periodic_functions': len(self.non_periodic),
            'total_invocations': self.total_invocations,
            'cold_starts': num_cold_starts,
            'cold_starts_from_zero': len(self.cold_starts_from_zero),
            'periodic_cold_starts': len(self.periodic_cold_starts),
            'cold_start_ratio': float(ratio),
        }


class TraceAnalyzer:
    """Runs periodicity classification, both cold start policies and alignment.

    The duration-aware simulation runs twice, once on every function and once
    on the periodic subset; the from-zero simulation runs on every function.
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize analyzer.

        Args:
            config: Configuration dictionary; reads the ``analysis`` section
        """
        self.config = config or {}
        self.logger = setup_logger(f"faastrace.{self.__class__.__name__}")

        analysis_cfg = self.config.get('analysis', {})
        self.keep_alive_ms = float(
            analysis_cfg.get('keep_alive_seconds', DEFAULT_KEEP_ALIVE_SECONDS)
        ) * 1000.0
        self.tolerance_ms = float(analysis_cfg.get('tolerance_ms', DEFAULT_TOLERANCE_MS))

        # Both constructors reject bad parameters before anything is simulated
        self.classifier = PeriodicityClassifier(self.tolerance_ms)
        self.simulator = ColdStartSimulator(self.keep_alive_ms)
        self.aligner = ResultAligner()

    def run(self, records: Sequence[InvocationRecord]) -> AnalysisResult:
        """Analyze a batch of function records.

        Args:
            records: Function records

        Returns:
            Analysis result

        Raises:
            InconsistentRecordError: If any record has mismatched lengths
        """
        start_time = time.time()
        self.logger.info(
            f"Analyzing {len(records)} functions "
            f"(keep-alive={self.keep_alive_ms:.0f} ms, tolerance={self.tolerance_ms:g} ms)"
        )

        validate_records(records)

        periodic, non_periodic = self.classifier.classify(records)

        periodic_cold_starts = self.simulator.simulate_cold_starts(periodic)
        all_cold_starts = self.simulator.simulate_cold_starts(records)
        cold_starts_from_zero = self.simulator.simulate_cold_starts_from_zero(records)

        rows = self.aligner.align(all_cold_starts, cold_starts_from_zero, periodic_cold_starts)

        result = AnalysisResult(
            rows=rows,
            all_cold_starts=all_cold_starts,
            cold_starts_from_zero=cold_starts_from_zero,
            periodic_cold_starts=periodic_cold_starts,
            periodic=periodic,
            non_periodic=non_periodic,
            total_invocations=total_invocations(records),
        )

        elapsed_time = time.time() - start_time
        self.logger.info(f"Analysis completed in {elapsed_time:.2f}s")
        return result


def analyze(records: Sequence[InvocationRecord], keep_alive_ms: float = 60000.0,
            tolerance_ms: float = DEFAULT_TOLERANCE_MS) -> AnalysisResult:
    """Run the full pipeline with explicit parameters.

    Args:
        records: Function records
        keep_alive_ms: Keep-alive window (ms)
        tolerance_ms: Interval grouping tolerance (ms)

    Returns:
        Analysis result
    """
    config = {
        'analysis': {
            'keep_alive_seconds': keep_alive_ms / 1000.0,
            'tolerance_ms': tolerance_ms,
        }
    }
    return TraceAnalyzer(config).run(records)
