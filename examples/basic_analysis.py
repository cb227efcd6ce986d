"""Basic cold start analysis example on a synthetic workload."""

import sys
from pathlib import Path

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from faastrace import InvocationRecord, analyze
from faastrace.reports.csv_report import write_csv
from faastrace.utils.logger import setup_logger

HOUR_MS = 3600000


def build_records(seed: int = 42):
    """A timer-triggered function and a bursty HTTP function over one day."""
    rng = np.random.default_rng(seed)

    timer = np.arange(24) * HOUR_MS + 30000.0

    arrivals = np.cumsum(rng.exponential(90000.0, 600))
    http = arrivals[arrivals < 24 * HOUR_MS]

    return [
        InvocationRecord('timer', timer.tolist(), [250.0] * len(timer)),
        InvocationRecord('http', http.tolist(), rng.gamma(2.0, 400.0, len(http)).tolist()),
    ]


def main():
    """Run a basic analysis."""
    logger = setup_logger("BasicAnalysis")

    logger.info("=== Basic Cold Start Analysis ===")
    records = build_records()

    result = analyze(records, keep_alive_ms=10 * 60 * 1000, tolerance_ms=100)

    summary = result.summary()
    logger.info(f"Functions: {summary['num_functions']} ({summary['num_periodic_functions']} periodic)")
    logger.info(f"Invocations: {summary['total_invocations']}")
    logger.info(f"Cold starts: {summary['cold_starts']} ({summary['cold_start_ratio']:.1%})")
    logger.info(f"Cold starts from 0: {summary['cold_starts_from_zero']}")
    logger.info(f"Periodic cold starts: {summary['periodic_cold_starts']}")

    write_csv(result.rows, "results/basic_analysis.csv")
    logger.info("\nAnalysis complete!")


if __name__ == "__main__":
    main()
