"""Periodic invocation detection."""

import math
from typing import List, Sequence, Tuple

from ..core.errors import InvalidParameterError
from ..core.records import InvocationRecord
from ..utils.logger import setup_logger

# 12 hours in milliseconds
MIN_PERIODIC_DURATION_MS = 12 * 60 * 60 * 1000


def dominant_interval(timestamps: Sequence[float], tolerance_ms: float) -> Tuple[float, int]:
    """Find the most frequent inter-arrival interval of a function.

    Intervals are grouped greedily: each one joins the first bucket (in order
    of first sight) whose representative is within ``tolerance_ms``, or opens
    a new bucket. Representatives never move, so the grouping depends on the
    order the intervals arrive in.

    Args:
        timestamps: Invocation start times (ms)
        tolerance_ms: Maximum distance to a bucket representative

    Returns:
        (representative interval, count) of the largest bucket; the first
        bucket wins ties. (0.0, 0) if there are fewer than 2 timestamps.
    """
    buckets: List[List[float]] = []  # [representative, count], in first-seen order

    for previous, current in zip(timestamps, timestamps[1:]):
        interval = current - previous
        for bucket in buckets:
            if abs(interval - bucket[0]) <= tolerance_ms:
                bucket[1] += 1
                break
        else:
            buckets.append([interval, 1])

    best_interval, best_count = 0.0, 0
    for representative, count in buckets:
        if count > best_count:
            best_interval, best_count = representative, int(count)

    return best_interval, best_count


class PeriodicityClassifier:
    """Splits functions into periodic and non-periodic invocation streams.

    A function is periodic when its dominant inter-arrival interval, repeated
    as many times as it was observed, covers at least 12 hours.
    """

    def __init__(self, tolerance_ms: float = 100.0,
                 min_periodic_duration_ms: float = MIN_PERIODIC_DURATION_MS):
        """Initialize classifier.

        Args:
            tolerance_ms: Tolerance for grouping intervals (ms)
            min_periodic_duration_ms: Coverage needed to call a stream periodic
        """
        if not math.isfinite(tolerance_ms) or tolerance_ms < 0:
            raise InvalidParameterError(f"tolerance must be >= 0 ms, got {tolerance_ms}")

        self.tolerance_ms = tolerance_ms
        self.min_periodic_duration_ms = min_periodic_duration_ms
        self.logger = setup_logger(f"faastrace.{self.__class__.__name__}")

    def is_periodic(self, record: InvocationRecord) -> bool:
        """Check whether one function's invocations are periodic.

        Args:
            record: Function record

        Returns:
            True if the stream is periodic
        """
        if len(record.timestamps) < 2:
            return False

        interval, count = dominant_interval(record.timestamps, self.tolerance_ms)
        periodic = interval * count >= self.min_periodic_duration_ms

        self.logger.debug(
            f"{record.function_id}: dominant interval {interval} ms x {count} -> "
            f"{'periodic' if periodic else 'non-periodic'}"
        )
        return periodic

    def classify(self, records: Sequence[InvocationRecord]
                 ) -> Tuple[List[InvocationRecord], List[InvocationRecord]]:
        """Partition records into periodic and non-periodic lists.

        Args:
            records: Function records

        Returns:
            (periodic, non_periodic), both in input order
        """
        periodic: List[InvocationRecord] = []
        non_periodic: List[InvocationRecord] = []

        for record in records:
            if self.is_periodic(record):
                periodic.append(record)
            else:
                non_periodic.append(record)

        self.logger.info(
            f"Classified {len(records)} functions: {len(periodic)} periodic, "
            f"{len(non_periodic)} non-periodic"
        )
        return periodic, non_periodic


def classify(records: Sequence[InvocationRecord], tolerance_ms: float
             ) -> Tuple[List[InvocationRecord], List[InvocationRecord]]:
    """Shortcut for ``PeriodicityClassifier(tolerance_ms).classify(records)``."""
    return PeriodicityClassifier(tolerance_ms).classify(records)
