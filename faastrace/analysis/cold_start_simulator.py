"""Offline cold start reconstruction for serverless functions."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from ..core.errors import InvalidParameterError
from ..core.records import InvocationRecord, LabeledEvent, validate_records
from ..utils.logger import setup_logger


class ColdStartPolicy(Enum):
    """Instance reuse rules.

    DURATION_AWARE: an instance is reusable only while idle and not expired
        (``last_end_time < start < expiry_time``); expiry counts from the end
        of the execution.
    FROM_ZERO: durations are ignored; an instance is reusable up to and
        including its expiry time, and expiry counts from the invocation start.
    """
    DURATION_AWARE = "duration_aware"
    FROM_ZERO = "from_zero"


@dataclass
class SimulatedInstance:
    """A warm execution slot of one function."""
    last_end_time: float
    expiry_time: float


class ColdStartSimulator:
    """Replays invocation traces against a keep-alive instance pool.

    Each function gets its own pool, so functions never share instances.
    Invocations are processed in the order they appear in the record.
    """

    def __init__(self, keep_alive_ms: float = 60000.0):
        """Initialize cold start simulator.

        Args:
            keep_alive_ms: Time an idle instance stays warm (ms)
        """
        if not math.isfinite(keep_alive_ms) or keep_alive_ms <= 0:
            raise InvalidParameterError(f"keep-alive must be > 0 ms, got {keep_alive_ms}")

        self.keep_alive_ms = keep_alive_ms
        self.logger = setup_logger(f"faastrace.{self.__class__.__name__}")

    def simulate_cold_starts(self, records: Sequence[InvocationRecord]) -> List[LabeledEvent]:
        """Detect cold starts with the duration-aware policy.

        Args:
            records: Function records

        Returns:
            Cold start events, grouped by function in input order

        Raises:
            InconsistentRecordError: If any record has mismatched lengths
        """
        return self._simulate(records, ColdStartPolicy.DURATION_AWARE)

    def simulate_cold_starts_from_zero(self, records: Sequence[InvocationRecord]) -> List[LabeledEvent]:
        """Detect cold starts with the from-zero policy (durations ignored).

        Args:
            records: Function records

        Returns:
            Cold start events, grouped by function in input order

        Raises:
            InconsistentRecordError: If any record has mismatched lengths
        """
        return self._simulate(records, ColdStartPolicy.FROM_ZERO)

    def _simulate(self, records: Sequence[InvocationRecord],
                  policy: ColdStartPolicy) -> List[LabeledEvent]:
        # No partial results: the whole batch is rejected up front
        validate_records(records)

        events: List[LabeledEvent] = []
        for record in records:
            events.extend(self.simulate_one_function(record, policy))

        self.logger.info(
            f"{policy.value}: {len(events)} cold starts across {len(records)} functions"
        )
        return events

    def simulate_one_function(self, record: InvocationRecord,
                              policy: ColdStartPolicy = ColdStartPolicy.DURATION_AWARE
                              ) -> List[LabeledEvent]:
        """Simulate a single function with a fresh instance pool.

        Args:
            record: Function record
            policy: Reuse policy

        Returns:
            Cold start events of this function
        """
        record.validate()

        if policy is ColdStartPolicy.DURATION_AWARE:
            cold_starts = self._duration_aware(record.timestamps, record.durations)
        elif policy is ColdStartPolicy.FROM_ZERO:
            cold_starts = self._from_zero(record.timestamps)
        else:
            raise InvalidParameterError(f"Unknown cold start policy: {policy}")

        self.logger.debug(
            f"{record.function_id}: {len(cold_starts)}/{record.num_invocations} cold starts ({policy.value})"
        )
        return [LabeledEvent(timestamp=start, function_id=record.function_id)
                for start in cold_starts]

    def _duration_aware(self, timestamps: Sequence[float],
                        durations: Sequence[float]) -> List[float]:
        active: List[SimulatedInstance] = []
        cold_starts = []

        for start, duration in zip(timestamps, durations):
            end = start + duration

            # Most recently created instance first
            for instance in reversed(active):
                if instance.last_end_time < start < instance.expiry_time:
                    instance.last_end_time = end
                    instance.expiry_time = end + self.keep_alive_ms
                    break
            else:
                cold_starts.append(start)
                active.append(SimulatedInstance(end, end + self.keep_alive_ms))

            # Lazy eviction against the current start time only
            for j in range(len(active) - 1, -1, -1):
                if active[j].expiry_time < start:
                    del active[j]

        return cold_starts

    def _from_zero(self, timestamps: Sequence[float]) -> List[float]:
        active: List[SimulatedInstance] = []
        cold_starts = []

        for start in timestamps:
            found = False

            # Expired instances seen before a match are dropped during the scan
            for j in range(len(active) - 1, -1, -1):
                if start <= active[j].expiry_time:
                    active[j].expiry_time = start + self.keep_alive_ms
                    found = True
                    break
                del active[j]

            if not found:
                cold_starts.append(start)
                active.append(SimulatedInstance(start, start + self.keep_alive_ms))

        return cold_starts

    @staticmethod
    def expand_invocations(records: Sequence[InvocationRecord]) -> List[float]:
        """Flatten the start times of all functions, in input order.

        Args:
            records: Function records

        Returns:
            All invocation start times
        """
        timestamps: List[float] = []
        for record in records:
            if not record.timestamps:
                continue
            timestamps.extend(record.timestamps)
        return timestamps
