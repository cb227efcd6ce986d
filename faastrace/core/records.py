"""Data model shared by the loaders, the simulator and the aligner."""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .errors import InconsistentRecordError


@dataclass(frozen=True)
class InvocationRecord:
    """All invocations of a single function.

    Timestamps are invocation start times and durations are execution
    times, both in milliseconds. ``durations[i]`` belongs to the invocation
    starting at ``timestamps[i]``. The order is the one produced by the
    loader; nothing downstream re-sorts it.
    """
    function_id: str
    timestamps: Tuple[float, ...] = field(default_factory=tuple)
    durations: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'timestamps', tuple(float(t) for t in self.timestamps))
        object.__setattr__(self, 'durations', tuple(float(d) for d in self.durations))

    @property
    def num_invocations(self) -> int:
        """Number of invocations in the record."""
        return len(self.timestamps)

    def is_consistent(self) -> bool:
        return len(self.timestamps) == len(self.durations)

    def validate(self) -> None:
        """Raise if timestamps and durations do not pair up.

        Raises:
            InconsistentRecordError: If the two sequences differ in length
        """
        if not self.is_consistent():
            raise InconsistentRecordError(
                f"Function {self.function_id}: len(timestamps) is {len(self.timestamps)} "
                f"while len(durations) is {len(self.durations)}"
            )

    def __repr__(self) -> str:
        return f"InvocationRecord(function={self.function_id}, invocations={self.num_invocations})"


@dataclass(frozen=True)
class LabeledEvent:
    """A cold start detected at ``timestamp`` for ``function_id``."""
    timestamp: float
    function_id: str


@dataclass(frozen=True)
class AlignedRow:
    """One row of the merged cold start table."""
    function_id: str
    timestamp: float
    is_cold_start_from_zero: bool
    is_periodic: bool


def validate_records(records: Iterable[InvocationRecord]) -> None:
    """Validate a whole batch before any of it is processed.

    Args:
        records: Records to check

    Raises:
        InconsistentRecordError: On the first inconsistent record
    """
    for record in records:
        record.validate()


def total_invocations(records: Sequence[InvocationRecord]) -> int:
    return sum(record.num_invocations for record in records)


def event_timestamps(events: Iterable[LabeledEvent]) -> List[float]:
    """Timestamps of a list of events, in the same order."""
    return [event.timestamp for event in events]
