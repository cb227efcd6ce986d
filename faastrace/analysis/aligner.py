"""Merge the three cold start label sets into one table."""

from typing import List, Sequence

from ..core.records import AlignedRow, LabeledEvent
from ..utils.logger import setup_logger


class ResultAligner:
    """Annotates every cold start with its from-zero and periodic labels.

    The join is a sorted merge on the timestamp alone, using exact float
    equality. Function ids are not compared, so two functions that cold start
    at the same instant can match each other, and a secondary timestamp that
    was rounded differently upstream will not match at all.
    """

    def __init__(self):
        self.logger = setup_logger(f"faastrace.{self.__class__.__name__}")

    def align(self, all_cold_starts: Sequence[LabeledEvent],
              cold_starts_from_zero: Sequence[LabeledEvent],
              periodic_cold_starts: Sequence[LabeledEvent]) -> List[AlignedRow]:
        """Build the merged table.

        Args:
            all_cold_starts: Duration-aware cold starts of every function
            cold_starts_from_zero: From-zero cold starts of every function
            periodic_cold_starts: Duration-aware cold starts of periodic functions

        Returns:
            One row per entry of ``all_cold_starts``, sorted by timestamp
        """
        # sorted() is stable, so equal timestamps keep their input order
        all_sorted = sorted(all_cold_starts, key=lambda e: e.timestamp)
        from_zero = sorted(cold_starts_from_zero, key=lambda e: e.timestamp)
        periodic = sorted(periodic_cold_starts, key=lambda e: e.timestamp)

        rows: List[AlignedRow] = []
        j = k = 0
        for event in all_sorted:
            t = event.timestamp

            while j < len(from_zero) and from_zero[j].timestamp < t:
                j += 1
            is_from_zero = j < len(from_zero) and from_zero[j].timestamp == t

            while k < len(periodic) and periodic[k].timestamp < t:
                k += 1
            is_periodic = k < len(periodic) and periodic[k].timestamp == t

            rows.append(AlignedRow(
                function_id=event.function_id,
                timestamp=t,
                is_cold_start_from_zero=is_from_zero,
                is_periodic=is_periodic,
            ))

        self.logger.info(
            f"Aligned {len(rows)} cold starts "
            f"({sum(r.is_cold_start_from_zero for r in rows)} from zero, "
            f"{sum(r.is_periodic for r in rows)} periodic)"
        )
        return rows


def align(all_cold_starts: Sequence[LabeledEvent],
          cold_starts_from_zero: Sequence[LabeledEvent],
          periodic_cold_starts: Sequence[LabeledEvent]) -> List[AlignedRow]:
    return ResultAligner().align(all_cold_starts, cold_starts_from_zero, periodic_cold_starts)
