"""Tests for periodicity classification."""

import unittest

from faastrace.analysis.periodicity import (
    PeriodicityClassifier, dominant_interval, classify, MIN_PERIODIC_DURATION_MS
)
from faastrace.core.errors import InvalidParameterError
from faastrace.core.records import InvocationRecord

HOUR_MS = 3600000


def hourly(function_id, points, offset=0.0):
    timestamps = [offset + i * HOUR_MS for i in range(points)]
    return InvocationRecord(function_id, timestamps, [0.0] * points)


class TestDominantInterval(unittest.TestCase):
    """Test cases for greedy interval bucketing."""

    def test_too_few_timestamps(self):
        """Test that fewer than two timestamps yield no interval."""
        self.assertEqual(dominant_interval([], 100), (0.0, 0))
        self.assertEqual(dominant_interval([5.0], 100), (0.0, 0))

    def test_groups_within_tolerance(self):
        """Test that close intervals share a bucket."""
        # intervals 100, 180, 60 with tolerance 50
        interval, count = dominant_interval([0, 100, 280, 340], 50)

        self.assertEqual(interval, 100)
        self.assertEqual(count, 2)

    def test_representative_is_not_recentered(self):
        """Test that bucket representatives stay at the first interval seen."""
        # intervals 100, 149, 190: 190 is within 50 of 149 but not of 100
        interval, count = dominant_interval([0, 100, 249, 439], 50)

        self.assertEqual(interval, 100)
        self.assertEqual(count, 2)

    def test_tolerance_is_inclusive(self):
        """Test that an interval exactly at the tolerance distance matches."""
        interval, count = dominant_interval([0, 100, 250], 50)

        self.assertEqual((interval, count), (100, 2))

    def test_tie_keeps_first_seen(self):
        """Test that equal counts keep the earliest bucket."""
        # intervals 10, 500, 10, 500
        interval, count = dominant_interval([0, 10, 510, 520, 1020], 0)

        self.assertEqual(interval, 10)
        self.assertEqual(count, 2)

    def test_unsorted_timestamps_are_not_resorted(self):
        """Test that intervals follow the given order."""
        interval, count = dominant_interval([1000, 0], 0)

        self.assertEqual(interval, -1000)
        self.assertEqual(count, 1)


class TestPeriodicityClassifier(unittest.TestCase):
    """Test cases for PeriodicityClassifier."""

    def setUp(self):
        """Set up test fixtures."""
        self.classifier = PeriodicityClassifier(tolerance_ms=100)

    def test_four_hourly_points_not_periodic(self):
        """Test that 3 hours of hourly invocations are not periodic."""
        record = hourly('f', 4)

        self.assertEqual(dominant_interval(record.timestamps, 100), (HOUR_MS, 3))
        self.assertFalse(self.classifier.is_periodic(record))

    def test_thirteen_hourly_points_periodic(self):
        """Test that 12 hours of hourly invocations are periodic."""
        record = hourly('f', 13)

        interval, count = dominant_interval(record.timestamps, 100)
        self.assertEqual(interval * count, MIN_PERIODIC_DURATION_MS)
        self.assertTrue(self.classifier.is_periodic(record))

    def test_jitter_within_tolerance(self):
        """Test that jittered hourly invocations are still periodic."""
        timestamps = [i * HOUR_MS + (40 if i % 2 else 0) for i in range(13)]
        record = InvocationRecord('jittery', timestamps, [0.0] * 13)

        self.assertTrue(self.classifier.is_periodic(record))

    def test_degenerate_records_non_periodic(self):
        """Test that records with 0 or 1 invocation are non-periodic."""
        empty = InvocationRecord('empty', [], [])
        single = InvocationRecord('single', [0.0], [0.0])

        periodic, non_periodic = self.classifier.classify([empty, single])

        self.assertEqual(periodic, [])
        self.assertEqual(non_periodic, [empty, single])

    def test_partition_is_complete_and_ordered(self):
        """Test that every function lands in exactly one list, in order."""
        records = [
            hourly('p1', 13),
            hourly('n1', 4),
            InvocationRecord('n2', [0.0], [0.0]),
            hourly('p2', 20, offset=500),
        ]

        periodic, non_periodic = self.classifier.classify(records)

        self.assertEqual([r.function_id for r in periodic], ['p1', 'p2'])
        self.assertEqual([r.function_id for r in non_periodic], ['n1', 'n2'])

        ids = {r.function_id for r in periodic} | {r.function_id for r in non_periodic}
        self.assertEqual(ids, {r.function_id for r in records})
        self.assertEqual(len(periodic) + len(non_periodic), len(records))

    def test_module_level_classify(self):
        """Test the classify shortcut."""
        periodic, non_periodic = classify([hourly('p', 13)], 100)

        self.assertEqual(len(periodic), 1)
        self.assertEqual(non_periodic, [])

    def test_negative_tolerance_rejected(self):
        """Test that a negative tolerance is rejected."""
        with self.assertRaises(InvalidParameterError):
            PeriodicityClassifier(tolerance_ms=-1)

    def test_zero_tolerance_allowed(self):
        """Test that a zero tolerance is valid."""
        classifier = PeriodicityClassifier(tolerance_ms=0)
        self.assertTrue(classifier.is_periodic(hourly('p', 13)))


if __name__ == '__main__':
    unittest.main()
