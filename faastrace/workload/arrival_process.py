"""Expansion of per-bucket invocation counts into start times."""

import numpy as np
from typing import Optional, Sequence

from ..core.errors import InvalidParameterError
from ..utils.logger import setup_logger

GRANULARITY_MS = {
    'minute': 60000.0,
    'second': 1000.0,
}

IAT_DISTRIBUTIONS = ('exponential', 'uniform', 'equidistant')


class InterArrivalGenerator:
    """Places a bucket's invocations inside the bucket.

    Supports:
    - Exponential (normalised exponential gaps)
    - Uniform (sorted uniform draws)
    - Equidistant (evenly spaced)
    """

    def __init__(self, distribution: str = 'exponential', granularity: str = 'minute',
                 shift_iat: bool = False, seed: Optional[int] = 123456789):
        """Initialize generator.

        Args:
            distribution: Inter-arrival distribution inside a bucket
            granularity: Bucket width, 'minute' or 'second'
            shift_iat: Rotate each bucket's offsets by a random shift
            seed: Seed for the random generator
        """
        if distribution not in IAT_DISTRIBUTIONS:
            raise InvalidParameterError(f"Unknown IAT distribution: {distribution}")
        if granularity not in GRANULARITY_MS:
            raise InvalidParameterError(f"Unknown trace granularity: {granularity}")

        self.distribution = distribution
        self.granularity = granularity
        self.bucket_ms = GRANULARITY_MS[granularity]
        self.shift_iat = shift_iat
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.logger = setup_logger(f"faastrace.{self.__class__.__name__}")

    def reseed(self, seed: Optional[int] = None):
        """Restart the random stream, from the constructor seed by default."""
        self.rng = np.random.default_rng(self.seed if seed is None else seed)

    def bucket_offsets(self, count: int) -> np.ndarray:
        """Offsets (ms) of ``count`` invocations inside one bucket.

        Args:
            count: Invocations in the bucket

        Returns:
            Sorted offsets in [0, bucket width)
        """
        if count <= 0:
            return np.empty(0)

        if self.distribution == 'equidistant':
            offsets = np.arange(count) * (self.bucket_ms / count)
        elif self.distribution == 'uniform':
            offsets = np.sort(self.rng.uniform(0.0, self.bucket_ms, count))
        else:
            gaps = self.rng.exponential(1.0, count)
            # First invocation at the bucket start, last one strictly inside
            offsets = (np.cumsum(gaps) - gaps[0]) / gaps.sum() * self.bucket_ms

        if self.shift_iat:
            shift = self.rng.uniform(0.0, self.bucket_ms)
            offsets = np.sort((offsets + shift) % self.bucket_ms)

        return offsets

    def generate(self, counts: Sequence[int], start_ms: float = 0.0) -> np.ndarray:
        """Start times for a sequence of per-bucket counts.

        Args:
            counts: Invocation count of each consecutive bucket
            start_ms: Start time of the first bucket

        Returns:
            Non-decreasing start times (ms)
        """
        chunks = []
        for index, count in enumerate(counts):
            if count <= 0:
                continue
            bucket_start = start_ms + index * self.bucket_ms
            chunks.append(bucket_start + self.bucket_offsets(int(count)))

        if not chunks:
            return np.empty(0)
        return np.concatenate(chunks)
