"""Load serverless invocation traces into per-function records."""

from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from .arrival_process import InterArrivalGenerator
from ..core.errors import InvalidParameterError, TraceFormatError
from ..core.records import InvocationRecord
from ..utils.logger import setup_logger

TRACE_FORMATS = ('azure2019', 'azure2021')

# Azure 2019 metadata columns before the per-bucket counts
AZURE2019_ID_COLUMNS = ['HashOwner', 'HashApp', 'HashFunction']
AZURE2019_META_COLUMNS = 4

# Percentile columns of the Azure 2019 duration file and their quantiles
AZURE2019_PERCENTILES = [
    ('percentile_Average_0', 0.0),
    ('percentile_Average_1', 0.01),
    ('percentile_Average_25', 0.25),
    ('percentile_Average_50', 0.50),
    ('percentile_Average_75', 0.75),
    ('percentile_Average_99', 0.99),
    ('percentile_Average_100', 1.0),
]


def _function_ids(df: pd.DataFrame) -> pd.Series:
    """Owner, app and function hashes concatenated into one id."""
    owner, app, function = (df[c].astype(str) for c in AZURE2019_ID_COLUMNS)
    return owner + app + function


class TraceLoader:
    """Load invocation traces from the public Azure Functions datasets.

    Supports:
    - azure2021: one row per invocation (app, func, end_timestamp, duration)
    - azure2019: per-minute invocation counts plus a duration percentile file
    """

    def __init__(self, trace_path: str, trace_format: str = 'azure2021',
                 duration_path: Optional[str] = None,
                 iat_distribution: str = 'exponential', shift_iat: bool = False,
                 granularity: str = 'minute', seed: Optional[int] = 123456789,
                 start_of_day_ms: float = 0.0, show_progress: bool = False):
        """Initialize trace loader.

        Args:
            trace_path: Path to the invocation trace file
            trace_format: 'azure2019' or 'azure2021'
            duration_path: Duration percentile file (azure2019 only)
            iat_distribution: Inter-arrival distribution inside a bucket (azure2019)
            shift_iat: Randomly shift each bucket's arrivals (azure2019)
            granularity: Bucket width of the counts, 'minute' or 'second' (azure2019)
            seed: Seed used for arrivals and durations (azure2019)
            start_of_day_ms: Offset added to every start time
            show_progress: Show a progress bar while expanding functions
        """
        if trace_format not in TRACE_FORMATS:
            raise InvalidParameterError(f"Unsupported trace format: {trace_format}")

        self.trace_path = Path(trace_path)
        self.trace_format = trace_format
        self.duration_path = Path(duration_path) if duration_path else None
        self.start_of_day_ms = float(start_of_day_ms)
        self.show_progress = show_progress
        self.logger = setup_logger(f"faastrace.{self.__class__.__name__}")

        if not self.trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")

        if trace_format == 'azure2019':
            if self.duration_path is None:
                raise InvalidParameterError("azure2019 traces need a duration file")
            if not self.duration_path.exists():
                raise FileNotFoundError(f"Duration file not found: {duration_path}")
            self.arrivals = InterArrivalGenerator(
                distribution=iat_distribution,
                granularity=granularity,
                shift_iat=shift_iat,
                seed=seed,
            )

    def load(self) -> List[InvocationRecord]:
        """Load trace data.

        Returns:
            One record per function
        """
        if self.trace_format == 'azure2019':
            return self._load_azure2019()
        return self._load_azure2021()

    def _read_csv(self, path: Path) -> pd.DataFrame:
        try:
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError as e:
            raise TraceFormatError(f"Empty CSV file: {path}") from e
        except pd.errors.ParserError as e:
            raise TraceFormatError(f"Failed to read CSV {path}: {e}") from e

    def _load_azure2021(self) -> List[InvocationRecord]:
        """Load an Azure 2021 invocation trace.

        Start times are derived from end time minus duration, truncated to
        whole milliseconds.

        Returns:
            Records in order of first appearance of each function
        """
        df = self._read_csv(self.trace_path)

        if df.shape[1] < 4:
            raise TraceFormatError(
                f"Invalid row format in {self.trace_path}: expected at least 4 columns, got {df.shape[1]}"
            )

        app = df.iloc[:, 0].astype(str)
        func = df.iloc[:, 1].astype(str)
        end_s = pd.to_numeric(df.iloc[:, 2], errors='coerce')
        duration_s = pd.to_numeric(df.iloc[:, 3], errors='coerce')

        for name, column in (('end timestamp', end_s), ('duration', duration_s)):
            invalid = column.isna()
            if invalid.any():
                # +2 for the header and 1-based line numbers
                line = int(np.flatnonzero(invalid.to_numpy())[0]) + 2
                raise TraceFormatError(f"Invalid {name} at line {line} of {self.trace_path}")

        duration_ms = np.floor(duration_s.to_numpy(dtype=float) * 1000.0)
        start_ms = np.floor(end_s.to_numpy(dtype=float) * 1000.0) - duration_ms + self.start_of_day_ms

        frame = pd.DataFrame({
            'function_id': app + func,
            'start_ms': start_ms,
            'duration_ms': duration_ms,
        })

        records = [
            InvocationRecord(
                function_id=function_id,
                timestamps=group['start_ms'].tolist(),
                durations=group['duration_ms'].tolist(),
            )
            for function_id, group in frame.groupby('function_id', sort=False)
        ]

        self.logger.info(
            f"Loaded {len(frame)} invocations of {len(records)} functions from {self.trace_path}"
        )
        return records

    def _load_azure2019(self) -> List[InvocationRecord]:
        """Load an Azure 2019 trace (invocation counts + duration percentiles).

        Returns:
            Records in the row order of the invocation file
        """
        invocations = self._read_csv(self.trace_path)
        missing = [c for c in AZURE2019_ID_COLUMNS if c not in invocations.columns]
        if missing or invocations.shape[1] <= AZURE2019_META_COLUMNS:
            raise TraceFormatError(f"Invalid invocation file format: {self.trace_path}")

        counts = invocations.iloc[:, AZURE2019_META_COLUMNS:].apply(pd.to_numeric, errors='coerce')
        values = counts.to_numpy(dtype=float)
        if np.isnan(values).any() or (values != np.floor(values)).any() or (values < 0).any():
            raise TraceFormatError(
                f"Failed parsing invocation file {self.trace_path}: counts must be non-negative integers"
            )

        duration_curves = self._load_duration_curves()

        function_ids = _function_ids(invocations)
        records = []
        for function_id, row_counts in tqdm(zip(function_ids, values.astype(np.int64)),
                                            total=len(function_ids),
                                            desc="Expanding functions",
                                            disable=not self.show_progress):
            # Every function draws from the same stream, independent of its row
            self.arrivals.reseed()
            timestamps = self.arrivals.generate(row_counts, start_ms=self.start_of_day_ms)

            curve = duration_curves.get(function_id)
            if curve is None:
                self.logger.debug(f"No duration data for {function_id}, using 0 ms")
                durations = np.zeros(len(timestamps))
            else:
                durations = self._sample_durations(curve, len(timestamps))

            records.append(InvocationRecord(
                function_id=function_id,
                timestamps=timestamps.tolist(),
                durations=durations.tolist(),
            ))

        self.logger.info(
            f"Loaded {len(records)} functions ({sum(r.num_invocations for r in records)} invocations) "
            f"from {self.trace_path}"
        )
        return records

    def _load_duration_curves(self) -> Dict[str, np.ndarray]:
        """Per-function duration percentile values (ms), keyed by function id."""
        durations = self._read_csv(self.duration_path)
        columns = AZURE2019_ID_COLUMNS + [name for name, _ in AZURE2019_PERCENTILES]
        missing = [c for c in columns if c not in durations.columns]
        if missing:
            raise TraceFormatError(
                f"Duration file {self.duration_path} is missing columns: {', '.join(missing)}"
            )

        percentiles = durations[[name for name, _ in AZURE2019_PERCENTILES]].apply(
            pd.to_numeric, errors='coerce'
        ).to_numpy(dtype=float)
        if np.isnan(percentiles).any():
            raise TraceFormatError(f"Failed parsing duration file {self.duration_path}")

        function_ids = _function_ids(durations)
        curves: Dict[str, np.ndarray] = {}
        for function_id, curve in zip(function_ids, percentiles):
            curves.setdefault(function_id, curve)
        return curves

    def _sample_durations(self, curve: np.ndarray, size: int) -> np.ndarray:
        """Inverse-CDF sampling from a percentile curve."""
        quantiles = [q for _, q in AZURE2019_PERCENTILES]
        samples = self.arrivals.rng.uniform(0.0, 1.0, size)
        return np.interp(samples, quantiles, curve)
