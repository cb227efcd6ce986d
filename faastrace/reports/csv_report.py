"""Write cold start tables and run summaries."""

import csv
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np
import yaml

from ..core.records import AlignedRow
from ..utils.logger import setup_logger

CSV_HEADER = ["FunctionName", "Time", "ColdstartFrom0", "PeriodicInvocation"]

logger = setup_logger("faastrace.CSVReport")


def format_timestamp(value: float) -> str:
    """Render a timestamp as the shortest plain decimal string.

    No exponent and no trailing zeros: 100.0 -> "100", 0.5 -> "0.5".
    """
    return np.format_float_positional(float(value), trim='-')


def _flag(value: bool) -> str:
    return "true" if value else "false"


def rows_to_table(rows: Sequence[AlignedRow]) -> List[List[str]]:
    """Convert aligned rows into CSV records (without the header).

    Args:
        rows: Aligned cold start rows

    Returns:
        List of string records
    """
    return [
        [row.function_id, format_timestamp(row.timestamp),
         _flag(row.is_cold_start_from_zero), _flag(row.is_periodic)]
        for row in rows
    ]


def write_csv(rows: Sequence[AlignedRow], output_path: str) -> Path:
    """Write the cold start table.

    Args:
        rows: Aligned cold start rows
        output_path: Output CSV path

    Returns:
        Path of the written file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        writer.writerows(rows_to_table(rows))

    logger.info(f"Wrote {len(rows)} cold starts to {path}")
    return path


def write_summary(summary: Dict, output_path: str) -> Path:
    """Save a run summary as YAML."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        yaml.safe_dump(summary, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Summary saved to {path}")
    return path
