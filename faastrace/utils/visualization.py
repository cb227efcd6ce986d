"""Visualization of cold starts over a day."""

import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter
import seaborn as sns
import numpy as np
from pathlib import Path
from typing import List, Sequence

sns.set_style("whitegrid")

MS_PER_MINUTE = 60000
MINUTES_PER_DAY = 1440

# Blue, red, green, then black for anything beyond
SERIES_COLORS = [(0.0, 0.4, 0.8), (0.8, 0.2, 0.2), (0.0, 0.6, 0.3)]


def count_per_minute(timestamps: Sequence[float], start_of_day_ms: float = 0.0,
                     minutes: int = MINUTES_PER_DAY) -> np.ndarray:
    """Count cold starts in each minute of a day window.

    Args:
        timestamps: Cold start times (ms)
        start_of_day_ms: Start of the window (ms)
        minutes: Window length in minutes

    Returns:
        Array of ``minutes`` counts; timestamps outside the window are ignored
    """
    counts = np.zeros(minutes, dtype=int)
    if len(timestamps) == 0:
        return counts

    index = np.floor((np.asarray(timestamps, dtype=float) - start_of_day_ms) / MS_PER_MINUTE)
    index = index[(index >= 0) & (index < minutes)].astype(int)
    np.add.at(counts, index, 1)
    return counts


def _format_minute(value, _pos) -> str:
    minute = int(value) % MINUTES_PER_DAY
    return f"{minute // 60:02d}:{minute % 60:02d}"


def _series_color(i: int, alpha: float):
    rgb = SERIES_COLORS[i] if i < len(SERIES_COLORS) else (0.0, 0.0, 0.0)
    return (*rgb, alpha)


def plot_cold_starts(timestamps: Sequence[float], output_path: Path,
                     start_of_day_ms: float = 0.0) -> None:
    """Plot cold starts per minute.

    Args:
        timestamps: Cold start times (ms)
        output_path: Output image path
        start_of_day_ms: Start of the plotted day (ms)
    """
    plot_multiple_cold_starts([timestamps], ["Cold Starts"], [1.0],
                              output_path, start_of_day_ms)


def plot_multiple_cold_starts(series: Sequence[Sequence[float]], legends: Sequence[str],
                              alphas: Sequence[float], output_path: Path,
                              start_of_day_ms: float = 0.0) -> List[float]:
    """Overlay several cold start series on one per-minute chart.

    Args:
        series: One list of cold start times (ms) per series
        legends: Legend label of each series
        alphas: Line transparency of each series, 0-1
        output_path: Output image path
        start_of_day_ms: Start of the plotted day (ms)

    Returns:
        Average cold starts per minute of each series
    """
    if len(series) != len(legends) or len(series) != len(alphas):
        raise ValueError("the number of data sets, legends, and alphas must match")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    minutes = np.arange(MINUTES_PER_DAY)
    averages = []

    fig, ax = plt.subplots(figsize=(12.8, 7.2))
    for i, (timestamps, legend, alpha) in enumerate(zip(series, legends, alphas)):
        counts = count_per_minute(timestamps, start_of_day_ms)
        average = float(counts.mean())
        averages.append(average)

        ax.plot(minutes, counts, linewidth=1.0, color=_series_color(i, alpha),
                label=f"{legend} Average: {average:.2f}")

    ax.xaxis.set_major_formatter(FuncFormatter(_format_minute))
    ax.set_xlabel('Time (Minutes)')
    ax.set_ylabel('Cold Starts')
    ax.legend(loc='upper left')
    ax.grid(alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=100, bbox_inches='tight')
    plt.close(fig)

    return averages
