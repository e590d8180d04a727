"""Statistical utilities for aggregation."""

from __future__ import annotations

import math
from typing import Dict, List

from ..models import ClassMetrics, StatsSummary


# Metric name -> ClassMetrics attribute summarized across the project.
SUMMARY_METRICS = {
    "wmc": "wmc",
    "dit": "dit",
    "noc": "noc",
    "cbo": "cbo",
    "rfc": "rfc",
    "mpc": "mpc",
    "lcom4": "lcom4",
    "tcc": "tcc",
    "lcc": "lcc",
    "nom": "nom",
    "cyclo_avg": "average_cyclomatic_complexity",
    "cognitive_avg": "average_cognitive_complexity",
    "mi": "maintainability_index",
    "sloc": "sloc",
}


def compute_stats(values: List[float]) -> StatsSummary:
    """Compute statistical summary for a list of values."""
    if not values:
        return StatsSummary()

    sorted_vals = sorted(values)
    n = len(sorted_vals)

    mean = sum(sorted_vals) / n
    median = _percentile(sorted_vals, 50)
    p90 = _percentile(sorted_vals, 90)

    if n > 1:
        variance = sum((x - mean) ** 2 for x in sorted_vals) / (n - 1)
        std_dev = math.sqrt(variance)
    else:
        std_dev = 0.0

    return StatsSummary(
        mean=round(mean, 2),
        median=round(median, 2),
        p90=round(p90, 2),
        min_val=round(sorted_vals[0], 2),
        max_val=round(sorted_vals[-1], 2),
        std_dev=round(std_dev, 2),
    )


def summarize_class_metrics(class_metrics: List[ClassMetrics]) -> Dict[str, StatsSummary]:
    """Distribution summary per metric over non-interface classes."""
    classes = [cm for cm in class_metrics if not cm.is_interface]
    return {
        name: compute_stats([float(getattr(cm, attr)) for cm in classes])
        for name, attr in SUMMARY_METRICS.items()
    }


def _percentile(sorted_values: List[float], pct: float) -> float:
    """Linear-interpolated percentile of already sorted values."""
    if not sorted_values:
        return 0.0
    n = len(sorted_values)
    idx = (pct / 100.0) * (n - 1)
    lower = int(math.floor(idx))
    upper = int(math.ceil(idx))
    if lower == upper:
        return sorted_values[lower]
    frac = idx - lower
    return sorted_values[lower] * (1 - frac) + sorted_values[upper] * frac
