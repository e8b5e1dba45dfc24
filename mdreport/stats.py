"""Closed-form numeric helpers used to annotate reports."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import pandas as pd


def mean(data: Sequence[float]) -> Optional[float]:
    if len(data) == 0:
        return None
    return math.fsum(data) / len(data)


def std_deviation(data: Sequence[float]) -> Optional[float]:
    """Population standard deviation (divides by n); ``None`` for empty input."""
    data_mean = mean(data)
    if data_mean is None:
        return None
    variance = math.fsum((data_mean - value) ** 2 for value in data) / len(data)
    return math.sqrt(variance)


def median(data: Sequence[float]) -> float:
    ordered = sorted(data)
    count = len(ordered)
    if count == 0:
        return 0.0
    middle = count // 2
    if count % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2.0
    return float(ordered[middle])


def mad(data: Sequence[float], med: float) -> float:
    """Median absolute deviation around a precomputed median."""
    return median([abs(value - med) for value in data])


def pearson_correlation_2v(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    if len(vec1) != len(vec2):
        raise ValueError(f"Vectors must have equal length (got {len(vec1)} and {len(vec2)})")
    return float(pd.Series(vec1, dtype=float).corr(pd.Series(vec2, dtype=float), method="pearson"))
