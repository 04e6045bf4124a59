#!/usr/bin/env python3
"""
Statistical utilities for the PowerRank engine.

Provides the min-max normalizer, recency weighting and clamping helpers
shared by the base PowerScore, the Enhanced PowerRank and the trend series.
"""

import math
import pandas as pd
import numpy as np
from typing import Iterable, Tuple, Union
import logging

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5

Number = Union[int, float]


def minmax_bounds(values: Iterable[Number]) -> Tuple[float, float]:
    """
    Compute (min, max) of a population.

    Args:
        values: Population of raw metric values

    Returns:
        Tuple of (min, max); (nan, nan) for an empty population
    """
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return float('nan'), float('nan')
    return float(np.min(arr)), float(np.max(arr))


def _scale(value: float, lo: float, hi: float) -> float:
    if not (math.isfinite(lo) and math.isfinite(hi)) or lo == hi:
        return NEUTRAL_SCORE
    if not math.isfinite(value):
        return NEUTRAL_SCORE
    return (value - lo) / (hi - lo)


def normalize_value(value: Number, population: Iterable[Number]) -> float:
    """
    Min-max scale a single value against a population.

    Degenerate populations (a single member, all-equal values) and
    non-finite bounds resolve to 0.5 instead of dividing by zero.

    Args:
        value: Raw value to scale
        population: Population the bounds are derived from

    Returns:
        Scaled value in [0, 1] when value lies inside the population
    """
    lo, hi = minmax_bounds(population)
    return _scale(float(value), lo, hi)


def minmax_normalize(x: pd.Series) -> pd.Series:
    """
    Min-max scale a whole population Series to [0, 1].

    Args:
        x: Input series to normalize

    Returns:
        Series with the same index; 0.5 everywhere for degenerate input
    """
    if x.empty:
        return x.astype(float)

    lo, hi = minmax_bounds(x)
    return x.astype(float).map(lambda v: _scale(v, lo, hi))


def normalize_to_bounds(value: Number, lo: Number, hi: Number) -> float:
    """
    Scale a value against externally fixed bounds, clamped to [0, 1].

    Used where the bounds come from a different population than the value,
    so the raw ratio may fall outside the unit interval.
    """
    return clamp(_scale(float(value), float(lo), float(hi)), 0.0, 1.0)


def clamp(value: Number, lo: Number, hi: Number) -> float:
    """Clamp value into [lo, hi]."""
    return float(max(lo, min(hi, value)))


def recency_weights(n: int, decay: float) -> np.ndarray:
    """
    Generate per-match recency weights, oldest first.

    Match index i (0 = oldest) of n gets weight decay ** (n - 1 - i), so the
    most recent match always weighs 1.0.

    Args:
        n: Number of matches
        decay: Per-match-back decay factor in (0, 1]

    Returns:
        Array of n weights (not normalized)
    """
    if n <= 0:
        return np.array([])

    games_ago = np.arange(n - 1, -1, -1, dtype=float)
    return np.power(float(decay), games_ago)


def weighted_mean(values: Iterable[Number], weights: np.ndarray) -> float:
    """
    Weighted arithmetic mean; 0.0 when the weights sum to zero.
    """
    arr = np.asarray(list(values), dtype=float)
    total = float(np.sum(weights))
    if total == 0 or arr.size == 0:
        return 0.0
    return float(np.dot(weights, arr) / total)


def cap_goal_diff(gd, cap: int):
    """
    Cap goal difference to specified range.

    Args:
        gd: Goal difference (scalar or Series)
        cap: Maximum absolute goal difference

    Returns:
        Goal difference clipped to [-cap, cap]
    """
    if isinstance(gd, pd.Series):
        return gd.clip(lower=-cap, upper=cap)
    return max(-cap, min(cap, gd))
