"""
Analytics module for the PowerRank engine.

This module provides the base PowerScore and Enhanced PowerRank calculations,
the weight balancer, Power vs Elo comparison and trend series.
"""

from .power_score import compute_team_powers, aggregate_team_stats
from .enhanced_engine import run_enhanced_ranking
from .comparative import compare_power_elo
from .trend import build_trend_series
from .weights import rebalance_weights
from .utils_stats import normalize_value, minmax_normalize

__all__ = [
    'compute_team_powers',
    'aggregate_team_stats',
    'run_enhanced_ranking',
    'compare_power_elo',
    'build_trend_series',
    'rebalance_weights',
    'normalize_value',
    'minmax_normalize'
]
