#!/usr/bin/env python3
"""
Power vs Elo comparison.

Merges an externally supplied Elo table with the overall base PowerScore
ranking into one delta-rank view, and summarizes how well the two orders agree.
"""

import pandas as pd
import numpy as np
from typing import Any, Dict
import logging
from scipy.stats import spearmanr, kendalltau

logger = logging.getLogger(__name__)

DEFAULT_INACTIVE_MARKER = 'zg.'

COMPARE_COLUMNS = ['elo_rank', 'power_rank', 'delta_rank', 'team_id', 'team_name',
                   'group_id', 'group_name', 'elo', 'games', 'inactive', 'power_score']


def is_inactive(team_name, games, marker: str = DEFAULT_INACTIVE_MARKER) -> bool:
    """
    A team is inactive with no Elo games or a name starting with the marker.
    """
    if pd.isna(games) or int(games) == 0:
        return True
    if marker and str(team_name or '').lower().startswith(marker.lower()):
        return True
    return False


def elo_order(elo: pd.DataFrame, marker: str = DEFAULT_INACTIVE_MARKER) -> pd.DataFrame:
    """
    Sort Elo entries: active teams by rating desc, then name asc; inactive
    teams appended afterwards under the same rule.

    Args:
        elo: Elo entries with team_id, team_name, elo, games
        marker: Inactive team-name prefix (case-insensitive)

    Returns:
        New DataFrame with inactive and elo_rank columns
    """
    ordered = elo.copy()
    ordered['inactive'] = [
        is_inactive(name, games, marker)
        for name, games in zip(ordered['team_name'], ordered['games'])
    ]
    ordered['_sort_name'] = ordered['team_name'].astype(str)
    ordered = ordered.sort_values(
        ['inactive', 'elo', '_sort_name'],
        ascending=[True, False, True]
    ).drop(columns='_sort_name')
    ordered['elo_rank'] = range(1, len(ordered) + 1)
    return ordered


def compare_power_elo(team_powers: pd.DataFrame, elo: pd.DataFrame,
                      marker: str = DEFAULT_INACTIVE_MARKER) -> pd.DataFrame:
    """
    Build the delta-rank view.

    delta_rank = power_rank - elo_rank. Teams missing from the Power ranking
    get a null power_rank and delta_rank.

    Args:
        team_powers: Output of compute_team_powers (overall rank order)
        elo: Elo entries
        marker: Inactive team-name prefix

    Returns:
        DataFrame with COMPARE_COLUMNS in Elo order
    """
    if elo.empty:
        logger.warning("No Elo entries supplied for comparison")
        return pd.DataFrame(columns=COMPARE_COLUMNS)

    ordered = elo_order(elo, marker)
    ordered['team_id'] = ordered['team_id'].astype(str)

    power = pd.DataFrame({
        'team_id': team_powers['team_id'].astype(str),
        'power_rank': team_powers['overall_rank'],
        'power_score': team_powers['overall_power_score'],
    }) if not team_powers.empty else pd.DataFrame(columns=['team_id', 'power_rank', 'power_score'])

    merged = ordered.merge(power, on='team_id', how='left')
    merged['power_rank'] = merged['power_rank'].astype('Int64')
    merged['delta_rank'] = merged['power_rank'] - merged['elo_rank'].astype('Int64')

    for col in ['group_id', 'group_name']:
        if col not in merged.columns:
            merged[col] = None

    missing = int(merged['power_rank'].isna().sum())
    if missing:
        logger.warning(f"{missing} Elo teams have no Power ranking")

    return merged[COMPARE_COLUMNS].reset_index(drop=True)


def _finite_or_none(value):
    value = float(value)
    return value if np.isfinite(value) else None


def summarize_agreement(compare: pd.DataFrame) -> Dict[str, Any]:
    """
    Compare the Elo and Power orders over teams present in both.

    Returns:
        Dictionary with rank correlations, rank delta statistics and top-k overlaps
    """
    both = compare.dropna(subset=['power_rank'])
    summary: Dict[str, Any] = {'teams_compared': int(len(both))}
    if len(both) < 2:
        summary.update({
            'spearman_correlation': None,
            'kendall_correlation': None,
            'median_abs_delta': None,
            'max_abs_delta': None,
            'top5_overlap': None,
            'top10_overlap': None,
        })
        return summary

    elo_ranks = both['elo_rank'].astype(float).to_numpy()
    power_ranks = both['power_rank'].astype(float).to_numpy()
    spearman_corr, _ = spearmanr(elo_ranks, power_ranks)
    kendall_corr, _ = kendalltau(elo_ranks, power_ranks)

    abs_delta = np.abs(both['delta_rank'].astype(float))

    def top_k_overlap(k: int) -> float:
        k = min(k, len(both))
        elo_top = set(both.nsmallest(k, 'elo_rank')['team_id'])
        power_top = set(both.assign(_pr=power_ranks).nsmallest(k, '_pr')['team_id'])
        return len(elo_top & power_top) / k

    summary.update({
        'spearman_correlation': _finite_or_none(spearman_corr),
        'kendall_correlation': _finite_or_none(kendall_corr),
        'median_abs_delta': float(abs_delta.median()),
        'max_abs_delta': float(abs_delta.max()),
        'top5_overlap': top_k_overlap(5),
        'top10_overlap': top_k_overlap(10),
    })
    return summary
