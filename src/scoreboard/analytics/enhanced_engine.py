#!/usr/bin/env python3
"""
Enhanced PowerRank Engine

Recency-weighted, goal-difference capped variant of the PowerScore, adjusted
for strength of schedule and a play-strength (group cohort) prior.

Per team the pass runs these layers:
  1. Order played matches by matchday (carry-forward ordinals), date, id
  2. Per-match goals for/against from the team's side, capped goal difference
  3. Recency-weighted means: match i of N weighs decay ** (N - 1 - i)
  4. Min-max normalization across teams with games only
  5. Strength of schedule from opponents' base PowerScores
  6. Play-strength prior from the group number
  7. Weight renormalization
  8. Combination into the enhanced score
  9. Ranking

The whole table is recomputed from scratch on every call.
"""

import math
import re
import pandas as pd
import numpy as np
from typing import Dict, Iterable, Optional
import logging

from scoreboard.analytics.config import EnhancedConfig, sanitize_config
from scoreboard.analytics.matchday import team_match_history
from scoreboard.analytics.power_score import base_power_lookup
from scoreboard.analytics.utils_stats import (
    recency_weights, weighted_mean, cap_goal_diff, clamp, minmax_bounds,
    normalize_to_bounds, NEUTRAL_SCORE
)
from scoreboard.analytics.weights import renormalize_weights, DEFAULT_ENHANCED_WEIGHTS

logger = logging.getLogger(__name__)

PLAY_STRENGTH_FLOOR = 0.5
PLAY_STRENGTH_CEILING = 1.5
WEAK_GROUP_THRESHOLD = 7

_FIRST_INT = re.compile(r'(\d+)')

ENHANCED_COLUMNS = [
    'rank', 'team_id', 'team_name', 'group_id', 'group_name', 'games', 'has_games',
    'offense_raw', 'defense_raw', 'dominance_raw',
    'offense_norm', 'defense_norm', 'dominance_norm',
    'sos_average', 'sos_multiplier', 'play_strength_multiplier',
    'base_power', 'enhanced_base', 'enhanced_power'
]


def group_number(group_id) -> Optional[int]:
    """
    Extract the first integer from a group identifier ("group7" -> 7).
    """
    if group_id is None:
        return None
    match = _FIRST_INT.search(str(group_id))
    return int(match.group(1)) if match else None


def play_strength_multiplier(group_id, bonus: float, penalty: float) -> float:
    """
    Cohort prior keyed by group number.

    Group 1 gets 1 + bonus, groups >= 7 get 1 - penalty, all others 1.0.
    The result is always clamped to [0.5, 1.5].
    """
    number = group_number(group_id)
    multiplier = 1.0
    if number == 1:
        multiplier = 1.0 + bonus
    elif number is not None and number >= WEAK_GROUP_THRESHOLD:
        multiplier = 1.0 - penalty
    return clamp(multiplier, PLAY_STRENGTH_FLOOR, PLAY_STRENGTH_CEILING)


def strength_of_schedule(opponent_ids: Iterable[str], base_power: Dict[str, float]) -> float:
    """
    Mean base PowerScore of the known opponents.

    Opponents without a known PowerScore are skipped; with no known opponent
    the neutral 0.5 is returned.
    """
    strengths = [base_power[str(opp)] for opp in opponent_ids if str(opp) in base_power]
    strengths = [s for s in strengths if math.isfinite(s)]
    if not strengths:
        return NEUTRAL_SCORE
    return float(np.mean(strengths))


def sos_multiplier(sos_average: float, sos_k: float, clamp_min: float, clamp_max: float) -> float:
    """
    1 + k * (sos_average - 0.5), clamped into the symmetrized clamp bounds.
    """
    lo, hi = min(clamp_min, clamp_max), max(clamp_min, clamp_max)
    return clamp(1.0 + sos_k * (sos_average - NEUTRAL_SCORE), lo, hi)


def recency_aggregate(history: pd.DataFrame, decay: float, goal_diff_cap: int) -> Dict[str, float]:
    """
    Recency-weighted raw metrics for one team's ordered history.

    Args:
        history: Ordered matches (oldest first) with goals_for, goals_against
        decay: Per-match-back decay factor
        goal_diff_cap: Per-match goal difference cap

    Returns:
        Dictionary with offense_raw, defense_raw, dominance_raw
    """
    weights = recency_weights(len(history), decay)
    goal_diff = cap_goal_diff(history['goals_for'] - history['goals_against'], goal_diff_cap)

    return {
        'offense_raw': weighted_mean(history['goals_for'], weights),
        'defense_raw': 1.0 - weighted_mean(history['goals_against'], weights),
        'dominance_raw': weighted_mean(goal_diff, weights),
    }


def run_enhanced_ranking(team_powers: pd.DataFrame, matches: pd.DataFrame,
                         config: EnhancedConfig) -> pd.DataFrame:
    """
    Compute the Enhanced PowerRank table.

    Args:
        team_powers: Output of compute_team_powers (team identity plus
            overall_power_score used as opponent-strength proxy)
        matches: Match records of all teams (one consistent snapshot)
        config: Enhanced configuration

    Returns:
        DataFrame with ENHANCED_COLUMNS in rank order
    """
    cfg = sanitize_config(config)
    if cfg != config:
        logger.warning(f"Config sanitized for engine use: {cfg.to_dict()}")

    if team_powers.empty:
        logger.warning("No teams supplied for enhanced ranking")
        return pd.DataFrame(columns=ENHANCED_COLUMNS)

    base_power = base_power_lookup(team_powers)
    weights = renormalize_weights(cfg.weight_off, cfg.weight_def, cfg.weight_dom,
                                  fallback=DEFAULT_ENHANCED_WEIGHTS)

    # Layers 1-3, 5, 6: per-team pass
    team_data = []
    for _, team in team_powers.iterrows():
        team_id = str(team['team_id'])
        history = team_match_history(matches, team_id)
        n_games = len(history)

        row = {
            'team_id': team_id,
            'team_name': team.get('team_name', team_id),
            'group_id': team.get('group_id'),
            'group_name': team.get('group_name', team.get('group_id')),
            'games': n_games,
            'has_games': n_games > 0,
            'base_power': float(team.get('overall_power_score', 0.0)),
            'play_strength_multiplier': play_strength_multiplier(
                team.get('group_id'), cfg.play_strength_bonus, cfg.play_strength_penalty
            ),
        }

        if n_games:
            row.update(recency_aggregate(history, cfg.decay, cfg.goal_diff_cap))
            row['sos_average'] = strength_of_schedule(history['opponent_id'], base_power)
            row['sos_multiplier'] = sos_multiplier(
                row['sos_average'], cfg.sos_k, cfg.sos_clamp_min, cfg.sos_clamp_max
            )
        else:
            row.update({'offense_raw': 0.0, 'defense_raw': 0.0, 'dominance_raw': 0.0,
                        'sos_average': NEUTRAL_SCORE, 'sos_multiplier': 1.0})

        team_data.append(row)

    result = pd.DataFrame(team_data)
    active = result['has_games']
    logger.info(f"Teams with played matches: {int(active.sum())}/{len(result)}")

    # Layer 4: normalization across teams with games only
    for metric in ['offense', 'defense', 'dominance']:
        lo, hi = minmax_bounds(result.loc[active, f"{metric}_raw"])
        result[f"{metric}_norm"] = [
            normalize_to_bounds(value, lo, hi) if has else NEUTRAL_SCORE
            for value, has in zip(result[f"{metric}_raw"], active)
        ]

    # Layers 7-8: combine
    result['enhanced_base'] = (
        weights.off * result['offense_norm']
        + weights.def_ * result['defense_norm']
        + weights.dom * result['dominance_norm']
    )
    result['enhanced_power'] = (
        result['enhanced_base'] * result['sos_multiplier'] * result['play_strength_multiplier']
    ).where(active, 0.0)

    # Layer 9: ranking
    result['_input_order'] = np.arange(len(result))
    result['_sort_name'] = result['team_name'].astype(str)
    result = result.sort_values(
        ['has_games', 'enhanced_power', 'base_power', '_sort_name', '_input_order'],
        ascending=[False, False, False, True, True]
    )
    result['rank'] = range(1, len(result) + 1)

    if active.any():
        top = result.iloc[0]
        logger.info(f"Enhanced PowerRank complete: {len(result)} teams, "
                    f"top={top['team_name']} ({top['enhanced_power']:.3f})")

    return result[ENHANCED_COLUMNS].reset_index(drop=True)
