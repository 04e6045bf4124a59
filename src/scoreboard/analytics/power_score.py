#!/usr/bin/env python3
"""
Base PowerScore calculation.

Computes offense / defense / dominance per team from season totals, min-max
normalizes them within a comparison population and combines them with the
canonical base weights. Two scopes are always computed: "group" (teams of the
same group) and "overall" (every team).
"""

import pandas as pd
import numpy as np
from typing import Dict
import logging

from scoreboard.analytics.utils_stats import minmax_normalize, NEUTRAL_SCORE
from scoreboard.analytics.weights import BASE_WEIGHTS

logger = logging.getLogger(__name__)

METRICS = ['offense', 'defense', 'dominance']
NORM_METRICS = [f"{m}_norm" for m in METRICS]
POWER_COLUMNS = METRICS + NORM_METRICS + ['power_score']

TEAM_STAT_COLUMNS = ['games', 'wins', 'draws', 'losses', 'goals_for', 'goals_against', 'points']


def prepare_teams(teams: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy of the team table with numeric stats and goal_diff filled in.
    """
    df = teams.copy()
    for col in TEAM_STAT_COLUMNS:
        if col not in df.columns:
            df[col] = 0
        df[col] = pd.to_numeric(df[col], errors='coerce').fillna(0).astype(int)
    df['goal_diff'] = df['goals_for'] - df['goals_against']
    return df


def compute_raw_metrics(teams: pd.DataFrame) -> pd.DataFrame:
    """
    Compute raw offense/defense/dominance from season totals.

    Teams with games == 0 get 0.0 for all three raw metrics.

    Args:
        teams: Team table with games, goals_for, goals_against

    Returns:
        DataFrame indexed like teams with offense, defense, dominance, has_games
    """
    games = teams['games'].astype(float)
    has_games = games > 0
    safe_games = games.where(has_games, 1.0)

    raw = pd.DataFrame(index=teams.index)
    raw['offense'] = (teams['goals_for'] / safe_games).where(has_games, 0.0)
    raw['defense'] = (1 - teams['goals_against'] / safe_games).where(has_games, 0.0)
    raw['dominance'] = ((teams['goals_for'] - teams['goals_against']) / safe_games).where(has_games, 0.0)
    raw['has_games'] = has_games
    return raw


def compute_power_metrics(teams: pd.DataFrame) -> pd.DataFrame:
    """
    Compute the PowerScore of every team within one comparison population.

    Zero-game teams are excluded from the min/max bounds, receive the neutral
    0.5 for every normalized metric and a power_score of 0.

    Args:
        teams: Teams forming the population (already prepared)

    Returns:
        DataFrame indexed like teams with raw, normalized and power_score columns
    """
    metrics = compute_raw_metrics(teams)
    if metrics.empty:
        for col in NORM_METRICS + ['power_score']:
            metrics[col] = pd.Series(dtype=float)
        return metrics

    active = metrics['has_games']
    for metric in METRICS:
        norm = minmax_normalize(metrics.loc[active, metric])
        metrics[f"{metric}_norm"] = norm.reindex(metrics.index).fillna(NEUTRAL_SCORE)

    score = (
        BASE_WEIGHTS.off * metrics['offense_norm']
        + BASE_WEIGHTS.def_ * metrics['defense_norm']
        + BASE_WEIGHTS.dom * metrics['dominance_norm']
    )
    metrics['power_score'] = score.where(active, 0.0)
    return metrics


def rank_teams(df: pd.DataFrame, score_col: str = 'power_score',
               rank_col: str = 'rank') -> pd.DataFrame:
    """
    Sort teams into the canonical PowerScore order and assign 1-based ranks.

    Order: teams with games first, then score desc, goal difference desc,
    points desc, goals for desc. Remaining ties keep input order.

    Args:
        df: Teams with has_games, score_col, goal_diff, points, goals_for
        score_col: Column holding the score to rank by
        rank_col: Name of the rank column to write

    Returns:
        New sorted DataFrame with rank_col
    """
    keys = ['has_games', score_col, 'goal_diff', 'points', 'goals_for']
    ranked = df.copy()
    ranked['_input_order'] = np.arange(len(ranked))
    ranked = ranked.sort_values(
        keys + ['_input_order'],
        ascending=[False] * len(keys) + [True]
    ).drop(columns='_input_order')
    ranked[rank_col] = range(1, len(ranked) + 1)
    return ranked


def compute_team_powers(teams: pd.DataFrame) -> pd.DataFrame:
    """
    Compute group-scope and overall-scope PowerScores for every team.

    Args:
        teams: Full team table across all groups

    Returns:
        Team table with group_* and overall_* metric columns plus
        group_rank and overall_rank, in overall rank order
    """
    df = prepare_teams(teams).reset_index(drop=True)
    if df.empty:
        logger.warning("No teams supplied for PowerScore computation")
        return df

    overall = compute_power_metrics(df)
    for col in POWER_COLUMNS:
        df[f"overall_{col}"] = overall[col]
    df['has_games'] = overall['has_games']

    group_frames = []
    for group_id, group_teams in df.groupby('group_id', sort=False, dropna=False):
        group_metrics = compute_power_metrics(group_teams)
        group_frames.append(group_metrics[POWER_COLUMNS].add_prefix('group_'))
        logger.debug(f"Group {group_id}: {len(group_teams)} teams, "
                     f"{int(group_metrics['has_games'].sum())} with games")
    group_metrics = pd.concat(group_frames).reindex(df.index)
    df = pd.concat([df, group_metrics], axis=1)

    group_ranks = []
    for _, group_teams in df.groupby('group_id', sort=False, dropna=False):
        group_ranks.append(
            rank_teams(group_teams, score_col='group_power_score', rank_col='group_rank')['group_rank']
        )
    df['group_rank'] = pd.concat(group_ranks).reindex(df.index)

    df = rank_teams(df, score_col='overall_power_score', rank_col='overall_rank')
    df['rank'] = df['overall_rank']

    logger.info(f"PowerScore computed for {len(df)} teams in {df['group_id'].nunique()} groups")
    return df.reset_index(drop=True)


def base_power_lookup(team_powers: pd.DataFrame) -> Dict[str, float]:
    """
    Map team_id to overall base PowerScore, for opponent-strength lookups.
    """
    if team_powers.empty:
        return {}
    return dict(zip(team_powers['team_id'].astype(str), team_powers['overall_power_score'].astype(float)))


def group_table(team_powers: pd.DataFrame, group_id: str) -> pd.DataFrame:
    """
    Teams of one group in group-scope rank order.
    """
    group = team_powers[team_powers['group_id'] == group_id]
    return group.sort_values('group_rank').reset_index(drop=True)


def aggregate_team_stats(teams: pd.DataFrame, matches: pd.DataFrame) -> pd.DataFrame:
    """
    Replace table totals with values derived from played matches.

    Teams that appear in at least one played match get games, wins, draws,
    losses, goals_for, goals_against and goal_diff recomputed; other teams
    keep the values from the supplied table. Points are left untouched.

    Args:
        teams: Team table
        matches: Match records (all statuses)

    Returns:
        New team table
    """
    aggregates: Dict[str, Dict[str, int]] = {}

    def _entry(team_id: str) -> Dict[str, int]:
        if team_id not in aggregates:
            aggregates[team_id] = {
                'games': 0, 'wins': 0, 'draws': 0, 'losses': 0,
                'goals_for': 0, 'goals_against': 0
            }
        return aggregates[team_id]

    if not matches.empty:
        played = matches[matches['status'] == 'played']
        for _, match in played.iterrows():
            home = _entry(str(match['home_team_id']).strip())
            away = _entry(str(match['away_team_id']).strip())
            home_score = int(match['home_score'])
            away_score = int(match['away_score'])

            home['games'] += 1
            away['games'] += 1
            home['goals_for'] += home_score
            home['goals_against'] += away_score
            away['goals_for'] += away_score
            away['goals_against'] += home_score

            if home_score > away_score:
                home['wins'] += 1
                away['losses'] += 1
            elif home_score < away_score:
                home['losses'] += 1
                away['wins'] += 1
            else:
                home['draws'] += 1
                away['draws'] += 1

    updated = prepare_teams(teams)
    replaced = 0
    for idx, team_id in updated['team_id'].items():
        agg = aggregates.get(str(team_id).strip())
        if agg is None:
            continue
        for col, value in agg.items():
            updated.at[idx, col] = value
        replaced += 1
    updated['goal_diff'] = updated['goals_for'] - updated['goals_against']

    logger.info(f"Applied match aggregates to {replaced}/{len(updated)} teams")
    return updated
