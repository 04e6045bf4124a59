#!/usr/bin/env python3
"""
Per-team PowerScore trend series.

Replays a team's played matches in order and emits one point per matchday with
the cumulative-to-date metrics, normalized against fixed global bounds taken
from the final overall table.
"""

import pandas as pd
from typing import Dict, NamedTuple, Tuple
import logging

from scoreboard.analytics.matchday import team_match_history
from scoreboard.analytics.utils_stats import minmax_bounds, normalize_to_bounds
from scoreboard.analytics.weights import BASE_WEIGHTS

logger = logging.getLogger(__name__)

TREND_METRICS = ('power', 'offense', 'defense', 'dominance')

TREND_COLUMNS = ['matchday', 'games', 'offense_norm', 'defense_norm',
                 'dominance_norm', 'power_score', 'value']

_METRIC_COLUMN = {
    'power': 'power_score',
    'offense': 'offense_norm',
    'defense': 'defense_norm',
    'dominance': 'dominance_norm',
}


class MetricBounds(NamedTuple):
    offense: Tuple[float, float]
    defense: Tuple[float, float]
    dominance: Tuple[float, float]


def global_metric_bounds(team_powers: pd.DataFrame) -> MetricBounds:
    """
    Min/max of the final overall raw metrics across teams with games.

    Computed once per pass and shared by every team's series.
    """
    if team_powers.empty:
        nan_pair = (float('nan'), float('nan'))
        return MetricBounds(nan_pair, nan_pair, nan_pair)

    active = team_powers[team_powers['has_games']]
    return MetricBounds(
        offense=minmax_bounds(active['overall_offense']),
        defense=minmax_bounds(active['overall_defense']),
        dominance=minmax_bounds(active['overall_dominance']),
    )


def build_trend_series(matches: pd.DataFrame, team_id: str, bounds: MetricBounds,
                       metric: str = 'power') -> pd.DataFrame:
    """
    Build the running trend series of one team.

    Args:
        matches: Match records of all teams
        team_id: Team to replay
        bounds: Fixed global bounds from global_metric_bounds
        metric: Metric copied into the value column
            ('power', 'offense', 'defense', 'dominance')

    Returns:
        DataFrame with TREND_COLUMNS, one row per played match in order

    Raises:
        ValueError: If metric is not one of TREND_METRICS. This is a caller
            error; match data never raises.
    """
    if metric not in _METRIC_COLUMN:
        raise ValueError(f"Unknown trend metric: {metric!r} (expected one of {TREND_METRICS})")

    history = team_match_history(matches, team_id)

    points = []
    games = 0
    goals_for = 0
    goals_against = 0
    for _, match in history.iterrows():
        games += 1
        goals_for += int(match['goals_for'])
        goals_against += int(match['goals_against'])

        offense_norm = normalize_to_bounds(goals_for / games, *bounds.offense)
        defense_norm = normalize_to_bounds(1 - goals_against / games, *bounds.defense)
        dominance_norm = normalize_to_bounds((goals_for - goals_against) / games, *bounds.dominance)
        power = (
            BASE_WEIGHTS.off * offense_norm
            + BASE_WEIGHTS.def_ * defense_norm
            + BASE_WEIGHTS.dom * dominance_norm
        )

        points.append({
            'matchday': int(match['matchday']),
            'games': games,
            'offense_norm': offense_norm,
            'defense_norm': defense_norm,
            'dominance_norm': dominance_norm,
            'power_score': power,
        })

    series = pd.DataFrame(points, columns=TREND_COLUMNS[:-1])
    series['value'] = series[_METRIC_COLUMN[metric]]
    return series


def build_all_trends(team_powers: pd.DataFrame, matches: pd.DataFrame,
                     metric: str = 'power') -> Dict[str, pd.DataFrame]:
    """
    Build trend series for every team against one shared set of bounds.
    """
    bounds = global_metric_bounds(team_powers)
    logger.info(f"Trend bounds: offense={bounds.offense} defense={bounds.defense} "
                f"dominance={bounds.dominance}")

    trends = {}
    for team_id in team_powers['team_id'].astype(str):
        trends[team_id] = build_trend_series(matches, team_id, bounds, metric)
    return trends
