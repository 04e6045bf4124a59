#!/usr/bin/env python3
"""
Per-team match history ordering.

Turns the raw match log into one team's chronological list of played matches,
seen from that team's side, with a resolved matchday ordinal for every match.
"""

import math
import re
import pandas as pd
from typing import Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*\+?(\d+)')

TEAM_MATCH_COLUMNS = [
    'match_id', 'matchday', 'matchday_tag', 'match_date', 'is_home',
    'opponent_id', 'goals_for', 'goals_against'
]


def parse_matchday_tag(tag) -> Optional[int]:
    """
    Parse a matchday tag like "7" or "7. Spieltag" into a positive integer.

    Returns None for missing, non-numeric or non-positive tags.
    """
    if tag is None:
        return None
    if isinstance(tag, (int, float)) and not isinstance(tag, bool):
        if not math.isfinite(tag) or int(tag) <= 0:
            return None
        return int(tag)

    match = _LEADING_INT.match(str(tag))
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


def resolve_matchdays(tags: Iterable) -> List[int]:
    """
    Resolve matchday ordinals for tags in chronological order.

    Folds over the sequence threading the last resolved ordinal: a parseable
    tag becomes the new ordinal, an unparseable one gets last + 1.

    Args:
        tags: Raw matchday tags, oldest first

    Returns:
        One ordinal per tag
    """
    ordinals = []
    last = 0
    for tag in tags:
        parsed = parse_matchday_tag(tag)
        last = parsed if parsed is not None else last + 1
        ordinals.append(last)
    return ordinals


def _text_column(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series('', index=df.index, dtype=object)
    return df[col].fillna('').astype(str)


def team_match_history(matches: pd.DataFrame, team_id: str) -> pd.DataFrame:
    """
    Build one team's ordered history of played matches.

    Matches are first put in (match_date, match_id) order to resolve the
    matchday ordinals, then sorted by (matchday, match_date, match_id).

    Args:
        matches: Match records of all teams
        team_id: Team whose history is built

    Returns:
        DataFrame with TEAM_MATCH_COLUMNS, oldest match first
    """
    if matches.empty:
        return pd.DataFrame(columns=TEAM_MATCH_COLUMNS)

    team_id = str(team_id)
    home_ids = matches['home_team_id'].astype(str)
    away_ids = matches['away_team_id'].astype(str)
    mask = (matches['status'] == 'played') & ((home_ids == team_id) | (away_ids == team_id))
    played = matches[mask]
    if played.empty:
        return pd.DataFrame(columns=TEAM_MATCH_COLUMNS)

    is_home = home_ids[mask] == team_id
    home_score = played['home_score'].astype(int)
    away_score = played['away_score'].astype(int)

    history = pd.DataFrame({
        'match_id': _text_column(played, 'match_id'),
        'matchday_tag': played['matchday_tag'] if 'matchday_tag' in played.columns else None,
        'match_date': _text_column(played, 'match_date'),
        'is_home': is_home,
        'opponent_id': away_ids[mask].where(is_home, home_ids[mask]),
        'goals_for': home_score.where(is_home, away_score),
        'goals_against': away_score.where(is_home, home_score),
    })

    history = history.sort_values(['match_date', 'match_id'])
    history['matchday'] = resolve_matchdays(history['matchday_tag'].tolist())
    history = history.sort_values(['matchday', 'match_date', 'match_id'])

    return history[TEAM_MATCH_COLUMNS].reset_index(drop=True)
