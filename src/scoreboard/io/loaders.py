#!/usr/bin/env python3
"""
Snapshot loading for the PowerRank engine.

Reads the exported standings snapshot (groups with their table and match log)
and the optional Elo table, maps the camelCase export keys onto the engine's
snake_case columns and validates everything against the standings schemas.
"""

import json
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union
import logging

from scoreboard.schema.standings_schema import (
    validate_matches_dataframe, validate_teams_dataframe, validate_elo_dataframe
)

logger = logging.getLogger(__name__)

TEAM_COLUMN_MAPPING = {
    'teamId': 'team_id',
    'teamName': 'team_name',
    'groupId': 'group_id',
    'groupName': 'group_name',
    'goalsFor': 'goals_for',
    'goalsAgainst': 'goals_against',
    'goalDiff': 'goal_diff',
    'logoUrl': 'logo_url',
}

MATCH_COLUMN_MAPPING = {
    'id': 'match_id',
    'groupId': 'group_id',
    'homeTeamId': 'home_team_id',
    'homeTeam': 'home_team',
    'awayTeamId': 'away_team_id',
    'awayTeam': 'away_team',
    'homeScore': 'home_score',
    'awayScore': 'away_score',
    'matchDate': 'match_date',
    'matchdayTag': 'matchday_tag',
}

TEAM_REQUIRED = ['team_id', 'team_name', 'group_id', 'games', 'wins', 'draws',
                 'losses', 'goals_for', 'goals_against', 'points']
MATCH_REQUIRED = ['match_id', 'group_id', 'home_team_id', 'away_team_id',
                  'home_score', 'away_score', 'status']


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _rename(df: pd.DataFrame, mapping: Dict[str, str]) -> pd.DataFrame:
    return df.rename(columns={old: new for old, new in mapping.items() if old in df.columns})


def _require(df: pd.DataFrame, required: List[str], label: str) -> None:
    missing_cols = [col for col in required if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Missing required {label} columns: {missing_cols}")


def teams_from_records(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build a validated team table from exported team records.
    """
    df = _rename(pd.DataFrame(records), TEAM_COLUMN_MAPPING)
    if df.empty:
        return pd.DataFrame(columns=TEAM_REQUIRED + ['group_name'])
    _require(df, TEAM_REQUIRED, 'team')
    if 'group_name' not in df.columns:
        df['group_name'] = df['group_id']
    df['team_id'] = df['team_id'].astype(str).str.strip()
    return validate_teams_dataframe(df)


def matches_from_records(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build a validated match table from exported match records.
    """
    df = _rename(pd.DataFrame(records), MATCH_COLUMN_MAPPING)
    if df.empty:
        return pd.DataFrame(columns=MATCH_REQUIRED + ['matchday_tag', 'match_date'])
    _require(df, MATCH_REQUIRED, 'match')
    for col in ['matchday_tag', 'match_date']:
        if col not in df.columns:
            df[col] = ''
        df[col] = df[col].fillna('').astype(str)
    for col in ['home_team_id', 'away_team_id']:
        df[col] = df[col].astype(str).str.strip()
    return validate_matches_dataframe(df)


def load_snapshot(path: Union[str, Path]) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Load a standings snapshot.

    The file holds {"groups": [{"id", "name", "teams": [...], "matches": [...]}]}.
    Group id and name are filled into team and match rows that lack them.

    Args:
        path: Snapshot JSON file

    Returns:
        Tuple of (teams, matches) DataFrames
    """
    payload = _read_json(path)
    groups = payload.get('groups', []) if isinstance(payload, dict) else []
    if not groups:
        raise ValueError(f"No groups found in snapshot {path}")

    team_records = []
    match_records = []
    for group in groups:
        group_id = str(group.get('id', ''))
        group_name = group.get('name', group_id)
        for team in group.get('teams', []):
            team_records.append({'groupId': group_id, 'groupName': group_name, **team})
        for match in group.get('matches', []):
            match_records.append({'groupId': group_id, **match})

    teams = teams_from_records(team_records)
    matches = matches_from_records(match_records)

    duplicates = int(matches['match_id'].duplicated().sum()) if not matches.empty else 0
    if duplicates:
        logger.warning(f"Dropped {duplicates} duplicate match records")
        matches = matches.drop_duplicates(subset=['match_id'])

    logger.info(f"Loaded {len(teams)} teams and {len(matches)} matches "
                f"from {len(groups)} groups ({path})")
    return teams, matches


def load_elo(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load an Elo table.

    Accepts both flat entries ({"teamId", "teamName", "elo", "games"}) and the
    nested export shape ({"team": {...}, "elo", "games"}).
    """
    payload = _read_json(path)
    entries = payload.get('teams', []) if isinstance(payload, dict) else payload

    rows = []
    for entry in entries:
        team = entry.get('team', entry)
        rows.append({
            'team_id': str(team.get('teamId', team.get('team_id', ''))).strip(),
            'team_name': team.get('teamName', team.get('team_name', '')),
            'group_id': team.get('groupId', team.get('group_id')),
            'group_name': team.get('groupName', team.get('group_name')),
            'elo': entry.get('elo', entry.get('rating')),
            'games': entry.get('games', 0),
        })

    df = pd.DataFrame(rows, columns=['team_id', 'team_name', 'group_id', 'group_name', 'elo', 'games'])
    logger.info(f"Loaded {len(df)} Elo entries from {path}")
    if df.empty:
        return df
    return validate_elo_dataframe(df)
