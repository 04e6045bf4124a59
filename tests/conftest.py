#!/usr/bin/env python3
"""
Pytest configuration and fixtures
"""

import json
import pytest
import pandas as pd
import tempfile
import shutil
from pathlib import Path
import sys

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from scoreboard.analytics.power_score import aggregate_team_stats, compute_team_powers


@pytest.fixture
def sample_team_data():
    """Two groups; t6 has not played yet"""
    return {
        'team_id': ['t1', 't2', 't3', 't4', 't5', 't6'],
        'team_name': ['FC Nord', 'SV Sued', 'TSV Ost II', 'TSV Ost', 'FC West', 'zg. Rot-Weiss'],
        'group_id': ['group1', 'group1', 'group1', 'group7', 'group7', 'group7'],
        'group_name': ['Kreisliga 1', 'Kreisliga 1', 'Kreisliga 1', 'Kreisklasse 7', 'Kreisklasse 7', 'Kreisklasse 7'],
        'games': [2, 2, 2, 1, 1, 0],
        'wins': [2, 0, 0, 1, 0, 0],
        'draws': [0, 1, 1, 0, 0, 0],
        'losses': [0, 1, 1, 0, 1, 0],
        'goals_for': [5, 2, 3, 1, 0, 0],
        'goals_against': [1, 5, 4, 0, 1, 0],
        'points': [6, 1, 1, 3, 0, 0]
    }


@pytest.fixture
def sample_teams_df(sample_team_data):
    """Sample team table"""
    return pd.DataFrame(sample_team_data)


@pytest.fixture
def sample_match_data():
    """Match log matching the sample team table; m5 was not played"""
    return {
        'match_id': ['m1', 'm2', 'm3', 'm4', 'm5'],
        'group_id': ['group1', 'group1', 'group1', 'group7', 'group7'],
        'home_team_id': ['t1', 't3', 't2', 't4', 't5'],
        'away_team_id': ['t2', 't1', 't3', 't5', 't4'],
        'home_score': pd.array([3, 1, 2, 1, None], dtype='Int64'),
        'away_score': pd.array([0, 2, 2, 0, None], dtype='Int64'),
        'status': ['played', 'played', 'played', 'played', 'not_played'],
        'matchday_tag': ['1', '2', '3', '1', '2'],
        'match_date': ['2024-09-01', '2024-09-08', '2024-09-15', '2024-09-01', '2024-09-08']
    }


@pytest.fixture
def sample_matches_df(sample_match_data):
    """Sample match records"""
    return pd.DataFrame(sample_match_data)


@pytest.fixture
def sample_elo_df():
    """Elo table; t9 has no Power ranking and t6 is inactive"""
    return pd.DataFrame({
        'team_id': ['t1', 't2', 't3', 't4', 't5', 't6', 't9'],
        'team_name': ['FC Nord', 'SV Sued', 'TSV Ost II', 'TSV Ost', 'FC West', 'zg. Rot-Weiss', 'Gast FC'],
        'group_id': ['group1', 'group1', 'group1', 'group7', 'group7', 'group7', None],
        'group_name': ['Kreisliga 1', 'Kreisliga 1', 'Kreisliga 1', 'Kreisklasse 7', 'Kreisklasse 7', 'Kreisklasse 7', None],
        'elo': [1550.0, 1480.0, 1490.0, 1530.0, 1470.0, 1500.0, 1400.0],
        'games': [2, 2, 2, 1, 1, 0, 3]
    })


@pytest.fixture
def sample_team_powers(sample_teams_df, sample_matches_df):
    """Base PowerScores of the sample snapshot"""
    return compute_team_powers(aggregate_team_stats(sample_teams_df, sample_matches_df))


@pytest.fixture
def temp_data_dir():
    """Temporary directory for test data"""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_snapshot_file(temp_data_dir, sample_team_data, sample_match_data):
    """Snapshot JSON in the exporter's camelCase layout"""
    groups = []
    for group_id, group_name in [('group1', 'Kreisliga 1'), ('group7', 'Kreisklasse 7')]:
        teams = []
        for i, team_group in enumerate(sample_team_data['group_id']):
            if team_group != group_id:
                continue
            teams.append({
                'teamId': sample_team_data['team_id'][i],
                'teamName': sample_team_data['team_name'][i],
                'games': sample_team_data['games'][i],
                'wins': sample_team_data['wins'][i],
                'draws': sample_team_data['draws'][i],
                'losses': sample_team_data['losses'][i],
                'goalsFor': sample_team_data['goals_for'][i],
                'goalsAgainst': sample_team_data['goals_against'][i],
                'points': sample_team_data['points'][i]
            })
        matches = []
        for i, match_group in enumerate(sample_match_data['group_id']):
            if match_group != group_id:
                continue
            home_score = sample_match_data['home_score'][i]
            away_score = sample_match_data['away_score'][i]
            matches.append({
                'id': sample_match_data['match_id'][i],
                'homeTeamId': sample_match_data['home_team_id'][i],
                'awayTeamId': sample_match_data['away_team_id'][i],
                'homeScore': None if pd.isna(home_score) else int(home_score),
                'awayScore': None if pd.isna(away_score) else int(away_score),
                'status': sample_match_data['status'][i],
                'matchdayTag': sample_match_data['matchday_tag'][i],
                'matchDate': sample_match_data['match_date'][i]
            })
        groups.append({'id': group_id, 'name': group_name, 'teams': teams, 'matches': matches})

    file_path = temp_data_dir / 'snapshot.json'
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump({'groups': groups}, f)
    return file_path


@pytest.fixture
def sample_elo_file(temp_data_dir, sample_elo_df):
    """Elo JSON in the nested export layout"""
    entries = []
    for _, row in sample_elo_df.iterrows():
        entries.append({
            'team': {
                'teamId': row['team_id'],
                'teamName': row['team_name'],
                'groupId': row['group_id'],
                'groupName': row['group_name']
            },
            'elo': row['elo'],
            'games': int(row['games'])
        })

    file_path = temp_data_dir / 'elo.json'
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump({'teams': entries}, f)
    return file_path
