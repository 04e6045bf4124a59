#!/usr/bin/env python3
"""
Test suite for the base PowerScore calculator
"""

import pytest
import pandas as pd

from scoreboard.analytics.power_score import (
    compute_raw_metrics, compute_power_metrics, compute_team_powers, rank_teams,
    aggregate_team_stats, base_power_lookup, group_table, prepare_teams
)


class TestRawMetrics:
    """Test cases for offense / defense / dominance"""

    def test_per_game_rates(self):
        """Test the three raw metrics from season totals"""
        teams = prepare_teams(pd.DataFrame({
            'team_id': ['a'], 'games': [4], 'goals_for': [10], 'goals_against': [6]
        }))
        raw = compute_raw_metrics(teams)

        assert raw.loc[0, 'offense'] == pytest.approx(2.5)
        assert raw.loc[0, 'defense'] == pytest.approx(1 - 1.5)
        assert raw.loc[0, 'dominance'] == pytest.approx(1.0)

    def test_zero_games_raw_is_zero(self):
        """Test that a team without games gets 0 raw metrics"""
        teams = prepare_teams(pd.DataFrame({
            'team_id': ['a'], 'games': [0], 'goals_for': [0], 'goals_against': [0]
        }))
        raw = compute_raw_metrics(teams)

        assert raw.loc[0, ['offense', 'defense', 'dominance']].tolist() == [0.0, 0.0, 0.0]
        assert not raw.loc[0, 'has_games']


class TestPowerMetrics:
    """Test cases for normalization and weighting within one population"""

    def test_single_team_population_is_neutral(self):
        """Test that a lone team gets 0.5 everywhere and power 0.5"""
        teams = prepare_teams(pd.DataFrame({
            'team_id': ['a'], 'games': [3], 'goals_for': [4], 'goals_against': [2]
        }))
        metrics = compute_power_metrics(teams)

        assert metrics.loc[0, 'offense_norm'] == 0.5
        assert metrics.loc[0, 'power_score'] == pytest.approx(0.5)

    def test_zero_game_team_excluded_from_bounds(self):
        """Test that zero-game teams do not stretch the bounds"""
        teams = prepare_teams(pd.DataFrame({
            'team_id': ['a', 'b', 'c'],
            'games': [2, 2, 0],
            'goals_for': [4, 2, 0],
            'goals_against': [0, 2, 0]
        }))
        metrics = compute_power_metrics(teams)

        assert metrics.loc[0, 'power_score'] == pytest.approx(1.0)
        assert metrics.loc[1, 'power_score'] == pytest.approx(0.0)
        assert metrics.loc[2, 'offense_norm'] == 0.5
        assert metrics.loc[2, 'power_score'] == 0.0


class TestTeamPowers:
    """Test cases for the two-scope computation on the sample snapshot"""

    def test_overall_order(self, sample_team_powers):
        """Test the overall ranking order"""
        assert sample_team_powers['team_id'].tolist() == ['t1', 't4', 't3', 't5', 't2', 't6']
        assert sample_team_powers['overall_rank'].tolist() == [1, 2, 3, 4, 5, 6]

    def test_overall_scores(self, sample_team_powers):
        """Test overall scores against hand-computed values"""
        scores = dict(zip(sample_team_powers['team_id'], sample_team_powers['overall_power_score']))

        assert scores['t1'] == pytest.approx(0.92)
        assert scores['t4'] == pytest.approx(0.16 + 0.4 + 0.2 * 2.5 / 3.5)
        assert scores['t2'] == pytest.approx(0.16)
        assert scores['t6'] == 0.0

    def test_group_scope(self, sample_team_powers):
        """Test that group scope normalizes within each group only"""
        by_team = sample_team_powers.set_index('team_id')

        assert by_team.loc['t1', 'group_power_score'] == pytest.approx(1.0)
        assert by_team.loc['t2', 'group_power_score'] == pytest.approx(0.0)
        assert by_team.loc['t4', 'group_power_score'] == pytest.approx(1.0)
        assert by_team.loc['t3', 'group_rank'] == 2
        assert by_team.loc['t6', 'group_rank'] == 3

    def test_zero_game_team_ranks_last(self, sample_team_powers):
        """Test that the team without games ranks last in both scopes"""
        last = sample_team_powers.iloc[-1]

        assert last['team_id'] == 't6'
        assert not last['has_games']
        assert last['overall_offense_norm'] == 0.5
        assert last['group_power_score'] == 0.0

    def test_scores_in_unit_interval(self, sample_team_powers):
        for col in ['overall_power_score', 'group_power_score']:
            assert sample_team_powers[col].between(0, 1).all()

    def test_lookup_and_group_table(self, sample_team_powers):
        lookup = base_power_lookup(sample_team_powers)
        table = group_table(sample_team_powers, 'group1')

        assert lookup['t1'] == pytest.approx(0.92)
        assert table['team_id'].tolist() == ['t1', 't3', 't2']

    def test_empty_input(self):
        """Test that no teams give an empty result"""
        assert compute_team_powers(pd.DataFrame(columns=['team_id', 'group_id'])).empty


class TestRanking:
    """Test cases for tie breaking"""

    def test_ties_keep_input_order(self):
        """Test that identical teams keep their input order"""
        df = pd.DataFrame({
            'team_id': ['x', 'y', 'z'],
            'has_games': [True, True, True],
            'power_score': [0.5, 0.5, 0.5],
            'goal_diff': [0, 0, 0],
            'points': [3, 3, 3],
            'goals_for': [2, 2, 2]
        })
        assert rank_teams(df)['team_id'].tolist() == ['x', 'y', 'z']

    def test_tie_breakers(self):
        """Test goal difference, then points, then goals for"""
        df = pd.DataFrame({
            'team_id': ['a', 'b', 'c', 'd'],
            'has_games': [True, True, True, False],
            'power_score': [0.5, 0.5, 0.5, 0.9],
            'goal_diff': [0, 2, 2, 5],
            'points': [9, 3, 4, 0],
            'goals_for': [1, 1, 1, 9]
        })
        ranked = rank_teams(df)

        assert ranked['team_id'].tolist() == ['c', 'b', 'a', 'd']
        assert ranked['rank'].tolist() == [1, 2, 3, 4]


class TestAggregateTeamStats:
    """Test cases for recomputing totals from played matches"""

    def test_totals_from_matches(self, sample_teams_df, sample_matches_df):
        """Test that played matches replace the table totals"""
        blank = sample_teams_df.copy()
        blank[['games', 'wins', 'draws', 'losses', 'goals_for', 'goals_against']] = 0
        updated = aggregate_team_stats(blank, sample_matches_df).set_index('team_id')

        assert updated.loc['t1', 'games'] == 2
        assert updated.loc['t1', 'wins'] == 2
        assert updated.loc['t1', 'goals_for'] == 5
        assert updated.loc['t1', 'goal_diff'] == 4
        assert updated.loc['t2', 'draws'] == 1
        # not_played match m5 is ignored
        assert updated.loc['t5', 'games'] == 1

    def test_teams_without_matches_keep_table(self, sample_teams_df, sample_matches_df):
        """Test that teams without played matches keep their values"""
        table = sample_teams_df.copy()
        table.loc[table['team_id'] == 't6', 'points'] = 7
        updated = aggregate_team_stats(table, sample_matches_df).set_index('team_id')

        assert updated.loc['t6', 'games'] == 0
        assert updated.loc['t6', 'points'] == 7
