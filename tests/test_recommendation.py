#!/usr/bin/env python3
"""
Test suite for balanced group suggestions
"""

import pytest
import pandas as pd

from scoreboard.analytics.recommendation import base_club_key, target_group_sizes, simple_balanced_groups


class TestBaseClubKey:
    """Test cases for base_club_key"""

    @pytest.mark.parametrize("name,expected", [
        ("TSV Ost II", "tsv ost"),
        ("TSV Ost", "tsv ost"),
        ("FC Nord 2", "fc nord"),
        ("1. FC Kassel", "1. fc kassel"),
        ("  SV Sued III ", "sv sued"),
        ("", ""),
        (None, ""),
    ])
    def test_key(self, name, expected):
        assert base_club_key(name) == expected


class TestSimpleBalancedGroups:
    """Test cases for simple_balanced_groups"""

    def test_sizes(self):
        assert target_group_sizes(7, 3) == [3, 2, 2]

    def test_clubs_kept_apart(self):
        """Test that a second team of the same club goes to another group"""
        ranked = pd.DataFrame({
            'team_id': ['a', 'b', 'c', 'd'],
            'team_name': ['TSV Ost', 'TSV Ost II', 'FC Nord', 'SV Sued']
        })
        groups = simple_balanced_groups(ranked, 2)

        assert [g['index'] for g in groups] == [1, 2]
        assert groups[0]['teams']['team_id'].tolist() == ['a', 'c']
        assert groups[1]['teams']['team_id'].tolist() == ['b', 'd']

    def test_falls_back_when_every_group_has_club(self):
        ranked = pd.DataFrame({
            'team_id': ['a', 'b', 'c'],
            'team_name': ['TSV Ost', 'TSV Ost II', 'TSV Ost III']
        })
        groups = simple_balanced_groups(ranked, 2)

        assert groups[0]['teams']['team_id'].tolist() == ['a', 'c']
        assert groups[1]['teams']['team_id'].tolist() == ['b']

    def test_non_positive_group_count(self, sample_team_powers):
        """Test that group_count <= 0 puts everyone into one group"""
        groups = simple_balanced_groups(sample_team_powers, 0)

        assert len(groups) == 1
        assert len(groups[0]['teams']) == len(sample_team_powers)

    def test_every_team_assigned_once(self, sample_team_powers):
        groups = simple_balanced_groups(sample_team_powers, 4)
        assigned = [tid for g in groups for tid in g['teams']['team_id']]

        assert sorted(assigned) == sorted(sample_team_powers['team_id'])
        assert [len(g['teams']) for g in groups] == [2, 2, 1, 1]
