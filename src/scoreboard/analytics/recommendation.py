#!/usr/bin/env python3
"""
Balanced group suggestion from the overall Power order.

Splits the ranked teams into equally sized buckets and keeps teams of the same
club apart where possible.
"""

import pandas as pd
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

ROMAN_SUFFIXES = {'i', 'ii', 'iii', 'iv', 'v', 'vi', 'vii', 'viii', 'ix', 'x'}


def base_club_key(team_name) -> str:
    """
    Club key of a team name: lowercased, trailing roman numerals and
    integers stripped ("TSV Wolfsanger II" -> "tsv wolfsanger").
    """
    lower = str(team_name or '').strip().lower()
    if not lower:
        return ''
    tokens = lower.split()
    while len(tokens) > 1 and (tokens[-1] in ROMAN_SUFFIXES or tokens[-1].isdigit()):
        tokens = tokens[:-1]
    return ' '.join(tokens)


def target_group_sizes(total: int, group_count: int) -> List[int]:
    """Even sizes with the remainder going to the first groups."""
    base, remainder = divmod(total, group_count)
    return [base + 1 if i < remainder else base for i in range(group_count)]


def simple_balanced_groups(ranked_teams: pd.DataFrame, group_count: int) -> List[Dict[str, Any]]:
    """
    Assign ranked teams to group_count buckets.

    Each team goes to the first bucket that is not full and holds no team of
    the same club; if every open bucket already has its club, to the first
    open bucket.

    Args:
        ranked_teams: Teams in rank order (team_id, team_name, ...)
        group_count: Number of buckets; values <= 0 mean one bucket

    Returns:
        List of {'index': 1-based bucket number, 'teams': DataFrame}
    """
    if group_count <= 0:
        group_count = 1

    sizes = target_group_sizes(len(ranked_teams), group_count)
    assignments: List[List[int]] = [[] for _ in range(group_count)]
    club_sets: List[set] = [set() for _ in range(group_count)]

    for pos, team_name in enumerate(ranked_teams['team_name']):
        key = base_club_key(team_name)
        open_groups = [i for i in range(group_count) if len(assignments[i]) < sizes[i]]
        target = next((i for i in open_groups if not key or key not in club_sets[i]), None)
        if target is None:
            target = open_groups[0]
            logger.debug(f"No club-free group left for {team_name}, using group {target + 1}")
        assignments[target].append(pos)
        if key:
            club_sets[target].add(key)

    groups = []
    for i, positions in enumerate(assignments):
        groups.append({
            'index': i + 1,
            'teams': ranked_teams.iloc[positions].reset_index(drop=True),
        })

    logger.info(f"Suggested {group_count} groups for {len(ranked_teams)} teams "
                f"(sizes {[len(a) for a in assignments]})")
    return groups
