#!/usr/bin/env python3
"""
Schedule connectivity diagnostics.

Without matches between groups, schedule-based strength cannot be compared
across groups. The opponent graph shows which teams share a connected schedule.
"""

import pandas as pd
import networkx as nx
import logging

logger = logging.getLogger(__name__)

CONNECTIVITY_COLUMNS = ['team_id', 'component_id', 'component_size', 'degree']


def schedule_connectivity(matches: pd.DataFrame, team_ids=None) -> pd.DataFrame:
    """
    Compute opponent-graph components.

    Args:
        matches: Match records; only played matches create edges
        team_ids: Optional teams to include as nodes even without matches

    Returns:
        DataFrame with CONNECTIVITY_COLUMNS, one row per team
    """
    G = nx.Graph()

    for team_id in team_ids if team_ids is not None else []:
        G.add_node(str(team_id))

    if not matches.empty:
        played = matches[matches['status'] == 'played']
        for home_id, away_id in zip(played['home_team_id'], played['away_team_id']):
            if pd.notna(home_id) and pd.notna(away_id):
                G.add_edge(str(home_id), str(away_id))

    # Largest component first; ties by smallest member id
    components = sorted(nx.connected_components(G), key=lambda c: (-len(c), min(c)))

    rows = []
    for component_id, component in enumerate(components):
        for team_id in sorted(component):
            rows.append({
                'team_id': team_id,
                'component_id': component_id,
                'component_size': len(component),
                'degree': G.degree(team_id),
            })

    logger.info(f"Schedule graph: {G.number_of_nodes()} teams, {G.number_of_edges()} pairings, "
                f"{len(components)} components")
    return pd.DataFrame(rows, columns=CONNECTIVITY_COLUMNS)
