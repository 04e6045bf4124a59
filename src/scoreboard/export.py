#!/usr/bin/env python3
"""
Static JSON export for the PowerRank dashboard.

Runs every ranking view against one loaded snapshot and writes the results:

  groups.json                   group summaries (id, name, team count)
  overall.json                  base PowerScore across all groups
  group_<id>.json               base PowerScore per group (group scope)
  matches_<group>_<team>.json   one team's match records, by match id
  enhanced.json                 Enhanced PowerRank with the config used
  compare_elo.json              Power vs Elo delta view (with --elo only)
  trends.json                   per-team running trend series
  recommendations_simple.json   balanced group suggestion

Usage:
    scoreboard-export --input data/snapshot.json --elo data/elo.json \
        --output-dir web/public/data --set decay=0.9 --set sos_k=0.3
"""

import argparse
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from scoreboard.analytics.comparative import (
    compare_power_elo, summarize_agreement, DEFAULT_INACTIVE_MARKER
)
from scoreboard.analytics.config import EnhancedConfig, load_config, parse_override_args
from scoreboard.analytics.connectivity import schedule_connectivity
from scoreboard.analytics.enhanced_engine import run_enhanced_ranking
from scoreboard.analytics.power_score import aggregate_team_stats, compute_team_powers, group_table
from scoreboard.analytics.recommendation import simple_balanced_groups
from scoreboard.analytics.trend import build_all_trends, TREND_METRICS
from scoreboard.io.loaders import load_snapshot, load_elo
from scoreboard.io.safe_write import safe_write_json, verify_file_integrity

logger = logging.getLogger(__name__)

TEAM_VIEW_COLUMNS = ['team_id', 'team_name', 'group_id', 'group_name', 'games', 'wins',
                     'draws', 'losses', 'goals_for', 'goals_against', 'goal_diff', 'points']

OVERALL_COLUMNS = ['overall_rank', 'group_rank'] + TEAM_VIEW_COLUMNS + [
    'overall_offense', 'overall_defense', 'overall_dominance',
    'overall_offense_norm', 'overall_defense_norm', 'overall_dominance_norm',
    'overall_power_score', 'group_power_score',
    'component_id', 'component_size', 'degree'
]

MATCH_VIEW_COLUMNS = ['match_id', 'group_id', 'home_team_id', 'home_team', 'away_team_id',
                      'away_team', 'home_score', 'away_score', 'status', 'matchday_tag', 'match_date']

GROUP_COLUMNS = ['group_rank'] + TEAM_VIEW_COLUMNS + [
    'group_offense', 'group_defense', 'group_dominance',
    'group_offense_norm', 'group_defense_norm', 'group_dominance_norm',
    'group_power_score', 'overall_power_score', 'overall_rank'
]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def group_summaries(team_powers: pd.DataFrame) -> List[Dict[str, Any]]:
    """Id, name and team count of every group, sorted by group id."""
    summaries = []
    for group_id, group_teams in team_powers.groupby('group_id', sort=True):
        summaries.append({
            'id': group_id,
            'name': group_teams['group_name'].iloc[0] if 'group_name' in group_teams.columns else group_id,
            'team_count': len(group_teams),
        })
    return summaries


def team_match_records(matches: pd.DataFrame, team_id: str) -> pd.DataFrame:
    """
    All match records of one team (home or away, any status), by match id.
    """
    columns = [col for col in MATCH_VIEW_COLUMNS if col in matches.columns]
    if matches.empty:
        return pd.DataFrame(columns=columns)
    team_id = str(team_id)
    mask = (matches['home_team_id'].astype(str) == team_id) | (matches['away_team_id'].astype(str) == team_id)
    return matches.loc[mask, columns].sort_values('match_id', kind='mergesort').reset_index(drop=True)


def verify_outputs(written: Dict[str, Dict[str, Any]]) -> None:
    """
    Re-check every written file against the checksum recorded at write time.

    Raises:
        IOError: If a file is missing or its checksum changed
    """
    for name, result in written.items():
        if not verify_file_integrity(result['path'], result['checksum']):
            logger.error(f"Integrity check failed for {name} ({result['path']})")
            raise IOError(f"Integrity check failed for {name}")
    logger.info(f"Verified checksums of {len(written)} files")


def run_export(teams: pd.DataFrame, matches: pd.DataFrame, output_dir: Path,
               config: EnhancedConfig, elo: Optional[pd.DataFrame] = None,
               trend_metric: str = 'power', group_count: Optional[int] = None,
               inactive_marker: str = DEFAULT_INACTIVE_MARKER) -> Dict[str, Dict[str, Any]]:
    """
    Compute every view from one snapshot and write the JSON outputs.

    Args:
        teams: Validated team table
        matches: Validated match records
        output_dir: Destination directory
        config: Enhanced configuration
        elo: Optional Elo table
        trend_metric: Metric copied into each trend point's value
        group_count: Buckets for the group suggestion; number of groups when None
        inactive_marker: Team-name prefix that marks inactive Elo teams

    Returns:
        Mapping of output file name to safe_write_json result
    """
    output_dir = Path(output_dir)
    written: Dict[str, Dict[str, Any]] = {}

    # One snapshot feeds every view
    teams = aggregate_team_stats(teams, matches)
    team_powers = compute_team_powers(teams)
    if team_powers.empty:
        raise ValueError("Snapshot contains no teams")

    connectivity = schedule_connectivity(matches, team_powers['team_id'].astype(str))
    overall = team_powers.merge(connectivity, on='team_id', how='left')
    components = int(connectivity['component_id'].nunique()) if not connectivity.empty else 0
    if components > 1:
        logger.warning(f"Schedule graph has {components} components; "
                       f"cross-group schedule strength is not comparable")

    written['groups.json'] = safe_write_json({
        'generated_at': _utc_now(),
        'groups': group_summaries(team_powers),
    }, output_dir / 'groups.json', logger=logger)

    written['overall.json'] = safe_write_json({
        'generated_at': _utc_now(),
        'team_count': len(overall),
        'components': components,
        'teams': overall[OVERALL_COLUMNS],
    }, output_dir / 'overall.json', logger=logger)

    for group_id in team_powers['group_id'].dropna().unique():
        table = group_table(team_powers, group_id)
        group_name = table['group_name'].iloc[0] if 'group_name' in table.columns else group_id
        name = f"group_{group_id}.json"
        written[name] = safe_write_json({
            'group': {
                'id': group_id,
                'name': group_name,
                'team_count': len(table),
            },
            'teams': table[GROUP_COLUMNS],
        }, output_dir / name, logger=logger)

        for team_id in table['team_id'].astype(str):
            team_matches = team_match_records(matches, team_id)
            match_name = f"matches_{group_id}_{team_id}.json"
            written[match_name] = safe_write_json({
                'group': {'id': group_id, 'name': group_name},
                'team_id': team_id,
                'count': len(team_matches),
                'matches': team_matches,
            }, output_dir / match_name, logger=logger)

    enhanced = run_enhanced_ranking(team_powers, matches, config)
    written['enhanced.json'] = safe_write_json({
        'generated_at': _utc_now(),
        'config': config.to_dict(),
        'teams': enhanced,
    }, output_dir / 'enhanced.json', logger=logger)

    if elo is not None:
        compare = compare_power_elo(team_powers, elo, inactive_marker)
        summary = summarize_agreement(compare)
        logger.info(f"Power vs Elo agreement: {summary}")
        written['compare_elo.json'] = safe_write_json({
            'generated_at': _utc_now(),
            'inactive_marker': inactive_marker,
            'summary': summary,
            'teams': compare,
        }, output_dir / 'compare_elo.json', logger=logger)

    trends = build_all_trends(team_powers, matches, trend_metric)
    written['trends.json'] = safe_write_json({
        'metric': trend_metric,
        'teams': trends,
    }, output_dir / 'trends.json', logger=logger)

    if group_count is None:
        group_count = max(1, int(team_powers['group_id'].nunique()))
    if group_count <= 0:
        group_count = 1
    suggestion = simple_balanced_groups(team_powers, group_count)
    written['recommendations_simple.json'] = safe_write_json({
        'generated_at': _utc_now(),
        'total_teams': len(team_powers),
        'group_count': group_count,
        'groups': [
            {'index': group['index'], 'teams': group['teams'][TEAM_VIEW_COLUMNS + ['overall_rank', 'overall_power_score']]}
            for group in suggestion
        ],
    }, output_dir / 'recommendations_simple.json', logger=logger)

    verify_outputs(written)
    logger.info(f"Export complete: {len(written)} files in {output_dir}")
    return written


def main(argv=None):
    """CLI entry point for the static export."""
    parser = argparse.ArgumentParser(description="PowerRank static JSON export")
    parser.add_argument("--input", type=str, required=True,
                        help="Snapshot JSON with groups, teams and matches")
    parser.add_argument("--elo", type=str, default=None,
                        help="Optional Elo table JSON")
    parser.add_argument("--config", type=str, default=None,
                        help="Enhanced config YAML (packaged defaults when omitted)")
    parser.add_argument("--set", dest="overrides", action="append", default=[],
                        metavar="KEY=VALUE", help="Override one config value")
    parser.add_argument("--output-dir", type=str, default="web/public/data",
                        help="Output directory")
    parser.add_argument("--trend-metric", type=str, default="power", choices=TREND_METRICS,
                        help="Metric copied into trend point values")
    parser.add_argument("--group-count", type=int, default=None,
                        help="Groups for the balanced suggestion (default: number of groups)")
    parser.add_argument("--inactive-marker", type=str, default=DEFAULT_INACTIVE_MARKER,
                        help="Team-name prefix marking inactive Elo teams")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        config = load_config(args.config, parse_override_args(args.overrides))
        logger.info(f"Enhanced config: {config.to_dict()}")

        teams, matches = load_snapshot(args.input)
        elo = load_elo(args.elo) if args.elo else None

        written = run_export(
            teams, matches, Path(args.output_dir), config,
            elo=elo,
            trend_metric=args.trend_metric,
            group_count=args.group_count,
            inactive_marker=args.inactive_marker,
        )

        for name, result in written.items():
            logger.info(f"  {name}: {result['size_bytes']:,} bytes")

    except Exception as e:
        logger.error(f"Export failed: {e}")
        raise


if __name__ == "__main__":
    main()
