#!/usr/bin/env python3
"""
Standings Schema Definition

Defines the canonical schemas for match records, team season tables and the
external Elo table using Pandera. Inputs are validated once at the boundary so
the ranking engine can rely on column presence and types.
"""

import pandera as pa
from pandera.typing import Series, DataFrame
from typing import Optional
import pandas as pd
import logging

logger = logging.getLogger(__name__)

MATCH_STATUSES = ["played", "not_played"]


class MatchRecordSchema(pa.DataFrameModel):
    """
    Pandera schema for match records.

    Played matches must carry both scores; matches that were not played
    (forfeits, cancellations) may leave them empty.
    """

    match_id: Series[str] = pa.Field(
        description="Match identifier"
    )

    group_id: Series[str] = pa.Field(
        description="Group the match belongs to"
    )

    home_team_id: Series[str] = pa.Field(
        description="Home team identifier"
    )

    away_team_id: Series[str] = pa.Field(
        description="Away team identifier"
    )

    home_score: Series[pd.Int64Dtype] = pa.Field(
        description="Goals scored by the home team",
        nullable=True,
        ge=0
    )

    away_score: Series[pd.Int64Dtype] = pa.Field(
        description="Goals scored by the away team",
        nullable=True,
        ge=0
    )

    status: Series[str] = pa.Field(
        description="Match status",
        isin=MATCH_STATUSES
    )

    matchday_tag: Optional[Series[str]] = pa.Field(
        description="Matchday tag, numeric-ish string",
        nullable=True
    )

    match_date: Optional[Series[str]] = pa.Field(
        description="Sortable match date string",
        nullable=True
    )

    class Config:
        """Pandera configuration."""
        coerce = True
        strict = False

    @pa.dataframe_check
    def played_matches_have_scores(cls, df: DataFrame) -> Series[bool]:
        """Played matches need both scores."""
        played = df["status"] == "played"
        return ~played | (df["home_score"].notna() & df["away_score"].notna())


class TeamSeasonStatsSchema(pa.DataFrameModel):
    """
    Pandera schema for the per-team season table.
    """

    team_id: Series[str] = pa.Field(
        description="Team identifier"
    )

    team_name: Series[str] = pa.Field(
        description="Team display name"
    )

    group_id: Series[str] = pa.Field(
        description="Group identifier"
    )

    group_name: Optional[Series[str]] = pa.Field(
        description="Group display name",
        nullable=True
    )

    games: Series[int] = pa.Field(ge=0, description="Games played")
    wins: Series[int] = pa.Field(ge=0, description="Wins")
    draws: Series[int] = pa.Field(ge=0, description="Draws")
    losses: Series[int] = pa.Field(ge=0, description="Losses")
    goals_for: Series[int] = pa.Field(ge=0, description="Goals scored")
    goals_against: Series[int] = pa.Field(ge=0, description="Goals conceded")
    points: Series[int] = pa.Field(description="Table points")

    class Config:
        """Pandera configuration."""
        coerce = True
        strict = False

    @pa.dataframe_check
    def results_add_up(cls, df: DataFrame) -> Series[bool]:
        """Wins, draws and losses never exceed games played."""
        return (df["wins"] + df["draws"] + df["losses"]) <= df["games"]


class EloEntrySchema(pa.DataFrameModel):
    """
    Pandera schema for the externally computed Elo table.
    """

    team_id: Series[str] = pa.Field(description="Team identifier")
    team_name: Series[str] = pa.Field(description="Team display name")
    elo: Series[float] = pa.Field(description="Elo rating")
    games: Series[int] = pa.Field(ge=0, description="Games counted by the rating")

    class Config:
        """Pandera configuration."""
        coerce = True
        strict = False


def _validate(df, schema, label: str):
    try:
        return schema.validate(df)
    except (pa.errors.SchemaError, pa.errors.SchemaErrors) as e:
        logger.error(f"{label} schema validation failed: {e}")
        logger.debug(f"DataFrame shape: {df.shape}")
        logger.debug(f"DataFrame columns: {list(df.columns)}")
        logger.debug(f"DataFrame dtypes:\n{df.dtypes}")

        if hasattr(e, 'failure_cases') and e.failure_cases is not None:
            logger.debug(f"Failure cases:\n{e.failure_cases}")

        raise


def validate_matches_dataframe(df, schema: MatchRecordSchema = MatchRecordSchema):
    """
    Validate a DataFrame against the MatchRecordSchema.

    Args:
        df: pandas DataFrame to validate
        schema: Pandera schema class (default: MatchRecordSchema)

    Returns:
        Validated DataFrame

    Raises:
        pa.errors.SchemaError: If validation fails
    """
    df_clean = df.copy()
    for col in ['home_score', 'away_score']:
        if col in df_clean.columns:
            df_clean[col] = pd.to_numeric(df_clean[col], errors='coerce').astype('Int64')
    return _validate(df_clean, schema, "Match")


def validate_teams_dataframe(df, schema: TeamSeasonStatsSchema = TeamSeasonStatsSchema):
    """
    Validate a DataFrame against the TeamSeasonStatsSchema.
    """
    return _validate(df, schema, "Team")


def validate_elo_dataframe(df, schema: EloEntrySchema = EloEntrySchema):
    """
    Validate a DataFrame against the EloEntrySchema.
    """
    return _validate(df, schema, "Elo")
