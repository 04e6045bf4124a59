"""
PowerRank: strength rankings for youth league teams.

Base PowerScore, Enhanced PowerRank, Power vs Elo comparison and trend series
computed from one snapshot of group tables and match results.
"""

__version__ = "0.1.0"
