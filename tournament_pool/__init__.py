"""Scoring and leaderboard engine for tournament prediction pools."""

__version__ = "1.0.0"
