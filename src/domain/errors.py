"""Exceptions raised by the leaderboard pipeline and ranking tables."""

from __future__ import annotations


class LeaderboardError(Exception):
    """Base exception for leaderboard and ranking errors."""


class ConfigurationError(LeaderboardError, ValueError):
    """Raised when a static reference table is invalid or out of sync with the data."""


class InvalidArgumentError(LeaderboardError, ValueError):
    """Raised when a caller passes an argument that breaks the pipeline contract."""


__all__ = ["ConfigurationError", "InvalidArgumentError", "LeaderboardError"]
