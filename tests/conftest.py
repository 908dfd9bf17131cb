"""
Pytest fixtures and configuration for all tests.
"""

import pytest
from datetime import datetime, timezone

from pickem.models.game import GameOutcome
from pickem.models.league import League, LeagueSettings
from pickem.models.pick import Pick


@pytest.fixture
def now():
    """Fixed 'now' so time windows are deterministic."""
    return datetime(2025, 10, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_outcome():
    """Factory for finalized games (home 20 - away 14 by default)."""
    def _make(**overrides):
        data = {
            "game_id": "game_1",
            "home_team": "KC",
            "away_team": "BUF",
            "home_score": 20,
            "away_score": 14,
            "home_spread": -3,
            "away_spread": 3,
            "over_under": 47,
            "is_final": True,
            "finalized_at": datetime(2025, 10, 12, 23, 0, tzinfo=timezone.utc),
            "week": 6,
        }
        data.update(overrides)
        return GameOutcome(**data)

    return _make


@pytest.fixture
def make_pick():
    def _make(**fields):
        return Pick(**fields)

    return _make


@pytest.fixture
def make_league():
    """Factory for leagues: picks as {user_id: {game_id: dict | Pick}}."""
    def _make(code="LEAGUE1", members=None, picks=None, tiebreaker="totalPoints", **extra):
        picks = picks or {}
        return League(
            code=code,
            name=f"League {code}",
            members=members if members is not None else list(picks.keys()),
            picks=picks,
            settings=LeagueSettings(tiebreaker=tiebreaker),
            **extra,
        )

    return _make


@pytest.fixture
def sample_outcome(make_outcome):
    """KC -3 at home beats BUF 20-14; total line 47 (34 combined)."""
    return make_outcome()
