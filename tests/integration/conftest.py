"""
Fixtures for API tests: in-memory repositories plugged in through
app.dependency_overrides, so no MongoDB is needed.
"""

import pytest
from datetime import datetime, timezone
from httpx import ASGITransport, AsyncClient

from pickem.core.dependencies import (
    get_achievement_repository,
    get_game_repository,
    get_league_repository,
    get_profile_repository,
)
from pickem.main import app
from pickem.models.game import GameOutcome
from pickem.models.league import League, LeagueSettings


class InMemoryGames:
    def __init__(self, outcomes):
        self.outcomes = {outcome.game_id: outcome for outcome in outcomes}

    async def get_outcomes(self, game_ids):
        return {gid: self.outcomes[gid] for gid in game_ids if gid in self.outcomes}


class InMemoryLeagues:
    def __init__(self, leagues):
        self.leagues = list(leagues)

    async def get_by_code(self, code):
        return next((league for league in self.leagues if league.code == code), None)

    async def get_for_member(self, user_id):
        return [league for league in self.leagues if user_id in league.members]


class InMemoryProfiles:
    def __init__(self, labels):
        self.labels = dict(labels)

    async def get_labels(self, user_ids):
        return {uid: self.labels[uid] for uid in user_ids if uid in self.labels}


class InMemoryAchievements:
    def __init__(self):
        self.unlocked = {}

    async def get_unlocked(self, user_id):
        return set(self.unlocked.get(user_id, set()))

    async def add_unlocked(self, user_id, achievement_ids):
        self.unlocked.setdefault(user_id, set()).update(achievement_ids)


def _outcome(game_id, home_score, away_score, week=6):
    return GameOutcome(
        game_id=game_id,
        home_team="KC",
        away_team="BUF",
        home_score=home_score,
        away_score=away_score,
        home_spread=-3,
        away_spread=3,
        over_under=47,
        is_final=True,
        finalized_at=datetime(2025, 10, 12, 23, 0, tzinfo=timezone.utc),
        week=week,
    )


@pytest.fixture
def store():
    return InMemoryAchievements()


@pytest.fixture
def repositories(store):
    """
    League SUNDAY: alice took KC -3 and the under, bob took BUF +3.
    Game_1 ends KC 20 - BUF 14.
    """
    sunday = League(
        code="SUNDAY",
        name="Sunday Crew",
        members=["alice", "bob"],
        picks={
            "alice": {"game_1": {"spread": "KC", "total": "under", "confidence": 3}},
            "bob": {"game_1": {"spread": "BUF"}},
        },
        settings=LeagueSettings(tiebreaker="headToHead"),
    )
    return {
        "games": InMemoryGames([_outcome("game_1", 20, 14)]),
        "leagues": InMemoryLeagues([sunday]),
        "profiles": InMemoryProfiles({"alice": "Alice"}),
        "achievements": store,
    }


@pytest.fixture
async def client(repositories):
    app.dependency_overrides[get_game_repository] = lambda: repositories["games"]
    app.dependency_overrides[get_league_repository] = lambda: repositories["leagues"]
    app.dependency_overrides[get_profile_repository] = lambda: repositories["profiles"]
    app.dependency_overrides[get_achievement_repository] = lambda: repositories["achievements"]

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
