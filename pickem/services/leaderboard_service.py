"""
LeaderboardService - Builds and ranks leaderboards from picks and results.

Entries are rebuilt from scratch on every request: stats come from the
aggregator (deduplicated across leagues), display labels from profiles,
and the order from the league's tiebreak rule.
"""

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from pymongo.errors import PyMongoError

from pickem.core.config import get_settings
from pickem.models.game import GameOutcome
from pickem.models.leaderboard import Leaderboard, LeaderboardEntry
from pickem.models.league import League
from pickem.models.pick import LegResult
from pickem.models.stats import MarketFilter, TimeWindow
from pickem.repositories.game_repository import GameRepository
from pickem.repositories.league_repository import LeagueRepository
from pickem.repositories.profile_repository import ProfileRepository
from pickem.services.grading_service import effective_timestamp
from pickem.services.stats_service import (
    GradedLeg,
    collect_graded_legs,
    game_ids_for,
    is_within_window,
    summarize_legs,
)
from pickem.services.tiebreakers import TiebreakRule, apply_tiebreaker

logger = logging.getLogger(__name__)


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class LeagueNotFoundError(LeaderboardServiceError):
    """Raised when the league does not exist."""
    pass


def points_from_legs(legs: Iterable[GradedLeg]) -> int:
    """Confidence (or 1) for every game with at least one winning leg."""
    awarded: dict[str, int] = {}
    for leg in legs:
        if leg.result is LegResult.WIN and leg.game_id not in awarded:
            awarded[leg.game_id] = leg.pick.confidence or 1
    return sum(awarded.values())


def count_missed_picks(
    leagues: Iterable[League],
    user_id: str,
    outcomes: Mapping[str, GameOutcome],
    graded_game_ids: set[str],
    window: TimeWindow = TimeWindow.ALL_TIME,
    now: Optional[datetime] = None,
) -> int:
    """Picks on finished games where no leg could be graded (no line offered)."""
    picked: set[str] = set()
    for league in leagues:
        for game_id, pick in league.picks_for(user_id).items():
            outcome = outcomes.get(game_id)
            if outcome is None or not outcome.is_final:
                continue
            if is_within_window(effective_timestamp(pick, outcome), window, now):
                picked.add(game_id)
    return len(picked - graded_game_ids)


def build_leaderboard_entries(
    leagues: Optional[Iterable[League]],
    outcomes: Optional[Mapping[str, GameOutcome]],
    labels: Optional[Mapping[str, str]] = None,
    window: TimeWindow = TimeWindow.ALL_TIME,
    points: Optional[Mapping[str, int]] = None,
    now: Optional[datetime] = None,
    label_length: int = 8,
) -> list[LeaderboardEntry]:
    """
    One unranked entry per distinct member, in first-seen order.

    `points` overrides the computed points total per user when the caller
    has its own scoring.
    """
    leagues = [league for league in (leagues or []) if league is not None]
    outcomes = outcomes or {}
    labels = labels or {}

    members: list[str] = []
    for league in leagues:
        for member in league.members:
            if member not in members:
                members.append(member)

    entries = []
    for user_id in members:
        user_leagues = [league for league in leagues if user_id in league.members]

        legs = collect_graded_legs(
            user_leagues, user_id, outcomes, MarketFilter.ALL, window, now
        )
        summary = summarize_legs(legs)

        if points is not None and user_id in points:
            user_points = points[user_id]
        else:
            user_points = points_from_legs(legs)

        entries.append(LeaderboardEntry(
            user_id=user_id,
            username=labels.get(user_id) or user_id[:label_length],
            wins=summary.overall_wins,
            losses=summary.overall_losses,
            pushes=summary.spread_pushes + summary.total_pushes,
            total_picks=summary.total_picks,
            missed_picks=count_missed_picks(
                user_leagues, user_id, outcomes, {leg.game_id for leg in legs}, window, now
            ),
            points=user_points,
            win_percentage=summary.win_percentage,
            leagues=len(user_leagues),
        ))

    return entries


class LeaderboardService:
    def __init__(
        self,
        leagues: LeagueRepository,
        games: GameRepository,
        profiles: ProfileRepository,
    ):
        self.leagues = leagues
        self.games = games
        self.profiles = profiles
        self.settings = get_settings()

    async def _load_labels(self, user_ids: list[str]) -> dict[str, str]:
        """
        Display names for the leaderboard.

        A failure here is not fatal: entries fall back to the user id.
        """
        try:
            return await self.profiles.get_labels(user_ids)
        except PyMongoError as e:
            logger.warning("Failed to load profile names for leaderboard: %s", e)
            return {}

    async def _build(
        self,
        leagues: list[League],
        window: TimeWindow,
    ) -> tuple[list[LeaderboardEntry], dict[str, GameOutcome]]:
        outcomes = await self.games.get_outcomes(game_ids_for(leagues))

        member_ids = list(dict.fromkeys(m for league in leagues for m in league.members))
        labels = await self._load_labels(member_ids)

        entries = build_leaderboard_entries(
            leagues,
            outcomes,
            labels=labels,
            window=window,
            label_length=self.settings.label_fallback_length,
        )
        return entries, outcomes

    async def get_league_leaderboard(
        self,
        league_code: str,
        window: TimeWindow = TimeWindow.ALL_TIME,
    ) -> Leaderboard:
        """Leaderboard for one league, ranked with the league's own tiebreaker."""
        league = await self.leagues.get_by_code(league_code)
        if not league:
            raise LeagueNotFoundError(f"League {league_code} not found")

        entries, outcomes = await self._build([league], window)
        rule = TiebreakRule.parse(league.settings.tiebreaker)

        return Leaderboard(
            scope=f"league:{league.code}",
            tiebreaker=rule.value,
            entries=apply_tiebreaker(entries, rule, league, outcomes),
        )

    async def get_user_leaderboard(
        self,
        user_id: str,
        window: TimeWindow = TimeWindow.ALL_TIME,
        tiebreaker: Optional[str] = None,
    ) -> Leaderboard:
        """
        Leaderboard across every league the user belongs to.

        There is no single league to derive head-to-head or weekly data
        from, so league-based rules resolve on total points.
        """
        rule = TiebreakRule.parse(tiebreaker or self.settings.default_tiebreaker)
        scope = f"user:{user_id}"

        leagues = await self.leagues.get_for_member(user_id)
        if not leagues:
            return Leaderboard(scope=scope, tiebreaker=rule.value, entries=[])

        entries, outcomes = await self._build(leagues, window)

        return Leaderboard(
            scope=scope,
            tiebreaker=rule.value,
            entries=apply_tiebreaker(entries, rule, None, outcomes),
        )
