"""
StatsService - Estadísticas acumuladas por usuario.

Recorre los picks de un usuario en todas sus ligas, los corrige contra los
resultados finales y acumula récords, porcentajes y rachas.

A given game's spread leg and total leg are each counted at most once per
user, no matter how many leagues hold a pick for it: the first league (in
iteration order) that has a gradable leg wins.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional

from pickem.models.game import GameOutcome
from pickem.models.league import League
from pickem.models.pick import LegResult, Pick
from pickem.models.stats import (
    MarketFilter,
    Streak,
    StreakType,
    TimeWindow,
    UserStatSummary,
)
from pickem.repositories.game_repository import GameRepository
from pickem.repositories.league_repository import LeagueRepository
from pickem.services.grading_service import effective_timestamp, grade_pick
from pickem.utils.dates import (
    TRAILING_WEEK,
    as_utc,
    sort_key,
    start_of_month,
    utc_now,
)
from pickem.utils.numbers import percentage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradedLeg:
    """One counted leg (spread or total) of a deduplicated pick."""

    game_id: str
    market: str  # spread | total
    result: LegResult
    timestamp: Optional[datetime]
    pick: Pick
    outcome: GameOutcome


def default_stats() -> UserStatSummary:
    return UserStatSummary()


def is_within_window(
    timestamp: Optional[datetime],
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> bool:
    """
    Check a timestamp against a time window.

    Records without a timestamp are inside every window.
    """
    if timestamp is None or window == TimeWindow.ALL_TIME:
        return True

    now = as_utc(now) or utc_now()
    timestamp = as_utc(timestamp)

    if window == TimeWindow.THIS_WEEK:
        return now - timestamp <= TRAILING_WEEK
    if window == TimeWindow.THIS_MONTH:
        return timestamp >= start_of_month(now)
    return True


def collect_graded_legs(
    leagues: Optional[Iterable[League]],
    user_id: str,
    outcomes: Optional[Mapping[str, GameOutcome]],
    market: MarketFilter = MarketFilter.ALL,
    window: TimeWindow = TimeWindow.ALL_TIME,
    now: Optional[datetime] = None,
) -> list[GradedLeg]:
    """
    Grade every pick of a user across leagues and keep one leg per market
    per game.

    Spread legs come first (in discovery order), then total legs.
    """
    if not user_id or not leagues or not outcomes:
        return []

    consider_spread = market in (MarketFilter.ALL, MarketFilter.SPREAD)
    consider_total = market in (MarketFilter.ALL, MarketFilter.TOTAL)

    spread_legs: dict[str, GradedLeg] = {}
    total_legs: dict[str, GradedLeg] = {}

    for league in leagues:
        if league is None:
            continue

        for game_id, pick in league.picks_for(user_id).items():
            outcome = outcomes.get(game_id)
            if outcome is None or not outcome.is_final:
                continue

            timestamp = effective_timestamp(pick, outcome)
            if not is_within_window(timestamp, window, now):
                continue

            graded = grade_pick(pick, outcome)
            if graded is None:
                continue

            if (
                consider_spread
                and graded.spread_result is not LegResult.NONE
                and game_id not in spread_legs
            ):
                spread_legs[game_id] = GradedLeg(
                    game_id, "spread", graded.spread_result, timestamp, pick, outcome
                )

            if (
                consider_total
                and graded.total_result is not LegResult.NONE
                and game_id not in total_legs
            ):
                total_legs[game_id] = GradedLeg(
                    game_id, "total", graded.total_result, timestamp, pick, outcome
                )

    return list(spread_legs.values()) + list(total_legs.values())


def current_streak(results_newest_first: list[LegResult]) -> Streak:
    """
    Current streak from results ordered newest first.

    A push as the most recent result means no current streak. Older pushes
    are skipped: they neither extend nor break the run.
    """
    if not results_newest_first or results_newest_first[0] is LegResult.PUSH:
        return Streak()

    first = results_newest_first[0]
    count = 0
    for result in results_newest_first:
        if result is LegResult.PUSH:
            continue
        if result is not first:
            break
        count += 1

    streak_type = StreakType.WINS if first is LegResult.WIN else StreakType.LOSSES
    return Streak(type=streak_type, count=count)


def longest_win_streak(results_oldest_first: list[LegResult]) -> int:
    """Longest run of wins; losses reset the run, pushes are skipped."""
    longest = running = 0
    for result in results_oldest_first:
        if result is LegResult.WIN:
            running += 1
            longest = max(longest, running)
        elif result is LegResult.LOSS:
            running = 0
    return longest


def summarize_legs(legs: list[GradedLeg]) -> UserStatSummary:
    """Build the summary (records, percentages, streaks) from counted legs."""
    if not legs:
        return default_stats()

    counts = {
        ("spread", LegResult.WIN): 0,
        ("spread", LegResult.LOSS): 0,
        ("spread", LegResult.PUSH): 0,
        ("total", LegResult.WIN): 0,
        ("total", LegResult.LOSS): 0,
        ("total", LegResult.PUSH): 0,
    }
    for leg in legs:
        counts[(leg.market, leg.result)] += 1

    spread_wins = counts[("spread", LegResult.WIN)]
    spread_losses = counts[("spread", LegResult.LOSS)]
    total_wins = counts[("total", LegResult.WIN)]
    total_losses = counts[("total", LegResult.LOSS)]

    overall_wins = spread_wins + total_wins
    overall_losses = spread_losses + total_losses

    # sorted() es estable: con reverse=True los empates conservan el orden
    newest_first = sorted(legs, key=lambda leg: sort_key(leg.timestamp), reverse=True)
    oldest_first = sorted(legs, key=lambda leg: sort_key(leg.timestamp))

    return UserStatSummary(
        total_picks=len(legs),
        spread_wins=spread_wins,
        spread_losses=spread_losses,
        spread_pushes=counts[("spread", LegResult.PUSH)],
        total_wins=total_wins,
        total_losses=total_losses,
        total_pushes=counts[("total", LegResult.PUSH)],
        overall_wins=overall_wins,
        overall_losses=overall_losses,
        win_percentage=percentage(overall_wins, overall_wins + overall_losses),
        spread_win_percentage=percentage(spread_wins, spread_wins + spread_losses),
        total_win_percentage=percentage(total_wins, total_wins + total_losses),
        current_streak=current_streak([leg.result for leg in newest_first]),
        longest_win_streak=longest_win_streak([leg.result for leg in oldest_first]),
    )


def compute_user_stats(
    leagues: Optional[Iterable[League]],
    user_id: str,
    outcomes: Optional[Mapping[str, GameOutcome]],
    market: MarketFilter = MarketFilter.ALL,
    window: TimeWindow = TimeWindow.ALL_TIME,
    now: Optional[datetime] = None,
) -> UserStatSummary:
    """
    Aggregate a user's graded picks across leagues.

    Games that are missing or not final are skipped, as are picks outside
    the time window. A user with nothing gradable gets an all-zero summary.
    """
    legs = collect_graded_legs(leagues, user_id, outcomes, market, window, now)
    return summarize_legs(legs)


def game_ids_for(leagues: Iterable[League], user_ids: Optional[Iterable[str]] = None) -> set[str]:
    """All game ids referenced by picks in the given leagues."""
    wanted = set(user_ids) if user_ids is not None else None
    game_ids: set[str] = set()
    for league in leagues:
        for user_id, picks in league.picks.items():
            if wanted is None or user_id in wanted:
                game_ids.update(picks.keys())
    return game_ids


class StatsServiceError(Exception):
    """Base exception for stats service errors."""
    pass


class StatsLeagueNotFoundError(StatsServiceError):
    """Raised when the requested league does not exist or the user is not in it."""
    pass


class StatsService:
    def __init__(self, leagues: LeagueRepository, games: GameRepository):
        self.leagues = leagues
        self.games = games

    async def get_user_stats(
        self,
        user_id: str,
        market: MarketFilter = MarketFilter.ALL,
        window: TimeWindow = TimeWindow.ALL_TIME,
        league_code: Optional[str] = None,
    ) -> UserStatSummary:
        """
        Stats for one user, across all their leagues or a single one.
        """
        if league_code:
            league = await self.leagues.get_by_code(league_code)
            if not league or user_id not in league.members:
                raise StatsLeagueNotFoundError(
                    f"League {league_code} not found for user {user_id}"
                )
            leagues = [league]
        else:
            leagues = await self.leagues.get_for_member(user_id)

        if not leagues:
            return default_stats()

        outcomes = await self.games.get_outcomes(game_ids_for(leagues, [user_id]))
        logger.debug(
            "Computing stats for %s over %d leagues and %d outcomes",
            user_id, len(leagues), len(outcomes),
        )
        return compute_user_stats(leagues, user_id, outcomes, market, window)
