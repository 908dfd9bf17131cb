"""
Tiebreakers - Reglas de desempate para la clasificación de una liga.

Primary order is win percentage (descending). Players tied on it are
ordered by the league's tiebreak rule, and every rule falls back to total
points so that the order is always deterministic. Players still tied after
that keep their input order (the sort is stable).

Each rule is a comparator `(a, b, context) -> int`: negative puts `a`
first, positive puts `b` first, zero means tied.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Iterable, Mapping, Optional

from pickem.models.game import GameOutcome
from pickem.models.leaderboard import LeaderboardEntry
from pickem.models.league import League
from pickem.services.grading_service import effective_timestamp, is_pick_correct
from pickem.utils.dates import as_utc
from pickem.utils.numbers import round_half_up

logger = logging.getLogger(__name__)


class TiebreakRule(str, Enum):
    TOTAL_POINTS = "totalPoints"
    WIN_PERCENTAGE = "winPercentage"
    HEAD_TO_HEAD = "headToHead"
    BEST_WEEK = "bestWeek"
    FEWEST_MISSED = "fewestMissed"
    MOST_RECENT_WIN = "mostRecentWin"

    @classmethod
    def parse(cls, name: Optional[str]) -> "TiebreakRule":
        """Unknown or empty names fall back to total points."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            if name:
                logger.debug("Unknown tiebreaker %r, using %s", name, cls.TOTAL_POINTS.value)
            return cls.TOTAL_POINTS


TIEBREAKER_INFO: dict[TiebreakRule, tuple[str, str]] = {
    TiebreakRule.TOTAL_POINTS: (
        "Total Points",
        "Ties broken by most total points scored",
    ),
    TiebreakRule.WIN_PERCENTAGE: (
        "Win Percentage",
        "Ties broken by highest win percentage, then total wins",
    ),
    TiebreakRule.HEAD_TO_HEAD: (
        "Head-to-Head Record",
        "Ties broken by record in games where both players made picks",
    ),
    TiebreakRule.BEST_WEEK: (
        "Best Single Week",
        "Ties broken by highest single week score",
    ),
    TiebreakRule.FEWEST_MISSED: (
        "Fewest Missed Picks",
        "Ties broken by fewest missed picks",
    ),
    TiebreakRule.MOST_RECENT_WIN: (
        "Most Recent Win",
        "Ties broken by who won most recently",
    ),
}


def describe_tiebreaker(name: Optional[str]) -> dict[str, str]:
    rule = TiebreakRule.parse(name)
    display_name, description = TIEBREAKER_INFO[rule]
    return {"rule": rule.value, "name": display_name, "description": description}


@dataclass
class TiebreakContext:
    """
    Raw data some rules need to re-derive finer-grained results.

    The memo only lives for one ranking call.
    """

    league: Optional[League] = None
    outcomes: Mapping[str, GameOutcome] = field(default_factory=dict)
    _memo: dict = field(default_factory=dict, repr=False)

    def cached(self, key: tuple, compute: Callable[[], object]):
        if key not in self._memo:
            self._memo[key] = compute()
        return self._memo[key]

    def final_outcome(self, game_id: str) -> Optional[GameOutcome]:
        outcome = self.outcomes.get(game_id)
        if outcome is None or not outcome.is_final:
            return None
        return outcome


Comparator = Callable[[LeaderboardEntry, LeaderboardEntry, TiebreakContext], int]


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


# ============================================
# Derived data
# ============================================

def head_to_head(user_a: str, user_b: str, context: TiebreakContext) -> int:
    """
    Head-to-head over games both players picked.

    Returns positive if B was correct more often, negative if A was, 0 if
    even or there is no shared game.
    """
    league = context.league
    if league is None or not context.outcomes:
        return 0

    picks_a = league.picks_for(user_a)
    picks_b = league.picks_for(user_b)

    a_wins = b_wins = 0
    for game_id, pick_a in picks_a.items():
        pick_b = picks_b.get(game_id)
        if pick_b is None:
            continue

        outcome = context.final_outcome(game_id)
        if outcome is None:
            continue

        a_correct = is_pick_correct(pick_a, outcome)
        b_correct = is_pick_correct(pick_b, outcome)

        if a_correct and not b_correct:
            a_wins += 1
        elif b_correct and not a_correct:
            b_wins += 1

    return b_wins - a_wins


def best_week_score(user_id: str, context: TiebreakContext) -> int:
    """Highest single-week points (confidence or 1 per correct pick)."""
    league = context.league
    if league is None or not context.outcomes:
        return 0

    def compute() -> int:
        week_scores: dict[int, int] = {}
        for game_id, pick in league.picks_for(user_id).items():
            outcome = context.final_outcome(game_id)
            if outcome is None:
                continue

            week = outcome.week or 1
            week_scores.setdefault(week, 0)
            if is_pick_correct(pick, outcome):
                week_scores[week] += pick.confidence or 1

        return max(week_scores.values(), default=0)

    return context.cached(("best_week", user_id), compute)


def most_recent_win(user_id: str, context: TiebreakContext) -> Optional[datetime]:
    """Timestamp of the user's latest correct pick, if any."""
    league = context.league
    if league is None or not context.outcomes:
        return None

    def compute() -> Optional[datetime]:
        latest = None
        for game_id, pick in league.picks_for(user_id).items():
            outcome = context.final_outcome(game_id)
            if outcome is None or not is_pick_correct(pick, outcome):
                continue

            timestamp = as_utc(effective_timestamp(pick, outcome))
            if timestamp is not None and (latest is None or timestamp > latest):
                latest = timestamp
        return latest

    return context.cached(("most_recent_win", user_id), compute)


# ============================================
# Comparators
# ============================================

def compare_total_points(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
    return _sign((b.points or 0) - (a.points or 0))


def compare_win_percentage(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
    # El porcentaje ya es el criterio principal: aquí se miran victorias y picks
    if a.wins != b.wins:
        return _sign(b.wins - a.wins)
    return _sign((b.total_picks or 0) - (a.total_picks or 0))


def compare_head_to_head(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
    return _sign(head_to_head(a.user_id, b.user_id, context))


def compare_best_week(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
    return _sign(best_week_score(b.user_id, context) - best_week_score(a.user_id, context))


def compare_fewest_missed(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
    return _sign((a.missed_picks or 0) - (b.missed_picks or 0))


def compare_most_recent_win(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
    last_a = most_recent_win(a.user_id, context)
    last_b = most_recent_win(b.user_id, context)

    if last_a and last_b:
        if last_a == last_b:
            return 0
        return -1 if last_a > last_b else 1
    if last_a:
        return -1
    if last_b:
        return 1
    return 0


TIEBREAKERS: dict[TiebreakRule, Comparator] = {
    TiebreakRule.TOTAL_POINTS: compare_total_points,
    TiebreakRule.WIN_PERCENTAGE: compare_win_percentage,
    TiebreakRule.HEAD_TO_HEAD: compare_head_to_head,
    TiebreakRule.BEST_WEEK: compare_best_week,
    TiebreakRule.FEWEST_MISSED: compare_fewest_missed,
    TiebreakRule.MOST_RECENT_WIN: compare_most_recent_win,
}


def with_points_fallback(comparator: Comparator) -> Comparator:
    def compare(a: LeaderboardEntry, b: LeaderboardEntry, context: TiebreakContext) -> int:
        return comparator(a, b, context) or compare_total_points(a, b, context)

    return compare


def compare_entries(
    a: LeaderboardEntry,
    b: LeaderboardEntry,
    rule: TiebreakRule,
    context: TiebreakContext,
) -> int:
    """Win percentage first, then the rule, then total points."""
    pct_a = round_half_up(a.win_percentage)
    pct_b = round_half_up(b.win_percentage)
    if pct_a != pct_b:
        return -1 if pct_a > pct_b else 1

    return with_points_fallback(TIEBREAKERS[rule])(a, b, context)


def apply_tiebreaker(
    entries: Optional[Iterable[LeaderboardEntry]],
    rule: Optional[str] = TiebreakRule.TOTAL_POINTS,
    league: Optional[League] = None,
    outcomes: Optional[Mapping[str, GameOutcome]] = None,
) -> list[LeaderboardEntry]:
    """
    Rank leaderboard entries.

    Returns a new list; the input is left untouched.
    """
    if not entries:
        return []

    tiebreak = TiebreakRule.parse(rule)
    context = TiebreakContext(league=league, outcomes=outcomes or {})

    return sorted(
        entries,
        key=cmp_to_key(lambda a, b: compare_entries(a, b, tiebreak, context)),
    )
