"""
AchievementService - Logros del usuario calculados a partir de sus picks.

El cálculo solo emite el estado actual de cada logro. Mantener el historial
("una vez desbloqueado, siempre desbloqueado") es responsabilidad de quien
llama, mediante un AchievementStore.
"""

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional, Protocol

from pickem.core.config import get_settings
from pickem.models.achievement import (
    AchievementDefinition,
    AchievementMetrics,
    AchievementReport,
    AchievementStatus,
)
from pickem.models.game import GameOutcome
from pickem.models.league import League
from pickem.models.pick import Pick
from pickem.repositories.game_repository import GameRepository
from pickem.repositories.league_repository import LeagueRepository
from pickem.services.grading_service import grade_pick
from pickem.services.stats_service import compute_user_stats, game_ids_for
from pickem.utils.dates import start_of_week

logger = logging.getLogger(__name__)


def _definition(id, name, description, category, tier, metric, target, min_picks=0):
    return AchievementDefinition(
        id=id,
        name=name,
        description=description,
        category=category,
        tier=tier,
        metric=metric,
        target=target,
        min_picks=min_picks,
    )


ACHIEVEMENTS: list[AchievementDefinition] = [
    # Getting Started
    _definition("first_pick", "First Pick", "Make your first pick", "Getting Started", "bronze", "total_picks", 1),
    _definition("first_win", "First Victory", "Win your first pick", "Getting Started", "bronze", "total_wins", 1),
    _definition("join_league", "League Member", "Join your first league", "Getting Started", "bronze", "total_leagues", 1),
    _definition("ten_picks", "Getting Started", "Make 10 picks", "Getting Started", "bronze", "total_picks", 10),
    # Wins
    _definition("five_wins", "Winning Ways", "Win 5 picks", "Wins", "bronze", "total_wins", 5),
    _definition("ten_wins", "Double Digits", "Win 10 picks", "Wins", "silver", "total_wins", 10),
    _definition("twenty_five_wins", "Quarter Century", "Win 25 picks", "Wins", "silver", "total_wins", 25),
    _definition("fifty_wins", "Half Century", "Win 50 picks", "Wins", "gold", "total_wins", 50),
    _definition("hundred_wins", "Centurion", "Win 100 picks", "Wins", "gold", "total_wins", 100),
    _definition("two_fifty_wins", "Elite Performer", "Win 250 picks", "Wins", "platinum", "total_wins", 250),
    _definition("five_hundred_wins", "Legend", "Win 500 picks", "Wins", "platinum", "total_wins", 500),
    # Streaks
    _definition("win_streak_3", "Hot Hand", "Win 3 picks in a row", "Streaks", "bronze", "longest_win_streak", 3),
    _definition("win_streak_5", "On Fire", "Win 5 picks in a row", "Streaks", "silver", "longest_win_streak", 5),
    _definition("win_streak_10", "Unstoppable", "Win 10 picks in a row", "Streaks", "gold", "longest_win_streak", 10),
    _definition("win_streak_15", "Legendary Streak", "Win 15 picks in a row", "Streaks", "platinum", "longest_win_streak", 15),
    # Accuracy
    _definition("accuracy_60", "Above Average", "Achieve 60% win rate (min. 10 picks)", "Accuracy", "silver", "win_percentage", 60, 10),
    _definition("accuracy_70", "Sharp Shooter", "Achieve 70% win rate (min. 20 picks)", "Accuracy", "gold", "win_percentage", 70, 20),
    _definition("accuracy_75", "Elite Handicapper", "Achieve 75% win rate (min. 30 picks)", "Accuracy", "platinum", "win_percentage", 75, 30),
    _definition("perfect_week", "Perfect Week", "Go undefeated in a week (min. 5 picks)", "Accuracy", "gold", "perfect_weeks", 1),
    # Volume
    _definition("fifty_picks", "Seasoned Picker", "Make 50 picks", "Volume", "bronze", "total_picks", 50),
    _definition("hundred_picks", "Century Club", "Make 100 picks", "Volume", "silver", "total_picks", 100),
    _definition("two_fifty_picks", "Dedicated", "Make 250 picks", "Volume", "gold", "total_picks", 250),
    _definition("five_hundred_picks", "Iron Man", "Make 500 picks", "Volume", "gold", "total_picks", 500),
    _definition("thousand_picks", "True Grinder", "Make 1,000 picks", "Volume", "platinum", "total_picks", 1000),
    # Confidence
    _definition("confident", "High Confidence", "Set a 5-star confidence pick", "Confidence", "bronze", "highest_confidence", 5),
    _definition("confident_wins", "Confident Winner", "Win 5 high-confidence picks (4-5 stars)", "Confidence", "gold", "high_confidence_wins", 5),
    _definition("confident_wins_10", "Conviction", "Win 10 high-confidence picks (4-5 stars)", "Confidence", "gold", "high_confidence_wins", 10),
    # Loyalty
    _definition("multiple_leagues", "League Hopper", "Join 3 leagues", "Loyalty", "silver", "total_leagues", 3),
    _definition("five_leagues", "League Master", "Join 5 leagues", "Loyalty", "gold", "total_leagues", 5),
]


def unique_picks(leagues: Iterable[League], user_id: str) -> dict[str, Pick]:
    """One pick per game; the first league (in iteration order) holding it wins."""
    picks: dict[str, Pick] = {}
    for league in leagues:
        for game_id, pick in league.picks_for(user_id).items():
            picks.setdefault(game_id, pick)
    return picks


class AchievementStore(Protocol):
    """Persistencia externa de logros desbloqueados (unión monótona)"""

    async def get_unlocked(self, user_id: str) -> set[str]: ...

    async def add_unlocked(self, user_id: str, achievement_ids: Iterable[str]) -> None: ...


def count_perfect_weeks(
    leagues: Iterable[League],
    user_id: str,
    outcomes: Mapping[str, GameOutcome],
    min_picks: int = 5,
) -> int:
    """
    Calendar weeks (Sunday start, by finalization date) with at least
    `min_picks` decided picks, no losses and at least one win.

    A pick counts as a win if any leg won, otherwise as a loss if any leg
    lost; pushes and ungraded picks are not decided.
    """
    weeks: dict[datetime, dict[str, int]] = {}

    for game_id, pick in unique_picks(leagues, user_id).items():
        outcome = outcomes.get(game_id)
        if outcome is None or not outcome.is_final or outcome.finalized_at is None:
            continue

        graded = grade_pick(pick, outcome)
        if graded is None:
            continue

        week = weeks.setdefault(start_of_week(outcome.finalized_at), {"wins": 0, "losses": 0})
        if graded.has_win:
            week["wins"] += 1
        elif graded.has_loss:
            week["losses"] += 1

    return sum(
        1
        for week in weeks.values()
        if week["wins"] + week["losses"] >= min_picks and week["losses"] == 0 and week["wins"] > 0
    )


def collect_achievement_metrics(
    leagues: Optional[Iterable[League]],
    user_id: str,
    outcomes: Optional[Mapping[str, GameOutcome]],
    perfect_week_min_picks: int = 5,
    high_confidence_threshold: int = 4,
) -> AchievementMetrics:
    leagues = [league for league in (leagues or []) if league is not None]
    outcomes = outcomes or {}

    stats = compute_user_stats(leagues, user_id, outcomes)

    highest_confidence = 0
    high_confidence_wins = 0
    for game_id, pick in unique_picks(leagues, user_id).items():
        confidence = pick.confidence or 0
        highest_confidence = max(highest_confidence, confidence)

        if confidence < high_confidence_threshold:
            continue

        outcome = outcomes.get(game_id)
        if outcome is None or not outcome.is_final:
            continue
        graded = grade_pick(pick, outcome)
        if graded is not None and graded.has_win:
            high_confidence_wins += 1

    return AchievementMetrics(
        total_picks=stats.total_picks,
        total_wins=stats.overall_wins,
        total_leagues=sum(1 for league in leagues if user_id in league.members),
        longest_win_streak=stats.longest_win_streak,
        win_percentage=stats.win_percentage,
        perfect_weeks=count_perfect_weeks(leagues, user_id, outcomes, perfect_week_min_picks),
        highest_confidence=highest_confidence,
        high_confidence_wins=high_confidence_wins,
    )


def evaluate_achievements(
    metrics: AchievementMetrics,
    catalogue: Iterable[AchievementDefinition] = ACHIEVEMENTS,
) -> list[AchievementStatus]:
    """Current truth value of every achievement predicate."""
    statuses = []
    for definition in catalogue:
        value = getattr(metrics, definition.metric)
        unlocked = value >= definition.target and metrics.total_picks >= definition.min_picks

        statuses.append(AchievementStatus(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            category=definition.category,
            tier=definition.tier,
            unlocked=unlocked,
            progress=min(value, definition.target),
            target=definition.target,
        ))
    return statuses


def merge_unlocked(
    statuses: list[AchievementStatus],
    persisted: Iterable[str],
) -> tuple[list[AchievementStatus], list[str]]:
    """
    Union of computed unlocks with persisted ones.

    Returns the merged statuses and the ids unlocked for the first time.
    """
    persisted_ids = set(persisted)

    merged = [
        status.model_copy(update={"unlocked": True})
        if status.id in persisted_ids and not status.unlocked
        else status
        for status in statuses
    ]
    newly_unlocked = [
        status.id for status in statuses
        if status.unlocked and status.id not in persisted_ids
    ]
    return merged, newly_unlocked


class AchievementService:
    def __init__(
        self,
        leagues: LeagueRepository,
        games: GameRepository,
        store: AchievementStore,
    ):
        self.leagues = leagues
        self.games = games
        self.store = store
        self.settings = get_settings()

    async def get_user_achievements(self, user_id: str) -> AchievementReport:
        """
        Evaluate achievements, merge with persisted unlocks and persist the
        new ones.
        """
        leagues = await self.leagues.get_for_member(user_id)
        outcomes = await self.games.get_outcomes(game_ids_for(leagues, [user_id])) if leagues else {}

        metrics = collect_achievement_metrics(
            leagues,
            user_id,
            outcomes,
            perfect_week_min_picks=self.settings.perfect_week_min_picks,
            high_confidence_threshold=self.settings.high_confidence_threshold,
        )

        persisted = await self.store.get_unlocked(user_id)
        merged, newly_unlocked = merge_unlocked(evaluate_achievements(metrics), persisted)

        if newly_unlocked:
            logger.info("User %s unlocked achievements: %s", user_id, ", ".join(newly_unlocked))
            await self.store.add_unlocked(user_id, newly_unlocked)

        return AchievementReport(
            user_id=user_id,
            achievements=merged,
            unlocked_count=sum(1 for status in merged if status.unlocked),
            total_count=len(merged),
            newly_unlocked=newly_unlocked,
            metrics=metrics,
        )
