"""
Unit tests for achievement evaluation and AchievementService
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from pickem.models.achievement import AchievementMetrics
from pickem.services.achievement_service import (
    ACHIEVEMENTS,
    AchievementService,
    collect_achievement_metrics,
    count_perfect_weeks,
    evaluate_achievements,
    merge_unlocked,
)


def by_id(statuses):
    return {status.id: status for status in statuses}


@pytest.fixture
def week_of_games(make_outcome):
    """Five final games, all finalized in the week starting Sunday 2025-10-12."""
    return {
        f"g{day}": make_outcome(
            game_id=f"g{day}",
            finalized_at=datetime(2025, 10, day, 22, 0, tzinfo=timezone.utc),
        )
        for day in range(12, 17)
    }


class TestCountPerfectWeeks:
    def test_five_wins_in_a_week(self, make_league, week_of_games):
        league = make_league(picks={"u1": {g: {"spread": "KC"} for g in week_of_games}})

        assert count_perfect_weeks([league], "u1", week_of_games) == 1

    def test_not_enough_picks(self, make_league, week_of_games):
        league = make_league(picks={"u1": {g: {"spread": "KC"} for g in list(week_of_games)[:4]}})

        assert count_perfect_weeks([league], "u1", week_of_games) == 0
        assert count_perfect_weeks([league], "u1", week_of_games, min_picks=4) == 1

    def test_one_loss_spoils_the_week(self, make_league, week_of_games):
        picks = {g: {"spread": "KC"} for g in week_of_games}
        picks["g12"] = {"spread": "BUF"}
        league = make_league(picks={"u1": picks})

        assert count_perfect_weeks([league], "u1", week_of_games) == 0

    def test_games_split_across_weeks(self, make_league, make_outcome):
        outcomes = {
            "sat": make_outcome(game_id="sat", finalized_at=datetime(2025, 10, 11, tzinfo=timezone.utc)),
            "sun": make_outcome(game_id="sun", finalized_at=datetime(2025, 10, 12, tzinfo=timezone.utc)),
        }
        league = make_league(picks={"u1": {"sat": {"spread": "KC"}, "sun": {"spread": "KC"}}})

        assert count_perfect_weeks([league], "u1", outcomes, min_picks=2) == 0
        assert count_perfect_weeks([league], "u1", outcomes, min_picks=1) == 2


class TestAchievementMetrics:
    def test_picks_copied_across_leagues_count_once(self, make_league, week_of_games):
        picks = {g: {"spread": "KC", "confidence": 5} for g in list(week_of_games)[:3]}
        leagues = [make_league(code="L1", picks={"u1": picks}), make_league(code="L2", picks={"u1": picks})]

        metrics = collect_achievement_metrics(leagues, "u1", week_of_games)

        assert metrics.total_picks == 3
        assert metrics.perfect_weeks == 0
        assert metrics.high_confidence_wins == 3
        assert count_perfect_weeks(leagues, "u1", week_of_games, min_picks=3) == 1
        assert count_perfect_weeks(leagues, "u1", week_of_games, min_picks=4) == 0

    def test_first_league_pick_wins_for_duplicated_game(self, make_league, week_of_games):
        first = make_league(code="L1", picks={"u1": {"g12": {"spread": "BUF", "confidence": 5}}})
        second = make_league(code="L2", picks={"u1": {"g12": {"spread": "KC", "confidence": 5}}})

        metrics = collect_achievement_metrics([first, second], "u1", week_of_games)

        assert metrics.high_confidence_wins == 0

    def test_collect_metrics(self, make_league, week_of_games):
        picks = {g: {"spread": "KC", "confidence": 4} for g in week_of_games}
        picks["g16"] = {"spread": "KC", "confidence": 5}
        picks["g15"] = {"spread": "BUF", "confidence": 5}
        league = make_league(picks={"u1": picks})
        other = make_league(code="OTHER", members=["u1", "u2"])

        metrics = collect_achievement_metrics([league, other], "u1", week_of_games)

        assert metrics.total_picks == 5
        assert metrics.total_wins == 4
        assert metrics.total_leagues == 2
        assert metrics.longest_win_streak == 3
        assert metrics.win_percentage == 80.0
        assert metrics.perfect_weeks == 0
        assert metrics.highest_confidence == 5
        assert metrics.high_confidence_wins == 4

    def test_empty_user(self):
        assert collect_achievement_metrics(None, "u1", None) == AchievementMetrics()


class TestEvaluateAchievements:
    def test_catalogue_ids_are_unique(self):
        ids = [definition.id for definition in ACHIEVEMENTS]
        assert len(ids) == len(set(ids))

    def test_nothing_unlocked_for_new_user(self):
        statuses = evaluate_achievements(AchievementMetrics())

        assert len(statuses) == len(ACHIEVEMENTS)
        assert not any(status.unlocked for status in statuses)

    def test_thresholds_and_progress(self):
        statuses = by_id(evaluate_achievements(AchievementMetrics(
            total_picks=12, total_wins=7, win_percentage=63.6, longest_win_streak=4,
        )))

        assert statuses["first_pick"].unlocked
        assert statuses["ten_picks"].unlocked
        assert statuses["five_wins"].unlocked
        assert statuses["win_streak_3"].unlocked
        assert statuses["accuracy_60"].unlocked

        assert not statuses["ten_wins"].unlocked
        assert statuses["ten_wins"].progress == 7
        assert statuses["win_streak_5"].progress == 4
        assert statuses["first_pick"].progress == 1

    def test_accuracy_requires_minimum_picks(self):
        statuses = by_id(evaluate_achievements(AchievementMetrics(total_picks=3, win_percentage=100.0)))

        assert not statuses["accuracy_60"].unlocked
        assert not statuses["accuracy_75"].unlocked


class TestMergeUnlocked:
    def test_persisted_achievements_stay_unlocked(self):
        statuses = evaluate_achievements(AchievementMetrics(total_picks=1))

        merged, newly = merge_unlocked(statuses, {"five_wins"})
        merged = by_id(merged)

        assert merged["five_wins"].unlocked
        assert merged["first_pick"].unlocked
        assert newly == ["first_pick"]

    def test_nothing_new(self):
        statuses = evaluate_achievements(AchievementMetrics(total_picks=1))

        _, newly = merge_unlocked(statuses, ["first_pick"])

        assert newly == []


class TestAchievementService:
    """Test suite for AchievementService."""

    @pytest.fixture
    def service(self, make_league, sample_outcome):
        league = make_league(picks={"u1": {"game_1": {"spread": "KC"}}})

        leagues = MagicMock()
        leagues.get_for_member = AsyncMock(return_value=[league])
        games = MagicMock()
        games.get_outcomes = AsyncMock(return_value={"game_1": sample_outcome})
        store = MagicMock()
        store.get_unlocked = AsyncMock(return_value={"win_streak_3"})
        store.add_unlocked = AsyncMock()

        return AchievementService(leagues, games, store)

    @pytest.mark.asyncio
    async def test_report_and_persistence(self, service):
        report = await service.get_user_achievements("u1")
        statuses = by_id(report.achievements)

        assert sorted(report.newly_unlocked) == ["first_pick", "first_win", "join_league"]
        assert statuses["win_streak_3"].unlocked
        assert report.unlocked_count == 4
        assert report.total_count == len(ACHIEVEMENTS)
        assert report.metrics.total_wins == 1

        service.store.add_unlocked.assert_awaited_once()
        user_id, ids = service.store.add_unlocked.await_args.args
        assert user_id == "u1"
        assert sorted(ids) == ["first_pick", "first_win", "join_league"]

    @pytest.mark.asyncio
    async def test_no_new_unlocks_skips_write(self, service):
        service.store.get_unlocked.return_value = {"first_pick", "first_win", "join_league"}

        report = await service.get_user_achievements("u1")

        assert report.newly_unlocked == []
        service.store.add_unlocked.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_without_leagues(self, service):
        service.leagues.get_for_member.return_value = []

        report = await service.get_user_achievements("ghost")

        assert report.unlocked_count == 1  # persisted win_streak_3
        service.games.get_outcomes.assert_not_awaited()
