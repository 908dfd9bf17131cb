from .game import GameOutcome
from .pick import Pick, GradeResult, LegResult, TotalSelection
from .league import League, LeagueSettings
from .stats import MarketFilter, TimeWindow, Streak, StreakType, UserStatSummary
from .leaderboard import Leaderboard, LeaderboardEntry
from .achievement import (
    AchievementDefinition,
    AchievementMetrics,
    AchievementReport,
    AchievementStatus,
)
from .records import LeagueRecords, PerfectWeek, RecordHolder

__all__ = [
    "GameOutcome",
    "Pick",
    "GradeResult",
    "LegResult",
    "TotalSelection",
    "League",
    "LeagueSettings",
    "MarketFilter",
    "TimeWindow",
    "Streak",
    "StreakType",
    "UserStatSummary",
    "Leaderboard",
    "LeaderboardEntry",
    "AchievementDefinition",
    "AchievementMetrics",
    "AchievementReport",
    "AchievementStatus",
    "LeagueRecords",
    "PerfectWeek",
    "RecordHolder",
]
