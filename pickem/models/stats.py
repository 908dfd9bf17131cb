from enum import Enum

from pydantic import BaseModel


class MarketFilter(str, Enum):
    ALL = "all"
    SPREAD = "spread"
    TOTAL = "total"


class TimeWindow(str, Enum):
    ALL_TIME = "allTime"
    THIS_WEEK = "thisWeek"  # últimos 7 días
    THIS_MONTH = "thisMonth"  # mes calendario en curso


class StreakType(str, Enum):
    WINS = "wins"
    LOSSES = "losses"
    NONE = "none"


class Streak(BaseModel):
    type: StreakType = StreakType.NONE
    count: int = 0


class UserStatSummary(BaseModel):
    """Estadísticas acumuladas de un usuario para un alcance dado"""

    total_picks: int = 0

    spread_wins: int = 0
    spread_losses: int = 0
    spread_pushes: int = 0

    total_wins: int = 0
    total_losses: int = 0
    total_pushes: int = 0

    overall_wins: int = 0
    overall_losses: int = 0

    win_percentage: float = 0.0
    spread_win_percentage: float = 0.0
    total_win_percentage: float = 0.0

    current_streak: Streak = Streak()
    longest_win_streak: int = 0
