from .game_repository import GameRepository
from .league_repository import LeagueRepository
from .profile_repository import ProfileRepository
from .achievement_repository import AchievementRepository

__all__ = [
    "GameRepository",
    "LeagueRepository",
    "ProfileRepository",
    "AchievementRepository",
]
