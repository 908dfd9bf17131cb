"""
Dependencies de FastAPI para inyectar repositorios

Los controladores nunca crean repositorios a mano: así los tests pueden
reemplazarlos con app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from pickem.database import get_database
from pickem.repositories.achievement_repository import AchievementRepository
from pickem.repositories.game_repository import GameRepository
from pickem.repositories.league_repository import LeagueRepository
from pickem.repositories.profile_repository import ProfileRepository


def get_game_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> GameRepository:
    return GameRepository(db)


def get_league_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> LeagueRepository:
    return LeagueRepository(db)


def get_profile_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> ProfileRepository:
    return ProfileRepository(db)


def get_achievement_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> AchievementRepository:
    return AchievementRepository(db)


# Alias de tipos para que se vea mas limpio en los endpoints
Games = Annotated[GameRepository, Depends(get_game_repository)]
Leagues = Annotated[LeagueRepository, Depends(get_league_repository)]
Profiles = Annotated[ProfileRepository, Depends(get_profile_repository)]
Achievements = Annotated[AchievementRepository, Depends(get_achievement_repository)]
