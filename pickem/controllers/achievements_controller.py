"""
Controlador de logros - Estado de los logros de un usuario
"""

from fastapi import APIRouter

from pickem.core.dependencies import Achievements, Games, Leagues
from pickem.models.achievement import AchievementReport
from pickem.services.achievement_service import AchievementService


router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("/{user_id}", response_model=AchievementReport)
async def get_user_achievements(
    user_id: str,
    leagues: Leagues,
    games: Games,
    store: Achievements,
):
    """
    Obtener los logros de un usuario.

    Los logros nuevos se guardan; los ya desbloqueados nunca se pierden.
    """
    achievement_service = AchievementService(leagues, games, store)
    return await achievement_service.get_user_achievements(user_id)
