"""
Controlador de estadísticas - Récord, porcentajes y rachas de un usuario
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from pickem.core.dependencies import Games, Leagues
from pickem.models.stats import MarketFilter, TimeWindow, UserStatSummary
from pickem.services.stats_service import StatsService, StatsLeagueNotFoundError


router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/{user_id}", response_model=UserStatSummary)
async def get_user_stats(
    user_id: str,
    leagues: Leagues,
    games: Games,
    market: MarketFilter = Query(MarketFilter.ALL, description="all | spread | total"),
    window: TimeWindow = Query(TimeWindow.ALL_TIME, description="allTime | thisWeek | thisMonth"),
    league: Optional[str] = Query(None, description="Limit to one league code"),
):
    """
    Obtener las estadísticas de un usuario.

    Un usuario sin picks corregibles recibe todo en cero, no un error.
    """
    stats_service = StatsService(leagues, games)

    try:
        return await stats_service.get_user_stats(user_id, market, window, league)
    except StatsLeagueNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
