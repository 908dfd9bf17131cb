"""
Controlador de ligas - Hall of Fame
"""

from fastapi import APIRouter, HTTPException, status

from pickem.core.dependencies import Games, Leagues
from pickem.models.records import LeagueRecords
from pickem.services.records_service import RecordsService, RecordsLeagueNotFoundError


router = APIRouter(prefix="/leagues", tags=["leagues"])


@router.get("/{league_code}/records", response_model=LeagueRecords)
async def get_league_records(
    league_code: str,
    leagues: Leagues,
    games: Games,
):
    """
    Obtener los récords históricos de una liga.
    """
    records_service = RecordsService(leagues, games)

    try:
        return await records_service.get_league_records(league_code)
    except RecordsLeagueNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
