"""
Controlador de leaderboards - Endpoints de clasificación

Las clasificaciones se recalculan en cada request a partir de los picks
y los resultados; no se guarda nada.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from pickem.core.dependencies import Games, Leagues, Profiles
from pickem.models.leaderboard import Leaderboard
from pickem.models.stats import TimeWindow
from pickem.services.leaderboard_service import LeaderboardService, LeagueNotFoundError
from pickem.services.tiebreakers import TiebreakRule, describe_tiebreaker


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


class LeaderboardEntryResponse(BaseModel):
    """Entrada del leaderboard (usuario y estadísticas)."""
    rank: int
    user_id: str
    username: str
    wins: int
    losses: int
    pushes: int
    total_picks: int
    missed_picks: int
    points: int
    win_percentage: float
    leagues: int


class LeaderboardResponse(BaseModel):
    """Leaderboard ordenado con la regla de desempate aplicada."""
    scope: str
    tiebreaker: dict[str, str]
    entries: list[LeaderboardEntryResponse]


class TiebreakerResponse(BaseModel):
    rule: str
    name: str
    description: str


def _to_response(leaderboard: Leaderboard) -> LeaderboardResponse:
    return LeaderboardResponse(
        scope=leaderboard.scope,
        tiebreaker=describe_tiebreaker(leaderboard.tiebreaker),
        entries=[
            LeaderboardEntryResponse(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(leaderboard.entries)
        ]
    )


@router.get("/tiebreakers", response_model=list[TiebreakerResponse])
async def list_tiebreakers():
    """
    Reglas de desempate disponibles para los comisionados.
    """
    return [TiebreakerResponse(**describe_tiebreaker(rule.value)) for rule in TiebreakRule]


@router.get("/league/{league_code}", response_model=LeaderboardResponse)
async def get_league_leaderboard(
    league_code: str,
    leagues: Leagues,
    games: Games,
    profiles: Profiles,
    window: TimeWindow = Query(TimeWindow.ALL_TIME, description="allTime | thisWeek | thisMonth"),
):
    """
    Obtener el leaderboard de una liga (con su regla de desempate).
    """
    leaderboard_service = LeaderboardService(leagues, games, profiles)

    try:
        leaderboard = await leaderboard_service.get_league_leaderboard(league_code, window)
    except LeagueNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return _to_response(leaderboard)


@router.get("/user/{user_id}", response_model=LeaderboardResponse)
async def get_user_leaderboard(
    user_id: str,
    leagues: Leagues,
    games: Games,
    profiles: Profiles,
    window: TimeWindow = Query(TimeWindow.ALL_TIME, description="allTime | thisWeek | thisMonth"),
    tiebreaker: Optional[str] = Query(None, description="Tiebreak rule name"),
):
    """
    Obtener el leaderboard de todas las ligas en las que participa un usuario.
    """
    leaderboard_service = LeaderboardService(leagues, games, profiles)
    leaderboard = await leaderboard_service.get_user_leaderboard(user_id, window, tiebreaker)

    return _to_response(leaderboard)
