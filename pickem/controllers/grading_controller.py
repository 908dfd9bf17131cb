"""
Controlador de grading - Corrige un pick contra un resultado

No toca la base de datos: recibe ambos objetos ya armados.
Corregir el mismo pick dos veces devuelve exactamente lo mismo.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from pickem.models.game import GameOutcome
from pickem.models.pick import LegResult, Pick
from pickem.services.grading_service import grade_pick


router = APIRouter(prefix="/grade", tags=["grading"])


class GradeRequest(BaseModel):
    pick: Pick
    outcome: GameOutcome


class GradeResponse(BaseModel):
    """Resultado por pierna; graded=False si el partido no tiene marcador válido."""
    graded: bool
    spread_result: LegResult
    total_result: LegResult


@router.post("", response_model=GradeResponse)
async def grade(request: GradeRequest):
    """
    Corregir un pick (spread y/o total).
    """
    result = grade_pick(request.pick, request.outcome)

    if result is None:
        return GradeResponse(
            graded=False,
            spread_result=LegResult.NONE,
            total_result=LegResult.NONE,
        )

    return GradeResponse(
        graded=True,
        spread_result=result.spread_result,
        total_result=result.total_result,
    )
