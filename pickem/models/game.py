from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from pickem.utils.numbers import parse_line


class GameOutcome(BaseModel):
    """Resultado final de un partido, tal como lo entrega el feed de resultados"""

    game_id: Optional[str] = None

    home_team: str
    away_team: str

    # Solo tienen sentido cuando is_final es True
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    # Líneas: None significa "no hubo mercado", nunca 0
    home_spread: Optional[float] = None
    away_spread: Optional[float] = None
    over_under: Optional[float] = None

    is_final: bool = False
    finalized_at: Optional[datetime] = None
    week: Optional[int] = None

    @field_validator("home_spread", "away_spread", "over_under", mode="before")
    @classmethod
    def _parse_line(cls, value: Any) -> Optional[float]:
        return parse_line(value)

    class Config:
        populate_by_name = True
        frozen = True
