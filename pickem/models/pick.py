from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class TotalSelection(str, Enum):
    OVER = "over"
    UNDER = "under"


class LegResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    NONE = "none"


class Pick(BaseModel):
    """Predicción de un usuario para un partido (spread y/o total)"""

    spread: Optional[str] = None  # equipo elegido para cubrir el spread
    total: Optional[TotalSelection] = None  # over | under
    confidence: Optional[int] = Field(default=None, ge=1)

    timestamp: Optional[datetime] = None

    @field_validator("total", mode="before")
    @classmethod
    def _normalize_total(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    class Config:
        populate_by_name = True
        frozen = True


class GradeResult(BaseModel):
    """Resultado efímero de corregir un pick contra un partido"""

    spread_result: LegResult = LegResult.NONE
    total_result: LegResult = LegResult.NONE

    @property
    def has_win(self) -> bool:
        return LegResult.WIN in (self.spread_result, self.total_result)

    @property
    def has_loss(self) -> bool:
        return LegResult.LOSS in (self.spread_result, self.total_result)

    @property
    def is_graded(self) -> bool:
        return (
            self.spread_result is not LegResult.NONE
            or self.total_result is not LegResult.NONE
        )

    class Config:
        frozen = True
