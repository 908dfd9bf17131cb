from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .pick import Pick


class LeagueSettings(BaseModel):
    """Configuración de una liga elegida por el comisionado"""

    tiebreaker: str = "totalPoints"
    lock_offset_minutes: int = Field(default=60, ge=0)
    visibility: str = "private"  # public | private
    show_others_picks: bool = False

    class Config:
        populate_by_name = True


class League(BaseModel):
    """Liga: miembros y sus picks anidados por usuario y partido"""

    code: str
    name: Optional[str] = None

    members: list[str] = []

    # user_id -> game_id -> Pick
    picks: dict[str, dict[str, Pick]] = {}

    settings: LeagueSettings = LeagueSettings()

    created_at: Optional[datetime] = None

    def picks_for(self, user_id: str) -> dict[str, Pick]:
        return self.picks.get(user_id) or {}

    class Config:
        populate_by_name = True
