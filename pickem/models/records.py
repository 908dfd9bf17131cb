from typing import Optional

from pydantic import BaseModel


class RecordHolder(BaseModel):
    """Usuario que ostenta un récord y el valor del récord"""

    user_id: str
    value: float

    week: Optional[int] = None
    wins: Optional[int] = None
    total: Optional[int] = None


class PerfectWeek(BaseModel):
    user_id: str
    week: int
    points: int


class LeagueRecords(BaseModel):
    """Salón de la fama de una liga"""

    league_code: str

    highest_win_percentage: Optional[RecordHolder] = None
    most_wins: Optional[RecordHolder] = None
    longest_win_streak: Optional[RecordHolder] = None
    most_points_in_week: Optional[RecordHolder] = None
    most_points_in_season: Optional[RecordHolder] = None
    iron_man: Optional[RecordHolder] = None  # más picks corregidos

    perfect_weeks: list[PerfectWeek] = []
