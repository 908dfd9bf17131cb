from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """Fila del leaderboard (se reconstruye en cada cálculo)"""

    user_id: str
    username: str  # etiqueta para mostrar

    wins: int = 0
    losses: int = 0
    pushes: int = 0

    total_picks: int = 0
    missed_picks: int = 0  # picks sin ninguna pierna corregible

    points: int = 0
    win_percentage: float = 0.0

    leagues: int = 0  # en cuántas ligas participa

    class Config:
        populate_by_name = True


class Leaderboard(BaseModel):
    """Clasificación ya ordenada"""

    scope: str  # league:<code> | user:<user_id>
    tiebreaker: str
    entries: list[LeaderboardEntry] = []
