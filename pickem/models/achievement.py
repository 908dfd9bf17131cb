from typing import Optional

from pydantic import BaseModel


class AchievementDefinition(BaseModel):
    """Logro del catálogo: se desbloquea cuando `metric` alcanza `target`"""

    id: str
    name: str
    description: str
    category: str
    tier: str  # bronze | silver | gold | platinum

    metric: str  # clave dentro de AchievementMetrics
    target: int

    # Algunos logros exigen además un mínimo de picks (ej: precisión)
    min_picks: int = 0

    class Config:
        frozen = True


class AchievementMetrics(BaseModel):
    """Valores calculados a partir de los picks de un usuario"""

    total_picks: int = 0
    total_wins: int = 0
    total_leagues: int = 0
    longest_win_streak: int = 0
    win_percentage: float = 0.0
    perfect_weeks: int = 0
    highest_confidence: int = 0
    high_confidence_wins: int = 0


class AchievementStatus(BaseModel):
    id: str
    name: str
    description: str
    category: str
    tier: str

    unlocked: bool
    progress: float
    target: int


class AchievementReport(BaseModel):
    user_id: str
    achievements: list[AchievementStatus]

    unlocked_count: int
    total_count: int

    newly_unlocked: list[str] = []
    metrics: Optional[AchievementMetrics] = None
