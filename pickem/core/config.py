"""
Settings del servicio (variables de entorno o .env)
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ==================== MongoDB ====================
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "pickem"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 2

    # ==================== App ====================
    app_env: str = "development"  # development | production
    debug: bool = False
    log_level: str = "INFO"

    # Orígenes permitidos, separados por coma
    cors_origins: str = "http://localhost:3000"
    # Patrón extra para previews (ej: https://.*\.vercel\.app); solo en production
    cors_origin_regex: Optional[str] = None

    # ==================== Clasificación ====================
    # Regla de desempate cuando no viene de la liga (leaderboard de un usuario)
    default_tiebreaker: str = "totalPoints"

    # Sin perfil se muestran los primeros N caracteres del user_id
    label_fallback_length: int = 8

    # ==================== Logros ====================
    # Semana perfecta: al menos N picks decididos y ninguna derrota
    perfect_week_min_picks: int = 5

    # Confianza a partir de la cual un pick es "de alta confianza"
    high_confidence_threshold: int = 4

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
