"""
Controlador de salud - Estado del servicio y de MongoDB
"""

from fastapi import APIRouter
from pydantic import BaseModel

from pickem.core.config import get_settings
from pickem.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str  # ok | degraded
    database: str  # connected | disconnected
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Estado del servicio.

    Sin base de datos el grading sigue funcionando (POST /grade no la
    usa), así que se responde "degraded" en vez de fallar.
    """
    connected = await Database.ping()

    return HealthResponse(
        status="ok" if connected else "degraded",
        database="connected" if connected else "disconnected",
        environment=get_settings().app_env,
    )
