"""
GameRepository - Lectura de resultados finales de partidos

Es el "results provider": devuelve un mapa game_id -> GameOutcome.
Los documentos los escribe el feed de resultados; aquí solo se leen.
"""

import logging
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from pickem.models.game import GameOutcome

logger = logging.getLogger(__name__)


class GameRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["game_results"]

    @staticmethod
    def _to_model(doc: dict) -> Optional[GameOutcome]:
        """
        Documento -> GameOutcome

        Un documento mal formado (ej: home_score "TBD") se trata como
        partido sin resultado, para no tumbar al resto.
        """
        data = {k: v for k, v in doc.items() if k != "_id"}
        try:
            return GameOutcome(**data)
        except ValidationError as e:
            logger.warning(
                "Skipping malformed game result %s: %d validation errors",
                doc.get("game_id", doc.get("_id")), e.error_count(),
            )
            return None

    async def get_by_id(self, game_id: str) -> Optional[GameOutcome]:
        """Obtiene el resultado de un partido"""
        doc = await self.collection.find_one({"game_id": game_id})
        return self._to_model(doc) if doc else None

    async def get_outcomes(self, game_ids: Iterable[str]) -> dict[str, GameOutcome]:
        """
        Obtiene los resultados de varios partidos de una vez

        Los partidos que no existen o no se pueden leer no aparecen en el mapa.
        """
        ids = sorted(set(game_ids))
        if not ids:
            return {}

        cursor = self.collection.find({"game_id": {"$in": ids}})
        docs = await cursor.to_list(length=None)

        outcomes = {}
        for doc in docs:
            outcome = self._to_model(doc)
            if outcome is not None:
                outcomes[doc["game_id"]] = outcome
        return outcomes
