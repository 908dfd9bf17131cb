"""
LeagueRepository - Ligas con sus miembros y picks anidados

Documento:
{
    "code": "ABC123",
    "members": ["user1", "user2"],
    "picks": {"user1": {"game_1": {"spread": "KC", "total": "over"}}},
    "settings": {"tiebreaker": "headToHead"},
    "created_at": ...
}
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pickem.models.league import League


class LeagueRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["leagues"]

    @staticmethod
    def _to_model(doc: dict) -> League:
        doc = {k: v for k, v in doc.items() if k != "_id"}
        return League(**doc)

    async def get_by_code(self, code: str) -> Optional[League]:
        """Obtiene una liga por su código"""
        doc = await self.collection.find_one({"code": code})
        return self._to_model(doc) if doc else None

    async def get_for_member(self, user_id: str) -> list[League]:
        """
        Ligas en las que participa un usuario

        Ordenadas por fecha de creación: el orden importa para la
        deduplicación de picks entre ligas.
        """
        cursor = self.collection.find({"members": user_id}).sort([("created_at", 1), ("code", 1)])
        docs = await cursor.to_list(length=None)
        return [self._to_model(doc) for doc in docs]
