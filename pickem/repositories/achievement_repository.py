"""
AchievementRepository - Logros desbloqueados por usuario

La unión es monótona: una vez desbloqueado, siempre desbloqueado.
Por eso solo se usa $addToSet y nunca se borra nada.
"""

from datetime import datetime, timezone
from typing import Iterable

from motor.motor_asyncio import AsyncIOMotorDatabase


class AchievementRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["achievements_user"]

    async def get_unlocked(self, user_id: str) -> set[str]:
        """IDs de logros ya desbloqueados"""
        doc = await self.collection.find_one({"_id": user_id})
        if not doc:
            return set()
        return set(doc.get("unlocked", []))

    async def add_unlocked(self, user_id: str, achievement_ids: Iterable[str]) -> None:
        """Agrega logros al conjunto (idempotente)"""
        ids = sorted(set(achievement_ids))
        if not ids:
            return

        await self.collection.update_one(
            {"_id": user_id},
            {
                "$addToSet": {"unlocked": {"$each": ids}},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
            upsert=True,
        )
