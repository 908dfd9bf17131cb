"""
ProfileRepository - Nombres para mostrar de los usuarios

Solo decora el leaderboard; nunca se usa para corregir ni para ordenar.
"""

from typing import Iterable

from motor.motor_asyncio import AsyncIOMotorDatabase


class ProfileRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["profiles"]

    async def get_labels(self, user_ids: Iterable[str]) -> dict[str, str]:
        """
        Mapa user_id -> etiqueta (display_name, o username si no hay)

        Los perfiles sin nombre no aparecen en el mapa.
        """
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}

        cursor = self.collection.find(
            {"_id": {"$in": ids}},
            {"display_name": 1, "username": 1},
        )
        docs = await cursor.to_list(length=None)

        labels = {}
        for doc in docs:
            label = doc.get("display_name") or doc.get("username")
            if label:
                labels[doc["_id"]] = label
        return labels
