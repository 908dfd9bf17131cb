"""
Conexión a MongoDB (motor)

Solo los repositorios leen de aquí. El grading, las estadísticas y el
ranking reciben los datos ya cargados y nunca tocan la base.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from pickem.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Cliente compartido por toda la app (se abre en el lifespan)"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        if cls.client is not None:
            return

        settings = get_settings()
        if not settings.mongodb_uri:
            raise ValueError("MONGODB_URI not configured")

        cls.client = AsyncIOMotorClient(
            settings.mongodb_uri,
            maxPoolSize=settings.mongodb_max_pool_size,
            minPoolSize=settings.mongodb_min_pool_size,
        )
        cls.db = cls.client[settings.mongodb_db_name]

        await cls.client.admin.command("ping")
        logger.info("MongoDB ready (db=%s)", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        if cls.client is None:
            return

        cls.client.close()
        cls.client = cls.db = None
        logger.info("MongoDB connection closed")

    @classmethod
    async def ping(cls) -> bool:
        """True si hay conexión y el servidor responde"""
        if cls.client is None:
            return False
        try:
            await cls.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False
        return True

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency de FastAPI; los repositorios la reciben en core/dependencies.py"""
    return Database.get_db()


async def create_indexes():
    """
    Índices de las colecciones que lee el servicio.

    Se corre una vez por deploy, no en cada arranque.
    """
    db = Database.get_db()

    await db.game_results.create_index("game_id", unique=True)
    await db.game_results.create_index([("week", 1), ("is_final", 1)])

    # get_for_member filtra por miembro y ordena por antigüedad
    await db.leagues.create_index("code", unique=True)
    await db.leagues.create_index([("members", 1), ("created_at", 1)])

    await db.profiles.create_index("username")

    logger.info("Indexes created")
