"""
Pick'em API

Corrección de picks, estadísticas, leaderboards, logros y récords de liga.
"""

import logging
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from pickem.core.config import Settings, get_settings
from pickem.core.logging_config import setup_logging
from pickem.database import Database

from pickem.controllers.achievements_controller import router as achievements_router
from pickem.controllers.grading_controller import router as grading_router
from pickem.controllers.health_controller import router as health_router
from pickem.controllers.leaderboard_controller import router as leaderboard_router
from pickem.controllers.leagues_controller import router as leagues_router
from pickem.controllers.stats_controller import router as stats_router

API_VERSION = "1.0.0"

settings = get_settings()
setup_logging(settings)

logger = logging.getLogger(__name__)


class OriginPolicy:
    """Lista explícita de orígenes más un regex opcional (solo en production)"""

    def __init__(self, settings: Settings):
        self.origins = set(settings.cors_origin_list)
        self.pattern = (
            re.compile(settings.cors_origin_regex)
            if settings.cors_origin_regex and settings.app_env == "production"
            else None
        )

    def allows(self, origin: str) -> bool:
        if not origin:
            return False
        if origin in self.origins:
            return True
        return bool(self.pattern and self.pattern.fullmatch(origin))


class CORSMiddleware(BaseHTTPMiddleware):
    """
    CORS resuelto antes del routing.

    El preflight OPTIONS se contesta aquí mismo: si llegara a los endpoints,
    la validación de query params (market, window) lo rechazaría con 422.
    """

    def __init__(self, app, policy: OriginPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")
        allowed = self.policy.allows(origin)

        if request.method == "OPTIONS":
            if not allowed:
                return Response(status_code=403, content="Origin not allowed")
            return Response(
                status_code=200,
                headers={
                    "Access-Control-Allow-Origin": origin,
                    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
                    "Access-Control-Allow-Headers": "Content-Type, Accept, Origin",
                    "Access-Control-Max-Age": "86400",
                },
            )

        response = await call_next(request)
        if allowed:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    logger.info("Pick'em API started (%s)", settings.app_env)
    yield
    await Database.disconnect()


app = FastAPI(
    title="Pick'em API",
    description="Corrección de picks, estadísticas y clasificaciones",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, policy=OriginPolicy(settings))

for router in (
    health_router,
    grading_router,
    stats_router,
    leaderboard_router,
    achievements_router,
    leagues_router,
):
    app.include_router(router)


@app.get("/")
async def root():
    return {
        "name": "Pick'em API",
        "version": API_VERSION,
        "docs": "/docs",
    }
