"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hirescreen_service.cache import RedisClient
from hirescreen_service.db.engine import Database
from hirescreen_service.rest.errors import register_error_handlers
from hirescreen_service.rest.routes.auth import router as auth_router
from hirescreen_service.rest.routes.companies import router as companies_router
from hirescreen_service.rest.routes.health import router as health_router
from hirescreen_service.rest.routes.users import router as users_router
from hirescreen_service.settings import Settings, settings as default_settings


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database = Database(settings.database_url, pool_size=settings.database_pool_size)
        redis = RedisClient(settings.redis_url)
        await database.connect()
        await redis.connect()
        app.state.database = database
        app.state.redis = redis
        try:
            yield
        finally:
            await redis.close()
            await database.close()

    app = FastAPI(
        title="HireScreen API",
        description="Candidate screening backend: authentication and sessions",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.auth_config = settings.auth_config()
    app.state.throttle_policy = settings.throttle_policy()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Public routes
    app.include_router(health_router, tags=["health"])

    # register/login/refresh/logout are public; /me, /logout-all and /users require a bearer token
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(companies_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")

    return app
