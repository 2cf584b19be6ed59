"""Service test fixtures with an in-memory auth store."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from hirescreen.config import AuthConfig
from hirescreen.store.memory import InMemoryAuthStore
from hirescreen_service.auth.throttle import ThrottlePolicy
from hirescreen_service.db.deps import get_auth_store
from hirescreen_service.rest.errors import register_error_handlers
from hirescreen_service.rest.routes.auth import router as auth_router
from hirescreen_service.rest.routes.companies import router as companies_router
from hirescreen_service.rest.routes.health import router as health_router
from hirescreen_service.rest.routes.users import router as users_router

TEST_AUTH_CONFIG = AuthConfig(
    access_token_secret="service-test-access-secret-0123456789",
    refresh_token_secret="service-test-refresh-secret-0123456789",
    bcrypt_rounds=4,
)

# Route tests log in and register far more than five times per client.
RELAXED_THROTTLE = ThrottlePolicy(attempts=10_000, lockout_threshold=10_000)


class FakeResource:
    """Stands in for Database / RedisClient on app.state."""

    def __init__(self, healthy: bool = True) -> None:
        self.healthy = healthy

    async def ping(self) -> bool:
        return self.healthy


class FakeRedis(FakeResource):
    """In-memory stand-in for RedisClient covering the commands the throttle uses.

    Keys never expire on their own; ``ttl`` reports the last ``expire`` value.
    """

    def __init__(self, healthy: bool = True) -> None:
        super().__init__(healthy)
        self.values: dict[str, int | str] = {}
        self.ttls: dict[str, int] = {}

    @property
    def client(self) -> FakeRedis:
        return self

    def _check(self) -> None:
        if not self.healthy:
            raise RedisConnectionError("redis down")

    async def incr(self, key: str) -> int:
        self._check()
        self.values[key] = int(self.values.get(key, 0)) + 1
        return self.values[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self._check()
        self.ttls[key] = seconds
        return key in self.values

    async def ttl(self, key: str) -> int:
        self._check()
        if key not in self.values:
            return -2
        return self.ttls.get(key, -1)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.values[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            removed += self.values.pop(key, None) is not None
            self.ttls.pop(key, None)
        return removed


def make_test_app(
    store: InMemoryAuthStore | None = None,
    throttle: ThrottlePolicy = RELAXED_THROTTLE,
) -> tuple[FastAPI, InMemoryAuthStore]:
    """Build an app with all routes and no database or Redis behind it."""
    app = FastAPI(title="HireScreen API (test)")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(companies_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")

    _store = store or InMemoryAuthStore()
    app.state.auth_config = TEST_AUTH_CONFIG
    app.state.database = FakeResource()
    app.state.throttle_policy = throttle
    app.state.redis = FakeRedis()
    app.dependency_overrides[get_auth_store] = lambda: _store
    return app, _store


@pytest.fixture
def auth_config() -> AuthConfig:
    return TEST_AUTH_CONFIG


@pytest.fixture
def auth_app():
    return make_test_app()


@pytest.fixture
def client(auth_app):
    app, store = auth_app
    return TestClient(app), store


@pytest.fixture
def throttled_app():
    """App with the production limits: 5 attempts per window, lockout after 5 failures."""
    return make_test_app(throttle=ThrottlePolicy())
