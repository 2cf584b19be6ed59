"""Redis client handle with an explicit lifecycle."""

from __future__ import annotations

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

log = structlog.get_logger(__name__)


class RedisClient:
    """Wraps a ``redis.asyncio.Redis`` connection pool.

    Built in the app lifespan and stored on ``app.state``; nothing imports a
    module-level client.
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._client: aioredis.Redis | None = None

    async def connect(self) -> None:
        self._client = aioredis.from_url(self._url, decode_responses=True)
        if await self.ping():
            log.info("redis_connected")
        else:
            # Auth does not depend on Redis; readiness reports it instead.
            log.warning("redis_unavailable_at_startup")

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as exc:
            log.warning("redis_ping_failed", error=str(exc))
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.info("redis_closed")

    @property
    def client(self) -> aioredis.Redis:
        if self._client is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._client
