"""Redis-backed throttling for authentication endpoints.

Two counters, both fixed windows kept in Redis:

* every login or registration attempt from a client address counts
  against ``attempts`` per ``window_seconds``;
* failed logins for one email from one address lock that pair out for
  ``lockout_seconds`` once ``lockout_threshold`` is reached.

Redis being unreachable disables throttling; authentication itself never
depends on Redis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request
from redis.exceptions import RedisError

from hirescreen_service.cache import RedisClient

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ThrottlePolicy:
    attempts: int = 5
    window_seconds: int = 15 * 60
    lockout_threshold: int = 5
    lockout_seconds: int = 30 * 60


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class AuthThrottle:
    """Attempt limiter and failed-login lockout over a ``RedisClient``."""

    def __init__(self, redis: RedisClient, policy: ThrottlePolicy) -> None:
        self._redis = redis
        self._policy = policy

    async def check_rate(self, address: str) -> None:
        """Count one attempt; raise 429 once the window's budget is spent."""
        key = f"rate_limit:auth:{address}"
        try:
            count = await self._hit(key, self._policy.window_seconds)
            if count <= self._policy.attempts:
                return
            retry_after = await self._redis.client.ttl(key)
        except (RedisError, OSError) as exc:
            log.warning("auth_throttle_unavailable", error=str(exc))
            return

        log.warning("auth_rate_limited", address=address, attempts=count)
        raise HTTPException(
            status_code=429,
            detail="Too many authentication attempts, please try again later",
            headers={"Retry-After": str(max(retry_after, 1))},
        )

    async def check_lockout(self, email: str, address: str) -> None:
        key = self._lock_key(email, address)
        try:
            remaining = await self._redis.client.ttl(key)
        except (RedisError, OSError) as exc:
            log.warning("auth_throttle_unavailable", error=str(exc))
            return
        # ttl is -2 for a missing key
        if remaining > 0:
            raise HTTPException(
                status_code=429,
                detail="Account temporarily locked, please try again later",
                headers={"Retry-After": str(remaining)},
            )

    async def record_failure(self, email: str, address: str) -> None:
        key = self._failure_key(email, address)
        try:
            failures = await self._hit(key, self._policy.window_seconds)
            if failures >= self._policy.lockout_threshold:
                await self._redis.client.set(
                    self._lock_key(email, address), "1", ex=self._policy.lockout_seconds
                )
                await self._redis.client.delete(key)
                log.warning("login_locked_out", address=address, failures=failures)
        except (RedisError, OSError) as exc:
            log.warning("auth_throttle_unavailable", error=str(exc))

    async def clear_failures(self, email: str, address: str) -> None:
        try:
            await self._redis.client.delete(self._failure_key(email, address))
        except (RedisError, OSError) as exc:
            log.warning("auth_throttle_unavailable", error=str(exc))

    async def _hit(self, key: str, window_seconds: int) -> int:
        count = await self._redis.client.incr(key)
        if count == 1:
            await self._redis.client.expire(key, window_seconds)
        return count

    @staticmethod
    def _failure_key(email: str, address: str) -> str:
        return f"login_failures:{email.lower()}:{address}"

    @staticmethod
    def _lock_key(email: str, address: str) -> str:
        return f"login_lock:{email.lower()}:{address}"


def get_auth_throttle(request: Request) -> AuthThrottle:
    return AuthThrottle(request.app.state.redis, request.app.state.throttle_policy)


AuthThrottleDep = Annotated[AuthThrottle, Depends(get_auth_throttle)]


async def limit_auth_attempts(request: Request, throttle: AuthThrottleDep) -> None:
    await throttle.check_rate(client_address(request))
