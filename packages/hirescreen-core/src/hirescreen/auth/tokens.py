"""JWT signing and verification.

``TokenCodec.verify`` reports failures as a value instead of raising, so an
expired token and a garbage string are handled on the same code path.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt


class VerificationError(str, Enum):
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenVerification:
    claims: dict[str, Any] | None = None
    error: VerificationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.claims is not None


def _now_utc() -> datetime:
    return datetime.now(UTC)


class TokenCodec:
    """Signs and verifies HMAC JWTs with a caller-supplied secret."""

    def __init__(self, algorithm: str = "HS256") -> None:
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def sign(
        self,
        claims: dict[str, Any],
        secret: str,
        ttl: timedelta,
        issued_at: datetime | None = None,
    ) -> str:
        """Return a signed token embedding ``claims`` plus ``iat``/``exp``."""
        now = issued_at or _now_utc()
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def verify(self, token: str, secret: str) -> TokenVerification:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenVerification(error=VerificationError.EXPIRED)
        except jwt.InvalidSignatureError:
            return TokenVerification(error=VerificationError.INVALID_SIGNATURE)
        except jwt.PyJWTError:
            return TokenVerification(error=VerificationError.MALFORMED)
        return TokenVerification(claims=claims)
