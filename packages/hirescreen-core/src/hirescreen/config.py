"""Configuration for the auth service."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=7)
BCRYPT_ROUNDS = 12


class AuthConfig(BaseModel):
    """Secrets, lifetimes and hashing cost used by AuthService."""

    access_token_secret: str = Field(min_length=1)
    refresh_token_secret: str = Field(min_length=1)
    jwt_algorithm: str = "HS256"
    access_token_ttl: timedelta = ACCESS_TOKEN_TTL
    refresh_token_ttl: timedelta = REFRESH_TOKEN_TTL
    bcrypt_rounds: int = Field(default=BCRYPT_ROUNDS, ge=4, le=31)

    model_config = {"frozen": True}
