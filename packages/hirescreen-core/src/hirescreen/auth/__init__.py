"""Authentication and session lifecycle."""

from __future__ import annotations

from hirescreen.auth.errors import (
    AccountDeactivated,
    AuthError,
    CompanyDeactivated,
    CompanyNotFound,
    DuplicateUser,
    InvalidCredentials,
    InvalidPassword,
    InvalidRefreshToken,
    InvalidToken,
    StoreError,
    UserNotFound,
    UserNotInCompany,
)
from hirescreen.auth.models import (
    AccessClaims,
    AuthResult,
    Company,
    RefreshTokenRecord,
    TokenPair,
    UserRecord,
    UserRole,
    UserView,
)
from hirescreen.auth.service import AuthService
from hirescreen.auth.tokens import TokenCodec, TokenVerification, VerificationError

__all__ = [
    "AccessClaims",
    "AccountDeactivated",
    "AuthError",
    "AuthResult",
    "AuthService",
    "Company",
    "CompanyDeactivated",
    "CompanyNotFound",
    "DuplicateUser",
    "InvalidCredentials",
    "InvalidPassword",
    "InvalidRefreshToken",
    "InvalidToken",
    "RefreshTokenRecord",
    "StoreError",
    "TokenCodec",
    "TokenPair",
    "TokenVerification",
    "UserNotFound",
    "UserNotInCompany",
    "UserRecord",
    "UserRole",
    "UserView",
    "VerificationError",
]
