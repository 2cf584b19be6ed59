"""Auth domain records and the views returned to callers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    HR_MANAGER = "HR_MANAGER"
    RECRUITER = "RECRUITER"
    HIRING_MANAGER = "HIRING_MANAGER"


@dataclass
class Company:
    """Tenant boundary. Users of an inactive company cannot log in."""

    name: str
    domain: str
    id: UUID = field(default_factory=uuid.uuid4)
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class UserRecord:
    """A user as held by the store, including the password hash.

    Never returned from AuthService; use ``view()``.
    """

    email: str
    password_hash: str
    first_name: str
    last_name: str
    company_id: UUID
    role: UserRole = UserRole.RECRUITER
    id: UUID = field(default_factory=uuid.uuid4)
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    company: Company | None = None

    def view(self) -> UserView:
        return UserView(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            role=self.role,
            company_id=self.company_id,
            is_active=self.is_active,
            last_login=self.last_login,
            created_at=self.created_at,
            company=self.company,
        )


@dataclass(frozen=True)
class UserView:
    """Public projection of a user. Has no password field."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    company_id: UUID
    is_active: bool
    last_login: datetime | None
    created_at: datetime
    company: Company | None = None


@dataclass
class RefreshTokenRecord:
    token: str
    user_id: UUID
    expires_at: datetime
    id: UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    user: UserRecord | None = None  # joined with its company by find_refresh_token_by_token


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@dataclass(frozen=True)
class AuthResult:
    user: UserView
    tokens: TokenPair


@dataclass(frozen=True)
class AccessClaims:
    """Decoded claims of a verified access token."""

    user_id: UUID
    email: str
    role: UserRole
    company_id: UUID
