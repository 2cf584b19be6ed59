"""Pydantic request/response models for REST API."""

from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from hirescreen.auth.models import AuthResult, Company, UserRole, UserView

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password(v: str) -> str:
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    # bcrypt only looks at the first 72 bytes.
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes")
    if not _PASSWORD_RULE.match(v):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return v


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    company_id: UUID
    role: UserRole | None = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class CreateCompanyRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    domain: str = Field(min_length=1, max_length=100)
    admin_email: EmailStr
    admin_password: str
    admin_first_name: str = Field(min_length=1, max_length=50)
    admin_last_name: str = Field(min_length=1, max_length=50)

    @field_validator("admin_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UserStatusRequest(BaseModel):
    is_active: bool


class CompanySchema(BaseModel):
    id: str
    name: str
    domain: str
    is_active: bool

    @classmethod
    def from_domain(cls, company: Company) -> CompanySchema:
        return cls(
            id=str(company.id),
            name=company.name,
            domain=company.domain,
            is_active=company.is_active,
        )


class UserSchema(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    company_id: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None
    company: CompanySchema | None = None

    @classmethod
    def from_view(cls, user: UserView) -> UserSchema:
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            company_id=str(user.company_id),
            is_active=user.is_active,
            last_login=user.last_login,
            created_at=user.created_at,
            company=CompanySchema.from_domain(user.company) if user.company else None,
        )


class AuthResponse(BaseModel):
    user: UserSchema
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

    @classmethod
    def from_result(cls, result: AuthResult) -> AuthResponse:
        return cls(
            user=UserSchema.from_view(result.user),
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            token_type=result.tokens.token_type,
        )


class MeResponse(BaseModel):
    user_id: str
    email: str
    role: UserRole
    company_id: str
