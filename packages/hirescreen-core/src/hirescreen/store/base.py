"""Protocol for pluggable auth persistence backends."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from hirescreen.auth.models import Company, RefreshTokenRecord, UserRecord, UserRole


class AuthStore(Protocol):
    """Backend interface for users, companies and refresh tokens.

    Implementations raise ``StoreError`` on backend failure. Deletes must be
    atomic: when two callers delete the same refresh token row, exactly one
    of them observes it removed. ``create_company_with_admin`` writes both
    rows or neither.
    """

    async def find_company_by_id(self, company_id: UUID) -> Company | None: ...
    async def create_company(self, name: str, domain: str) -> Company: ...
    async def create_company_with_admin(
        self,
        name: str,
        domain: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> UserRecord: ...

    async def find_user_by_email(self, email: str) -> UserRecord | None: ...
    async def find_user_by_id(
        self, user_id: UUID, include_company: bool = True
    ) -> UserRecord | None: ...
    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        company_id: UUID,
        role: UserRole,
    ) -> UserRecord: ...
    async def update_user_last_login(self, user_id: UUID, at: datetime) -> None: ...
    async def update_user_active(self, user_id: UUID, active: bool) -> UserRecord | None: ...

    async def create_refresh_token(
        self, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord: ...
    async def find_refresh_token_by_token(self, token: str) -> RefreshTokenRecord | None: ...
    async def delete_refresh_token_by_id(self, token_id: UUID) -> bool: ...
    async def delete_refresh_tokens_by_token(self, token: str) -> int: ...
    async def delete_refresh_tokens_by_user_id(self, user_id: UUID) -> int: ...
