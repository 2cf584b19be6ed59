"""In-memory auth store for testing and development."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from uuid import UUID

from hirescreen.auth.errors import StoreError
from hirescreen.auth.models import Company, RefreshTokenRecord, UserRecord, UserRole


class InMemoryAuthStore:
    """Dict-backed AuthStore.

    Every method completes without awaiting, so each one is atomic with
    respect to other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._companies: dict[UUID, Company] = {}
        self._users: dict[UUID, UserRecord] = {}
        self._tokens: dict[UUID, RefreshTokenRecord] = {}

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    async def find_company_by_id(self, company_id: UUID) -> Company | None:
        return self._companies.get(company_id)

    async def create_company(self, name: str, domain: str) -> Company:
        company = Company(name=name, domain=domain)
        self._companies[company.id] = company
        return company

    async def create_company_with_admin(
        self,
        name: str,
        domain: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> UserRecord:
        if any(u.email == email for u in self._users.values()):
            raise StoreError(f"duplicate email: {email}")
        company = Company(name=name, domain=domain)
        user = UserRecord(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            company_id=company.id,
            role=UserRole.ADMIN,
        )
        self._companies[company.id] = company
        self._users[user.id] = user
        return self._with_company(user)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def _with_company(self, user: UserRecord, include_company: bool = True) -> UserRecord:
        company = self._companies.get(user.company_id) if include_company else None
        return dataclasses.replace(user, company=company)

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        user = next((u for u in self._users.values() if u.email == email), None)
        return self._with_company(user) if user else None

    async def find_user_by_id(
        self, user_id: UUID, include_company: bool = True
    ) -> UserRecord | None:
        user = self._users.get(user_id)
        return self._with_company(user, include_company) if user else None

    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        company_id: UUID,
        role: UserRole,
    ) -> UserRecord:
        if any(u.email == email for u in self._users.values()):
            raise StoreError(f"duplicate email: {email}")
        if company_id not in self._companies:
            raise StoreError(f"unknown company: {company_id}")
        user = UserRecord(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            company_id=company_id,
            role=role,
        )
        self._users[user.id] = user
        return self._with_company(user)

    async def update_user_last_login(self, user_id: UUID, at: datetime) -> None:
        user = self._users.get(user_id)
        if user is None:
            raise StoreError(f"unknown user: {user_id}")
        user.last_login = at

    async def update_user_active(self, user_id: UUID, active: bool) -> UserRecord | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        user.is_active = active
        return self._with_company(user)

    # ------------------------------------------------------------------
    # Refresh tokens
    # ------------------------------------------------------------------

    async def create_refresh_token(
        self, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord:
        if any(t.token == token for t in self._tokens.values()):
            raise StoreError("duplicate refresh token")
        record = RefreshTokenRecord(token=token, user_id=user_id, expires_at=expires_at)
        self._tokens[record.id] = record
        return record

    async def find_refresh_token_by_token(self, token: str) -> RefreshTokenRecord | None:
        record = next((t for t in self._tokens.values() if t.token == token), None)
        if record is None:
            return None
        user = self._users.get(record.user_id)
        return dataclasses.replace(record, user=self._with_company(user) if user else None)

    async def delete_refresh_token_by_id(self, token_id: UUID) -> bool:
        return self._tokens.pop(token_id, None) is not None

    async def delete_refresh_tokens_by_token(self, token: str) -> int:
        return self._delete_where(lambda t: t.token == token)

    async def delete_refresh_tokens_by_user_id(self, user_id: UUID) -> int:
        return self._delete_where(lambda t: t.user_id == user_id)

    def _delete_where(self, predicate) -> int:
        doomed = [tid for tid, t in self._tokens.items() if predicate(t)]
        for tid in doomed:
            del self._tokens[tid]
        return len(doomed)

    # ------------------------------------------------------------------
    # Admin helpers (not part of AuthStore)
    # ------------------------------------------------------------------

    def set_user_active(self, user_id: UUID, active: bool) -> None:
        self._users[user_id].is_active = active

    def set_company_active(self, company_id: UUID, active: bool) -> None:
        self._companies[company_id].is_active = active

    def companies(self) -> list[Company]:
        return list(self._companies.values())

    def refresh_tokens_for(self, user_id: UUID) -> list[RefreshTokenRecord]:
        return [t for t in self._tokens.values() if t.user_id == user_id]
