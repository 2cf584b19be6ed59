"""SQLAlchemy implementation of the AuthStore protocol."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from hirescreen.auth.errors import StoreError
from hirescreen.auth.models import Company, RefreshTokenRecord, UserRecord, UserRole
from hirescreen_service.db.models import CompanyModel, RefreshTokenModel, UserModel

log = structlog.get_logger(__name__)


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _company(row: CompanyModel) -> Company:
    return Company(
        id=row.id,
        name=row.name,
        domain=row.domain,
        is_active=row.is_active,
        created_at=_aware(row.created_at),
    )


def _user(row: UserModel, include_company: bool = True) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        role=UserRole(row.role),
        company_id=row.company_id,
        is_active=row.is_active,
        last_login=_aware(row.last_login),
        created_at=_aware(row.created_at),
        company=_company(row.company) if include_company and row.company is not None else None,
    )


class SqlAuthStore:
    """AuthStore over an AsyncSession. Every write commits immediately."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, statement):
        try:
            return await self._session.execute(statement)
        except SQLAlchemyError as exc:
            await self._session.rollback()
            log.error("store_query_failed", error=str(exc))
            raise StoreError(str(exc)) from exc

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            log.error("store_commit_failed", error=str(exc))
            raise StoreError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    async def find_company_by_id(self, company_id: UUID) -> Company | None:
        result = await self._execute(
            select(CompanyModel)
            .where(CompanyModel.id == company_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalars().first()
        return _company(row) if row else None

    async def create_company(self, name: str, domain: str) -> Company:
        row = CompanyModel(id=uuid4(), name=name, domain=domain, is_active=True)
        self._session.add(row)
        await self._commit()
        company = await self.find_company_by_id(row.id)
        if company is None:
            raise StoreError(f"company {row.id} vanished after insert")
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
        company = CompanyModel(id=uuid4(), name=name, domain=domain, is_active=True)
        admin = UserModel(
            id=uuid4(),
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            company_id=company.id,
            role=UserRole.ADMIN,
            is_active=True,
        )
        self._session.add_all([company, admin])
        # One commit for both rows; a failure rolls back the company too.
        await self._commit()
        user = await self.find_user_by_id(admin.id)
        if user is None:
            raise StoreError(f"user {admin.id} vanished after insert")
        return user

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        result = await self._execute(
            select(UserModel)
            .options(joinedload(UserModel.company))
            .where(UserModel.email == email)
            .execution_options(populate_existing=True)
        )
        row = result.scalars().first()
        return _user(row) if row else None

    async def find_user_by_id(
        self, user_id: UUID, include_company: bool = True
    ) -> UserRecord | None:
        query = (
            select(UserModel)
            .where(UserModel.id == user_id)
            .execution_options(populate_existing=True)
        )
        if include_company:
            query = query.options(joinedload(UserModel.company))
        result = await self._execute(query)
        row = result.scalars().first()
        return _user(row, include_company) if row else None

    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        company_id: UUID,
        role: UserRole,
    ) -> UserRecord:
        row = UserModel(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            company_id=company_id,
            role=role,
            is_active=True,
        )
        self._session.add(row)
        await self._commit()
        user = await self.find_user_by_id(row.id)
        if user is None:
            raise StoreError(f"user {row.id} vanished after insert")
        return user

    async def update_user_last_login(self, user_id: UUID, at: datetime) -> None:
        await self._execute(
            update(UserModel).where(UserModel.id == user_id).values(last_login=at)
        )
        await self._commit()

    async def update_user_active(self, user_id: UUID, active: bool) -> UserRecord | None:
        result = await self._execute(
            update(UserModel).where(UserModel.id == user_id).values(is_active=active)
        )
        await self._commit()
        if result.rowcount == 0:
            return None
        return await self.find_user_by_id(user_id)

    # ------------------------------------------------------------------
    # Refresh tokens
    # ------------------------------------------------------------------

    async def create_refresh_token(
        self, token: str, user_id: UUID, expires_at: datetime
    ) -> RefreshTokenRecord:
        row = RefreshTokenModel(token=token, user_id=user_id, expires_at=expires_at)
        self._session.add(row)
        await self._commit()
        return RefreshTokenRecord(
            id=row.id,
            token=row.token,
            user_id=row.user_id,
            expires_at=_aware(row.expires_at),
            created_at=_aware(row.created_at),
        )

    async def find_refresh_token_by_token(self, token: str) -> RefreshTokenRecord | None:
        result = await self._execute(
            select(RefreshTokenModel)
            .options(joinedload(RefreshTokenModel.user).joinedload(UserModel.company))
            .where(RefreshTokenModel.token == token)
            .execution_options(populate_existing=True)
        )
        row = result.scalars().first()
        if row is None:
            return None
        return RefreshTokenRecord(
            id=row.id,
            token=row.token,
            user_id=row.user_id,
            expires_at=_aware(row.expires_at),
            created_at=_aware(row.created_at),
            user=_user(row.user) if row.user is not None else None,
        )

    async def delete_refresh_token_by_id(self, token_id: UUID) -> bool:
        result = await self._execute(
            delete(RefreshTokenModel).where(RefreshTokenModel.id == token_id)
        )
        await self._commit()
        return result.rowcount > 0

    async def delete_refresh_tokens_by_token(self, token: str) -> int:
        result = await self._execute(
            delete(RefreshTokenModel).where(RefreshTokenModel.token == token)
        )
        await self._commit()
        return result.rowcount

    async def delete_refresh_tokens_by_user_id(self, user_id: UUID) -> int:
        result = await self._execute(
            delete(RefreshTokenModel).where(RefreshTokenModel.user_id == user_id)
        )
        await self._commit()
        return result.rowcount
