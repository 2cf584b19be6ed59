"""FastAPI dependency injection for database sessions and the auth service."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hirescreen.auth.service import AuthService
from hirescreen.store.base import AuthStore
from hirescreen_service.db.engine import Database
from hirescreen_service.db.repositories.auth import SqlAuthStore


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncIterator[AsyncSession]:
    """Yield an async DB session, auto-closing on exit."""
    async with database.session() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_auth_store(session: SessionDep) -> AuthStore:
    return SqlAuthStore(session)


AuthStoreDep = Annotated[AuthStore, Depends(get_auth_store)]


def get_auth_service(request: Request, store: AuthStoreDep) -> AuthService:
    return AuthService(store, request.app.state.auth_config)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
