"""Shared test fixtures."""

from __future__ import annotations

import pytest
import pytest_asyncio

from hirescreen.auth.models import Company
from hirescreen.auth.service import AuthService
from hirescreen.config import AuthConfig
from hirescreen.store.memory import InMemoryAuthStore


@pytest.fixture
def auth_config() -> AuthConfig:
    # Minimum bcrypt cost keeps the suite fast; the default is asserted separately.
    return AuthConfig(
        access_token_secret="test-access-secret-0123456789abcdef",
        refresh_token_secret="test-refresh-secret-0123456789abcdef",
        bcrypt_rounds=4,
    )


@pytest.fixture
def memory_store() -> InMemoryAuthStore:
    return InMemoryAuthStore()


@pytest_asyncio.fixture
async def company(memory_store: InMemoryAuthStore) -> Company:
    return await memory_store.create_company(name="Acme", domain="acme.test")


@pytest.fixture
def service(memory_store: InMemoryAuthStore, auth_config: AuthConfig) -> AuthService:
    return AuthService(memory_store, auth_config)
