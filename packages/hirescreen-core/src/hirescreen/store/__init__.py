"""Persistence backends for users, companies and refresh tokens."""

from __future__ import annotations

from hirescreen.store.base import AuthStore
from hirescreen.store.memory import InMemoryAuthStore

__all__ = ["AuthStore", "InMemoryAuthStore"]
