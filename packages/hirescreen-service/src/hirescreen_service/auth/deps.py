"""FastAPI auth dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from hirescreen.auth.errors import InvalidToken
from hirescreen.auth.models import AccessClaims, UserRole
from hirescreen_service.db.deps import AuthServiceDep

CurrentUser = AccessClaims


async def get_current_user(request: Request, service: AuthServiceDep) -> CurrentUser:
    """Resolve the caller from ``Authorization: Bearer <token>``.

    The token is verified and the user and company are re-checked for being
    active on every request.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Access token required")

    token = auth_header.removeprefix("Bearer ").strip()
    try:
        return await service.verify_token(token)
    except InvalidToken as exc:
        raise HTTPException(status_code=401, detail="Invalid or expired token") from exc


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_role(*roles: UserRole):
    """Dependency factory that enforces role membership."""

    async def _check(current_user: CurrentUserDep) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return current_user

    return Depends(_check)
