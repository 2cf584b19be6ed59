"""User administration. ADMIN only, scoped to the caller's company."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter

from hirescreen.auth.models import UserRole
from hirescreen_service.auth.deps import CurrentUser, require_role
from hirescreen_service.db.deps import AuthServiceDep
from hirescreen_service.rest.schemas import UserSchema, UserStatusRequest

router = APIRouter(prefix="/users", tags=["users"])

AdminDep = Annotated[CurrentUser, require_role(UserRole.ADMIN)]


@router.patch("/{user_id}/status", response_model=UserSchema)
async def set_user_status(
    user_id: UUID, request: UserStatusRequest, admin: AdminDep, service: AuthServiceDep
) -> UserSchema:
    """Activate or block a user. Blocking also ends all of the user's sessions."""
    user = await service.set_user_active(admin, user_id, request.is_active)
    return UserSchema.from_view(user)
