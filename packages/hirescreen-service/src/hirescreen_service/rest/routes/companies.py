"""Company onboarding."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from hirescreen_service.auth.throttle import limit_auth_attempts
from hirescreen_service.db.deps import AuthServiceDep
from hirescreen_service.rest.schemas import AuthResponse, CreateCompanyRequest

router = APIRouter(tags=["companies"])


@router.post(
    "/companies",
    response_model=AuthResponse,
    status_code=201,
    dependencies=[Depends(limit_auth_attempts)],
)
async def create_company(request: CreateCompanyRequest, service: AuthServiceDep) -> AuthResponse:
    """Create a company and its first ADMIN user, returning that user's tokens."""
    result = await service.register_company(
        name=request.name,
        domain=request.domain,
        admin_email=request.admin_email,
        admin_password=request.admin_password,
        admin_first_name=request.admin_first_name,
        admin_last_name=request.admin_last_name,
    )
    return AuthResponse.from_result(result)
