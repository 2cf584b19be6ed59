"""Auth endpoints: register, login, refresh, logout, /me."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from hirescreen.auth.errors import InvalidCredentials
from hirescreen_service.auth.deps import CurrentUserDep
from hirescreen_service.auth.throttle import AuthThrottleDep, client_address, limit_auth_attempts
from hirescreen_service.db.deps import AuthServiceDep
from hirescreen_service.rest.schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RefreshRequest,
    RegisterRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    dependencies=[Depends(limit_auth_attempts)],
)
async def register(request: RegisterRequest, service: AuthServiceDep) -> AuthResponse:
    """Create a user in an existing company, returning the user and a token pair."""
    result = await service.register(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        company_id=request.company_id,
        role=request.role,
    )
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(limit_auth_attempts)])
async def login(
    request: LoginRequest,
    http_request: Request,
    service: AuthServiceDep,
    throttle: AuthThrottleDep,
) -> AuthResponse:
    address = client_address(http_request)
    await throttle.check_lockout(request.email, address)
    try:
        result = await service.login(request.email, request.password)
    except InvalidCredentials:
        await throttle.record_failure(request.email, address)
        raise
    await throttle.clear_failures(request.email, address)
    return AuthResponse.from_result(result)


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(request: RefreshRequest, service: AuthServiceDep) -> AuthResponse:
    """Exchange a refresh token for a new pair. The presented token stops working."""
    result = await service.refresh_token(request.refresh_token)
    return AuthResponse.from_result(result)


@router.post("/logout", status_code=204)
async def logout(request: RefreshRequest, service: AuthServiceDep) -> Response:
    await service.logout(request.refresh_token)
    return Response(status_code=204)


@router.post("/logout-all", status_code=204)
async def logout_all(current_user: CurrentUserDep, service: AuthServiceDep) -> Response:
    """Revoke every refresh token of the caller."""
    await service.logout_all(current_user.user_id)
    return Response(status_code=204)


@router.get("/me", response_model=MeResponse)
async def me(current_user: CurrentUserDep) -> MeResponse:
    return MeResponse(
        user_id=str(current_user.user_id),
        email=current_user.email,
        role=current_user.role,
        company_id=str(current_user.company_id),
    )
