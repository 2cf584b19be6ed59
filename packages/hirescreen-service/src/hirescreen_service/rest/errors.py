"""Map auth error kinds to HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hirescreen.auth.errors import AuthError, StoreError, UserNotFound

logger = structlog.get_logger()


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    if isinstance(exc, UserNotFound):
        logger.error("auth_invariant_violated", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("store_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
