"""Health check endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(request: Request) -> JSONResponse:
    """Report database and Redis reachability. 503 unless both answer."""
    database_ok = await request.app.state.database.ping()
    redis_ok = await request.app.state.redis.ping()
    status = "ready" if database_ok and redis_ok else "degraded"
    return JSONResponse(
        status_code=200 if status == "ready" else 503,
        content={
            "status": status,
            "database": "ok" if database_ok else "unavailable",
            "redis": "ok" if redis_ok else "unavailable",
        },
    )
