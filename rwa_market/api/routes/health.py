"""Health Probes — liveness, and readiness of the market database.

Invariants:
    - GET /health/ answers 200 whenever the process is up
    - GET /health/ready answers 503 until the database is reachable
    - Readiness also reports whether the market registry exists; an
      uninstantiated market is reachable but not yet usable
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import rwa_market.infrastructure.database as database
from rwa_market.infrastructure.market_repository import SqlMarketRepository

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "rwa-market-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    async with manager.session() as db:
        instantiated = await SqlMarketRepository(db).registry_exists()
    return {
        "status": "ready",
        "checks": {"database": "healthy", "market_instantiated": instantiated},
    }
