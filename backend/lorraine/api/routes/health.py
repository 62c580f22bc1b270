"""Health Routes — liveness, and readiness of the trust store.

Invariants:
    - GET /health/ returns 200 while the process is up, with the active trust tuning
    - GET /health/ready returns 503 when the database is unreachable
    - A reachable database with an empty graph is ready; the graph size is reported,
      not gated on

Design Decisions:
    - Readiness opens its own session from db_manager instead of Depends(get_db), so an
      unreachable database yields 503 rather than a dependency failure
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import lorraine.infrastructure.database as database
from lorraine.config import get_settings
from lorraine.services.graph_service import GraphService
from lorraine.services.sql_store import SqlTrustStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "lorraine-engine",
        "trust": {
            "base_half_life_days": settings.base_half_life_days,
            "propagation_attenuation": settings.propagation_attenuation,
        },
    }


@router.get("/ready")
async def readiness():
    """Database connectivity plus the size of the loaded concept graph."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        logger.warning("Readiness failed: trust store unreachable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )

    async with manager.session() as db:
        view = await GraphService(SqlTrustStore(db)).get_graph()
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "graph": {"concepts": len(view.nodes), "edges": len(view.edges)},
    }
