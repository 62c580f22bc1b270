"""Service Dependencies — per-request wiring of store and services.

Invariants:
    - One AsyncSession and one SqlTrustStore per request (FastAPI caches Depends)
    - Trust parameters always come from settings

Design Decisions:
    - Plain dependency functions over a container: explicit, overridable in tests
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lorraine.config import get_settings
from lorraine.infrastructure.database import get_db
from lorraine.services.diagnostics_service import DiagnosticsService
from lorraine.services.graph_service import GraphService
from lorraine.services.retraction_service import RetractionService
from lorraine.services.sql_store import SqlTrustStore
from lorraine.services.trust_service import TrustService


def get_store(db: AsyncSession = Depends(get_db)) -> SqlTrustStore:
    return SqlTrustStore(db)


def get_graph_service(store: SqlTrustStore = Depends(get_store)) -> GraphService:
    return GraphService(store)


def get_trust_service(store: SqlTrustStore = Depends(get_store)) -> TrustService:
    return TrustService(store, get_settings().trust_parameters())


def get_retraction_service(
    store: SqlTrustStore = Depends(get_store),
    trust: TrustService = Depends(get_trust_service),
) -> RetractionService:
    return RetractionService(store, trust)


def get_diagnostics_service(
    store: SqlTrustStore = Depends(get_store),
    trust: TrustService = Depends(get_trust_service),
) -> DiagnosticsService:
    return DiagnosticsService(store, trust)
