"""Service test fixtures — async DB, wired services and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe hits the test engine
    - Services run on a FakeClock, so decay is deterministic

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and
      route tests (PostgreSQL-specific features are not exercised)
    - prerequisite_chain loads A -> B -> C -> D -> E at strength 0.8, the graph most
      propagation and decay assertions are written against
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import lorraine.models  # noqa: F401  (registers tables on Base.metadata)
from lorraine.core.domain_pack import EdgeSpec
from lorraine.core.domain_types import ConceptId, EdgeType
from lorraine.core.records import ConceptNode
from lorraine.db.base import Base
from lorraine.infrastructure.database import get_db, DatabaseSessionManager
import lorraine.infrastructure.database as db_module
from lorraine.main import app
from lorraine.services.diagnostics_service import DiagnosticsService
from lorraine.services.graph_service import GraphService
from lorraine.services.retraction_service import RetractionService
from lorraine.services.sql_store import SqlTrustStore
from lorraine.services.trust_service import TrustService

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
CHAIN = ["A", "B", "C", "D", "E"]


class FakeClock:
    """Callable clock the tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def store(test_db):
    return SqlTrustStore(test_db)


@pytest.fixture
def graph_service(store):
    return GraphService(store)


@pytest.fixture
def trust_service(store, clock):
    return TrustService(store, clock=clock)


@pytest.fixture
def retraction_service(store, trust_service):
    return RetractionService(store, trust_service)


@pytest.fixture
def diagnostics_service(store, trust_service):
    return DiagnosticsService(store, trust_service)


@pytest.fixture
async def prerequisite_chain(graph_service):
    """Load A -> B -> C -> D -> E, every edge a prerequisite at strength 0.8."""
    result = await graph_service.load_concepts(
        [ConceptNode(id=ConceptId(c), name=f"Concept {c}", domain="chain") for c in CHAIN],
        [
            EdgeSpec(ConceptId(a), ConceptId(b), EdgeType.PREREQUISITE, 0.8)
            for a, b in zip(CHAIN, CHAIN[1:])
        ],
    )
    assert result.errors == []
    return CHAIN


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def chain_pack():
    """The prerequisite chain as a domain pack document."""
    return {
        "id": "chain",
        "name": "Chain",
        "version": "1.0.0",
        "concepts": [{"id": c, "name": f"Concept {c}", "domain": "chain"} for c in CHAIN],
        "edges": [
            {"from": a, "to": b, "type": "prerequisite", "inferenceStrength": 0.8}
            for a, b in zip(CHAIN, CHAIN[1:])
        ],
        "bundles": {"all": {"required": [{"concept": c} for c in CHAIN]}},
    }
