"""Root conftest — shared test configuration and record factories."""

import itertools
import os
from datetime import datetime, timedelta, timezone

import pytest

# Keep tests off any real database and out of JSON log noise
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from lorraine.core.domain_types import (  # noqa: E402
    ConceptId, EventId, Modality, PersonId, VerificationResult,
)
from lorraine.core.records import ClaimEvent, VerificationEvent  # noqa: E402

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def make_event():
    """Factory for VerificationEvent records dated T0 + days."""
    counter = itertools.count()

    def _make(
        concept_id: str = "a",
        result: VerificationResult = VerificationResult.DEMONSTRATED,
        modality: Modality = Modality.GRILL_RECALL,
        days: float = 0,
        person_id: str = "p1",
        retracted: bool = False,
    ) -> VerificationEvent:
        return VerificationEvent(
            id=EventId(f"ev{next(counter)}"),
            person_id=PersonId(person_id),
            concept_id=ConceptId(concept_id),
            modality=modality,
            result=result,
            context="test",
            timestamp=T0 + timedelta(days=days),
            retracted=retracted,
        )

    return _make


@pytest.fixture
def make_claim():
    """Factory for ClaimEvent records dated T0 + days."""
    counter = itertools.count()

    def _make(
        concept_id: str = "a",
        confidence: float = 0.5,
        days: float = 0,
        person_id: str = "p1",
    ) -> ClaimEvent:
        return ClaimEvent(
            id=EventId(f"cl{next(counter)}"),
            person_id=PersonId(person_id),
            concept_id=ConceptId(concept_id),
            self_reported_confidence=confidence,
            context="test",
            timestamp=T0 + timedelta(days=days),
        )

    return _make
