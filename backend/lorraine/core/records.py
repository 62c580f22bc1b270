"""Engine Records — plain dataclasses exchanged between the core and the shell.

Invariants:
    - Event records are frozen; the only mutable fact about an event (retracted)
      is changed by the store, which hands back a new record
    - StoredTrustState is a projection: always rebuildable from non-retracted history
    - TrustState (read view) adds read-time fields that are never persisted
      (decayed_confidence, calibration_gap)
    - All timestamps are timezone-aware UTC datetimes

Design Decisions:
    - Dataclasses over ORM objects in the core: no session, no lazy loading, no IO
    - Tuples for collection fields on frozen records so equality and hashing stay cheap
"""

from dataclasses import dataclass, field
from datetime import datetime

from lorraine.core.domain_types import (
    ConceptId, PersonId, EventId, EdgeId, RetractionId,
    TrustLevel, VerificationResult, Modality, EventSource,
    EdgeType, EventType, RetractionReason,
)


# ─── Graph ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class ConceptNode:
    """A single unit of knowledge a person can demonstrate or fail."""
    id: ConceptId
    name: str
    description: str = ""
    domain: str | None = None


@dataclass(frozen=True)
class RelationshipEdge:
    """Directed edge: trust in from_concept_id implies trust in to_concept_id."""
    id: EdgeId
    from_concept_id: ConceptId
    to_concept_id: ConceptId
    type: EdgeType
    inference_strength: float


# ─── Event Log ───────────────────────────────────────────────────

@dataclass(frozen=True)
class VerificationEvent:
    """Evidence that a person demonstrated, failed or partially showed a concept."""
    id: EventId
    person_id: PersonId
    concept_id: ConceptId
    modality: Modality
    result: VerificationResult
    context: str
    timestamp: datetime
    source: EventSource = EventSource.INTERNAL
    retracted: bool = False


@dataclass(frozen=True)
class ClaimEvent:
    """A self-report. Hypothesis, not evidence."""
    id: EventId
    person_id: PersonId
    concept_id: ConceptId
    self_reported_confidence: float
    context: str
    timestamp: datetime
    retracted: bool = False


@dataclass(frozen=True)
class Retraction:
    """Permanent audit record of an event invalidation."""
    id: RetractionId
    event_id: EventId
    event_type: EventType
    reason: RetractionReason
    retracted_by: str
    person_id: PersonId
    concept_id: ConceptId
    timestamp: datetime


# ─── Trust ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class TrustScore:
    """Output of scoring a single history."""
    level: TrustLevel
    confidence: float


@dataclass(frozen=True)
class StoredTrustState:
    """The persisted projection row for a (person, concept)."""
    person_id: PersonId
    concept_id: ConceptId
    level: TrustLevel = TrustLevel.UNTESTED
    confidence: float = 0.0
    last_verified: datetime | None = None
    modalities_tested: tuple[Modality, ...] = ()
    inferred_from: tuple[ConceptId, ...] = ()


@dataclass
class TrustState:
    """Read view of trust, including read-time decay and calibration."""
    person_id: PersonId
    concept_id: ConceptId
    level: TrustLevel
    confidence: float
    decayed_confidence: float
    last_verified: datetime | None
    modalities_tested: list[Modality] = field(default_factory=list)
    inferred_from: list[ConceptId] = field(default_factory=list)
    verification_history: list[VerificationEvent] = field(default_factory=list)
    claim_history: list[ClaimEvent] = field(default_factory=list)
    calibration_gap: float | None = None


# ─── Operation Results ───────────────────────────────────────────

@dataclass(frozen=True)
class PropagationResult:
    """A neighbour whose trust moved because of a source concept."""
    concept_id: ConceptId
    previous_level: TrustLevel
    previous_confidence: float
    new_level: TrustLevel
    new_confidence: float
    inference_strength: float
    reason: str


@dataclass(frozen=True)
class DecayResult:
    """A concept whose confidence has decayed below its stored value."""
    concept_id: ConceptId
    previous_confidence: float
    decayed_confidence: float
    days_since_verified: float


@dataclass
class LoadResult:
    """Outcome of an atomic graph batch load."""
    loaded: int = 0
    edges_created: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class RetractResult:
    """Outcome of a retraction request."""
    retracted: bool
    trust_states_affected: list[ConceptId] = field(default_factory=list)


@dataclass
class ProjectionResult:
    """Outcome of re-projecting one connected component."""
    concept_ids: list[ConceptId]
    changed_concept_ids: list[ConceptId]
    states_written: int


@dataclass
class IngestResult:
    """Outcome of a bulk event ingest."""
    processed: int = 0
    verifications: int = 0
    claims: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    concepts_affected: set[ConceptId] = field(default_factory=set)
