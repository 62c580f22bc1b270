"""Trust Schemas — event submission bodies and trust read views.

Invariants:
    - self_reported_confidence within [0, 1]
    - modality / result / source restricted to their enums
    - Ingest rows are objects validated one by one (schemas.exchange), so a bad
      row is reported and skipped instead of rejecting the whole batch
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lorraine.core.domain_types import (
    EventSource, Modality, TrustLevel, VerificationResult,
)


class VerificationCreate(BaseModel):
    """Submit one verification outcome."""
    concept_id: str = Field(min_length=1, max_length=200)
    modality: Modality
    result: VerificationResult
    context: str = Field("", max_length=10_000)
    source: EventSource = EventSource.INTERNAL
    timestamp: datetime | None = None


class ClaimCreate(BaseModel):
    """Submit one self-reported confidence."""
    concept_id: str = Field(min_length=1, max_length=200)
    self_reported_confidence: float = Field(ge=0.0, le=1.0)
    context: str = Field("", max_length=10_000)
    timestamp: datetime | None = None


class IngestRequest(BaseModel):
    """Bulk events in the camelCase exchange format."""
    events: list[dict[str, Any]] = Field(max_length=10_000)


class IngestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    processed: int
    verifications: int
    claims: int
    skipped: int
    errors: list[str] = []
    concepts_affected: list[str] = []

    @field_validator("concepts_affected", mode="before")
    @classmethod
    def sort_concepts(cls, v: Any) -> list[str]:
        return sorted(v)


class VerificationEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    person_id: str
    concept_id: str
    modality: Modality
    result: VerificationResult
    context: str
    source: EventSource
    timestamp: datetime
    retracted: bool


class ClaimEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    person_id: str
    concept_id: str
    self_reported_confidence: float
    context: str
    timestamp: datetime
    retracted: bool


class TrustStateResponse(BaseModel):
    """Read view of trust, decayed to the request time."""
    model_config = ConfigDict(from_attributes=True)

    person_id: str
    concept_id: str
    level: TrustLevel
    confidence: float
    decayed_confidence: float
    last_verified: datetime | None = None
    modalities_tested: list[Modality] = []
    inferred_from: list[str] = []
    verification_history: list[VerificationEventOut] = []
    claim_history: list[ClaimEventOut] = []
    calibration_gap: float | None = None


class PropagationResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    concept_id: str
    previous_level: TrustLevel
    previous_confidence: float
    new_level: TrustLevel
    new_confidence: float
    inference_strength: float
    reason: str
