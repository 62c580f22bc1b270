"""Exchange Schemas — camelCase documents: domain packs and bulk ingest rows.

Invariants:
    - Edge defaults: type related_to, inferenceStrength 0.5 (within [0, 1])
    - Concept ids are unique within a pack; a concept without a name is named by its id
    - Bundle minLevel is verified or inferred; minConfidence within [0, 1]
    - Ingest rows: type == "claim", or a selfReportedConfidence without a result, is
      a claim; every other row is a verification
    - Naive ingest timestamps are read as UTC

Design Decisions:
    - parse_* helpers turn ValidationError.errors() into flat "where: what" messages so
      callers can collect them per row instead of failing the whole batch
    - populate_by_name on RequirementIn: the readiness API sends snake_case, packs
      send camelCase, both reach the same model
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lorraine.core.domain_pack import (
    DEFAULT_EDGE_TYPE, DEFAULT_INFERENCE_STRENGTH,
    BundleRequirement, DomainPack, EdgeSpec,
)
from lorraine.core.domain_types import (
    ConceptId, EdgeType, EventSource, Modality, PersonId, TrustLevel, VerificationResult,
)
from lorraine.core.enforce_events import ClaimInput, VerificationInput
from lorraine.core.records import ConceptNode


# --- Domain packs -------------------------------------------------------------

class ConceptDoc(BaseModel):
    id: str = Field(min_length=1, max_length=200)
    name: str | None = Field(None, max_length=500)
    description: str | None = Field(None, max_length=10_000)
    domain: str | None = Field(None, max_length=200)

    def to_node(self) -> ConceptNode:
        return ConceptNode(
            id=ConceptId(self.id),
            name=self.name or self.id,
            description=self.description or "",
            domain=self.domain,
        )


class EdgeDoc(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_concept_id: str = Field(alias="from", min_length=1, max_length=200)
    to_concept_id: str = Field(alias="to", min_length=1, max_length=200)
    type: EdgeType = DEFAULT_EDGE_TYPE
    inference_strength: float = Field(
        DEFAULT_INFERENCE_STRENGTH, alias="inferenceStrength", ge=0.0, le=1.0,
    )

    def to_spec(self) -> EdgeSpec:
        return EdgeSpec(
            from_concept_id=ConceptId(self.from_concept_id),
            to_concept_id=ConceptId(self.to_concept_id),
            type=self.type,
            inference_strength=self.inference_strength,
        )


class RequirementIn(BaseModel):
    """One gate of a readiness bundle."""
    model_config = ConfigDict(populate_by_name=True)

    concept: str = Field(min_length=1, max_length=200)
    min_level: Literal["verified", "inferred"] = Field("verified", alias="minLevel")
    min_confidence: float | None = Field(None, alias="minConfidence", ge=0.0, le=1.0)

    def to_requirement(self) -> BundleRequirement:
        return BundleRequirement(
            concept_id=ConceptId(self.concept),
            min_level=TrustLevel(self.min_level),
            min_confidence=self.min_confidence,
        )


class BundleDoc(BaseModel):
    required: list[RequirementIn]


class MappingDoc(BaseModel):
    paths: list[str]


class DomainPackDocument(BaseModel):
    """A whole domain pack: concepts, edges, readiness bundles and path mappings."""
    id: str | None = None
    name: str | None = None
    version: str | None = None
    description: str | None = None
    concepts: list[ConceptDoc] = Field(max_length=10_000)
    edges: list[EdgeDoc] = Field(default_factory=list, max_length=50_000)
    bundles: dict[str, BundleDoc] = Field(default_factory=dict)
    mappings: dict[str, MappingDoc] = Field(default_factory=dict)

    @field_validator("concepts")
    @classmethod
    def unique_concept_ids(cls, v: list[ConceptDoc]) -> list[ConceptDoc]:
        seen: set[str] = set()
        for concept in v:
            if concept.id in seen:
                raise ValueError(f'duplicate concept id "{concept.id}"')
            seen.add(concept.id)
        return v

    def to_pack(self) -> DomainPack:
        return DomainPack(
            concepts=[c.to_node() for c in self.concepts],
            edges=[e.to_spec() for e in self.edges],
            bundles={
                name: [r.to_requirement() for r in bundle.required]
                for name, bundle in self.bundles.items()
            },
            mappings={
                ConceptId(concept_id): list(m.paths)
                for concept_id, m in self.mappings.items()
            },
            id=self.id,
            name=self.name,
            version=self.version,
            description=self.description,
        )


def parse_domain_pack(raw: object) -> tuple[DomainPack, list[str]]:
    """Validate a pack document (dict or DomainPackDocument), collecting every problem."""
    try:
        document = DomainPackDocument.model_validate(raw)
    except ValidationError as exc:
        return DomainPack(), format_errors(exc)
    return document.to_pack(), []


# --- Ingest rows --------------------------------------------------------------

class _IngestRow(BaseModel):
    person_id: str = Field(alias="personId", min_length=1, max_length=200)
    concept_id: str = Field(alias="conceptId", min_length=1, max_length=200)
    context: str = Field("", max_length=10_000)
    timestamp: datetime | None = None

    @field_validator("context", mode="before")
    @classmethod
    def null_context(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("timestamp", mode="before")
    @classmethod
    def blank_timestamp(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class VerificationRow(_IngestRow):
    modality: Modality
    result: VerificationResult
    source: EventSource = EventSource.INTERNAL

    @field_validator("source", mode="before")
    @classmethod
    def default_source(cls, v: Any) -> Any:
        return v or EventSource.INTERNAL

    def to_input(self) -> VerificationInput:
        return VerificationInput(
            person_id=PersonId(self.person_id),
            concept_id=ConceptId(self.concept_id),
            modality=self.modality,
            result=self.result,
            context=self.context,
            source=self.source,
            timestamp=self.timestamp,
        )


class ClaimRow(_IngestRow):
    self_reported_confidence: float = Field(
        alias="selfReportedConfidence", ge=0.0, le=1.0,
    )

    def to_input(self) -> ClaimInput:
        return ClaimInput(
            person_id=PersonId(self.person_id),
            concept_id=ConceptId(self.concept_id),
            self_reported_confidence=self.self_reported_confidence,
            context=self.context,
            timestamp=self.timestamp,
        )


def is_claim_row(row: dict[str, Any]) -> bool:
    return row.get("type") == "claim" or (
        "selfReportedConfidence" in row and "result" not in row
    )


def parse_ingest_row(
    row: object, index: int, default_person_id: str | None = None,
) -> tuple[VerificationInput | ClaimInput | None, list[str]]:
    """Turn one raw exchange-format row into a typed payload, or its messages."""
    where = f"events[{index}]"
    if not isinstance(row, dict):
        return None, [f"{where}: must be an object"]

    if not row.get("personId") and default_person_id:
        row = {**row, "personId": default_person_id}
    model = ClaimRow if is_claim_row(row) else VerificationRow
    try:
        parsed = model.model_validate(row)
    except ValidationError as exc:
        return None, format_errors(exc, where)
    return parsed.to_input(), []


# --- Helpers ------------------------------------------------------------------

def format_errors(exc: ValidationError, where: str = "") -> list[str]:
    """Flatten pydantic errors into "where.loc: message" strings."""
    messages: list[str] = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"])
        prefix = ".".join(part for part in (where, loc) if part)
        messages.append(f"{prefix}: {error['msg']}" if prefix else error["msg"])
    return messages
