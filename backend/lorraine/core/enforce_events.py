"""Event Validation — checks verification and claim payloads before they are appended.

Invariants:
    - All functions are PURE: return a list of messages, empty on success
    - Confidence values must lie in [0, 1]
    - Modality and result must belong to their closed sets
    - Typed payloads are built at the boundary (schemas.exchange, API schemas)

Design Decisions:
    - Separate from retraction rules: these guard the append path, retraction rules
      guard the invalidation path
    - Payloads built directly by service callers are re-checked on the append path
"""

from dataclasses import dataclass
from datetime import datetime

from lorraine.core.domain_types import (
    ConceptId, EventSource, Modality, PersonId, VerificationResult,
)


@dataclass(frozen=True)
class VerificationInput:
    """Validated payload for appending a verification event."""
    person_id: PersonId
    concept_id: ConceptId
    modality: Modality
    result: VerificationResult
    context: str
    source: EventSource = EventSource.INTERNAL
    timestamp: datetime | None = None


@dataclass(frozen=True)
class ClaimInput:
    """Validated payload for appending a claim event."""
    person_id: PersonId
    concept_id: ConceptId
    self_reported_confidence: float
    context: str
    timestamp: datetime | None = None


_MODALITIES = {m.value for m in Modality}
_RESULTS = {r.value for r in VerificationResult}


def check_confidence_range(value: object, name: str) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"{name} must be a number between 0 and 1"
    if not 0.0 <= float(value) <= 1.0:
        return f"{name} must be between 0 and 1, got {value}"
    return None


def validate_verification(
    person_id: str, concept_id: str, modality: str, result: str,
) -> list[str]:
    errors: list[str] = []
    if not person_id:
        errors.append("person_id is required")
    if not concept_id:
        errors.append("concept_id is required")
    if modality not in _MODALITIES:
        errors.append(f'Unknown modality "{modality}"')
    if result not in _RESULTS:
        errors.append(f'Unknown result "{result}"')
    return errors


def validate_claim(
    person_id: str, concept_id: str, self_reported_confidence: object,
) -> list[str]:
    errors: list[str] = []
    if not person_id:
        errors.append("person_id is required")
    if not concept_id:
        errors.append("concept_id is required")
    error = check_confidence_range(
        self_reported_confidence, "selfReportedConfidence",
    )
    if error:
        errors.append(error)
    return errors

