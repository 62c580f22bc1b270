"""Retraction Rules — validation and audit records for event retraction.

Invariants:
    - All functions are PURE
    - An event moves active -> retracted exactly once; retracted is terminal
    - Reasons and event types come from closed sets; anything else is a validation error

Design Decisions:
    - Validation returns every message at once (list), mirroring graph load errors,
      so a caller can fix a request in one round trip
    - Audit records are built here so ids and timestamps are generated in one place
"""

import uuid
from datetime import datetime

from lorraine.core.domain_types import (
    ConceptId, EventId, EventType, PersonId, RetractionId, RetractionReason,
)
from lorraine.core.records import Retraction


def validate_retraction_request(
    event_type: str, reason: str, retracted_by: str,
) -> list[str]:
    """Return all problems with a retraction request (empty when valid)."""
    errors: list[str] = []
    if event_type not in {t.value for t in EventType}:
        allowed = ", ".join(t.value for t in EventType)
        errors.append(f'Invalid event type "{event_type}". Expected one of: {allowed}')
    if reason not in {r.value for r in RetractionReason}:
        allowed = ", ".join(r.value for r in RetractionReason)
        errors.append(f'Invalid retraction reason "{reason}". Expected one of: {allowed}')
    if not retracted_by or not retracted_by.strip():
        errors.append("retracted_by must name the actor performing the retraction")
    return errors


def new_retraction(
    event_id: EventId,
    event_type: EventType,
    reason: RetractionReason,
    retracted_by: str,
    person_id: PersonId,
    concept_id: ConceptId,
    timestamp: datetime,
) -> Retraction:
    return Retraction(
        id=RetractionId(f"ret_{uuid.uuid4().hex}"),
        event_id=event_id,
        event_type=event_type,
        reason=reason,
        retracted_by=retracted_by,
        person_id=person_id,
        concept_id=concept_id,
        timestamp=timestamp,
    )

