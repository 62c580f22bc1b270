"""Retraction Schemas — retraction requests and audit records.

Invariants:
    - event_type and reason stay plain strings here: the service validates them
      against the closed sets and reports every problem at once
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lorraine.core.domain_types import EventType, RetractionReason


class RetractionCreate(BaseModel):
    event_id: str = Field(min_length=1, max_length=64)
    event_type: str
    reason: str
    retracted_by: str = Field(max_length=200)


class RetractResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    retracted: bool
    trust_states_affected: list[str] = []


class RetractionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    event_type: EventType
    reason: RetractionReason
    retracted_by: str
    person_id: str
    concept_id: str
    timestamp: datetime
