"""Retraction Routes — invalidate events and read the audit trail.

Invariants:
    - Invalid reason / event type → 400 with every message
    - Unknown or already-retracted event → 200 with retracted=false
"""

import logging

from fastapi import APIRouter, Depends

from lorraine.api.dependencies import get_retraction_service
from lorraine.core.domain_types import EventId
from lorraine.schemas.retraction import RetractionCreate, RetractionOut, RetractResponse
from lorraine.services.retraction_service import RetractionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/retractions", tags=["retractions"])


@router.post("", response_model=RetractResponse)
async def retract_event(
    body: RetractionCreate,
    retractions: RetractionService = Depends(get_retraction_service),
):
    result = await retractions.retract_event(
        EventId(body.event_id), body.event_type, body.reason, body.retracted_by,
    )
    return RetractResponse.model_validate(result)


@router.get("/{event_id}", response_model=list[RetractionOut])
async def get_retractions(
    event_id: str,
    retractions: RetractionService = Depends(get_retraction_service),
):
    records = await retractions.get_retractions(EventId(event_id))
    return [RetractionOut.model_validate(r) for r in records]
