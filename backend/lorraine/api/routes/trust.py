"""Trust Routes — evidence submission and trust reads per person.

Invariants:
    - Writes return the refreshed trust view for the touched concept
    - Unknown concepts read as untested (200, never 404)
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from lorraine.api.dependencies import get_trust_service
from lorraine.core.domain_types import ConceptId, PersonId
from lorraine.core.enforce_events import ClaimInput, VerificationInput
from lorraine.schemas.trust import (
    ClaimCreate, IngestRequest, IngestResponse, PropagationResultOut,
    TrustStateResponse, VerificationCreate,
)
from lorraine.services.trust_service import TrustService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/people", tags=["trust"])


@router.post(
    "/{person_id}/verifications",
    response_model=TrustStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_verification(
    person_id: str,
    body: VerificationCreate,
    trust: TrustService = Depends(get_trust_service),
):
    state = await trust.record_verification(VerificationInput(
        person_id=PersonId(person_id),
        concept_id=ConceptId(body.concept_id),
        modality=body.modality,
        result=body.result,
        context=body.context,
        source=body.source,
        timestamp=body.timestamp,
    ))
    return TrustStateResponse.model_validate(state)


@router.post(
    "/{person_id}/claims",
    response_model=TrustStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_claim(
    person_id: str,
    body: ClaimCreate,
    trust: TrustService = Depends(get_trust_service),
):
    state = await trust.record_claim(ClaimInput(
        person_id=PersonId(person_id),
        concept_id=ConceptId(body.concept_id),
        self_reported_confidence=body.self_reported_confidence,
        context=body.context,
        timestamp=body.timestamp,
    ))
    return TrustStateResponse.model_validate(state)


@router.post("/{person_id}/events/ingest", response_model=IngestResponse)
async def ingest_events(
    person_id: str,
    body: IngestRequest,
    trust: TrustService = Depends(get_trust_service),
):
    """Bulk append; rows without personId default to the path person."""
    result = await trust.ingest_events(body.events, default_person_id=person_id)
    return IngestResponse.model_validate(result)


@router.post(
    "/{person_id}/concepts/{concept_id}/propagate",
    response_model=list[PropagationResultOut],
)
async def propagate_trust(
    person_id: str,
    concept_id: str,
    trust: TrustService = Depends(get_trust_service),
):
    results = await trust.propagate_trust(PersonId(person_id), ConceptId(concept_id))
    return [PropagationResultOut.model_validate(r) for r in results]


@router.get("/{person_id}/trust", response_model=list[TrustStateResponse])
async def get_bulk_trust(
    person_id: str,
    concept_ids: list[str] | None = Query(None),
    trust: TrustService = Depends(get_trust_service),
):
    states = await trust.get_bulk_trust_state(
        PersonId(person_id),
        [ConceptId(c) for c in concept_ids] if concept_ids else None,
    )
    return [TrustStateResponse.model_validate(s) for s in states]


@router.get("/{person_id}/trust/{concept_id}", response_model=TrustStateResponse)
async def get_trust(
    person_id: str,
    concept_id: str,
    trust: TrustService = Depends(get_trust_service),
):
    state = await trust.get_trust_state(PersonId(person_id), ConceptId(concept_id))
    return TrustStateResponse.model_validate(state)
