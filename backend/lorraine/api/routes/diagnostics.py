"""Diagnostics Routes — decay report, calibration, readiness and explanations.

Invariants:
    - All endpoints are read-only
    - Readiness bundles arrive in the request; they are never persisted
"""

import logging

from fastapi import APIRouter, Depends

from lorraine.api.dependencies import get_diagnostics_service
from lorraine.core.domain_types import ConceptId, PersonId
from lorraine.schemas.diagnostics import (
    CalibrationResponse, DecayResultOut, ExplanationRequest, ExplanationResponse,
    GateOut, ReadinessRequest, ReadinessResponse,
)
from lorraine.services.diagnostics_service import DiagnosticsService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["diagnostics"])


@router.get("/people/{person_id}/decay", response_model=list[DecayResultOut])
async def get_decay(
    person_id: str,
    diagnostics: DiagnosticsService = Depends(get_diagnostics_service),
):
    results = await diagnostics.decay_trust(PersonId(person_id))
    return [DecayResultOut.model_validate(r) for r in results]


@router.get("/people/{person_id}/calibration", response_model=CalibrationResponse)
async def get_calibration(
    person_id: str,
    diagnostics: DiagnosticsService = Depends(get_diagnostics_service),
):
    report = await diagnostics.calibrate(PersonId(person_id))
    return CalibrationResponse.model_validate(report)


@router.post("/people/{person_id}/readiness", response_model=ReadinessResponse)
async def check_readiness(
    person_id: str,
    body: ReadinessRequest,
    diagnostics: DiagnosticsService = Depends(get_diagnostics_service),
):
    requirements = [r.to_requirement() for r in body.required]
    result = await diagnostics.check_readiness(
        PersonId(person_id), body.bundle, requirements,
    )
    return ReadinessResponse(
        person_id=result.person_id,
        bundle=result.bundle,
        passed=result.passed,
        passed_count=result.passed_count,
        total_count=result.total_count,
        gates=[
            GateOut(
                concept_id=g.requirement.concept_id,
                min_level=g.requirement.min_level,
                min_confidence=g.requirement.min_confidence,
                level=g.level,
                decayed_confidence=g.decayed_confidence,
                passed=g.passed,
                reason=g.reason,
            )
            for g in result.gates
        ],
    )


@router.post("/explanations", response_model=ExplanationResponse)
async def explain(
    body: ExplanationRequest,
    diagnostics: DiagnosticsService = Depends(get_diagnostics_service),
):
    explanation = await diagnostics.explain(
        body.decision_type,
        body.context,
        PersonId(body.person_id) if body.person_id else None,
        ConceptId(body.concept_id) if body.concept_id else None,
    )
    return ExplanationResponse.model_validate(explanation)
