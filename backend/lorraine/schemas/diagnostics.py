"""Diagnostics Schemas — decay, calibration, readiness and explanation payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lorraine.core.domain_types import DecisionType, TrustLevel
from lorraine.schemas.exchange import RequirementIn


class DecayResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    concept_id: str
    previous_confidence: float
    decayed_confidence: float
    days_since_verified: float


class CalibrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    prediction_accuracy: float
    claim_calibration: float
    overconfidence_bias: float
    underconfidence_bias: float
    surprise_rate: float
    stale_percentage: float
    claim_count: int
    outcome_prediction_count: int
    stale_from_inferred: int
    concept_count: int
    recommendation: str


class ReadinessRequest(BaseModel):
    bundle: str = Field(min_length=1, max_length=200)
    required: list[RequirementIn]


class GateOut(BaseModel):
    concept_id: str
    min_level: TrustLevel
    min_confidence: float | None
    level: TrustLevel
    decayed_confidence: float
    passed: bool
    reason: str


class ReadinessResponse(BaseModel):
    person_id: str
    bundle: str
    passed: bool
    passed_count: int
    total_count: int
    gates: list[GateOut]


class ExplanationRequest(BaseModel):
    decision_type: DecisionType
    context: dict[str, Any] = {}
    person_id: str | None = None
    concept_id: str | None = None


class ExplanationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reasoning: str
    trust_inputs: dict[str, Any]
    alternatives: list[str]
    confidence: float
