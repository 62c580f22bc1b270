"""Calibration — how well self-reports and the model itself match the evidence.

Invariants:
    - All functions are PURE: the shell gathers one ConceptEvidence per concept
    - Never raises on empty input; a person with no events gets zeros and a
      "no trust data" recommendation
    - Every ratio is within [0, 1]
    - Claims feed calibration only; nothing here changes trust

Design Decisions:
    - prediction_accuracy looks at every claim against the evidence that existed
      at claim time (direct history up to the claim, decayed to the claim instant),
      so later evidence cannot make an old self-report look better or worse
    - claim_calibration looks at each concept's latest claim against today's decayed
      confidence, which is what a reader of the current model cares about
    - Surprise rate scores the model on its own outcomes: the confidence from all but
      the last verification should predict the last result
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from lorraine.core.decay import compute_decayed_confidence, days_between, read_time_confidence
from lorraine.core.domain_types import TrustLevel, VerificationResult
from lorraine.core.records import ClaimEvent, StoredTrustState, VerificationEvent
from lorraine.core.scoring import compute_trust_from_history
from lorraine.core.trust_parameters import TrustParameters, DEFAULT_TRUST_PARAMETERS


NO_DATA_RECOMMENDATION = "No trust data available. Begin verification to build a model."
PREDICTION_THRESHOLD = 0.5
BIAS_ALERT = 0.3


@dataclass
class ConceptEvidence:
    """Everything calibration needs to know about one concept for one person."""
    state: StoredTrustState | None
    history: list[VerificationEvent] = field(default_factory=list)
    claims: list[ClaimEvent] = field(default_factory=list)
    downstream_dependent_count: int = 0


@dataclass
class CalibrationReport:
    prediction_accuracy: float = 0.0
    claim_calibration: float = 0.0
    overconfidence_bias: float = 0.0
    underconfidence_bias: float = 0.0
    surprise_rate: float = 0.0
    stale_percentage: float = 0.0
    claim_count: int = 0
    outcome_prediction_count: int = 0
    stale_from_inferred: int = 0
    concept_count: int = 0
    recommendation: str = NO_DATA_RECOMMENDATION


def evidence_confidence_at(
    history: Sequence[VerificationEvent],
    moment: datetime,
    downstream_dependent_count: int,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Decayed direct confidence using only evidence recorded up to ``moment``."""
    prior = [e for e in history if e.timestamp <= moment and not e.retracted]
    if not prior:
        return 0.0
    score = compute_trust_from_history(prior, None, params)
    return compute_decayed_confidence(
        score.confidence,
        max(e.timestamp for e in prior),
        moment,
        len({e.modality for e in prior}),
        downstream_dependent_count,
        params,
    )


def calibrate(
    evidence: Sequence[ConceptEvidence],
    as_of: datetime,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> CalibrationReport:
    states = [e.state for e in evidence if e.state is not None]
    has_claims = any(e.claims for e in evidence)
    if not states and not has_claims:
        return CalibrationReport()

    report = CalibrationReport(concept_count=len(evidence))

    # Claim gaps at claim time.
    point_gaps: list[float] = []
    for item in evidence:
        for claim in item.claims:
            actual = evidence_confidence_at(
                item.history, claim.timestamp, item.downstream_dependent_count, params,
            )
            point_gaps.append(claim.self_reported_confidence - actual)
    report.claim_count = len(point_gaps)
    if point_gaps:
        report.prediction_accuracy = max(
            0.0, 1 - sum(abs(g) for g in point_gaps) / len(point_gaps),
        )
        over = [g for g in point_gaps if g > 0]
        under = [-g for g in point_gaps if g < 0]
        report.overconfidence_bias = sum(over) / len(over) if over else 0.0
        report.underconfidence_bias = sum(under) / len(under) if under else 0.0

    # Latest claim per concept against current decayed confidence.
    latest_gaps: list[float] = []
    for item in evidence:
        if not item.claims:
            continue
        latest = max(item.claims, key=lambda c: c.timestamp)
        current = (
            read_time_confidence(item.state, as_of, item.downstream_dependent_count, params)
            if item.state else 0.0
        )
        latest_gaps.append(abs(latest.self_reported_confidence - current))
    if latest_gaps:
        report.claim_calibration = max(0.0, 1 - sum(latest_gaps) / len(latest_gaps))

    # Outcome surprises.
    predictions = surprises = 0
    for item in evidence:
        history = sorted(
            (e for e in item.history if not e.retracted), key=lambda e: (e.timestamp, e.id),
        )
        if len(history) < 2:
            continue
        last = history[-1]
        if last.result == VerificationResult.PARTIAL:
            continue
        before = compute_trust_from_history(history[:-1], None, params).confidence
        predicted_success = before >= PREDICTION_THRESHOLD
        predictions += 1
        if predicted_success != (last.result == VerificationResult.DEMONSTRATED):
            surprises += 1
    report.outcome_prediction_count = predictions
    report.surprise_rate = surprises / predictions if predictions else 0.0

    # Staleness.
    stale = 0
    for state in states:
        if state.last_verified is not None:
            if days_between(state.last_verified, as_of) > params.stale_threshold_days:
                stale += 1
        elif state.level == TrustLevel.INFERRED:
            stale += 1
            report.stale_from_inferred += 1
    report.stale_percentage = stale / len(states) if states else 0.0

    report.recommendation = recommend(report)
    return report


def recommend(report: CalibrationReport) -> str:
    """First matching condition wins."""
    if report.stale_percentage > 0.5:
        return ("More than half the model is stale. "
                "Prioritize re-verification of foundational concepts.")
    if report.overconfidence_bias > BIAS_ALERT:
        return ("Self-reports run ahead of the evidence (overconfidence). "
                "Verify claimed concepts with harder modalities.")
    if report.underconfidence_bias > BIAS_ALERT:
        return ("Self-reports lag behind the evidence (underconfidence). "
                "Demonstrated understanding is stronger than claimed.")
    if report.surprise_rate > BIAS_ALERT:
        return ("High surprise rate. Model predictions frequently differ from outcomes. "
                "More evidence needed.")
    if report.claim_count > 0 and report.claim_calibration < 0.5:
        return ("Self-assessment poorly calibrated with evidence. "
                "Focus on claim-evidence alignment.")
    if report.outcome_prediction_count == 0 and report.claim_count == 0:
        return ("Insufficient data for calibration. Record claims or repeat "
                "verifications to measure prediction accuracy.")
    return "Model is performing within acceptable parameters. Continue regular verification."
