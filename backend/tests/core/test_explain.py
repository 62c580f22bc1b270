"""Explanation tests — every decision type yields reasoning, inputs and alternatives.

Invariants:
    - confidence matches the decision's own confidence, clamped to [0, 1]
    - alternatives is never empty
    - Missing context values never raise
"""

import pytest

from lorraine.core.domain_types import DecisionType, Modality, TrustLevel, VerificationResult
from lorraine.core.errors import ValidationFailedError
from lorraine.core.explain import explain_decision
from lorraine.core.scoring import compute_trust_from_history


@pytest.mark.parametrize("decision_type", list(DecisionType))
def test_empty_context_never_raises(decision_type):
    explanation = explain_decision(decision_type, {})
    assert explanation.reasoning
    assert explanation.alternatives
    assert 0.0 <= explanation.confidence <= 1.0


def test_trust_update_uses_history(make_event):
    history = [
        make_event("closures", modality=Modality.GRILL_TRANSFER),
        make_event("closures", modality=Modality.SANDBOX_EXECUTION),
        make_event("closures", result=VerificationResult.FAILED, retracted=True),
    ]
    explanation = explain_decision(
        "trust_update",
        {"concept_id": "closures", "previous_level": "untested",
         "new_level": "verified", "confidence": 0.8},
        history,
    )
    assert '"closures"' in explanation.reasoning
    assert "2 verification event(s)" in explanation.reasoning
    assert explanation.trust_inputs["demonstrated"] == 2
    assert explanation.trust_inputs["failed"] == 0
    assert explanation.confidence == 0.8
    assert any("inferred" in alt for alt in explanation.alternatives)


def test_propagation_confidence_is_inference_strength():
    explanation = explain_decision(
        DecisionType.PROPAGATION_RESULT,
        {"source_concept_id": "a", "target_concept_id": "b",
         "inference_strength": 0.56, "depth": 1},
    )
    assert '"a"' in explanation.reasoning and '"b"' in explanation.reasoning
    assert explanation.confidence == pytest.approx(0.56)


def test_decay_confidence_is_decayed_value():
    explanation = explain_decision(
        DecisionType.DECAY_RESULT,
        {"concept_id": "a", "days_since_verified": 30,
         "previous_confidence": 0.8, "decayed_confidence": 0.4},
    )
    assert "0.800" in explanation.reasoning
    assert explanation.confidence == pytest.approx(0.4)


def test_contested_from_counts():
    explanation = explain_decision(
        DecisionType.CONTESTED_DETECTION,
        {"concept_id": "a", "demonstrated_count": 2, "partial_count": 2, "failed_count": 3},
    )
    # (2 + 2 * 0.5) / (3 + 3)
    assert explanation.confidence == pytest.approx(0.5)
    assert explanation.trust_inputs["failed"] == 3


def test_contested_confidence_matches_score_of_history(make_event):
    history = [
        make_event("a", modality=Modality.GRILL_RECALL),
        make_event("a", modality=Modality.GRILL_TRANSFER),
        make_event("a", result=VerificationResult.FAILED, modality=Modality.GRILL_RECALL),
    ]
    score = compute_trust_from_history(history)
    assert score.level == TrustLevel.CONTESTED

    explanation = explain_decision(
        DecisionType.CONTESTED_DETECTION, {"concept_id": "a"}, history,
    )

    assert explanation.confidence == pytest.approx(score.confidence)
    assert explanation.trust_inputs["success_share"] == pytest.approx(2 / 3)


def test_contested_prefers_supplied_confidence():
    explanation = explain_decision(
        DecisionType.CONTESTED_DETECTION,
        {"concept_id": "a", "demonstrated_count": 1, "failed_count": 1, "confidence": 0.6},
    )
    assert explanation.confidence == pytest.approx(0.6)


def test_calibration_confidence_clamped():
    explanation = explain_decision(
        DecisionType.CALIBRATION_FINDING, {"metric": "surprise_rate", "value": 1.7},
    )
    assert "surprise_rate" in explanation.reasoning
    assert explanation.confidence == 1.0


def test_unknown_decision_type_raises_validation_error():
    with pytest.raises(ValidationFailedError) as exc_info:
        explain_decision("horoscope", {})
    assert exc_info.value.code == "INVALID_DECISION_TYPE"
    assert exc_info.value.errors == ['Unknown decision type "horoscope"']
