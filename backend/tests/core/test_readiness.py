"""Readiness gate tests — level ordering and decayed-confidence thresholds."""

from lorraine.core.domain_pack import BundleRequirement
from lorraine.core.domain_types import ConceptId, PersonId, TrustLevel
from lorraine.core.readiness import evaluate_gate, evaluate_readiness
from lorraine.core.records import TrustState


def _view(concept_id, level, decayed):
    return TrustState(
        person_id=PersonId("p1"),
        concept_id=ConceptId(concept_id),
        level=level,
        confidence=decayed + 0.1,
        decayed_confidence=decayed,
        last_verified=None,
    )


def _req(concept_id, level=TrustLevel.VERIFIED, min_confidence=None):
    return BundleRequirement(ConceptId(concept_id), level, min_confidence)


def test_missing_state_fails_as_untested():
    gate = evaluate_gate(_req("a"), None)
    assert not gate.passed
    assert gate.reason == "untested"


def test_contested_needs_resolution():
    gate = evaluate_gate(_req("a", TrustLevel.INFERRED), _view("a", TrustLevel.CONTESTED, 0.5))
    assert not gate.passed
    assert "contested" in gate.reason


def test_inferred_does_not_meet_verified():
    gate = evaluate_gate(_req("a"), _view("a", TrustLevel.INFERRED, 0.9))
    assert not gate.passed
    assert gate.reason == "inferred (requires verified)"


def test_verified_meets_inferred_requirement():
    gate = evaluate_gate(_req("a", TrustLevel.INFERRED), _view("a", TrustLevel.VERIFIED, 0.3))
    assert gate.passed


def test_confidence_gate_uses_decayed_value():
    view = _view("a", TrustLevel.VERIFIED, 0.55)
    assert not evaluate_gate(_req("a", min_confidence=0.6), view).passed
    assert evaluate_gate(_req("a", min_confidence=0.5), view).passed


def test_bundle_passes_only_when_every_gate_passes():
    states = {
        ConceptId("a"): _view("a", TrustLevel.VERIFIED, 0.8),
        ConceptId("b"): _view("b", TrustLevel.INFERRED, 0.4),
    }
    result = evaluate_readiness("p1", "ready", [_req("a"), _req("b")], states)
    assert result.passed_count == 1
    assert result.total_count == 2
    assert not result.passed


def test_empty_bundle_passes():
    assert evaluate_readiness("p1", "empty", [], {}).passed
