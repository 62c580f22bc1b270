"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Enums have expected members and serialize to their wire strings
    - LEVEL_ORDER ranks untested < contested < inferred < verified
"""

from lorraine.core.domain_types import (
    ConceptId, PersonId, EventId, EdgeId, RetractionId,
    Confidence, InferenceStrength,
    TrustLevel, VerificationResult, Modality, EdgeType, EventType,
    RetractionReason, DecisionType, LEVEL_ORDER,
)


def test_identity_types_wrap_str():
    assert ConceptId("closures") == "closures"
    assert PersonId("p1") == "p1"
    assert EventId("ver_1") == "ver_1"
    assert EdgeId("edge_1") == "edge_1"
    assert RetractionId("ret_1") == "ret_1"


def test_value_types_wrap_float():
    assert Confidence(0.7) == 0.7
    assert InferenceStrength(0.5) == 0.5


def test_trust_level_has_four_states():
    assert {lv.value for lv in TrustLevel} == {
        "untested", "verified", "inferred", "contested",
    }


def test_verification_result_values():
    assert {r.value for r in VerificationResult} == {
        "demonstrated", "failed", "partial",
    }


def test_modalities_use_family_prefix():
    assert Modality("external:observed") == Modality.EXTERNAL_OBSERVED
    assert Modality("integrated:use") == Modality.INTEGRATED_USE
    assert all(":" in m.value for m in Modality)


def test_edge_types():
    assert {t.value for t in EdgeType} == {
        "prerequisite", "component_of", "related_to", "analogous_to",
    }


def test_retraction_reasons_are_closed_set():
    assert {r.value for r in RetractionReason} == {
        "fraudulent", "duplicate", "identity_mixup",
        "consent_erasure", "data_correction",
    }
    assert {t.value for t in EventType} == {"verification", "claim"}


def test_decision_types():
    assert len(DecisionType) == 5
    assert DecisionType("contested_detection") == DecisionType.CONTESTED_DETECTION


def test_str_enum_compares_to_wire_value():
    assert TrustLevel.VERIFIED == "verified"


def test_level_order_ranks_levels():
    ordered = sorted(TrustLevel, key=LEVEL_ORDER.__getitem__)
    assert ordered == [
        TrustLevel.UNTESTED, TrustLevel.CONTESTED,
        TrustLevel.INFERRED, TrustLevel.VERIFIED,
    ]
