"""Readiness Gates — checks a person's trust against a bundle of requirements.

Invariants:
    - All functions are PURE: trust states are read by the shell and passed in
    - Level gate uses LEVEL_ORDER (untested < contested < inferred < verified)
    - Confidence gate compares the DECAYED confidence, never the stored one
    - A bundle passes only when every gate passes (empty bundle passes)
"""

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from lorraine.core.domain_pack import BundleRequirement
from lorraine.core.domain_types import ConceptId, LEVEL_ORDER, TrustLevel
from lorraine.core.records import TrustState


@dataclass(frozen=True)
class GateResult:
    requirement: BundleRequirement
    level: TrustLevel
    decayed_confidence: float
    passed: bool
    reason: str


@dataclass
class ReadinessResult:
    person_id: str
    bundle: str
    gates: list[GateResult] = field(default_factory=list)

    @property
    def passed_count(self) -> int:
        return sum(1 for g in self.gates if g.passed)

    @property
    def total_count(self) -> int:
        return len(self.gates)

    @property
    def passed(self) -> bool:
        return self.passed_count == self.total_count


def evaluate_gate(requirement: BundleRequirement, state: TrustState | None) -> GateResult:
    level = state.level if state else TrustLevel.UNTESTED
    decayed = state.decayed_confidence if state else 0.0

    if LEVEL_ORDER[level] < LEVEL_ORDER[requirement.min_level]:
        if level == TrustLevel.UNTESTED:
            reason = "untested"
        elif level == TrustLevel.CONTESTED:
            reason = "contested (requires resolution)"
        else:
            reason = f"{level.value} (requires {requirement.min_level.value})"
        return GateResult(requirement, level, decayed, False, reason)

    if requirement.min_confidence is not None and decayed < requirement.min_confidence:
        return GateResult(
            requirement, level, decayed, False,
            f"confidence {decayed:.2f} below minimum {requirement.min_confidence}",
        )

    return GateResult(requirement, level, decayed, True, "meets requirement")


def evaluate_readiness(
    person_id: str,
    bundle_name: str,
    requirements: Sequence[BundleRequirement],
    states: Mapping[ConceptId, TrustState],
) -> ReadinessResult:
    return ReadinessResult(
        person_id=person_id,
        bundle=bundle_name,
        gates=[evaluate_gate(req, states.get(req.concept_id)) for req in requirements],
    )
