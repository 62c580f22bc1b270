"""Trust Scoring — derives a trust level and confidence from a verification history.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no clock
    - Classification uses aggregate counts only, so any permutation of the same
      history yields the same score
    - Confidence is always within [0, 1]
    - Callers pass non-retracted history only; retracted events are filtered again
      here so a stray flag can never leak into a score

Design Decisions:
    - Partial-only evidence is classified verified at half the modality strength.
      It is weaker than a full demonstration but still direct evidence, so it is
      kept out of the inferred level (which is reserved for propagation)
    - A history with no successes left after a previously positive state becomes
      contested at a fixed low confidence instead of snapping back to untested
"""

from typing import Iterable

from lorraine.core.domain_types import Modality, TrustLevel, VerificationResult
from lorraine.core.records import TrustScore, VerificationEvent
from lorraine.core.trust_parameters import TrustParameters, DEFAULT_TRUST_PARAMETERS


UNTESTED_SCORE = TrustScore(TrustLevel.UNTESTED, 0.0)


def compute_trust_from_history(
    history: Iterable[VerificationEvent],
    existing: TrustScore | None = None,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> TrustScore:
    """Score a (person, concept) history.

    ``existing`` is consulted only when no success remains in the history.
    """
    events = [e for e in history if not e.retracted]
    if not events:
        return UNTESTED_SCORE

    demonstrated = [e for e in events if e.result == VerificationResult.DEMONSTRATED]
    failed = [e for e in events if e.result == VerificationResult.FAILED]
    partial = [e for e in events if e.result == VerificationResult.PARTIAL]

    has_success = bool(demonstrated or partial)

    if has_success and failed:
        success_weight = success_weight_of(demonstrated, partial, params)
        base = success_weight / (success_weight + len(failed))
        bonus = modality_bonus(demonstrated, params)
        return TrustScore(TrustLevel.CONTESTED, min(1.0, base + bonus))

    if demonstrated:
        strongest = max_strength(demonstrated, params)
        bonus = modality_bonus(demonstrated, params)
        partial_bonus = params.partial_evidence_bonus if partial else 0.0
        return TrustScore(
            TrustLevel.VERIFIED, min(1.0, strongest + bonus + partial_bonus),
        )

    if partial:
        strongest = max_strength(partial, params)
        return TrustScore(
            TrustLevel.VERIFIED, min(1.0, strongest * params.partial_weight),
        )

    if existing is not None and existing.level in (
        TrustLevel.VERIFIED, TrustLevel.INFERRED,
    ):
        return TrustScore(
            TrustLevel.CONTESTED, params.vanished_evidence_confidence,
        )

    return UNTESTED_SCORE


def success_weight_of(
    demonstrated: list[VerificationEvent],
    partial: list[VerificationEvent],
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Demonstrations count fully, partials at params.partial_weight."""
    return len(demonstrated) + len(partial) * params.partial_weight


def failure_share(
    history: Iterable[VerificationEvent],
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Fraction of the weighted evidence that is failure (0 when no failures)."""
    events = [e for e in history if not e.retracted]
    demonstrated = [e for e in events if e.result == VerificationResult.DEMONSTRATED]
    partial = [e for e in events if e.result == VerificationResult.PARTIAL]
    failed = sum(1 for e in events if e.result == VerificationResult.FAILED)
    if failed == 0:
        return 0.0
    return failed / (success_weight_of(demonstrated, partial, params) + failed)


def distinct_modalities(events: Iterable[VerificationEvent]) -> set[Modality]:
    return {e.modality for e in events}


def modality_bonus(
    demonstrated: list[VerificationEvent],
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Cross-modality bonus: each extra demonstrated channel adds a fixed amount."""
    count = len(distinct_modalities(demonstrated))
    return max(0.0, (count - 1) * params.cross_modality_confidence_bonus)


def max_strength(
    events: list[VerificationEvent],
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    return max(
        (params.strength(m) for m in distinct_modalities(events)), default=0.0,
    )
