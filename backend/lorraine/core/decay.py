"""Decay — time-based discounting of stored confidence, computed at read time.

Invariants:
    - All functions are PURE: the stored confidence is never decayed in place
    - Decayed confidence is non-increasing in elapsed time and equals the raw
      confidence at zero elapsed days
    - Half-life never decreases when modality count or dependent count grows
    - Never raises: zero confidence or a missing last_verified yields 0.0

Design Decisions:
    - Half-life form C(t) = C0 * 0.5^(t / half_life): the half-life is the
      parameter people reason about ("loses half in 30 days")
    - Two modifiers on the half-life: cross-modality depth (multiplicative per
      extra channel) and structural importance (additive per downstream dependent)
"""

from datetime import datetime
from typing import Iterable, Mapping

from lorraine.core.domain_types import ConceptId
from lorraine.core.records import DecayResult, StoredTrustState
from lorraine.core.trust_parameters import TrustParameters, DEFAULT_TRUST_PARAMETERS


SECONDS_PER_DAY = 86_400.0


def days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def compute_half_life(
    modality_count: int,
    downstream_dependent_count: int,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Effective half-life in days for a concept's evidence."""
    modality_multiplier = params.cross_modality_decay_multiplier ** max(
        0, modality_count - 1,
    )
    structural_multiplier = 1 + max(0, downstream_dependent_count) * (
        params.structural_importance_bonus
    )
    return params.base_half_life_days * modality_multiplier * structural_multiplier


def compute_decayed_confidence(
    confidence: float,
    last_verified: datetime | None,
    as_of: datetime,
    modality_count: int,
    downstream_dependent_count: int,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Confidence as of ``as_of`` given when the concept was last verified."""
    if confidence <= 0 or last_verified is None:
        return 0.0

    elapsed = days_between(last_verified, as_of)
    if elapsed <= 0:
        return confidence

    half_life = compute_half_life(
        modality_count, downstream_dependent_count, params,
    )
    if half_life <= 0:
        return 0.0
    return max(0.0, confidence * 0.5 ** (elapsed / half_life))


def read_time_confidence(
    state: StoredTrustState,
    as_of: datetime,
    downstream_dependent_count: int,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> float:
    """Decayed confidence for a stored state.

    Purely inferred states carry no verification clock, so their confidence
    is reported undecayed.
    """
    if state.last_verified is None:
        return state.confidence
    return compute_decayed_confidence(
        state.confidence,
        state.last_verified,
        as_of,
        len(state.modalities_tested),
        downstream_dependent_count,
        params,
    )


def find_decayed(
    states: Iterable[StoredTrustState],
    dependent_counts: Mapping[ConceptId, int],
    as_of: datetime,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> list[DecayResult]:
    """Concepts whose decayed confidence is strictly below stored confidence."""
    results: list[DecayResult] = []
    for state in states:
        if state.confidence <= 0 or state.last_verified is None:
            continue
        decayed = compute_decayed_confidence(
            state.confidence,
            state.last_verified,
            as_of,
            len(state.modalities_tested),
            dependent_counts.get(state.concept_id, 0),
            params,
        )
        if decayed < state.confidence:
            results.append(DecayResult(
                concept_id=state.concept_id,
                previous_confidence=state.confidence,
                decayed_confidence=decayed,
                days_since_verified=days_between(state.last_verified, as_of),
            ))
    return results
