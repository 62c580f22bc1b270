"""Propagation — infers trust in related concepts from direct evidence nearby.

Invariants:
    - All functions are PURE: histories and the graph snapshot come in, states go out
    - Propagation never overwrites direct evidence; concepts with a success in their
      own history keep their directly scored level and confidence
    - Only concepts without direct evidence can become INFERRED
    - Signals attenuate per hop (edge inference_strength, and the attenuation factor
      for every hop after the first); anything below the threshold is dropped
    - Each source walk visits a concept at most once, so cycles terminate
    - The result is independent of event order and source order: positives combine
      by max, negatives by sum

Design Decisions:
    - Strongest-path walk (best-first on a max-heap) instead of depth-first: per-hop
      factors are <= 1, so the first time a concept is popped its signal is final
    - Failure signals are weighted by failure_propagation_multiplier. A failure is
      stronger counter-evidence than a success is confirming evidence
    - Sources reaching a directly evidenced concept are still recorded in
      inferred_from, as a supplementary signal for explanations
"""

import heapq
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from lorraine.core.concept_graph import ConceptGraph
from lorraine.core.domain_types import ConceptId, PersonId, TrustLevel, VerificationResult
from lorraine.core.records import (
    PropagationResult, StoredTrustState, TrustScore, VerificationEvent,
)
from lorraine.core.scoring import compute_trust_from_history, failure_share
from lorraine.core.trust_parameters import TrustParameters, DEFAULT_TRUST_PARAMETERS


@dataclass
class Inflow:
    """Signals that reached one concept from its propagation sources."""
    positive: float = 0.0
    negative: float = 0.0
    sources: set[ConceptId] = field(default_factory=set)

    @property
    def net(self) -> float:
        return max(0.0, self.positive - self.negative)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def propagate_signal(
    graph: ConceptGraph,
    source_concept_id: ConceptId,
    signal: float,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> dict[ConceptId, float]:
    """Strongest attenuated signal reaching each concept downstream of the source.

    The source itself is never included.
    """
    if signal <= 0:
        return {}

    reached: dict[ConceptId, float] = {}
    visited: set[ConceptId] = set()
    heap: list[tuple[float, ConceptId, bool]] = [(-signal, source_concept_id, True)]

    while heap:
        negated, current, is_source = heapq.heappop(heap)
        if current in visited:
            continue
        visited.add(current)
        strength = -negated
        if not is_source:
            reached[current] = strength

        hop_factor = 1.0 if is_source else params.propagation_attenuation
        for edge in graph.edges_from(current):
            target = edge.to_concept_id
            if target in visited:
                continue
            attenuated = strength * _clamp(edge.inference_strength) * hop_factor
            if attenuated < params.propagation_threshold:
                continue
            heapq.heappush(heap, (-attenuated, target, False))

    return reached


def collect_inflows(
    graph: ConceptGraph,
    direct_scores: Mapping[ConceptId, TrustScore],
    histories: Mapping[ConceptId, Sequence[VerificationEvent]],
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> dict[ConceptId, Inflow]:
    """Run every source's walk and combine the signals per target."""
    inflows: dict[ConceptId, Inflow] = {}

    for source in sorted(histories):
        history = histories[source]
        score = direct_scores.get(source)

        if score is not None and score.level == TrustLevel.VERIFIED:
            for target, strength in propagate_signal(
                graph, source, score.confidence, params,
            ).items():
                inflow = inflows.setdefault(target, Inflow())
                inflow.positive = max(inflow.positive, strength)
                inflow.sources.add(source)

        share = failure_share(history, params)
        if share > 0:
            negative = share * params.failure_propagation_multiplier
            for target, strength in propagate_signal(
                graph, source, negative, params,
            ).items():
                inflow = inflows.setdefault(target, Inflow())
                inflow.negative += strength
                inflow.sources.add(source)

    return inflows


def project_component(
    person_id: PersonId,
    histories: Mapping[ConceptId, Sequence[VerificationEvent]],
    graph: ConceptGraph,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> dict[ConceptId, StoredTrustState]:
    """Rebuild every persisted trust state of one connected component.

    ``histories`` maps concept ids to their non-retracted verification events;
    concepts absent from the returned mapping have no state worth persisting.
    """
    live = {
        concept_id: [e for e in events if not e.retracted]
        for concept_id, events in histories.items()
    }
    live = {concept_id: events for concept_id, events in live.items() if events}

    direct: dict[ConceptId, TrustScore] = {
        concept_id: compute_trust_from_history(events, None, params)
        for concept_id, events in live.items()
        if _has_success(events)
    }
    inflows = collect_inflows(graph, direct, live, params)

    states: dict[ConceptId, StoredTrustState] = {}
    for concept_id in sorted(graph.concept_ids | set(live)):
        inflow = inflows.get(concept_id, Inflow())
        events = live.get(concept_id, [])

        if events:
            score = direct.get(concept_id)
            if score is None:
                score = compute_trust_from_history(
                    events, _inferred_score(inflow, params), params,
                )
            states[concept_id] = StoredTrustState(
                person_id=person_id,
                concept_id=concept_id,
                level=score.level,
                confidence=score.confidence,
                last_verified=max(e.timestamp for e in events),
                modalities_tested=tuple(sorted({e.modality for e in events})),
                inferred_from=tuple(sorted(inflow.sources)),
            )
            continue

        inferred = _inferred_score(inflow, params)
        if inferred is not None:
            states[concept_id] = StoredTrustState(
                person_id=person_id,
                concept_id=concept_id,
                level=inferred.level,
                confidence=inferred.confidence,
                inferred_from=tuple(sorted(inflow.sources)),
            )

    return states


def is_material_change(
    before: StoredTrustState | None,
    after: StoredTrustState | None,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> bool:
    """Level changed, or confidence moved by more than the epsilon."""
    prev_level, prev_conf = _level_and_confidence(before)
    new_level, new_conf = _level_and_confidence(after)
    return prev_level != new_level or (
        abs(new_conf - prev_conf) > params.material_change_epsilon
    )


def describe_changes(
    before: Mapping[ConceptId, StoredTrustState],
    after: Mapping[ConceptId, StoredTrustState],
    source_concept_id: ConceptId,
    source_failed: bool,
    params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
) -> list[PropagationResult]:
    """Neighbours whose trust moved materially after re-projecting the source."""
    results: list[PropagationResult] = []
    for concept_id in sorted(set(before) | set(after)):
        if concept_id == source_concept_id:
            continue
        prev = before.get(concept_id)
        new = after.get(concept_id)
        if not is_material_change(prev, new, params):
            continue
        prev_level, prev_conf = _level_and_confidence(prev)
        new_level, new_conf = _level_and_confidence(new)
        reason = (
            f"Recomputed after failure on {source_concept_id}"
            if source_failed
            else f"Recomputed inference after verification on {source_concept_id}"
        )
        results.append(PropagationResult(
            concept_id=concept_id,
            previous_level=prev_level,
            previous_confidence=prev_conf,
            new_level=new_level,
            new_confidence=new_conf,
            inference_strength=abs(new_conf - prev_conf),
            reason=reason,
        ))
    return results


# --- Helpers ------------------------------------------------------------------

def _has_success(events: Sequence[VerificationEvent]) -> bool:
    return any(
        e.result in (VerificationResult.DEMONSTRATED, VerificationResult.PARTIAL)
        for e in events
    )


def _inferred_score(
    inflow: Inflow, params: TrustParameters,
) -> TrustScore | None:
    net = inflow.net
    if inflow.positive <= 0 or net < params.propagation_threshold:
        return None
    return TrustScore(TrustLevel.INFERRED, min(1.0, net))


def _level_and_confidence(
    state: StoredTrustState | None,
) -> tuple[TrustLevel, float]:
    if state is None:
        return TrustLevel.UNTESTED, 0.0
    return state.level, state.confidence
