"""Trust Service — records evidence and maintains the trust projection.

Invariants:
    - Every write re-projects the whole connected component of the touched concept
      from non-retracted history, then commits once
    - Stored trust is never decayed; decay and calibration gaps are added at read time
    - Unknown (person, concept) pairs read as untested, never raise
    - Claims are appended and reported but never change trust

Design Decisions:
    - Impureim sandwich: read histories and the graph snapshot, call the pure projection,
      write the resulting states back. All trust math lives in core/
    - A projection writes every state of the component and deletes rows that no longer
      carry trust, so the table always equals a replay of history
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from lorraine.core.concept_graph import ConceptGraph
from lorraine.core.decay import read_time_confidence
from lorraine.core.domain_types import ConceptId, EventId, PersonId
from lorraine.core.enforce_events import (
    ClaimInput, VerificationInput, validate_claim, validate_verification,
)
from lorraine.core.errors import ErrorContext, EventValidationError
from lorraine.core.propagation import describe_changes, is_material_change, project_component
from lorraine.core.records import (
    ClaimEvent, IngestResult, ProjectionResult, PropagationResult,
    StoredTrustState, TrustState, VerificationEvent,
)
from lorraine.core.repository_protocols import TrustStore
from lorraine.core.scoring import failure_share
from lorraine.core.trust_parameters import TrustParameters, DEFAULT_TRUST_PARAMETERS
from lorraine.schemas.exchange import parse_ingest_row
from lorraine.services.graph_service import load_concept_graph

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_event_id(prefix: str) -> EventId:
    return EventId(f"{prefix}_{uuid.uuid4().hex}")


class TrustService:
    """Write and read paths for per-person trust."""

    def __init__(
        self,
        store: TrustStore,
        params: TrustParameters = DEFAULT_TRUST_PARAMETERS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.params = params
        self.clock = clock

    # ─── Writes ──────────────────────────────────────────────────

    async def record_verification(self, payload: VerificationInput) -> TrustState:
        """Append a verification event and re-project its component."""
        errors = validate_verification(
            payload.person_id, payload.concept_id,
            payload.modality.value, payload.result.value,
        )
        if errors:
            raise EventValidationError(errors, ErrorContext(
                person_id=payload.person_id, concept_id=payload.concept_id,
            ))

        event = _verification_from_input(payload, self.clock())
        await self.store.insert_verification_event(event)
        graph = await load_concept_graph(self.store)
        projection = await self._project(event.person_id, event.concept_id, graph)
        await self.store.commit()

        logger.info(
            f"Recorded {event.result.value} via {event.modality.value}",
            extra={
                "person_id": event.person_id,
                "concept_id": event.concept_id,
                "event_id": event.id,
                "changed_count": len(projection.changed_concept_ids),
            },
        )
        return await self._read_view(event.person_id, event.concept_id, graph, None)

    async def record_claim(self, payload: ClaimInput) -> TrustState:
        """Append a self-report; the returned view carries the calibration gap."""
        errors = validate_claim(
            payload.person_id, payload.concept_id, payload.self_reported_confidence,
        )
        if errors:
            raise EventValidationError(errors, ErrorContext(
                person_id=payload.person_id, concept_id=payload.concept_id,
            ))

        event = _claim_from_input(payload, self.clock())
        await self.store.insert_claim_event(event)
        await self.store.commit()

        logger.info(
            f"Recorded claim {event.self_reported_confidence:.2f}",
            extra={
                "person_id": event.person_id,
                "concept_id": event.concept_id,
                "event_id": event.id,
            },
        )
        return await self.get_trust_state(event.person_id, event.concept_id)

    async def ingest_events(
        self, rows: Sequence[object], default_person_id: str | None = None,
    ) -> IngestResult:
        """Bulk append; invalid rows are skipped and reported, valid rows applied."""
        result = IngestResult()
        touched: dict[PersonId, set[ConceptId]] = {}
        now = self.clock()

        for index, row in enumerate(rows):
            payload, errors = parse_ingest_row(row, index, default_person_id)
            if payload is None:
                result.skipped += 1
                result.errors.extend(errors)
                continue
            result.processed += 1
            if isinstance(payload, ClaimInput):
                await self.store.insert_claim_event(_claim_from_input(payload, now))
                result.claims += 1
                continue
            await self.store.insert_verification_event(
                _verification_from_input(payload, now),
            )
            result.verifications += 1
            touched.setdefault(payload.person_id, set()).add(payload.concept_id)
            result.concepts_affected.add(payload.concept_id)

        if touched:
            graph = await load_concept_graph(self.store)
            for person_id, concept_ids in touched.items():
                await self._project_all(person_id, concept_ids, graph)
        await self.store.commit()

        logger.info(
            f"Ingested {result.processed} event(s), skipped {result.skipped}",
            extra={"changed_count": len(result.concepts_affected)},
        )
        return result

    async def propagate_trust(
        self, person_id: PersonId, source_concept_id: ConceptId,
    ) -> list[PropagationResult]:
        """Re-project the source's component and report neighbours its evidence moves.

        Each result compares the neighbour's state without the source's history
        (previous_*) against its projected state (new_*).
        """
        graph = await load_concept_graph(self.store)
        histories, subgraph = await self._component_inputs(
            person_id, source_concept_id, graph,
        )
        without_source = project_component(
            person_id,
            {c: h for c, h in histories.items() if c != source_concept_id},
            subgraph,
            self.params,
        )

        after = await self._write_projection(person_id, histories, subgraph)
        await self.store.commit()

        results = describe_changes(
            without_source, after, source_concept_id,
            failure_share(histories.get(source_concept_id, []), self.params) > 0,
            self.params,
        )
        logger.info(
            "Propagated trust",
            extra={
                "person_id": person_id,
                "concept_id": source_concept_id,
                "changed_count": len(results),
            },
        )
        return results

    async def recompute_component(
        self, person_id: PersonId, concept_id: ConceptId,
    ) -> ProjectionResult:
        """Re-project one component without committing (caller owns the transaction)."""
        graph = await load_concept_graph(self.store)
        return await self._project(person_id, concept_id, graph)

    async def rebuild_person(self, person_id: PersonId) -> ProjectionResult:
        """Replay every component the person has evidence or stored trust in."""
        events = await self.store.get_verification_events_for_person(person_id)
        states = await self.store.get_all_trust_states(person_id)
        seeds = {e.concept_id for e in events} | {s.concept_id for s in states}

        graph = await load_concept_graph(self.store)
        result = await self._project_all(person_id, seeds, graph)
        await self.store.commit()

        logger.info(
            f"Rebuilt {len(result.concept_ids)} concept(s)",
            extra={"person_id": person_id, "changed_count": len(result.changed_concept_ids)},
        )
        return result

    # ─── Reads ───────────────────────────────────────────────────

    async def get_trust_state(
        self,
        person_id: PersonId,
        concept_id: ConceptId,
        as_of: datetime | None = None,
    ) -> TrustState:
        graph = await load_concept_graph(self.store)
        return await self._read_view(person_id, concept_id, graph, as_of)

    async def get_bulk_trust_state(
        self,
        person_id: PersonId,
        concept_ids: Iterable[ConceptId] | None = None,
        as_of: datetime | None = None,
    ) -> list[TrustState]:
        """Views for the given concepts, or for every concept with stored trust."""
        if concept_ids is None:
            concept_ids = [
                s.concept_id for s in await self.store.get_all_trust_states(person_id)
            ]
        graph = await load_concept_graph(self.store)
        return [
            await self._read_view(person_id, concept_id, graph, as_of)
            for concept_id in concept_ids
        ]

    # ─── Internals ───────────────────────────────────────────────

    async def _project(
        self, person_id: PersonId, concept_id: ConceptId, graph: ConceptGraph,
    ) -> ProjectionResult:
        histories, subgraph = await self._component_inputs(person_id, concept_id, graph)
        ordered = sorted(subgraph.concept_ids)
        before = await self.store.get_trust_states(person_id, ordered)
        after = await self._write_projection(person_id, histories, subgraph, before)

        changed = [
            c for c in ordered
            if is_material_change(before.get(c), after.get(c), self.params)
        ]
        return ProjectionResult(
            concept_ids=ordered, changed_concept_ids=changed, states_written=len(after),
        )

    async def _component_inputs(
        self, person_id: PersonId, concept_id: ConceptId, graph: ConceptGraph,
    ) -> tuple[dict[ConceptId, list[VerificationEvent]], ConceptGraph]:
        """Non-retracted histories and the edge snapshot of one component."""
        component = graph.connected_component(concept_id)
        histories: dict[ConceptId, list[VerificationEvent]] = {}
        for member in sorted(component):
            history = await self.store.get_verification_history(person_id, member)
            if history:
                histories[member] = history
        return histories, ConceptGraph(graph.subgraph_edges(component), component)

    async def _write_projection(
        self,
        person_id: PersonId,
        histories: dict[ConceptId, list[VerificationEvent]],
        subgraph: ConceptGraph,
        before: dict[ConceptId, StoredTrustState] | None = None,
    ) -> dict[ConceptId, StoredTrustState]:
        ordered = sorted(subgraph.concept_ids)
        if before is None:
            before = await self.store.get_trust_states(person_id, ordered)
        after = project_component(person_id, histories, subgraph, self.params)

        for state in after.values():
            await self.store.upsert_trust_state(state)
        await self.store.delete_trust_states(
            person_id, [c for c in ordered if c in before and c not in after],
        )
        return after

    async def _project_all(
        self, person_id: PersonId, seeds: Iterable[ConceptId], graph: ConceptGraph,
    ) -> ProjectionResult:
        """Project each distinct component reached from the seeds once."""
        total = ProjectionResult(concept_ids=[], changed_concept_ids=[], states_written=0)
        done: set[ConceptId] = set()
        for seed in sorted(seeds):
            if seed in done:
                continue
            projection = await self._project(person_id, seed, graph)
            done.update(projection.concept_ids)
            total.concept_ids.extend(projection.concept_ids)
            total.changed_concept_ids.extend(projection.changed_concept_ids)
            total.states_written += projection.states_written
        return total

    async def _read_view(
        self,
        person_id: PersonId,
        concept_id: ConceptId,
        graph: ConceptGraph,
        as_of: datetime | None,
    ) -> TrustState:
        as_of = as_of or self.clock()
        stored = await self.store.get_trust_state(person_id, concept_id)
        history = await self.store.get_verification_history(person_id, concept_id)
        claims = await self.store.get_claim_history(person_id, concept_id)

        if stored is None:
            stored = StoredTrustState(person_id=person_id, concept_id=concept_id)
            decayed = 0.0
        else:
            decayed = read_time_confidence(
                stored, as_of, len(graph.downstream_dependents(concept_id)), self.params,
            )

        return _view_from_stored(stored, decayed, history, claims)


# --- Helpers ------------------------------------------------------------------

def _verification_from_input(
    payload: VerificationInput, now: datetime,
) -> VerificationEvent:
    return VerificationEvent(
        id=new_event_id("ver"),
        person_id=payload.person_id,
        concept_id=payload.concept_id,
        modality=payload.modality,
        result=payload.result,
        context=payload.context,
        timestamp=payload.timestamp or now,
        source=payload.source,
    )


def _claim_from_input(payload: ClaimInput, now: datetime) -> ClaimEvent:
    return ClaimEvent(
        id=new_event_id("clm"),
        person_id=payload.person_id,
        concept_id=payload.concept_id,
        self_reported_confidence=payload.self_reported_confidence,
        context=payload.context,
        timestamp=payload.timestamp or now,
    )


def _view_from_stored(
    stored: StoredTrustState,
    decayed: float,
    history: list[VerificationEvent],
    claims: list[ClaimEvent],
) -> TrustState:
    latest_claim = max(claims, key=lambda c: (c.timestamp, c.id)) if claims else None
    return TrustState(
        person_id=stored.person_id,
        concept_id=stored.concept_id,
        level=stored.level,
        confidence=stored.confidence,
        decayed_confidence=decayed,
        last_verified=stored.last_verified,
        modalities_tested=list(stored.modalities_tested),
        inferred_from=list(stored.inferred_from),
        verification_history=history,
        claim_history=claims,
        calibration_gap=(
            latest_claim.self_reported_confidence - decayed if latest_claim else None
        ),
    )

