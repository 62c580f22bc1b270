"""SQL Trust Store — TrustStore implementation over an async SQLAlchemy session.

Invariants:
    - Translates between ORM rows and core records; no trust logic here
    - Mutations are staged on the session; nothing is durable until commit()
    - Histories are returned oldest first (timestamp, then id) and exclude
      retracted events unless explicitly asked for
    - mark_event_retracted flips the flag at most once and reports whether it did

Design Decisions:
    - One class for all tables: every engine operation spans graph, events and
      projections inside a single session/transaction
    - Autoflush left on: reads inside an operation see rows staged earlier in it
"""

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lorraine.core.domain_types import (
    ConceptId, EdgeId, EdgeType, EventId, EventSource, EventType, Modality,
    PersonId, RetractionId, RetractionReason, TrustLevel, VerificationResult,
)
from lorraine.core.records import (
    ClaimEvent, ConceptNode, RelationshipEdge, Retraction,
    StoredTrustState, VerificationEvent,
)
from lorraine.models.claim_event import ClaimEventModel
from lorraine.models.concept_node import ConceptNodeModel
from lorraine.models.relationship_edge import RelationshipEdgeModel
from lorraine.models.retraction import RetractionModel
from lorraine.models.trust_state import TrustStateModel
from lorraine.models.verification_event import VerificationEventModel


class SqlTrustStore:
    """Graph, event log and trust projection persistence."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Nodes ───────────────────────────────────────────────────

    async def upsert_node(self, node: ConceptNode) -> None:
        row = await self.db.get(ConceptNodeModel, node.id)
        if row is None:
            self.db.add(ConceptNodeModel(
                id=node.id,
                name=node.name,
                description=node.description,
                domain=node.domain,
            ))
            return
        row.name = node.name
        row.description = node.description
        row.domain = node.domain

    async def get_node(self, concept_id: ConceptId) -> ConceptNode | None:
        row = await self.db.get(ConceptNodeModel, concept_id)
        return _to_node(row) if row else None

    async def get_nodes_by_domain(self, domain: str) -> list[ConceptNode]:
        result = await self.db.execute(
            select(ConceptNodeModel)
            .where(ConceptNodeModel.domain == domain)
            .order_by(ConceptNodeModel.id)
        )
        return [_to_node(r) for r in result.scalars().all()]

    async def get_all_nodes(self) -> list[ConceptNode]:
        result = await self.db.execute(
            select(ConceptNodeModel).order_by(ConceptNodeModel.id),
        )
        return [_to_node(r) for r in result.scalars().all()]

    # ─── Edges ───────────────────────────────────────────────────

    async def insert_edge(self, edge: RelationshipEdge) -> None:
        self.db.add(RelationshipEdgeModel(
            id=edge.id,
            from_concept_id=edge.from_concept_id,
            to_concept_id=edge.to_concept_id,
            edge_type=edge.type.value,
            inference_strength=edge.inference_strength,
        ))

    async def get_edge(self, edge_id: EdgeId) -> RelationshipEdge | None:
        row = await self.db.get(RelationshipEdgeModel, edge_id)
        return _to_edge(row) if row else None

    async def get_edges_from(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        result = await self.db.execute(
            select(RelationshipEdgeModel)
            .where(RelationshipEdgeModel.from_concept_id == concept_id)
            .order_by(RelationshipEdgeModel.created_at, RelationshipEdgeModel.id)
        )
        return [_to_edge(r) for r in result.scalars().all()]

    async def get_edges_to(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        result = await self.db.execute(
            select(RelationshipEdgeModel)
            .where(RelationshipEdgeModel.to_concept_id == concept_id)
            .order_by(RelationshipEdgeModel.created_at, RelationshipEdgeModel.id)
        )
        return [_to_edge(r) for r in result.scalars().all()]

    async def get_all_edges(self) -> list[RelationshipEdge]:
        result = await self.db.execute(
            select(RelationshipEdgeModel)
            .order_by(RelationshipEdgeModel.created_at, RelationshipEdgeModel.id),
        )
        return [_to_edge(r) for r in result.scalars().all()]

    # ─── Verification events ─────────────────────────────────────

    async def insert_verification_event(self, event: VerificationEvent) -> None:
        self.db.add(VerificationEventModel(
            id=event.id,
            person_id=event.person_id,
            concept_id=event.concept_id,
            modality=event.modality.value,
            result=event.result.value,
            context=event.context,
            source=event.source.value,
            timestamp=event.timestamp,
            retracted=event.retracted,
        ))

    async def get_verification_event(
        self, event_id: EventId,
    ) -> VerificationEvent | None:
        row = await self.db.get(VerificationEventModel, event_id)
        return _to_verification(row) if row else None

    async def get_verification_history(
        self,
        person_id: PersonId,
        concept_id: ConceptId,
        include_retracted: bool = False,
    ) -> list[VerificationEvent]:
        query = (
            select(VerificationEventModel)
            .where(VerificationEventModel.person_id == person_id)
            .where(VerificationEventModel.concept_id == concept_id)
        )
        if not include_retracted:
            query = query.where(VerificationEventModel.retracted.is_(False))
        result = await self.db.execute(
            query.order_by(VerificationEventModel.timestamp, VerificationEventModel.id),
        )
        return [_to_verification(r) for r in result.scalars().all()]

    async def get_verification_events_for_person(
        self, person_id: PersonId,
    ) -> list[VerificationEvent]:
        result = await self.db.execute(
            select(VerificationEventModel)
            .where(VerificationEventModel.person_id == person_id)
            .where(VerificationEventModel.retracted.is_(False))
            .order_by(VerificationEventModel.timestamp, VerificationEventModel.id)
        )
        return [_to_verification(r) for r in result.scalars().all()]

    # ─── Claim events ────────────────────────────────────────────

    async def insert_claim_event(self, event: ClaimEvent) -> None:
        self.db.add(ClaimEventModel(
            id=event.id,
            person_id=event.person_id,
            concept_id=event.concept_id,
            self_reported_confidence=event.self_reported_confidence,
            context=event.context,
            timestamp=event.timestamp,
            retracted=event.retracted,
        ))

    async def get_claim_event(self, event_id: EventId) -> ClaimEvent | None:
        row = await self.db.get(ClaimEventModel, event_id)
        return _to_claim(row) if row else None

    async def get_claim_history(
        self, person_id: PersonId, concept_id: ConceptId,
    ) -> list[ClaimEvent]:
        result = await self.db.execute(
            select(ClaimEventModel)
            .where(ClaimEventModel.person_id == person_id)
            .where(ClaimEventModel.concept_id == concept_id)
            .where(ClaimEventModel.retracted.is_(False))
            .order_by(ClaimEventModel.timestamp, ClaimEventModel.id)
        )
        return [_to_claim(r) for r in result.scalars().all()]

    async def get_claims_for_person(self, person_id: PersonId) -> list[ClaimEvent]:
        result = await self.db.execute(
            select(ClaimEventModel)
            .where(ClaimEventModel.person_id == person_id)
            .where(ClaimEventModel.retracted.is_(False))
            .order_by(ClaimEventModel.timestamp, ClaimEventModel.id)
        )
        return [_to_claim(r) for r in result.scalars().all()]

    # ─── Retractions ─────────────────────────────────────────────

    async def mark_event_retracted(self, event_id: EventId, event_type: str) -> bool:
        model = (
            VerificationEventModel
            if event_type == EventType.VERIFICATION.value
            else ClaimEventModel
        )
        row = await self.db.get(model, event_id)
        if row is None or row.retracted:
            return False
        row.retracted = True
        return True

    async def insert_retraction(self, retraction: Retraction) -> None:
        self.db.add(RetractionModel(
            id=retraction.id,
            event_id=retraction.event_id,
            event_type=retraction.event_type.value,
            reason=retraction.reason.value,
            retracted_by=retraction.retracted_by,
            person_id=retraction.person_id,
            concept_id=retraction.concept_id,
            timestamp=retraction.timestamp,
        ))

    async def get_retractions_for_event(self, event_id: EventId) -> list[Retraction]:
        result = await self.db.execute(
            select(RetractionModel)
            .where(RetractionModel.event_id == event_id)
            .order_by(RetractionModel.timestamp, RetractionModel.id)
        )
        return [_to_retraction(r) for r in result.scalars().all()]

    # ─── Trust projections ───────────────────────────────────────

    async def get_trust_state(
        self, person_id: PersonId, concept_id: ConceptId,
    ) -> StoredTrustState | None:
        row = await self.db.get(TrustStateModel, (person_id, concept_id))
        return _to_state(row) if row else None

    async def get_trust_states(
        self, person_id: PersonId, concept_ids: Sequence[ConceptId],
    ) -> dict[ConceptId, StoredTrustState]:
        if not concept_ids:
            return {}
        result = await self.db.execute(
            select(TrustStateModel)
            .where(TrustStateModel.person_id == person_id)
            .where(TrustStateModel.concept_id.in_(list(concept_ids)))
        )
        return {
            ConceptId(r.concept_id): _to_state(r) for r in result.scalars().all()
        }

    async def get_all_trust_states(self, person_id: PersonId) -> list[StoredTrustState]:
        result = await self.db.execute(
            select(TrustStateModel)
            .where(TrustStateModel.person_id == person_id)
            .order_by(TrustStateModel.concept_id)
        )
        return [_to_state(r) for r in result.scalars().all()]

    async def upsert_trust_state(self, state: StoredTrustState) -> None:
        row = await self.db.get(TrustStateModel, (state.person_id, state.concept_id))
        if row is None:
            row = TrustStateModel(person_id=state.person_id, concept_id=state.concept_id)
            self.db.add(row)
        row.level = state.level.value
        row.confidence = state.confidence
        row.last_verified = state.last_verified
        row.modalities_tested = [m.value for m in state.modalities_tested]
        row.inferred_from = list(state.inferred_from)

    async def delete_trust_states(
        self, person_id: PersonId, concept_ids: Sequence[ConceptId],
    ) -> None:
        if not concept_ids:
            return
        await self.db.execute(
            delete(TrustStateModel)
            .where(TrustStateModel.person_id == person_id)
            .where(TrustStateModel.concept_id.in_(list(concept_ids)))
            .execution_options(synchronize_session="fetch")
        )

    # ─── Transaction ─────────────────────────────────────────────

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()


# --- Row mapping ----------------------------------------------------------------

def _to_node(row: ConceptNodeModel) -> ConceptNode:
    return ConceptNode(
        id=ConceptId(row.id),
        name=row.name,
        description=row.description or "",
        domain=row.domain,
    )


def _to_edge(row: RelationshipEdgeModel) -> RelationshipEdge:
    return RelationshipEdge(
        id=EdgeId(row.id),
        from_concept_id=ConceptId(row.from_concept_id),
        to_concept_id=ConceptId(row.to_concept_id),
        type=EdgeType(row.edge_type),
        inference_strength=row.inference_strength,
    )


def _to_verification(row: VerificationEventModel) -> VerificationEvent:
    return VerificationEvent(
        id=EventId(row.id),
        person_id=PersonId(row.person_id),
        concept_id=ConceptId(row.concept_id),
        modality=Modality(row.modality),
        result=VerificationResult(row.result),
        context=row.context or "",
        timestamp=row.timestamp,
        source=EventSource(row.source),
        retracted=row.retracted,
    )


def _to_claim(row: ClaimEventModel) -> ClaimEvent:
    return ClaimEvent(
        id=EventId(row.id),
        person_id=PersonId(row.person_id),
        concept_id=ConceptId(row.concept_id),
        self_reported_confidence=row.self_reported_confidence,
        context=row.context or "",
        timestamp=row.timestamp,
        retracted=row.retracted,
    )


def _to_retraction(row: RetractionModel) -> Retraction:
    return Retraction(
        id=RetractionId(row.id),
        event_id=EventId(row.event_id),
        event_type=EventType(row.event_type),
        reason=RetractionReason(row.reason),
        retracted_by=row.retracted_by,
        person_id=PersonId(row.person_id),
        concept_id=ConceptId(row.concept_id),
        timestamp=row.timestamp,
    )


def _to_state(row: TrustStateModel) -> StoredTrustState:
    return StoredTrustState(
        person_id=PersonId(row.person_id),
        concept_id=ConceptId(row.concept_id),
        level=TrustLevel(row.level),
        confidence=row.confidence,
        last_verified=row.last_verified,
        modalities_tested=tuple(Modality(m) for m in row.modalities_tested or ()),
        inferred_from=tuple(ConceptId(c) for c in row.inferred_from or ()),
    )
