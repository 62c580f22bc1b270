"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO goes through TrustStore; implementations are provided by the shell
    - Events are append-only: the only mutation an event ever sees is mark_event_retracted
    - Mutating calls stage work; nothing is durable until commit()

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: store methods are async because implementations do IO,
      but the pure functions fed by them are never async themselves — the services
      orchestrate the async reads and writes around the pure logic
    - One store contract instead of per-table repositories: every engine operation
      spans graph, events and projections inside one transaction
"""

from typing import Protocol, Sequence

from lorraine.core.domain_types import ConceptId, EdgeId, EventId, PersonId
from lorraine.core.records import (
    ClaimEvent, ConceptNode, RelationshipEdge, Retraction,
    StoredTrustState, VerificationEvent,
)


class TrustStore(Protocol):
    """Contract for graph, event log and trust projection persistence."""

    # Graph: nodes
    async def upsert_node(self, node: ConceptNode) -> None: ...
    async def get_node(self, concept_id: ConceptId) -> ConceptNode | None: ...
    async def get_nodes_by_domain(self, domain: str) -> list[ConceptNode]: ...
    async def get_all_nodes(self) -> list[ConceptNode]: ...

    # Graph: edges
    async def insert_edge(self, edge: RelationshipEdge) -> None: ...
    async def get_edge(self, edge_id: EdgeId) -> RelationshipEdge | None: ...
    async def get_edges_from(self, concept_id: ConceptId) -> list[RelationshipEdge]: ...
    async def get_edges_to(self, concept_id: ConceptId) -> list[RelationshipEdge]: ...
    async def get_all_edges(self) -> list[RelationshipEdge]: ...

    # Verification events
    async def insert_verification_event(self, event: VerificationEvent) -> None: ...
    async def get_verification_event(
        self, event_id: EventId,
    ) -> VerificationEvent | None: ...
    async def get_verification_history(
        self,
        person_id: PersonId,
        concept_id: ConceptId,
        include_retracted: bool = False,
    ) -> list[VerificationEvent]: ...
    async def get_verification_events_for_person(
        self, person_id: PersonId,
    ) -> list[VerificationEvent]: ...

    # Claim events
    async def insert_claim_event(self, event: ClaimEvent) -> None: ...
    async def get_claim_event(self, event_id: EventId) -> ClaimEvent | None: ...
    async def get_claim_history(
        self, person_id: PersonId, concept_id: ConceptId,
    ) -> list[ClaimEvent]: ...
    async def get_claims_for_person(self, person_id: PersonId) -> list[ClaimEvent]: ...

    # Retractions
    async def mark_event_retracted(self, event_id: EventId, event_type: str) -> bool: ...
    async def insert_retraction(self, retraction: Retraction) -> None: ...
    async def get_retractions_for_event(self, event_id: EventId) -> list[Retraction]: ...

    # Trust projections
    async def get_trust_state(
        self, person_id: PersonId, concept_id: ConceptId,
    ) -> StoredTrustState | None: ...
    async def get_trust_states(
        self, person_id: PersonId, concept_ids: Sequence[ConceptId],
    ) -> dict[ConceptId, StoredTrustState]: ...
    async def get_all_trust_states(self, person_id: PersonId) -> list[StoredTrustState]: ...
    async def upsert_trust_state(self, state: StoredTrustState) -> None: ...
    async def delete_trust_states(
        self, person_id: PersonId, concept_ids: Sequence[ConceptId],
    ) -> None: ...

    # Transaction
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
