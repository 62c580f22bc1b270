"""Graph Service — concept graph CRUD, atomic batch loads and subgraph reads.

Invariants:
    - load_concepts is all-or-nothing: any dangling endpoint or inference strength
      outside [0, 1] commits nothing
    - Every error message names the missing concept id
    - Re-loading the same batch is safe for nodes (upsert by id); edges get fresh ids
    - Traversals run on an in-memory ConceptGraph snapshot, never row by row

Design Decisions:
    - The graph is small and bounded, so snapshots load every edge once per operation
    - Domain packs are validated as a whole before load_concepts ever runs
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from lorraine.core.concept_graph import ConceptGraph
from lorraine.core.domain_pack import (
    DomainPack, EdgeSpec, edge_endpoints, find_dangling_edges, find_strength_errors,
)
from lorraine.core.domain_types import ConceptId, EdgeId
from lorraine.core.errors import ValidationFailedError
from lorraine.core.records import ConceptNode, LoadResult, RelationshipEdge
from lorraine.core.repository_protocols import TrustStore
from lorraine.schemas.exchange import parse_domain_pack

logger = logging.getLogger(__name__)


@dataclass
class GraphView:
    """Selected nodes plus the edges between them."""
    nodes: list[ConceptNode] = field(default_factory=list)
    edges: list[RelationshipEdge] = field(default_factory=list)


def new_edge_id() -> EdgeId:
    return EdgeId(f"edge_{uuid.uuid4().hex}")


async def load_concept_graph(store: TrustStore) -> ConceptGraph:
    """Snapshot of every stored node and edge."""
    nodes = await store.get_all_nodes()
    edges = await store.get_all_edges()
    return ConceptGraph(edges, concept_ids=[n.id for n in nodes])


class GraphService:
    """Concept graph operations over a TrustStore."""

    def __init__(self, store: TrustStore):
        self.store = store

    # ─── Nodes ───────────────────────────────────────────────────

    async def upsert_node(self, node: ConceptNode) -> ConceptNode:
        await self.store.upsert_node(node)
        await self.store.commit()
        return node

    async def get_node(self, concept_id: ConceptId) -> ConceptNode | None:
        return await self.store.get_node(concept_id)

    async def get_nodes_by_domain(self, domain: str) -> list[ConceptNode]:
        return await self.store.get_nodes_by_domain(domain)

    async def get_all_nodes(self) -> list[ConceptNode]:
        return await self.store.get_all_nodes()

    # ─── Edges ───────────────────────────────────────────────────

    async def create_edge(self, spec: EdgeSpec) -> RelationshipEdge:
        """Insert one edge; both endpoints must already be stored."""
        stored = await self._stored_ids(edge_endpoints([spec]))
        errors = find_dangling_edges([], [spec], stored) + find_strength_errors([spec])
        if errors:
            raise ValidationFailedError(errors, "INVALID_EDGE")

        edge = _edge_from_spec(spec)
        await self.store.insert_edge(edge)
        await self.store.commit()
        return edge

    async def get_edges_from(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        return await self.store.get_edges_from(concept_id)

    async def get_edges_to(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        return await self.store.get_edges_to(concept_id)

    async def get_connected_edges(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        outgoing = await self.store.get_edges_from(concept_id)
        incoming = await self.store.get_edges_to(concept_id)
        return outgoing + incoming

    async def get_downstream_dependents(self, concept_id: ConceptId) -> list[ConceptId]:
        graph = await load_concept_graph(self.store)
        return sorted(graph.downstream_dependents(concept_id))

    # ─── Batch loads ─────────────────────────────────────────────

    async def load_concepts(
        self, concepts: Sequence[ConceptNode], edges: Sequence[EdgeSpec],
    ) -> LoadResult:
        """Upsert a batch of nodes and insert its edges in one transaction."""
        batch_ids = {c.id for c in concepts}
        stored = await self._stored_ids(edge_endpoints(edges) - batch_ids)
        errors = find_dangling_edges(concepts, edges, stored) + find_strength_errors(edges)
        if errors:
            logger.warning(
                f"Graph load rejected: {len(errors)} invalid edge(s)",
                extra={"error_code": "INVALID_EDGE"},
            )
            return LoadResult(loaded=0, edges_created=0, errors=errors)

        try:
            for concept in concepts:
                await self.store.upsert_node(concept)
            for spec in edges:
                await self.store.insert_edge(_edge_from_spec(spec))
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            raise

        logger.info(f"Loaded {len(concepts)} concept(s) and {len(edges)} edge(s)")
        return LoadResult(loaded=len(concepts), edges_created=len(edges))

    async def load_domain_pack(self, raw: object) -> tuple[LoadResult, DomainPack]:
        """Validate a whole domain pack document, then load it atomically."""
        pack, errors = parse_domain_pack(raw)
        if errors:
            return LoadResult(errors=errors), pack
        result = await self.load_concepts(pack.concepts, pack.edges)
        return result, pack

    # ─── Reads ───────────────────────────────────────────────────

    async def get_graph(
        self, concept_ids: Iterable[ConceptId] | None = None, depth: int = 0,
    ) -> GraphView:
        """Whole graph, or the selected concepts expanded ``depth`` hops both ways."""
        nodes = await self.store.get_all_nodes()
        graph = ConceptGraph(await self.store.get_all_edges(), [n.id for n in nodes])

        if concept_ids is None:
            return GraphView(nodes=nodes, edges=graph.edges)

        selected = graph.expand(concept_ids, max(0, depth))
        return GraphView(
            nodes=[n for n in nodes if n.id in selected],
            edges=graph.subgraph_edges(selected),
        )

    async def _stored_ids(self, concept_ids: Iterable[ConceptId]) -> set[ConceptId]:
        found: set[ConceptId] = set()
        for concept_id in concept_ids:
            if await self.store.get_node(concept_id) is not None:
                found.add(concept_id)
        return found


def _edge_from_spec(spec: EdgeSpec) -> RelationshipEdge:
    return RelationshipEdge(
        id=new_edge_id(),
        from_concept_id=spec.from_concept_id,
        to_concept_id=spec.to_concept_id,
        type=spec.type,
        inference_strength=spec.inference_strength,
    )
