"""Concept Graph — in-memory, read-only view over a set of relationship edges.

Invariants:
    - Pure data access: no scoring, no IO
    - Traversals track visited concepts, so cycles always terminate
    - Multiple edges between the same pair are kept (never deduplicated)
    - downstream_dependents never includes the concept itself

Design Decisions:
    - The shell loads the edges of a connected component once and hands this
      snapshot to propagation, so the graph walk never touches storage
    - Adjacency lists keep edge insertion order; callers needing determinism sort ids
"""

from collections import defaultdict, deque
from typing import Iterable

from lorraine.core.domain_types import ConceptId, EdgeType
from lorraine.core.records import RelationshipEdge


class ConceptGraph:
    """Adjacency view used by propagation, decay and subgraph queries."""

    def __init__(
        self,
        edges: Iterable[RelationshipEdge] = (),
        concept_ids: Iterable[ConceptId] = (),
    ):
        self._outgoing: dict[ConceptId, list[RelationshipEdge]] = defaultdict(list)
        self._incoming: dict[ConceptId, list[RelationshipEdge]] = defaultdict(list)
        self._concepts: set[ConceptId] = set(concept_ids)
        self._edges: list[RelationshipEdge] = []
        for edge in edges:
            self.add_edge(edge)

    def add_edge(self, edge: RelationshipEdge) -> None:
        self._edges.append(edge)
        self._outgoing[edge.from_concept_id].append(edge)
        self._incoming[edge.to_concept_id].append(edge)
        self._concepts.add(edge.from_concept_id)
        self._concepts.add(edge.to_concept_id)

    @property
    def concept_ids(self) -> set[ConceptId]:
        return set(self._concepts)

    @property
    def edges(self) -> list[RelationshipEdge]:
        return list(self._edges)

    def edges_from(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        return list(self._outgoing.get(concept_id, ()))

    def edges_to(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        return list(self._incoming.get(concept_id, ()))

    def connected_edges(self, concept_id: ConceptId) -> list[RelationshipEdge]:
        return self.edges_from(concept_id) + self.edges_to(concept_id)

    def downstream_dependents(self, concept_id: ConceptId) -> set[ConceptId]:
        """Transitive closure over outgoing prerequisite edges."""
        seen: set[ConceptId] = {concept_id}
        queue = deque([concept_id])
        while queue:
            current = queue.popleft()
            for edge in self._outgoing.get(current, ()):
                if edge.type != EdgeType.PREREQUISITE:
                    continue
                if edge.to_concept_id not in seen:
                    seen.add(edge.to_concept_id)
                    queue.append(edge.to_concept_id)
        seen.discard(concept_id)
        return seen

    def connected_component(self, concept_id: ConceptId) -> set[ConceptId]:
        """Every concept reachable from concept_id ignoring edge direction."""
        return self.expand({concept_id}, depth=None)

    def expand(
        self, seeds: Iterable[ConceptId], depth: int | None,
    ) -> set[ConceptId]:
        """Breadth-first expansion over both edge directions.

        ``depth=None`` expands until the frontier is empty.
        """
        selected = set(seeds)
        frontier = set(selected)
        hops = 0
        while frontier and (depth is None or hops < depth):
            next_frontier: set[ConceptId] = set()
            for current in frontier:
                for edge in self._outgoing.get(current, ()):
                    if edge.to_concept_id not in selected:
                        next_frontier.add(edge.to_concept_id)
                for edge in self._incoming.get(current, ()):
                    if edge.from_concept_id not in selected:
                        next_frontier.add(edge.from_concept_id)
            selected |= next_frontier
            frontier = next_frontier
            hops += 1
        return selected

    def subgraph_edges(self, concept_ids: set[ConceptId]) -> list[RelationshipEdge]:
        """Edges whose endpoints are both inside concept_ids."""
        return [
            e for e in self._edges
            if e.from_concept_id in concept_ids and e.to_concept_id in concept_ids
        ]
