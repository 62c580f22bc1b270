"""Graph Routes — domain pack loading, subgraph reads and dependents.

Invariants:
    - A malformed pack fails request validation (400 VALIDATION_ERROR); a dangling or
      out-of-range edge returns 400 INVALID_DOMAIN_PACK; both commit nothing
    - GET /graph with person_id adds a trust overlay decayed to request time
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from lorraine.api.dependencies import get_graph_service, get_trust_service
from lorraine.core.domain_types import ConceptId, PersonId
from lorraine.core.errors import DomainPackValidationError
from lorraine.schemas.exchange import DomainPackDocument
from lorraine.schemas.graph import (
    ConceptNodeOut, DependentsResponse, GraphData, LoadResultResponse,
    RelationshipEdgeOut, TrustOverlay,
)
from lorraine.services.graph_service import GraphService
from lorraine.services.trust_service import TrustService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/graph", tags=["graph"])


@router.post(
    "/domain-packs",
    response_model=LoadResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def load_domain_pack(
    body: DomainPackDocument,
    graph: GraphService = Depends(get_graph_service),
):
    """Validate and atomically load a domain pack document."""
    result, pack = await graph.load_domain_pack(body)
    if result.errors:
        raise DomainPackValidationError(result.errors)
    return LoadResultResponse(
        loaded=result.loaded,
        edges_created=result.edges_created,
        errors=[],
        bundles=sorted(pack.bundles),
    )


@router.get("", response_model=GraphData)
async def get_graph(
    concept_ids: list[str] | None = Query(None),
    depth: int = Query(0, ge=0, le=10),
    person_id: str | None = None,
    graph: GraphService = Depends(get_graph_service),
    trust: TrustService = Depends(get_trust_service),
):
    """Whole graph or a selection expanded by depth, with optional trust overlay."""
    selection = [ConceptId(c) for c in concept_ids] if concept_ids else None
    view = await graph.get_graph(selection, depth)

    overlay = None
    if person_id:
        states = await trust.get_bulk_trust_state(
            PersonId(person_id), [n.id for n in view.nodes],
        )
        overlay = {
            s.concept_id: TrustOverlay(
                level=s.level,
                confidence=s.confidence,
                decayed_confidence=s.decayed_confidence,
            )
            for s in states
        }

    return GraphData(
        nodes=[ConceptNodeOut.model_validate(n) for n in view.nodes],
        edges=[RelationshipEdgeOut.model_validate(e) for e in view.edges],
        trust=overlay,
    )


@router.get("/concepts/{concept_id}/dependents", response_model=DependentsResponse)
async def get_dependents(
    concept_id: str, graph: GraphService = Depends(get_graph_service),
):
    """Transitive downstream dependents over prerequisite edges."""
    dependents = await graph.get_downstream_dependents(ConceptId(concept_id))
    return DependentsResponse(concept_id=concept_id, dependents=dependents)
