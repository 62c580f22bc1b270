"""Graph Schemas — Pydantic models for concept graph requests and responses.

Invariants:
    - Domain pack documents live in schemas.exchange (camelCase exchange format)
    - GraphData.trust is present only when a person overlay was requested
"""

from pydantic import BaseModel, ConfigDict

from lorraine.core.domain_types import EdgeType, TrustLevel


class ConceptNodeOut(BaseModel):
    """A concept in the graph."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str = ""
    domain: str | None = None


class RelationshipEdgeOut(BaseModel):
    """A directed edge in the graph."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    from_concept_id: str
    to_concept_id: str
    type: EdgeType
    inference_strength: float


class TrustOverlay(BaseModel):
    """Trust of one person on one concept, for graph rendering."""
    level: TrustLevel
    confidence: float
    decayed_confidence: float


class GraphData(BaseModel):
    """Subgraph with optional trust overlay."""
    nodes: list[ConceptNodeOut] = []
    edges: list[RelationshipEdgeOut] = []
    trust: dict[str, TrustOverlay] | None = None


class LoadResultResponse(BaseModel):
    """Outcome of a domain pack load."""
    model_config = ConfigDict(from_attributes=True)

    loaded: int
    edges_created: int
    errors: list[str] = []
    bundles: list[str] = []


class DependentsResponse(BaseModel):
    concept_id: str
    dependents: list[str]
