"""Domain Packs — typed pack contents, batch load checks and path mappings.

Invariants:
    - All functions are PURE: existence of stored concepts is passed in as a set
    - Edge defaults: type related_to, inferenceStrength 0.5
    - A batch with any dangling edge endpoint or out-of-range strength is rejected
      entirely; every dangling-endpoint error names the missing concept id

Design Decisions:
    - Document shape is validated at the boundary (schemas.exchange); this module
      only sees typed records
    - Whether an edge endpoint exists is decided at load time against batch + store,
      so packs can extend an already loaded graph
    - Bundles and mappings are parsed into typed records but never persisted: they are
      consumed by readiness checks and path lookups on the caller's side
"""

from dataclasses import dataclass, field
from fnmatch import fnmatch
from typing import Iterable

from lorraine.core.domain_types import ConceptId, EdgeType, TrustLevel
from lorraine.core.records import ConceptNode


DEFAULT_EDGE_TYPE = EdgeType.RELATED_TO
DEFAULT_INFERENCE_STRENGTH = 0.5


@dataclass(frozen=True)
class EdgeSpec:
    """An edge as it appears in a load batch (ids are assigned on insert)."""
    from_concept_id: ConceptId
    to_concept_id: ConceptId
    type: EdgeType = DEFAULT_EDGE_TYPE
    inference_strength: float = DEFAULT_INFERENCE_STRENGTH


@dataclass(frozen=True)
class BundleRequirement:
    """One gate of a readiness bundle."""
    concept_id: ConceptId
    min_level: TrustLevel
    min_confidence: float | None = None


@dataclass
class DomainPack:
    """Parsed domain pack document."""
    concepts: list[ConceptNode] = field(default_factory=list)
    edges: list[EdgeSpec] = field(default_factory=list)
    bundles: dict[str, list[BundleRequirement]] = field(default_factory=dict)
    mappings: dict[ConceptId, list[str]] = field(default_factory=dict)
    id: str | None = None
    name: str | None = None
    version: str | None = None
    description: str | None = None


# --- Batch load validation ----------------------------------------------------

def find_dangling_edges(
    concepts: Iterable[ConceptNode],
    edges: Iterable[EdgeSpec],
    stored_concept_ids: set[ConceptId],
) -> list[str]:
    """Messages for every edge endpoint missing from both batch and store."""
    known = {c.id for c in concepts} | stored_concept_ids
    errors: list[str] = []
    for edge in edges:
        if edge.from_concept_id not in known:
            errors.append(
                f'Edge from "{edge.from_concept_id}" to "{edge.to_concept_id}": '
                f'source concept "{edge.from_concept_id}" not found'
            )
        if edge.to_concept_id not in known:
            errors.append(
                f'Edge from "{edge.from_concept_id}" to "{edge.to_concept_id}": '
                f'target concept "{edge.to_concept_id}" not found'
            )
    return errors


def find_strength_errors(edges: Iterable[EdgeSpec]) -> list[str]:
    """Messages for every edge whose inference strength lies outside [0, 1]."""
    return [
        f'Edge from "{edge.from_concept_id}" to "{edge.to_concept_id}": '
        f"inference_strength must be between 0 and 1, got {edge.inference_strength}"
        for edge in edges
        if not 0.0 <= edge.inference_strength <= 1.0
    ]


def edge_endpoints(edges: Iterable[EdgeSpec]) -> set[ConceptId]:
    ids: set[ConceptId] = set()
    for edge in edges:
        ids.add(edge.from_concept_id)
        ids.add(edge.to_concept_id)
    return ids


# --- Path mappings ------------------------------------------------------------

def concepts_for_paths(
    mappings: dict[ConceptId, list[str]], paths: Iterable[str],
) -> list[ConceptId]:
    """Concepts whose mapped path patterns cover any of the given paths.

    A pattern matches a path exactly, as a directory prefix, or as a glob.
    """
    matched: set[ConceptId] = set()
    for path in paths:
        for concept_id, patterns in mappings.items():
            if any(_path_matches(path, pattern) for pattern in patterns):
                matched.add(concept_id)
    return sorted(matched)


def _path_matches(path: str, pattern: str) -> bool:
    if path == pattern or fnmatch(path, pattern):
        return True
    prefix = pattern if pattern.endswith("/") else pattern + "/"
    return path.startswith(prefix)
