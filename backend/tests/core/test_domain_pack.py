"""Domain pack tests — dangling edges, edge strengths and path mappings.

Tests cover:
    find_dangling_edges: messages name the missing id; stored ids count as known
    find_strength_errors: strengths outside [0, 1] are reported per edge
    concepts_for_paths: exact, directory prefix and glob matches
"""

from lorraine.core.domain_pack import (
    EdgeSpec, concepts_for_paths, edge_endpoints, find_dangling_edges,
    find_strength_errors,
)
from lorraine.core.domain_types import ConceptId
from lorraine.core.records import ConceptNode


# --- Dangling edges -----------------------------------------------------------

def _node(concept_id):
    return ConceptNode(id=ConceptId(concept_id), name=concept_id)


def test_dangling_edge_names_missing_id():
    edges = [EdgeSpec(ConceptId("a"), ConceptId("ghost"))]
    errors = find_dangling_edges([_node("a")], edges, set())
    assert len(errors) == 1
    assert '"ghost"' in errors[0]
    assert "target" in errors[0]


def test_stored_concepts_satisfy_endpoints():
    edges = [EdgeSpec(ConceptId("a"), ConceptId("stored"))]
    assert find_dangling_edges([_node("a")], edges, {ConceptId("stored")}) == []


def test_both_endpoints_missing_gives_two_errors():
    errors = find_dangling_edges([], [EdgeSpec(ConceptId("x"), ConceptId("y"))], set())
    assert len(errors) == 2


def test_edge_endpoints():
    edges = [EdgeSpec(ConceptId("a"), ConceptId("b")), EdgeSpec(ConceptId("b"), ConceptId("c"))]
    assert edge_endpoints(edges) == {"a", "b", "c"}


def test_strength_errors_only_for_out_of_range_edges():
    edges = [
        EdgeSpec(ConceptId("a"), ConceptId("b"), inference_strength=0.0),
        EdgeSpec(ConceptId("b"), ConceptId("c"), inference_strength=1.0),
        EdgeSpec(ConceptId("c"), ConceptId("d"), inference_strength=1.2),
        EdgeSpec(ConceptId("d"), ConceptId("e"), inference_strength=-0.5),
    ]
    errors = find_strength_errors(edges)
    assert len(errors) == 2
    assert '"c"' in errors[0] and "1.2" in errors[0]
    assert '"d"' in errors[1] and "-0.5" in errors[1]


# --- Path mappings ------------------------------------------------------------

def test_concepts_for_paths():
    mappings = {
        ConceptId("closures"): ["src/closures.js"],
        ConceptId("async"): ["src/async/"],
        ConceptId("tests"): ["**/*.test.js"],
    }
    assert concepts_for_paths(mappings, ["src/closures.js"]) == ["closures"]
    assert concepts_for_paths(mappings, ["src/async/queue.js"]) == ["async"]
    assert concepts_for_paths(mappings, ["lib/x/util.test.js"]) == ["tests"]
    assert concepts_for_paths(mappings, ["README.md"]) == []
