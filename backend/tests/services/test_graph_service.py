"""GraphService tests — atomic batch loads, edges and subgraph reads.

Tests cover:
    load_concepts: counts, all-or-nothing on dangling endpoints and bad strengths
    load_domain_pack: structural errors, bundles returned
    create_edge: endpoint and strength validation
    get_downstream_dependents / get_graph / get_connected_edges
"""

import pytest

from lorraine.core.domain_pack import EdgeSpec
from lorraine.core.domain_types import ConceptId, EdgeType
from lorraine.core.errors import ValidationFailedError
from lorraine.core.records import ConceptNode


def _nodes(*ids, domain="js"):
    return [ConceptNode(id=ConceptId(c), name=c.title(), domain=domain) for c in ids]


def _spec(src, dst, edge_type=EdgeType.PREREQUISITE, strength=0.8):
    return EdgeSpec(ConceptId(src), ConceptId(dst), edge_type, strength)


# --- Batch loads --------------------------------------------------------------

async def test_load_eight_concepts_four_edges(graph_service, store):
    ids = [f"c{i}" for i in range(8)]
    edges = [_spec("c0", "c1"), _spec("c1", "c2"), _spec("c3", "c4"), _spec("c5", "c6")]

    result = await graph_service.load_concepts(_nodes(*ids), edges)

    assert (result.loaded, result.edges_created, result.errors) == (8, 4, [])
    assert len(await store.get_all_nodes()) == 8
    assert len(await store.get_all_edges()) == 4


async def test_dangling_edge_rejects_whole_batch(graph_service, store):
    result = await graph_service.load_concepts(
        _nodes("a", "b"), [_spec("a", "b"), _spec("b", "ghost")],
    )

    assert result.loaded == 0
    assert result.edges_created == 0
    assert len(result.errors) == 1
    assert "ghost" in result.errors[0]
    assert await store.get_all_nodes() == []
    assert await store.get_all_edges() == []


async def test_out_of_range_strength_rejects_whole_batch(graph_service, store):
    result = await graph_service.load_concepts(
        _nodes("a", "b", "c"), [_spec("a", "b"), _spec("b", "c", strength=1.5)],
    )

    assert (result.loaded, result.edges_created) == (0, 0)
    assert len(result.errors) == 1
    assert "between 0 and 1" in result.errors[0]
    assert '"b"' in result.errors[0]
    assert await store.get_all_nodes() == []
    assert await store.get_all_edges() == []


async def test_edges_may_target_stored_concepts(graph_service):
    await graph_service.load_concepts(_nodes("a", "b"), [])
    result = await graph_service.load_concepts(_nodes("c"), [_spec("b", "c")])
    assert result.errors == []
    assert result.edges_created == 1


async def test_reloading_nodes_upserts(graph_service):
    await graph_service.load_concepts(_nodes("a"), [])
    await graph_service.load_concepts(
        [ConceptNode(ConceptId("a"), "Renamed", domain="js")], [],
    )
    nodes = await graph_service.get_all_nodes()
    assert [(n.id, n.name) for n in nodes] == [("a", "Renamed")]


async def test_load_domain_pack(graph_service):
    result, pack = await graph_service.load_domain_pack({
        "id": "pack",
        "concepts": [{"id": "a"}, {"id": "b"}],
        "edges": [{"from": "a", "to": "b", "type": "prerequisite"}],
        "bundles": {"ready": {"required": [{"concept": "b", "minLevel": "inferred"}]}},
    })
    assert (result.loaded, result.edges_created) == (2, 1)
    assert list(pack.bundles) == ["ready"]


async def test_load_domain_pack_with_errors_loads_nothing(graph_service, store):
    result, _ = await graph_service.load_domain_pack({
        "concepts": [{"id": "a"}],
        "edges": [{"from": "a", "to": "a", "inferenceStrength": 2}],
    })
    assert result.loaded == 0
    assert result.errors
    assert await store.get_all_nodes() == []


async def test_load_domain_pack_dangling(graph_service):
    result, _ = await graph_service.load_domain_pack({
        "concepts": [{"id": "a"}],
        "edges": [{"from": "a", "to": "nowhere"}],
    })
    assert result.loaded == 0
    assert '"nowhere"' in result.errors[0]


# --- Single edges -------------------------------------------------------------

async def test_create_edge(graph_service):
    await graph_service.load_concepts(_nodes("a", "b"), [])
    edge = await graph_service.create_edge(_spec("a", "b", EdgeType.ANALOGOUS_TO, 0.3))
    assert edge.id.startswith("edge_")
    assert [e.id for e in await graph_service.get_edges_from(ConceptId("a"))] == [edge.id]


async def test_create_edge_rejects_missing_endpoint_and_bad_strength(graph_service):
    await graph_service.load_concepts(_nodes("a"), [])
    with pytest.raises(ValidationFailedError) as exc_info:
        await graph_service.create_edge(_spec("a", "ghost", strength=1.5))
    assert exc_info.value.code == "INVALID_EDGE"
    assert len(exc_info.value.errors) == 2


# --- Reads --------------------------------------------------------------------

async def test_downstream_dependents(graph_service, prerequisite_chain):
    assert await graph_service.get_downstream_dependents(ConceptId("A")) == ["B", "C", "D", "E"]
    assert await graph_service.get_downstream_dependents(ConceptId("E")) == []
    assert await graph_service.get_downstream_dependents(ConceptId("unknown")) == []


async def test_get_graph_depth_expansion(graph_service, prerequisite_chain):
    view = await graph_service.get_graph([ConceptId("C")], depth=1)
    assert sorted(n.id for n in view.nodes) == ["B", "C", "D"]
    assert sorted((e.from_concept_id, e.to_concept_id) for e in view.edges) == [
        ("B", "C"), ("C", "D"),
    ]


async def test_get_whole_graph(graph_service, prerequisite_chain):
    view = await graph_service.get_graph()
    assert len(view.nodes) == 5
    assert len(view.edges) == 4


async def test_connected_edges_and_domain(graph_service, prerequisite_chain):
    edges = await graph_service.get_connected_edges(ConceptId("C"))
    assert len(edges) == 2
    assert len(await graph_service.get_nodes_by_domain("chain")) == 5
    assert (await graph_service.get_node(ConceptId("A"))).name == "Concept A"
