"""Graph route tests — domain pack loading, graph reads and dependents."""

PACKS = "/api/v1/graph/domain-packs"


async def test_load_domain_pack(client, chain_pack):
    response = await client.post(PACKS, json=chain_pack)
    assert response.status_code == 201
    assert response.json() == {
        "loaded": 5, "edges_created": 4, "errors": [], "bundles": ["all"],
    }


async def test_load_eight_concepts_four_edges(client):
    pack = {
        "concepts": [{"id": f"c{i}"} for i in range(8)],
        "edges": [{"from": f"c{i}", "to": f"c{i + 1}"} for i in range(4)],
    }
    response = await client.post(PACKS, json=pack)
    body = response.json()
    assert (body["loaded"], body["edges_created"], body["errors"]) == (8, 4, [])


async def test_dangling_pack_rejected(client):
    response = await client.post(PACKS, json={
        "concepts": [{"id": "a"}],
        "edges": [{"from": "a", "to": "ghost"}],
    })
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_DOMAIN_PACK"
    assert any("ghost" in d for d in error["details"])

    graph = (await client.get("/api/v1/graph")).json()
    assert graph["nodes"] == []


async def test_malformed_pack_rejected(client):
    response = await client.post(PACKS, json={"edges": []})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in error["details"]] == ["body.concepts"]


async def test_out_of_range_strength_pack_rejected(client):
    response = await client.post(PACKS, json={
        "concepts": [{"id": "a"}, {"id": "b"}],
        "edges": [{"from": "a", "to": "b", "inferenceStrength": 1.5}],
    })
    assert response.status_code == 400
    details = response.json()["error"]["details"]
    assert [d["field"] for d in details] == ["body.edges.0.inferenceStrength"]
    assert (await client.get("/api/v1/graph")).json()["nodes"] == []


async def test_get_whole_graph(client, chain_pack):
    await client.post(PACKS, json=chain_pack)
    body = (await client.get("/api/v1/graph")).json()
    assert [n["id"] for n in body["nodes"]] == ["A", "B", "C", "D", "E"]
    assert len(body["edges"]) == 4
    assert body["edges"][0]["type"] == "prerequisite"
    assert body["trust"] is None


async def test_get_subgraph_with_trust_overlay(client, chain_pack):
    await client.post(PACKS, json=chain_pack)
    await client.post("/api/v1/people/p1/verifications", json={
        "concept_id": "B", "modality": "sandbox:execution", "result": "demonstrated",
    })

    response = await client.get(
        "/api/v1/graph", params={"concept_ids": ["B"], "depth": 1, "person_id": "p1"},
    )

    body = response.json()
    assert sorted(n["id"] for n in body["nodes"]) == ["A", "B", "C"]
    assert body["trust"]["B"]["level"] == "verified"
    assert body["trust"]["C"]["level"] == "inferred"
    assert body["trust"]["A"]["level"] == "untested"


async def test_dependents(client, chain_pack):
    await client.post(PACKS, json=chain_pack)
    body = (await client.get("/api/v1/graph/concepts/B/dependents")).json()
    assert body == {"concept_id": "B", "dependents": ["C", "D", "E"]}
