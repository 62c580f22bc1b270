"""Trust route tests — evidence submission, ingest, propagation and reads."""

import pytest

PEOPLE = "/api/v1/people"


async def _load(client, pack):
    response = await client.post("/api/v1/graph/domain-packs", json=pack)
    assert response.status_code == 201


async def test_record_verification(client, chain_pack):
    await _load(client, chain_pack)
    response = await client.post(f"{PEOPLE}/p1/verifications", json={
        "concept_id": "A", "modality": "sandbox:execution",
        "result": "demonstrated", "context": "kata",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["level"] == "verified"
    assert body["confidence"] == pytest.approx(0.7)
    assert body["modalities_tested"] == ["sandbox:execution"]
    assert body["verification_history"][0]["context"] == "kata"

    inferred = (await client.get(f"{PEOPLE}/p1/trust/B")).json()
    assert inferred["level"] == "inferred"
    assert inferred["inferred_from"] == ["A"]


async def test_unknown_modality_rejected(client):
    response = await client.post(f"{PEOPLE}/p1/verifications", json={
        "concept_id": "A", "modality": "grill:shouting", "result": "demonstrated",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_external_observation_contested(client):
    body = {"concept_id": "x", "modality": "external:observed", "source": "external"}
    first = await client.post(f"{PEOPLE}/p1/verifications", json={**body, "result": "demonstrated"})
    assert first.json()["level"] == "verified"
    second = await client.post(f"{PEOPLE}/p1/verifications", json={**body, "result": "failed"})
    assert second.json()["level"] == "contested"


async def test_claim_on_untested_concept(client):
    response = await client.post(f"{PEOPLE}/p1/claims", json={
        "concept_id": "closures", "self_reported_confidence": 0.8,
    })
    assert response.status_code == 201
    body = response.json()
    assert body["level"] == "untested"
    assert body["calibration_gap"] == pytest.approx(0.8)
    assert body["claim_history"][0]["self_reported_confidence"] == 0.8


async def test_claim_out_of_range_rejected(client):
    response = await client.post(f"{PEOPLE}/p1/claims", json={
        "concept_id": "a", "self_reported_confidence": 1.2,
    })
    assert response.status_code == 400


async def test_unknown_concept_reads_untested(client):
    response = await client.get(f"{PEOPLE}/p1/trust/never-seen")
    assert response.status_code == 200
    body = response.json()
    assert (body["level"], body["confidence"]) == ("untested", 0.0)
    assert body["calibration_gap"] is None


async def test_bulk_trust(client, chain_pack):
    await _load(client, chain_pack)
    await client.post(f"{PEOPLE}/p1/verifications", json={
        "concept_id": "C", "modality": "write:teaching", "result": "demonstrated",
    })

    everything = (await client.get(f"{PEOPLE}/p1/trust")).json()
    assert [s["concept_id"] for s in everything] == ["C", "D", "E"]

    picked = (await client.get(
        f"{PEOPLE}/p1/trust", params={"concept_ids": ["A", "C"]},
    )).json()
    assert [s["level"] for s in picked] == ["untested", "verified"]


async def test_ingest(client, chain_pack):
    await _load(client, chain_pack)
    response = await client.post(f"{PEOPLE}/p1/events/ingest", json={"events": [
        {"conceptId": "A", "modality": "grill:transfer", "result": "demonstrated"},
        {"type": "claim", "conceptId": "A", "selfReportedConfidence": 0.6},
        {"conceptId": "B", "modality": "grill:recall", "result": "maybe"},
    ]})

    assert response.status_code == 200
    body = response.json()
    assert (body["processed"], body["verifications"], body["claims"], body["skipped"]) == \
        (2, 1, 1, 1)
    assert body["concepts_affected"] == ["A"]
    assert len(body["errors"]) == 1
    assert body["errors"][0].startswith("events[2].result:")


async def test_ingest_reports_wrongly_typed_row(client, chain_pack):
    await _load(client, chain_pack)
    response = await client.post(f"{PEOPLE}/p1/events/ingest", json={"events": [
        {"personId": 42, "conceptId": ["A"], "modality": "grill:recall", "result": "demonstrated"},
        {"conceptId": "A", "modality": "grill:recall", "result": "demonstrated"},
    ]})

    assert response.status_code == 200
    body = response.json()
    assert (body["processed"], body["skipped"]) == (1, 1)
    assert all(e.startswith("events[0].") for e in body["errors"])


async def test_propagate(client, chain_pack):
    await _load(client, chain_pack)
    await client.post(f"{PEOPLE}/p1/verifications", json={
        "concept_id": "A", "modality": "sandbox:execution", "result": "demonstrated",
    })

    response = await client.post(f"{PEOPLE}/p1/concepts/A/propagate")

    assert response.status_code == 200
    results = response.json()
    assert [r["concept_id"] for r in results] == ["B", "C", "D"]
    assert results[0]["new_level"] == "inferred"
    assert results[0]["previous_level"] == "untested"
