"""Diagnostics and health route tests."""

import pytest

import lorraine.infrastructure.database as db_module


async def test_liveness_reports_trust_tuning(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["trust"]["base_half_life_days"] > 0


async def test_readiness_reports_graph_size(client, chain_pack):
    empty = (await client.get("/api/v1/health/ready")).json()
    assert empty["graph"] == {"concepts": 0, "edges": 0}

    await client.post("/api/v1/graph/domain-packs", json=chain_pack)
    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["checks"]["database"] == "healthy"
    assert body["graph"] == {"concepts": 5, "edges": 4}


async def test_readiness_without_database_is_503(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["reason"] == "database_unavailable"


async def test_decay_report_empty_for_fresh_evidence(client):
    await client.post("/api/v1/people/p1/verifications", json={
        "concept_id": "a", "modality": "grill:recall", "result": "demonstrated",
    })
    response = await client.get("/api/v1/people/p1/decay")
    assert response.status_code == 200
    for item in response.json():
        assert item["decayed_confidence"] <= item["previous_confidence"]


async def test_calibration_no_data(client):
    body = (await client.get("/api/v1/people/nobody/calibration")).json()
    assert body["prediction_accuracy"] == 0.0
    assert body["recommendation"].startswith("No trust data")


async def test_calibration_after_claim(client):
    await client.post("/api/v1/people/p1/claims", json={
        "concept_id": "a", "self_reported_confidence": 0.8,
    })
    body = (await client.get("/api/v1/people/p1/calibration")).json()
    assert body["claim_count"] == 1
    assert body["overconfidence_bias"] == pytest.approx(0.8)


async def test_readiness_bundle(client, chain_pack):
    await client.post("/api/v1/graph/domain-packs", json=chain_pack)
    await client.post("/api/v1/people/p1/verifications", json={
        "concept_id": "A", "modality": "sandbox:debugging", "result": "demonstrated",
    })

    response = await client.post("/api/v1/people/p1/readiness", json={
        "bundle": "intro",
        "required": [
            {"concept": "A", "min_confidence": 0.8},
            {"concept": "B", "min_level": "inferred"},
            {"concept": "E"},
        ],
    })

    body = response.json()
    assert body["bundle"] == "intro"
    assert [g["passed"] for g in body["gates"]] == [True, True, False]
    assert (body["passed_count"], body["total_count"], body["passed"]) == (2, 3, False)


async def test_readiness_rejects_contested_min_level(client):
    response = await client.post("/api/v1/people/p1/readiness", json={
        "bundle": "x", "required": [{"concept": "A", "min_level": "contested"}],
    })
    assert response.status_code == 400


async def test_explanation(client):
    response = await client.post("/api/v1/explanations", json={
        "decision_type": "decay_result",
        "context": {"concept_id": "a", "days_since_verified": 30,
                    "previous_confidence": 0.8, "decayed_confidence": 0.4},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["confidence"] == pytest.approx(0.4)
    assert body["alternatives"]


async def test_explanation_unknown_type(client):
    response = await client.post("/api/v1/explanations", json={
        "decision_type": "horoscope", "context": {},
    })
    assert response.status_code == 400
