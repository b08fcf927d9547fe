"""API tests for CDM CRUD, versions and asset retrieval."""

from fastapi.testclient import TestClient

from cdm_api.services.test_data import build_test_model


def _body(model):
    return model.model_dump(mode="json", by_alias=True)


def test_root(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["service"] == "CDM API"


def test_health(client: TestClient):
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["models"] == 0


def test_list_models_empty(client: TestClient):
    r = client.get("/v0/models")
    assert r.status_code == 200
    assert r.json() == []


def test_create_and_get_model(client: TestClient, lever_outcome_model):
    r = client.post("/v0/models", json=_body(lever_outcome_model))
    assert r.status_code == 201
    assert r.json()["meta"]["uuid"] == "m1"

    meta = client.get("/v0/models/m1")
    assert meta.status_code == 200
    assert meta.json()["name"] == "M1"

    full = client.get("/v0/models/m1/full")
    assert full.status_code == 200
    data = full.json()
    assert data["$schema"] == "test"
    diagram = data["diagrams"][0]
    assert len(diagram["elements"]) == 2
    assert diagram["elements"][0]["causalType"] == "Lever"
    assert diagram["dependencies"][0]["source"] == "a"
    assert diagram["dependencies"][0]["target"] == "b"

    listed = client.get("/v0/models").json()
    assert [m["uuid"] for m in listed] == ["m1"]


def test_post_existing_is_conflict(client: TestClient, lever_outcome_model):
    client.post("/v0/models", json=_body(lever_outcome_model))
    r = client.post("/v0/models", json=_body(lever_outcome_model))
    assert r.status_code == 409
    assert r.json()["detail"]["hint"] == "PUT /v0/models"


def test_put_missing_is_not_found(client: TestClient, lever_outcome_model):
    r = client.put("/v0/models", json=_body(lever_outcome_model))
    assert r.status_code == 404
    assert client.get("/v0/models/m1").status_code == 404


def test_put_creates_new_current_version(client: TestClient, lever_outcome_model):
    client.post("/v0/models", json=_body(lever_outcome_model))
    body = _body(lever_outcome_model)
    body["meta"]["name"] = "M1 v2"
    body["diagrams"] = []
    r = client.put("/v0/models", json=body)
    assert r.status_code == 200

    assert client.get("/v0/models/m1").json()["name"] == "M1 v2"
    assert client.get("/v0/models/m1/full").json()["diagrams"] == []
    versions = client.get("/v0/models/m1/versions").json()
    assert [v["name"] for v in versions] == ["M1", "M1 v2"]
    assert len(client.get("/v0/models").json()) == 1

    # Orphaned diagram and elements are still addressable
    diagram = client.get("/v0/assets/diagram/d1")
    assert diagram.status_code == 200
    assert [e["meta"]["uuid"] for e in diagram.json()["elements"]] == ["a", "b"]
    assert client.get("/v0/assets/element/a").json()["causalType"] == "Lever"


def test_put_with_path_id(client: TestClient, lever_outcome_model):
    client.post("/v0/models", json=_body(lever_outcome_model))
    assert client.put("/v0/models/m1", json=_body(lever_outcome_model)).status_code == 200
    r = client.put("/v0/models/other", json=_body(lever_outcome_model))
    assert r.status_code == 400


def test_delete_model(client: TestClient, lever_outcome_model):
    client.post("/v0/models", json=_body(lever_outcome_model))
    r = client.delete("/v0/models/m1")
    assert r.status_code == 204
    assert client.get("/v0/models/m1").status_code == 404
    assert client.get("/v0/models/m1/full").status_code == 404
    assert client.delete("/v0/models/m1").status_code == 404
    assert client.get("/v0/assets/dependency/a-b").json()["target"] == "b"


def test_full_adder_model_roundtrip(client: TestClient):
    model = build_test_model()
    client.post("/v0/models", json=_body(model))
    data = client.get(f"/v0/models/{model.meta.uuid}/full").json()
    assert data["runnableModels"][0]["elements"][0]["functionName"] == "add"
    assert data["evaluatableAssets"][0]["content"]["language"] == "javascript"
    assert [v["data"] for v in data["inputOutputValues"]] == [30, 27, None]
    assert data["controls"][0]["inputOutputValues"] == [model.input_output_values[0].meta.uuid]
    assert data["diagrams"][0]["elements"][0]["displays"][0]["displayType"] == "controlRange"


def test_list_is_capped(client: TestClient):
    for _ in range(12):
        client.post("/v0/models", json=_body(build_test_model()))
    assert len(client.get("/v0/models").json()) == 10


def test_invalid_body_rejected(client: TestClient):
    r = client.post("/v0/models", json={"$schema": "x", "diagrams": []})
    assert r.status_code == 422
    r = client.post("/v0/models", json={"meta": {"uuid": ""}})
    assert r.status_code == 422


def test_asset_unknown(client: TestClient):
    r = client.get("/v0/assets/diagram/nope")
    assert r.status_code == 404
    assert r.json()["detail"] == {
        "error": "Diagram with ID nope does not exist.",
        "code": "NOT_FOUND",
        "kind": "diagram",
        "uuid": "nope",
    }
    assert client.get("/v0/assets/spaceship/nope").status_code == 404
    kinds = client.get("/v0/assets").json()
    assert "diagram" in kinds and "model" in kinds
