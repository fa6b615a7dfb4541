"""
Tests for fault tree, event tree and cause-consequence endpoints.
"""
import pytest
from fastapi import status

FTA_STRUCTURE = {
    "top_event": {"id": "top", "text": "ignored", "x": 400, "y": 50},
    "gates": [{"id": "gate-electrical", "type": "OR", "x": 200, "y": 110, "parent_id": "top"}],
    "intermediate_events": [
        {"id": "electrical", "text": "Electrical fault", "x": 200, "y": 150, "gate_id": "gate-electrical"},
    ],
    "basic_events": [
        {"id": "cable", "text": "Worn cable", "x": 150, "y": 350, "parent_gate_id": "gate-electrical"},
        {"id": "spark", "text": "Grinding sparks", "x": 300, "y": 450, "parent_gate_id": "top"},
    ],
}


class TestFaultTree:

    def test_create_and_get(self, client, auth_headers):
        response = client.post("/api/v1/fta/", json={
            "title": "Warehouse fire",
            "top_event": "Fire in warehouse",
            "structure": FTA_STRUCTURE,
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_201_CREATED, response.text
        created = response.json()
        assert created["analysis_type"] == "FTA"
        # Top event text is taken from the top_event field
        assert created["structure"]["top_event"]["text"] == "Fire in warehouse"
        assert created["structure"]["basic_events"][0]["x"] == 150

        fetched = client.get(f"/api/v1/fta/{created['id']}", headers=auth_headers).json()
        assert fetched["structure"] == created["structure"]

    def test_dangling_reference_is_rejected(self, client, auth_headers):
        structure = {**FTA_STRUCTURE, "gates": []}
        response = client.post("/api/v1/fta/", json={
            "title": "Broken", "top_event": "x", "structure": structure,
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_non_finite_coordinates_are_rejected(self, client, auth_headers):
        body = (
            '{"title": "Overflow", "top_event": "Fire", "structure": {"top_event": {"id": "top", "x": Infinity, "y": 50}}}'
        )
        response = client.post("/api/v1/fta/", content=body, headers={**auth_headers, "Content-Type": "application/json"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert client.get("/api/v1/fta/", headers=auth_headers).json()["total"] == 0

    def test_update_and_delete(self, client, auth_headers, other_auth_headers):
        created = client.post("/api/v1/fta/", json={
            "title": "Draft", "top_event": "Explosion",
        }, headers=auth_headers).json()

        response = client.put(f"/api/v1/fta/{created['id']}", json={
            "title": "Final", "top_event": "Explosion", "structure": FTA_STRUCTURE,
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Final"
        assert len(response.json()["structure"]["gates"]) == 1

        assert client.delete(f"/api/v1/fta/{created['id']}", headers=other_auth_headers).status_code == 404
        assert client.delete(f"/api/v1/fta/{created['id']}", headers=auth_headers).status_code == 204
        assert client.get("/api/v1/fta/", headers=auth_headers).json()["total"] == 0


class TestEventTree:

    def test_outcomes_are_computed_server_side(self, client, auth_headers):
        response = client.post("/api/v1/eta/", json={
            "title": "Gas leak",
            "initiating_event": "LPG line rupture",
            "barriers": [
                {"name": "Gas detector", "success_rate": 0.9},
                {"id": "b-valve", "name": "Shutoff valve", "success_rate": 0.8},
            ],
            "outcomes": [{"path": [True], "frequency": 1.0, "severity": "Low"}],
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_201_CREATED, response.text
        data = response.json()

        assert len(data["outcomes"]) == 4
        assert sum(o["frequency"] for o in data["outcomes"]) == pytest.approx(1.0)
        assert data["barriers"][0]["id"].startswith("barrier-")
        assert data["barriers"][1]["id"] == "b-valve"
        all_fail = next(o for o in data["outcomes"] if o["path"] == [False, False])
        assert all_fail["frequency"] == pytest.approx(0.02)
        assert all_fail["severity"] == "High"

    def test_invalid_success_rate_is_rejected(self, client, auth_headers):
        response = client.post("/api/v1/eta/", json={
            "title": "Bad", "initiating_event": "x",
            "barriers": [{"name": "Alarm", "success_rate": 1.2}],
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_preview(self, client, auth_headers):
        response = client.post("/api/v1/eta/preview", json={
            "barriers": [{"name": "Alarm", "success_rate": 0.9}, {"name": "Sprinkler", "success_rate": 0.8}],
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["counts"] == {"Low": 1, "Medium": 2, "High": 1}
        assert data["total_frequency"] == pytest.approx(1.0)

    def test_no_barriers_gives_single_outcome(self, client, auth_headers):
        response = client.post("/api/v1/eta/", json={
            "title": "Empty", "initiating_event": "Spill",
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["outcomes"] == [{"path": [], "frequency": 1.0, "severity": "Low"}]

    def test_update_recomputes_outcomes(self, client, auth_headers):
        created = client.post("/api/v1/eta/", json={
            "title": "Gas leak", "initiating_event": "Rupture",
            "barriers": [{"name": "Detector", "success_rate": 0.9}],
        }, headers=auth_headers).json()

        response = client.put(f"/api/v1/eta/{created['id']}", json={
            "title": "Gas leak", "initiating_event": "Rupture",
            "barriers": created["barriers"] + [{"name": "Valve", "success_rate": 0.5}],
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["outcomes"]) == 4
        assert response.json()["barriers"][0]["id"] == created["barriers"][0]["id"]


class TestCauseConsequence:

    def test_create_keeps_event_order(self, client, auth_headers):
        response = client.post("/api/v1/cca/", json={
            "title": "Boiler",
            "critical_event": "Overpressure",
            "cause_tree": [{"text": "Relief valve stuck", "gate_type": "OR"}, {"text": "Controller failure"}],
            "consequence_tree": [{"id": "c-1", "text": "Vessel rupture"}],
        }, headers=auth_headers)
        assert response.status_code == status.HTTP_201_CREATED, response.text
        data = response.json()

        assert data["analysis_type"] == "CCA"
        assert [e["text"] for e in data["cause_tree"]] == ["Relief valve stuck", "Controller failure"]
        assert data["cause_tree"][0]["gate_type"] == "OR"
        assert data["cause_tree"][1]["gate_type"] == "AND"
        assert all(e["id"] for e in data["cause_tree"])
        assert data["consequence_tree"][0]["id"] == "c-1"

    def test_owner_only(self, client, auth_headers, other_auth_headers):
        created = client.post("/api/v1/cca/", json={
            "title": "Boiler", "critical_event": "Overpressure",
        }, headers=auth_headers).json()

        assert client.get(f"/api/v1/cca/{created['id']}", headers=other_auth_headers).status_code == 404
        assert client.get("/api/v1/cca/", headers=other_auth_headers).json()["total"] == 0

        response = client.put(f"/api/v1/cca/{created['id']}", json={
            "title": "Boiler v2", "critical_event": "Overpressure",
        }, headers=auth_headers)
        assert response.json()["title"] == "Boiler v2"
