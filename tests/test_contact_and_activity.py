"""
Tests for contact messages and the activity log.
"""
from fastapi import status


def test_send_contact_message(client, auth_headers):
    response = client.post("/api/v1/contact/", json={
        "name": "  Budi ",
        "email": "Budi@Example.com",
        "message": "The ETA page needs more barriers.",
    }, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    data = response.json()
    assert data["status"] == "unread"
    assert data["name"] == "Budi"
    assert data["email"] == "budi@example.com"

    listing = client.get("/api/v1/contact/", headers=auth_headers).json()
    assert listing["total"] == 1


def test_contact_message_validation(client, auth_headers):
    response = client.post("/api/v1/contact/", json={
        "name": "Budi", "email": "not-an-email", "message": "Hi",
    }, headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = client.post("/api/v1/contact/", json={
        "name": "Budi", "email": "budi@example.com", "message": "   ",
    }, headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_mark_message_read(client, auth_headers, other_auth_headers):
    created = client.post("/api/v1/contact/", json={
        "name": "Budi", "email": "budi@example.com", "message": "Hello",
    }, headers=auth_headers).json()

    response = client.patch(f"/api/v1/contact/{created['id']}", json={"status": "read"}, headers=other_auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.patch(f"/api/v1/contact/{created['id']}", json={"status": "read"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "read"

    history = client.get(
        "/api/v1/activity/",
        params={"action": "contact_status_update", "resource_id": created["id"]},
        headers=auth_headers,
    ).json()
    assert history["total"] == 1
    assert history["items"][0]["details"] == {"status": "read"}
    assert history["items"][0]["summary"] == f"Changed status of contact message #{created['id']}"


def test_contact_requires_authentication(client):
    response = client.post("/api/v1/contact/", json={
        "name": "Budi", "email": "budi@example.com", "message": "Hello",
    })
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_activity_log_records_own_actions(client, auth_headers, other_auth_headers):
    created = client.post("/api/v1/hiradc/", json={
        "activity_name": "Scaffolding", "location": "Tower", "hazard": "Fall from height",
        "severity": 5, "likelihood": 3,
    }, headers=auth_headers).json()

    response = client.get("/api/v1/activity/", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    actions = [item["action"] for item in data["items"]]
    assert actions[0] == "analysis_create"
    assert "register" in actions
    assert data["items"][0]["resource_type"] == "hiradc"
    assert data["items"][0]["resource_id"] == created["id"]

    filtered = client.get("/api/v1/activity/", params={"action": "register"}, headers=auth_headers).json()
    assert filtered["total"] == 1

    other = client.get("/api/v1/activity/", headers=other_auth_headers).json()
    assert "analysis_create" not in [item["action"] for item in other["items"]]


def test_activity_history_of_one_record(client, auth_headers):
    created = client.post("/api/v1/calculator/", json={"total_incidents": 1}, headers=auth_headers).json()
    client.get(f"/api/v1/reports/K3/{created['id']}/pdf", headers=auth_headers)

    response = client.get(
        "/api/v1/activity/",
        params={"resource_type": "k3", "resource_id": created["id"]},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    summaries = [item["summary"] for item in response.json()["items"]]
    assert summaries == [
        f"Exported PDF of K3 calculation #{created['id']}",
        f"Created K3 calculation #{created['id']}",
    ]


def test_activity_rejects_unknown_action(client, auth_headers):
    response = client.get("/api/v1/activity/", params={"action": "format_disk"}, headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
