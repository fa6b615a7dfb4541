"""
Tests for dashboard aggregation.
"""
from datetime import datetime, timezone
from types import SimpleNamespace

from fastapi import status

from app.services.dashboard_service import last_months, monthly_average_trir, monthly_counts, risk_kpis


def test_last_months_wraps_year():
    months = last_months(datetime(2026, 2, 15, tzinfo=timezone.utc))
    assert months == [(2025, 9), (2025, 10), (2025, 11), (2025, 12), (2026, 1), (2026, 2)]


def test_risk_kpis_use_dashboard_thresholds():
    analyses = [SimpleNamespace(risk_score=s) for s in (25, 13, 12, 6, 5, 1)]
    assert risk_kpis(analyses) == {"total": 6, "high": 2, "medium": 2, "low": 2}


def test_monthly_counts_ignore_records_outside_window():
    months = last_months(datetime(2026, 6, 1))
    records = [
        SimpleNamespace(created_at=datetime(2026, 6, 1)),
        SimpleNamespace(created_at=datetime(2026, 6, 20)),
        SimpleNamespace(created_at=datetime(2026, 1, 31)),
        SimpleNamespace(created_at=datetime(2025, 12, 31)),
    ]
    trend = monthly_counts(records, months)
    assert [m["name"] for m in trend] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    assert [m["analyses"] for m in trend] == [1, 0, 0, 0, 0, 2]


def test_monthly_average_trir():
    months = last_months(datetime(2026, 6, 1))
    calculations = [
        SimpleNamespace(created_at=datetime(2026, 6, 2), trir=1.0),
        SimpleNamespace(created_at=datetime(2026, 6, 3), trir=2.335),
        SimpleNamespace(created_at=datetime(2026, 5, 3), trir=4.0),
    ]
    trend = monthly_average_trir(calculations, months)
    assert trend[-1]["trir"] == round((1.0 + 2.335) / 2, 2)
    assert trend[-2]["trir"] == 4.0
    assert trend[0]["trir"] == 0.0


def test_dashboard_endpoint(client, auth_headers):
    for severity, likelihood in ((5, 5), (3, 3), (1, 2)):
        client.post("/api/v1/hiradc/", json={
            "activity_name": f"Task {severity}x{likelihood}", "location": "Plant",
            "hazard": "Noise", "severity": severity, "likelihood": likelihood,
        }, headers=auth_headers)
    client.post("/api/v1/calculator/", json={"total_incidents": 1, "total_work_hours": 200_000}, headers=auth_headers)

    response = client.get("/api/v1/dashboard/", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["kpis"] == {"total": 3, "high": 1, "medium": 1, "low": 1}
    assert len(data["monthly_trend"]) == 6
    assert data["monthly_trend"][-1]["analyses"] == 3
    assert data["trir_trend"][-1]["trir"] == 1.0
    assert data["risk_distribution"] == [
        {"name": "High Risk", "value": 1},
        {"name": "Medium Risk", "value": 1},
        {"name": "Low Risk", "value": 1},
    ]
    assert len(data["recent_activities"]) == 3
    assert data["recent_activities"][0]["title"] == "Task 1x2"
    assert data["recent_activities"][0]["type"] == "HIRADC"


def test_dashboard_for_new_user_is_empty(client, auth_headers):
    data = client.get("/api/v1/dashboard/", headers=auth_headers).json()
    assert data["kpis"]["total"] == 0
    assert all(m["analyses"] == 0 for m in data["monthly_trend"])
    assert data["recent_activities"] == []
