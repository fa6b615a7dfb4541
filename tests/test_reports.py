"""
Tests for the unified report list, report deletion and PDF export.
"""
from datetime import datetime

import pytest
from fastapi import status

from app.models.fta_analysis import FtaAnalysis
from app.models.hiradc_analysis import HiradcAnalysis, RiskCategory
from app.models.k3_calculation import K3Calculation
from app.services.report_service import filter_reports, paginate, report_row
from app.schemas.common import AnalysisType


def current_user_id(client, headers):
    return client.get("/api/v1/auth/me", headers=headers).json()["id"]


def create_one_of_each(client, headers):
    """Create one record per analysis type through the API; returns {type: id}."""
    ids = {}
    ids["HIRADC"] = client.post("/api/v1/hiradc/", json={
        "activity_name": "Warehouse forklift loading", "location": "Dock 3",
        "hazard": "Collision", "severity": 3, "likelihood": 3,
    }, headers=headers).json()["id"]
    ids["FTA"] = client.post("/api/v1/fta/", json={
        "title": "Warehouse fire", "top_event": "Fire",
    }, headers=headers).json()["id"]
    ids["ETA"] = client.post("/api/v1/eta/", json={
        "title": "Gas leak", "initiating_event": "Rupture",
        "barriers": [{"name": "Detector", "success_rate": 0.9}],
    }, headers=headers).json()["id"]
    ids["CCA"] = client.post("/api/v1/cca/", json={
        "title": "Boiler overpressure", "critical_event": "Overpressure",
        "cause_tree": [{"text": "Valve stuck"}], "consequence_tree": [{"text": "Rupture"}],
    }, headers=headers).json()["id"]
    ids["K3"] = client.post("/api/v1/calculator/", json={
        "total_lti": 2, "total_incidents": 5, "total_work_hours": 1_000_000,
    }, headers=headers).json()["id"]
    return ids


def add_hiradc(db, user_id, name, created_at, score=(2, 2)):
    severity, likelihood = score
    record = HiradcAnalysis(
        user_id=user_id, activity_name=name, location="Site", hazard="Hazard",
        severity=severity, likelihood=likelihood, risk_score=severity * likelihood,
        risk_category=RiskCategory.LOW, recommended_controls=[], ai_insight="",
        created_at=created_at,
    )
    db.add(record)
    db.commit()
    return record


def test_list_merges_all_types_with_titles_and_statuses(client, auth_headers):
    ids = create_one_of_each(client, auth_headers)

    response = client.get("/api/v1/reports/", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 5
    assert data["page"] == 1
    assert data["page_size"] == 10
    assert data["total_pages"] == 1

    rows = {row["type"]: row for row in data["items"]}
    assert set(rows) == {"HIRADC", "FTA", "ETA", "CCA", "K3"}
    assert rows["HIRADC"]["title"] == "Warehouse forklift loading"
    assert rows["HIRADC"]["status"] == "Medium"
    assert rows["FTA"]["status"] == "Completed"
    assert rows["K3"]["title"].startswith("K3 Calculation - ")
    assert rows["K3"]["status"] == "LTIR: 2.0"
    assert {row["type"]: row["id"] for row in data["items"]} == ids


def test_filter_by_type(client, auth_headers):
    create_one_of_each(client, auth_headers)

    data = client.get("/api/v1/reports/", params={"type": "ETA"}, headers=auth_headers).json()
    assert data["total"] == 1
    assert data["items"][0]["type"] == "ETA"


def test_search_matches_title_or_type_case_insensitive(client, auth_headers):
    create_one_of_each(client, auth_headers)

    data = client.get("/api/v1/reports/", params={"search": "WAREHOUSE"}, headers=auth_headers).json()
    assert {row["type"] for row in data["items"]} == {"HIRADC", "FTA"}

    data = client.get("/api/v1/reports/", params={"search": "cca"}, headers=auth_headers).json()
    assert [row["type"] for row in data["items"]] == ["CCA"]


def test_invalid_type_is_rejected(client, auth_headers):
    response = client.get("/api/v1/reports/", params={"type": "XYZ"}, headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_newest_first_across_tables_and_pagination(client, auth_headers, db_session):
    user_id = current_user_id(client, auth_headers)
    for day in range(1, 12):
        add_hiradc(db_session, user_id, f"Task {day}", datetime(2026, 1, day, 8, 0))
    db_session.add(FtaAnalysis(
        user_id=user_id, title="Latest tree", top_event="Fire",
        structure={"top_event": {"id": "top", "text": "Fire", "x": 400, "y": 50},
                   "gates": [], "intermediate_events": [], "basic_events": []},
        created_at=datetime(2026, 3, 1, 8, 0),
    ))
    db_session.add(K3Calculation(
        user_id=user_id, ltir=0, trir=0, severity_rate=0, frequency_rate=0,
        safe_man_hours=0, compliance_ppe=0, created_at=datetime(2026, 2, 1, 8, 0),
    ))
    db_session.commit()

    page1 = client.get("/api/v1/reports/", headers=auth_headers).json()
    assert page1["total"] == 13
    assert page1["total_pages"] == 2
    assert len(page1["items"]) == 10
    assert [row["type"] for row in page1["items"][:3]] == ["FTA", "K3", "HIRADC"]
    assert page1["items"][2]["title"] == "Task 11"

    page2 = client.get("/api/v1/reports/", params={"page": 2}, headers=auth_headers).json()
    assert [row["title"] for row in page2["items"]] == ["Task 3", "Task 2", "Task 1"]

    page3 = client.get("/api/v1/reports/", params={"page": 3}, headers=auth_headers).json()
    assert page3["items"] == []
    assert page3["total"] == 13


def test_reports_are_scoped_to_owner(client, auth_headers, other_auth_headers):
    create_one_of_each(client, auth_headers)
    data = client.get("/api/v1/reports/", headers=other_auth_headers).json()
    assert data["total"] == 0
    assert data["total_pages"] == 0


def test_delete_by_type(client, auth_headers, other_auth_headers):
    ids = create_one_of_each(client, auth_headers)

    response = client.delete(f"/api/v1/reports/FTA/{ids['FTA']}", headers=other_auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.delete(f"/api/v1/reports/FTA/{ids['FTA']}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/fta/{ids['FTA']}", headers=auth_headers).status_code == 404
    assert client.get("/api/v1/reports/", headers=auth_headers).json()["total"] == 4


@pytest.mark.parametrize("report_type", ["HIRADC", "FTA", "ETA", "CCA", "K3"])
def test_pdf_export(client, auth_headers, report_type):
    ids = create_one_of_each(client, auth_headers)
    record_id = ids[report_type]

    response = client.get(f"/api/v1/reports/{report_type}/{record_id}/pdf", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/pdf"
    assert f'filename="{report_type.lower()}_{record_id}.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_pdf_export_of_other_users_record_is_not_found(client, auth_headers, other_auth_headers):
    ids = create_one_of_each(client, auth_headers)
    response = client.get(f"/api/v1/reports/HIRADC/{ids['HIRADC']}/pdf", headers=other_auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_filter_and_paginate_helpers():
    rows = [
        {"id": 1, "type": AnalysisType.FTA, "title": "Crane failure", "status": "Completed", "created_at": None},
        {"id": 2, "type": AnalysisType.HIRADC, "title": "Crane lift", "status": "High", "created_at": None},
        {"id": 3, "type": AnalysisType.K3, "title": "K3 Calculation - 2026-01-01", "status": "LTIR: 0", "created_at": None},
    ]
    assert [r["id"] for r in filter_reports(rows, search="crane")] == [1, 2]
    assert [r["id"] for r in filter_reports(rows, AnalysisType.FTA, "crane")] == [1]
    assert filter_reports(rows, search="hiradc")[0]["id"] == 2

    page = paginate(rows, page=2, page_size=2)
    assert page["items"] == rows[2:]
    assert page["total_pages"] == 2


def test_report_row_for_k3_uses_date_title():
    record = K3Calculation(id=7, ltir=1.5, created_at=datetime(2026, 5, 4, 10, 0))
    row = report_row(AnalysisType.K3, record)
    assert row["title"] == "K3 Calculation - 2026-05-04"
    assert row["status"] == "LTIR: 1.5"
