import json
import pytest

def _assess(client, competency_id, employee_id, level):
    response = client.post(
        f"/api/competencies/{competency_id}/assessments/{employee_id}",
        json={"current_level": level, "assessor_type": "self"},
    )
    assert response.status_code == 200
    return response.json()["data"]

def test_create_competency(client):
    response = client.post("/api/competencies", json={"name": "Stakeholder Management", "category": "leadership"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["code"] == "stakeholder-management"
    assert data["levels"]["3"]["name"] == "Intermediate"

def test_assessment_out_of_range(client):
    response = client.post("/api/competencies/python/assessments/3", json={"current_level": 0})
    assert response.status_code == 422

def test_framework_and_gap_analysis(client):
    response = client.post("/api/competencies/frameworks/data-lead", json={
        "role_name": "Data Lead",
        "competencies": [
            {"competency_id": "sql", "required_level": 4},
            {"competency_id": "leadership", "required_level": 3},
        ],
    })
    assert response.status_code == 200
    framework = response.json()["data"]
    assert framework["effective_date"] == "2024-04-01"

    assessments = [_assess(client, "sql", 3, 2), _assess(client, "leadership", 3, 3)]
    response = client.post("/api/competencies/gap-analysis", json={
        "employee_id": 3, "framework": framework, "assessments": assessments,
    })
    assert response.status_code == 200
    analysis = response.json()["data"]
    assert analysis["readiness_score"] == 75
    assert analysis["strengths"] == ["leadership"]
    assert analysis["gaps"][0]["gap"] == 2

    response = client.post("/api/competencies/development-plans", json={
        "employee_id": 3, "gaps": analysis["gaps"],
    })
    assert response.status_code == 200
    plan = response.json()["data"]
    assert plan["items"][0]["competency_id"] == "sql"
    assert plan["period"]["end_date"] == "2024-09-28"

def test_self_endorsement_rejected(client):
    response = client.post("/api/competencies/endorsements", json={
        "employee_id": 3, "competency_id": "sql", "endorser_id": 3,
    })
    assert response.status_code == 422

def test_team_matrix(client):
    assessments = [_assess(client, "sql", 1, 5), _assess(client, "sql", 2, 1)]
    response = client.post("/api/competencies/team-matrix", json={"team_id": 4, "assessments": assessments})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["team_averages"]["sql"] == 3
    assert data["coverage_analysis"]["sql"] == 50

def test_gap_analysis_rejects_infinite_weight(client):
    response = client.post("/api/competencies/frameworks/data-lead", json={
        "role_name": "Data Lead", "competencies": [{"competency_id": "sql", "required_level": 4}],
    })
    framework = response.json()["data"]
    framework["required_competencies"][0]["weight"] = float("inf")

    response = client.post(
        "/api/competencies/gap-analysis",
        content=json.dumps({"employee_id": 3, "framework": framework}),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "weight"

def test_search_by_skill(client):
    assessments = [_assess(client, "sql", 1, 4), _assess(client, "sql", 2, 2), _assess(client, "python", 2, 5)]
    response = client.post("/api/competencies/search", json={
        "competency_id": "sql", "min_level": 3, "assessments": assessments,
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_count"] == 1
    assert data["employees"] == [{"employee_id": 1, "level": 4}]

def test_competency_analytics(client):
    assessments = [_assess(client, "sql", 1, 4), _assess(client, "sql", 2, 2)]
    response = client.post("/api/competencies/analytics", json={"assessments": assessments})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["organization_overview"]["total_competencies"] == 1
    assert data["organization_overview"]["average_proficiency"] == 3
    assert data["skill_gaps"] == []
