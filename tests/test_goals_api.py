import pytest

GOAL_PAYLOAD = {
    "title": "Improve onboarding",
    "owner_id": 12,
    "start_date": "2024-04-01",
    "end_date": "2024-06-30",
    "key_results": [
        {"title": "Hires onboarded in a week", "start_value": 0, "target_value": 200, "weight": 2},
        {"title": "Buddy programme", "target_value": 1, "measurement_type": "boolean"},
    ],
}

def _create_goal(client, headers=None):
    response = client.post("/api/goals", json=GOAL_PAYLOAD, headers=headers or {})
    assert response.status_code == 200
    return response.json()["data"]

def test_create_goal(client):
    goal = _create_goal(client, headers={"X-Organization-ID": "42"})
    assert goal["status"] == "draft"
    assert goal["organization_id"] == 42
    assert goal["created_at"].startswith("2024-04-01T09:00:00")
    assert len(goal["key_results"]) == 2

def test_create_goal_reports_every_error(client):
    response = client.post("/api/goals", json={"start_date": "2024-06-30", "end_date": "2024-04-01"})
    assert response.status_code == 422
    body = response.json()
    assert body["errors"][0]["code"] == "VALIDATION_FAILED"
    assert body["details"]["errors"] == [
        "Goal title is required",
        "Goal owner is required",
        "Start date must be before end date",
    ]

def test_check_in_flow(client):
    goal = _create_goal(client)
    kr_id = goal["key_results"][0]["id"]

    response = client.post("/api/goals/check-ins", json={
        "goal": goal,
        "key_result_id": kr_id,
        "check_in": {"new_value": 150, "confidence": "at_risk", "notes": "Hiring freeze"},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["progress"] == 50
    updated = body["data"]
    assert updated["key_results"][0]["progress"] == 75
    assert updated["key_results"][0]["check_ins"][0]["confidence"] == "at_risk"

def test_check_in_unknown_key_result(client):
    goal = _create_goal(client)
    response = client.post("/api/goals/check-ins", json={
        "goal": goal, "key_result_id": "nope", "check_in": {"new_value": 1},
    })
    assert response.status_code == 404

def test_add_key_result(client):
    goal = _create_goal(client)
    response = client.post("/api/goals/key-results", json={
        "goal": goal,
        "key_result": {"title": "Survey score", "start_value": 3, "target_value": 5, "current_value": 5},
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["key_results"]) == 3
    assert data["progress"] == 25

def test_close_goal_twice_conflicts(client):
    goal = _create_goal(client)
    response = client.post("/api/goals/close", json={"goal": goal, "closure": {"outcome": "not_achieved"}})
    assert response.status_code == 200
    closed = response.json()["data"]
    assert closed["closure"]["outcome"] == "not_achieved"

    response = client.post("/api/goals/close", json={"goal": closed["goal"]})
    assert response.status_code == 409

def test_goal_summary(client):
    goal = _create_goal(client)
    response = client.post("/api/goals/summary", json={"goals": [goal, goal]})
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 2

def test_negative_key_result_weight_rejected(client):
    payload = {**GOAL_PAYLOAD, "key_results": [{"title": "Bad", "weight": -2}]}
    response = client.post("/api/goals", json=payload)
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "weight"
