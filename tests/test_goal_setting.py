import pytest
from datetime import date
from app.core.exceptions import InvalidTransition, NotFound, ValidationFailed
from app.schemas.goal import (
    CheckInCreate,
    Confidence,
    GoalCloseRequest,
    GoalCreate,
    GoalOutcome,
    GoalStatus,
    KeyResultCreate,
)

def _goal_data(**overrides):
    data = {
        "title": "Grow enterprise revenue",
        "owner_id": 7,
        "start_date": date(2024, 4, 1),
        "end_date": date(2024, 6, 30),
        "quarter": 2,
        "key_results": [
            {"title": "Close deals", "start_value": 0, "target_value": 200, "weight": 2},
            {"title": "Launch partner program", "measurement_type": "boolean", "start_value": 0, "target_value": 1},
        ],
    }
    data.update(overrides)
    return GoalCreate(**data)

def test_create_goal_starts_in_draft(goal_service, clock):
    goal = goal_service.create_goal(_goal_data())
    assert goal.status == GoalStatus.DRAFT
    assert goal.progress == 0
    assert goal.period.year == 2024
    assert goal.organization_id == 1
    assert goal.created_at == clock.now()
    assert len(goal.key_results) == 2
    assert all(kr.goal_id == goal.id for kr in goal.key_results)
    assert goal.key_results[0].current_value == 0

def test_create_goal_collects_all_errors(goal_service):
    with pytest.raises(ValidationFailed) as exc:
        goal_service.create_goal(GoalCreate(title="", start_date=date(2024, 1, 1)))
    assert exc.value.errors == [
        "Goal title is required",
        "Goal owner is required",
        "Goal period dates are required",
    ]

def test_create_goal_rejects_inverted_period(goal_service):
    with pytest.raises(ValidationFailed) as exc:
        goal_service.create_goal(_goal_data(start_date=date(2024, 7, 1)))
    assert exc.value.errors == ["Start date must be before end date"]

def test_add_key_result_recomputes_progress(goal_service):
    goal = goal_service.create_goal(_goal_data(key_results=[]))
    updated = goal_service.add_key_result(goal, KeyResultCreate(
        title="NPS", start_value=20, target_value=60, current_value=40
    ))
    assert updated.key_results[0].progress == 50
    assert updated.progress == 50
    # the original record is untouched
    assert goal.key_results == []

def test_check_in_appends_and_recomputes(goal_service, clock):
    goal = goal_service.create_goal(_goal_data())
    deals = goal.key_results[0]

    after_first = goal_service.check_in(goal, deals.id, CheckInCreate(new_value=150))
    kr = after_first.key_results[0]
    assert kr.current_value == 150
    assert kr.progress == 75
    assert after_first.progress == 50
    assert len(kr.check_ins) == 1
    assert kr.check_ins[0].previous_value == 0

    clock.advance(days=7)
    after_second = goal_service.check_in(
        after_first, deals.id, CheckInCreate(new_value=260, confidence=Confidence.ON_TRACK)
    )
    kr = after_second.key_results[0]
    assert kr.progress == 100  # overshoot is clamped
    assert [c.new_value for c in kr.check_ins] == [150, 260]
    assert kr.check_ins[1].previous_value == 150
    assert kr.check_ins[1].checked_in_at > kr.check_ins[0].checked_in_at
    # earlier snapshot still has a single check-in
    assert len(after_first.key_results[0].check_ins) == 1

def test_check_ins_are_immutable(goal_service):
    goal = goal_service.create_goal(_goal_data())
    goal = goal_service.check_in(goal, goal.key_results[0].id, CheckInCreate(new_value=10))
    with pytest.raises(Exception):
        goal.key_results[0].check_ins[0].new_value = 99

def test_check_in_unknown_key_result(goal_service):
    goal = goal_service.create_goal(_goal_data())
    with pytest.raises(NotFound):
        goal_service.check_in(goal, "missing", CheckInCreate(new_value=1))

def test_close_goal_records_outcome(goal_service):
    goal = goal_service.create_goal(_goal_data())
    goal = goal_service.check_in(goal, goal.key_results[0].id, CheckInCreate(new_value=150))

    closed = goal_service.close_goal(goal, GoalCloseRequest(outcome=GoalOutcome.PARTIALLY_COMPLETED))
    assert closed.goal.status == GoalStatus.COMPLETED
    assert closed.closure.outcome == GoalOutcome.PARTIALLY_COMPLETED
    assert closed.closure.final_progress == 50

    with pytest.raises(InvalidTransition):
        goal_service.close_goal(closed.goal, GoalCloseRequest())
    with pytest.raises(InvalidTransition):
        goal_service.check_in(closed.goal, goal.key_results[0].id, CheckInCreate(new_value=1))

def test_summarize_goals(goal_service):
    first = goal_service.create_goal(_goal_data())
    first = goal_service.check_in(first, first.key_results[0].id, CheckInCreate(new_value=150))
    second = goal_service.create_goal(_goal_data()).model_copy(update={"status": GoalStatus.AT_RISK})
    third = goal_service.close_goal(goal_service.create_goal(_goal_data()), GoalCloseRequest()).goal

    summary = goal_service.summarize_goals([first, second, third])
    assert summary.total == 3
    assert summary.completed == 1
    assert summary.in_progress == 2
    assert summary.at_risk == 1
    assert summary.average_progress == 16.67
    assert summary.completion_rate == 33.33

def test_summarize_no_goals(goal_service):
    summary = goal_service.summarize_goals([])
    assert summary.total == 0
    assert summary.average_progress == 0
