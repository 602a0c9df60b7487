"""
Goals Router

OKR endpoints. Goal records are sent with each request and returned
updated; persistence belongs to the caller's data layer.
"""
from fastapi import APIRouter, Depends

from app.core.schemas import ApiResponse
from app.dependencies import get_goal_service
from app.schemas.goal import (
    AddKeyResultRequest,
    CheckInRequest,
    CloseGoalRequest,
    ClosedGoal,
    Goal,
    GoalCreate,
    GoalSummary,
    GoalSummaryRequest,
)
from app.services.goal_setting import GoalSettingService

router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=ApiResponse[Goal])
def create_goal(request: GoalCreate, service: GoalSettingService = Depends(get_goal_service)):
    return ApiResponse.ok(service.create_goal(request))


@router.post("/key-results", response_model=ApiResponse[Goal])
def add_key_result(request: AddKeyResultRequest, service: GoalSettingService = Depends(get_goal_service)):
    return ApiResponse.ok(service.add_key_result(request.goal, request.key_result))


@router.post("/check-ins", response_model=ApiResponse[Goal])
def check_in(request: CheckInRequest, service: GoalSettingService = Depends(get_goal_service)):
    """Record a key result value update and return the recomputed goal."""
    goal = service.check_in(request.goal, request.key_result_id, request.check_in)
    return ApiResponse.ok(goal, metadata={"progress": goal.progress})


@router.post("/close", response_model=ApiResponse[ClosedGoal])
def close_goal(request: CloseGoalRequest, service: GoalSettingService = Depends(get_goal_service)):
    return ApiResponse.ok(service.close_goal(request.goal, request.closure))


@router.post("/summary", response_model=ApiResponse[GoalSummary])
def summarize_goals(request: GoalSummaryRequest, service: GoalSettingService = Depends(get_goal_service)):
    return ApiResponse.ok(service.summarize_goals(request.goals))
