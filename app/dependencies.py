"""
Request-scoped dependencies shared by the routers.

Services are built per request with the injected clock and the tenant taken
from the organization header, so tests can swap the clock through
app.dependency_overrides.
"""
from typing import Optional

from fastapi import Depends, Header

from app.core.clock import Clock, get_clock
from app.services.competency_matrix import CompetencyMatrixService
from app.services.goal_setting import GoalSettingService
from app.services.performance_review import PerformanceReviewService


def get_current_org(x_organization_id: Optional[int] = Header(default=None)) -> Optional[int]:
    """Tenant stamped onto records created in this request (None when global)."""
    return x_organization_id


def get_goal_service(
    clock: Clock = Depends(get_clock),
    org_id: Optional[int] = Depends(get_current_org),
) -> GoalSettingService:
    return GoalSettingService(clock=clock, organization_id=org_id)


def get_competency_service(
    clock: Clock = Depends(get_clock),
    org_id: Optional[int] = Depends(get_current_org),
) -> CompetencyMatrixService:
    return CompetencyMatrixService(clock=clock, organization_id=org_id)


def get_review_service(
    clock: Clock = Depends(get_clock),
    org_id: Optional[int] = Depends(get_current_org),
) -> PerformanceReviewService:
    return PerformanceReviewService(clock=clock, organization_id=org_id)


__all__ = [
    "get_current_org",
    "get_goal_service",
    "get_competency_service",
    "get_review_service",
]
