import pytest
import os
from datetime import datetime, timezone

# Set env before importing app components
os.environ["APP_ENV"] = "testing"

from app.core.clock import FixedClock, get_clock
from app.main import app
from app.services.competency_matrix import CompetencyMatrixService
from app.services.goal_setting import GoalSettingService
from app.services.performance_review import PerformanceReviewService
from fastapi.testclient import TestClient

FROZEN_AT = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)

@pytest.fixture(scope="function")
def clock():
    """A clock frozen at the start of Q2 2024."""
    return FixedClock(FROZEN_AT)

@pytest.fixture(scope="function")
def goal_service(clock):
    return GoalSettingService(clock=clock, organization_id=1)

@pytest.fixture(scope="function")
def competency_service(clock):
    return CompetencyMatrixService(clock=clock, organization_id=1)

@pytest.fixture(scope="function")
def review_service(clock):
    return PerformanceReviewService(clock=clock, organization_id=1)

@pytest.fixture(scope="function")
def client(clock):
    """Get a TestClient whose services use the frozen clock via dependency override."""
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
