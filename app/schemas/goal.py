from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import enum


class GoalType(str, enum.Enum):
    INDIVIDUAL = "individual"
    TEAM = "team"
    DEPARTMENT = "department"
    COMPANY = "company"

class GoalStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    BEHIND = "behind"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class GoalPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class MeasurementType(str, enum.Enum):
    PERCENTAGE = "percentage"
    NUMBER = "number"
    CURRENCY = "currency"
    BOOLEAN = "boolean"
    MILESTONE = "milestone"

class Confidence(str, enum.Enum):
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OFF_TRACK = "off_track"

class GoalOutcome(str, enum.Enum):
    COMPLETED = "completed"
    PARTIALLY_COMPLETED = "partially_completed"
    NOT_ACHIEVED = "not_achieved"

class Visibility(str, enum.Enum):
    PRIVATE = "private"
    TEAM = "team"
    DEPARTMENT = "department"
    PUBLIC = "public"

TERMINAL_GOAL_STATUSES = (GoalStatus.COMPLETED, GoalStatus.CANCELLED)


# --- Inputs ---

class KeyResultCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    measurement_type: MeasurementType = MeasurementType.PERCENTAGE
    start_value: float = 0
    target_value: float = 100
    current_value: Optional[float] = None  # defaults to start_value
    unit: Optional[str] = None
    weight: float = Field(1.0, ge=0)
    milestones: List[Dict[str, Any]] = []
    owner_id: Optional[int] = None
    due_date: Optional[date] = None

class GoalCreate(BaseModel):
    """Required fields are checked by the service so every error is reported at once."""
    model_config = ConfigDict(allow_inf_nan=False)

    title: Optional[str] = None
    description: Optional[str] = None
    type: GoalType = GoalType.INDIVIDUAL
    priority: GoalPriority = GoalPriority.MEDIUM
    owner_id: Optional[int] = None
    owner_type: str = "employee"
    parent_goal_id: Optional[str] = None
    aligned_to: List[str] = []
    period_type: str = "quarter"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    quarter: Optional[int] = Field(None, ge=1, le=4)
    year: Optional[int] = None
    key_results: List[KeyResultCreate] = []
    weight: Optional[float] = Field(None, ge=0)
    tags: List[str] = []
    visibility: Visibility = Visibility.PRIVATE
    created_by: Optional[int] = None
    metadata: Dict[str, Any] = {}

class CheckInCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    new_value: float
    confidence: Confidence = Confidence.ON_TRACK
    notes: Optional[str] = None
    blockers: List[str] = []
    next_steps: Optional[str] = None
    checked_in_by: Optional[int] = None

class GoalCloseRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    final_progress: Optional[float] = None
    outcome: GoalOutcome = GoalOutcome.COMPLETED
    learnings: Optional[str] = None
    closed_by: Optional[int] = None


# --- Records ---

class CheckIn(BaseModel):
    """Append-only; a check-in is never edited once recorded."""
    model_config = ConfigDict(frozen=True)

    id: str
    key_result_id: str
    previous_value: float
    new_value: float
    confidence: Confidence
    notes: Optional[str] = None
    blockers: List[str] = []
    next_steps: Optional[str] = None
    checked_in_by: Optional[int] = None
    checked_in_at: datetime

class KeyResult(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    goal_id: str
    title: str
    description: Optional[str] = None
    measurement_type: MeasurementType = MeasurementType.PERCENTAGE
    start_value: float = 0
    target_value: float = 100
    current_value: float = 0
    unit: Optional[str] = None
    weight: float = Field(1.0, ge=0)
    progress: float = Field(0, ge=0, le=100)
    milestones: List[Dict[str, Any]] = []
    check_ins: List[CheckIn] = []
    status: GoalStatus = GoalStatus.ACTIVE
    owner_id: Optional[int] = None
    due_date: Optional[date] = None
    created_at: datetime

class GoalPeriod(BaseModel):
    type: str = "quarter"
    start_date: date
    end_date: date
    quarter: Optional[int] = None
    year: int

class Goal(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    title: str
    description: Optional[str] = None
    type: GoalType = GoalType.INDIVIDUAL
    priority: GoalPriority = GoalPriority.MEDIUM
    status: GoalStatus = GoalStatus.DRAFT
    owner_id: int
    owner_type: str = "employee"
    parent_goal_id: Optional[str] = None
    aligned_to: List[str] = []
    period: GoalPeriod
    key_results: List[KeyResult] = []
    weight: float = Field(1.0, ge=0)
    progress: float = Field(0, ge=0, le=100)
    tags: List[str] = []
    visibility: Visibility = Visibility.PRIVATE
    created_by: Optional[int] = None
    created_at: datetime
    organization_id: Optional[int] = None
    metadata: Dict[str, Any] = {}

class GoalClosure(BaseModel):
    goal_id: str
    final_progress: float
    outcome: GoalOutcome
    learnings: Optional[str] = None
    closed_by: Optional[int] = None
    closed_at: datetime

class ClosedGoal(BaseModel):
    goal: Goal
    closure: GoalClosure

class GoalSummary(BaseModel):
    total: int
    completed: int
    in_progress: int
    at_risk: int
    average_progress: float
    completion_rate: float


# --- Request envelopes (records travel with the request; nothing is stored) ---

class AddKeyResultRequest(BaseModel):
    goal: Goal
    key_result: KeyResultCreate

class CheckInRequest(BaseModel):
    goal: Goal
    key_result_id: str
    check_in: CheckInCreate

class CloseGoalRequest(BaseModel):
    goal: Goal
    closure: GoalCloseRequest = GoalCloseRequest()

class GoalSummaryRequest(BaseModel):
    goals: List[Goal]
