from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import enum

from app.core.config import settings


class ReviewType(str, enum.Enum):
    ANNUAL = "annual"
    MID_YEAR = "mid_year"
    QUARTERLY = "quarterly"
    PROBATION = "probation"
    PROJECT = "project"
    CONTINUOUS = "continuous"

class ReviewStatus(str, enum.Enum):
    DRAFT = "draft"
    SELF_REVIEW = "self_review"
    PEER_REVIEW = "peer_review"
    MANAGER_REVIEW = "manager_review"
    CALIBRATION = "calibration"
    COMPLETED = "completed"
    ACKNOWLEDGED = "acknowledged"

# Order in which a review moves through its phases
REVIEW_STATUS_SEQUENCE = list(ReviewStatus)

class ReviewerType(str, enum.Enum):
    SELF = "self"
    MANAGER = "manager"
    PEER = "peer"
    DIRECT_REPORT = "direct_report"
    EXTERNAL = "external"

class RatingScale(str, enum.Enum):
    FIVE_POINT = "5_point"
    FOUR_POINT = "4_point"
    TEN_POINT = "10_point"
    CUSTOM = "custom"

RATING_SCALE_MAX = {
    RatingScale.FIVE_POINT: 5,
    RatingScale.FOUR_POINT: 4,
    RatingScale.TEN_POINT: 10,
}

RATING_LABELS = {
    1: "Needs Improvement",
    2: "Developing",
    3: "Meets Expectations",
    4: "Exceeds Expectations",
    5: "Outstanding",
}


# --- Inputs ---

class ReviewPhase(BaseModel):
    name: str
    duration_days: int = Field(settings.reviews.default_phase_days, ge=0)

class ReviewCycleCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: ReviewType = ReviewType.ANNUAL
    start_date: date
    end_date: date
    year: Optional[int] = None
    phases: List[ReviewPhase] = []
    template_id: Optional[str] = None
    rating_scale: RatingScale = RatingScale.FIVE_POINT
    is_360: bool = True
    peer_selection: str = "manager_selected"  # self_selected, manager_selected, both
    min_peers: int = Field(settings.reviews.min_peers, ge=0)
    max_peers: int = Field(settings.reviews.max_peers, ge=0)
    include_goals: bool = True
    include_competencies: bool = True
    eligible_employees: List[int] = []
    excluded_employees: List[int] = []
    created_by: Optional[int] = None

class ReviewInitiate(BaseModel):
    manager_id: Optional[int] = None
    peers: List[int] = []
    direct_reports: List[int] = []
    template_id: Optional[str] = None
    goals_summary: List[Dict[str, Any]] = []
    phases: List[ReviewPhase] = []

class SelfAssessmentCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    accomplishments: List[str] = []
    challenges: List[str] = []
    goals_reflection: Optional[str] = None
    competency_ratings: Dict[str, float] = {}
    development_goals: List[str] = []
    feedback_for_manager: Optional[str] = None
    career_aspirations: Optional[str] = None

class PeerFeedbackCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    reviewer_type: ReviewerType = ReviewerType.PEER
    relationship: Optional[str] = None
    ratings: Dict[str, float] = {}
    strengths: List[str] = []
    areas_for_improvement: List[str] = []
    collaboration_feedback: Optional[str] = None
    additional_comments: Optional[str] = None
    is_anonymous: bool = True

class ManagerEvaluationCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    competency_ratings: Dict[str, float] = {}
    goal_ratings: Dict[str, float] = {}
    overall_rating: float
    rating_scale: RatingScale = RatingScale.FIVE_POINT
    rating_justification: Optional[str] = None
    strengths: List[str] = []
    areas_for_improvement: List[str] = []
    achievements: List[str] = []
    development_recommendations: List[str] = []
    promotion_readiness: Optional[str] = None
    retention_risk: Optional[str] = None
    compensation_recommendation: Optional[str] = None
    comments: Optional[str] = None

class CalibrationEntry(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    original: Optional[float] = None
    calibrated: Optional[float] = None
    reason: Optional[str] = None

class CompleteReviewCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    final_rating: Optional[float] = None
    development_plan: Optional[Dict[str, Any]] = None
    goals_for_next_period: List[str] = []
    compensation_impact: Optional[str] = None

class AcknowledgementCreate(BaseModel):
    agrees: Optional[bool] = None
    comments: Optional[str] = None
    dispute: bool = False
    signature: Optional[str] = None


# --- Records ---

class CyclePeriod(BaseModel):
    start_date: date
    end_date: date
    year: int

class ReviewCycle(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    type: ReviewType
    period: CyclePeriod
    phases: List[ReviewPhase]
    template_id: Optional[str] = None
    rating_scale: RatingScale
    is_360: bool
    peer_selection: str
    min_peers: int
    max_peers: int
    include_goals: bool
    include_competencies: bool
    eligible_employees: List[int] = []
    excluded_employees: List[int] = []
    status: str = "draft"
    created_by: Optional[int] = None
    created_at: datetime
    organization_id: Optional[int] = None

class Reviewer(BaseModel):
    id: str
    reviewer_id: int
    type: ReviewerType
    status: str = "pending"

class ReviewSection(BaseModel):
    id: str
    name: str
    weight: float = Field(..., ge=0, allow_inf_nan=False)
    questions: List[Dict[str, Any]] = []

class Review(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    cycle_id: str
    employee_id: int
    manager_id: Optional[int] = None
    status: ReviewStatus = ReviewStatus.DRAFT
    reviewers: List[Reviewer]
    sections: List[ReviewSection]
    goals_summary: List[Dict[str, Any]] = []
    competency_ratings: Dict[str, float] = {}
    overall_rating: Optional[float] = None
    calibrated_rating: Optional[float] = None
    strengths: List[str] = []
    areas_for_improvement: List[str] = []
    development_plan: Optional[Dict[str, Any]] = None
    acknowledgement: Optional[Dict[str, Any]] = None
    started_at: datetime
    due_dates: Dict[str, date] = {}
    organization_id: Optional[int] = None

class SelfAssessment(SelfAssessmentCreate):
    review_id: str
    submitted_at: datetime

class PeerFeedback(PeerFeedbackCreate):
    id: str
    review_id: str
    reviewer_id: int
    submitted_at: datetime

class ManagerEvaluation(ManagerEvaluationCreate):
    review_id: str
    submitted_at: datetime

class Calibration(BaseModel):
    review_id: str
    original_rating: Optional[float] = None
    calibrated_rating: Optional[float] = None
    adjustment_reason: Optional[str] = None
    calibrated_by: Optional[int] = None
    calibrated_at: datetime

class FeedbackSummary(BaseModel):
    average_peer_rating: float = 0
    common_strengths: List[str] = []
    common_improvements: List[str] = []
    response_count: int = 0

class ReviewSummary(BaseModel):
    review_id: str
    completed_at: datetime
    final_rating: Optional[float] = None
    rating_label: str
    feedback_summary: FeedbackSummary
    development_plan: Optional[Dict[str, Any]] = None
    goals_for_next_period: List[str] = []
    compensation_impact: Optional[str] = None

class CompletionStats(BaseModel):
    total_reviews: int = 0
    completed: int = 0
    in_progress: int = 0
    not_started: int = 0
    completion_rate: float = 0

class ReviewAnalytics(BaseModel):
    cycle_id: Optional[str] = None
    completion_stats: CompletionStats
    rating_distribution: Dict[str, int] = {}  # rating label -> review count
    average_rating: Optional[float] = None

class Acknowledgement(BaseModel):
    review_id: str
    employee_id: int
    acknowledged_at: datetime
    agrees_with_rating: Optional[bool] = None
    employee_comments: Optional[str] = None
    dispute_requested: bool = False
    signature: Optional[str] = None


# --- Request envelopes ---

class InitiateReviewRequest(BaseModel):
    cycle_id: str
    employee_id: int
    review: ReviewInitiate = ReviewInitiate()

class AdvanceReviewRequest(BaseModel):
    review: Review

class PeerFeedbackRequest(BaseModel):
    reviewer_id: int
    feedback: PeerFeedbackCreate

class CalibrationRequest(BaseModel):
    review_ids: List[str]
    entries: Dict[str, CalibrationEntry] = {}
    calibrated_by: Optional[int] = None

class CompleteReviewRequest(BaseModel):
    completion: CompleteReviewCreate = CompleteReviewCreate()
    peer_feedback: List[PeerFeedback] = []

class AcknowledgeReviewRequest(BaseModel):
    employee_id: int
    acknowledgement: AcknowledgementCreate = AcknowledgementCreate()

class ReviewAnalyticsRequest(BaseModel):
    cycle_id: Optional[str] = None
    reviews: List[Review] = []

class OverallScoreRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    sections: List[ReviewSection] = []
    section_scores: Dict[str, float]

    @model_validator(mode="after")
    def scores_are_percentages(self):
        for section_id, score in self.section_scores.items():
            if not 0 <= score <= 100:
                raise ValueError(f"Score for section '{section_id}' must be between 0 and 100")
        return self
