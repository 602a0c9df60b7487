from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import enum


class CompetencyCategory(str, enum.Enum):
    TECHNICAL = "technical"
    LEADERSHIP = "leadership"
    BEHAVIORAL = "behavioral"
    FUNCTIONAL = "functional"
    INDUSTRY = "industry"

class AssessorType(str, enum.Enum):
    SELF = "self"
    MANAGER = "manager"
    PEER = "peer"
    EXTERNAL = "external"

class ProficiencyLevel(int, enum.Enum):
    NOVICE = 1
    BEGINNER = 2
    INTERMEDIATE = 3
    ADVANCED = 4
    EXPERT = 5

LEVEL_LABELS = {
    1: "Novice",
    2: "Beginner",
    3: "Intermediate",
    4: "Advanced",
    5: "Expert",
}

LEVEL_DESCRIPTIONS = {
    1: "Basic awareness, requires supervision",
    2: "Working knowledge, occasional guidance needed",
    3: "Practical application, works independently",
    4: "Deep expertise, can guide others",
    5: "Strategic mastery, industry recognition",
}


# --- Inputs ---

class LevelOverride(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    indicators: List[str] = []

class CompetencyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = None
    description: Optional[str] = None
    category: CompetencyCategory = CompetencyCategory.TECHNICAL
    is_core: bool = False
    levels: Dict[int, LevelOverride] = {}
    behavioral_indicators: List[str] = []
    applicable_roles: List[str] = []
    applicable_departments: List[str] = []
    related_competencies: List[str] = []
    assessment_methods: List[str] = ["self", "manager", "test"]
    weight: float = Field(1.0, ge=0, allow_inf_nan=False)
    metadata: Dict[str, Any] = {}

class FrameworkCompetencyInput(BaseModel):
    competency_id: str
    required_level: int = Field(3, ge=1, le=5)
    weight: float = Field(1.0, ge=0, allow_inf_nan=False)
    is_critical: bool = False

class RoleFrameworkCreate(BaseModel):
    role_name: str
    department_id: Optional[int] = None
    level: Optional[str] = None  # junior, mid, senior, lead
    competencies: List[FrameworkCompetencyInput] = []
    nice_to_have: List[str] = []
    career_path: List[str] = []
    effective_date: Optional[date] = None

class AssessmentCreate(BaseModel):
    assessor_id: Optional[int] = None
    assessor_type: AssessorType = AssessorType.MANAGER
    current_level: int = Field(..., ge=1, le=5)
    target_level: Optional[int] = Field(None, ge=1, le=5)
    evidence: List[str] = []
    observations: Optional[str] = None
    development_suggestions: List[str] = []
    next_assessment_date: Optional[date] = None
    metadata: Dict[str, Any] = {}

class DevelopmentPlanOptions(BaseModel):
    type: str = "skill_development"
    title: str = "Individual Development Plan"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    mentor_id: Optional[int] = None
    check_in_frequency: str = "monthly"


# --- Records ---

class LevelDefinition(BaseModel):
    level: int
    name: str
    description: str
    indicators: List[str] = []

class Competency(BaseModel):
    id: str
    name: str
    code: str
    description: Optional[str] = None
    category: CompetencyCategory
    is_core: bool = False
    levels: Dict[int, LevelDefinition]
    behavioral_indicators: List[str] = []
    applicable_roles: List[str] = []
    applicable_departments: List[str] = []
    related_competencies: List[str] = []
    assessment_methods: List[str] = []
    weight: float = Field(1.0, ge=0, allow_inf_nan=False)
    is_active: bool = True
    created_at: datetime
    organization_id: Optional[int] = None
    metadata: Dict[str, Any] = {}

class FrameworkCompetency(BaseModel):
    competency_id: str
    required_level: int = Field(3, ge=1, le=5)
    weight: float = Field(1.0, ge=0, allow_inf_nan=False)
    is_critical: bool = False

class RoleFramework(BaseModel):
    id: str
    role_id: str
    role_name: str
    department_id: Optional[int] = None
    level: Optional[str] = None
    required_competencies: List[FrameworkCompetency] = []
    nice_to_have_competencies: List[str] = []
    career_path: List[str] = []
    version: int = 1
    effective_date: date
    created_at: datetime
    organization_id: Optional[int] = None

class CompetencyAssessment(BaseModel):
    id: str
    employee_id: int
    competency_id: str
    assessor_id: Optional[int] = None
    assessor_type: AssessorType
    current_level: int = Field(..., ge=1, le=5)
    target_level: Optional[int] = Field(None, ge=1, le=5)
    evidence: List[str] = []
    observations: Optional[str] = None
    development_suggestions: List[str] = []
    assessed_at: datetime
    next_assessment_date: Optional[date] = None
    organization_id: Optional[int] = None
    metadata: Dict[str, Any] = {}

class CompetencyGap(BaseModel):
    competency_id: str
    competency_name: Optional[str] = None
    current_level: int = Field(..., ge=0, le=5)
    target_level: int = Field(..., ge=1, le=5)
    gap: int = 0
    priority: str = "medium"
    timeline: str = "3 months"

class GapAnalysis(BaseModel):
    employee_id: int
    target_role_id: str
    gaps: List[CompetencyGap] = []
    strengths: List[str] = []
    readiness_score: float = 0
    estimated_development_time: Optional[str] = None
    recommended_actions: List[str] = []

class DevelopmentAction(BaseModel):
    type: str
    description: str

class LearningResource(BaseModel):
    type: str
    name: str
    provider: Optional[str] = None

class DevelopmentItem(BaseModel):
    id: str
    competency_id: str
    competency_name: Optional[str] = None
    current_level: int
    target_level: int
    priority: str
    actions: List[DevelopmentAction]
    resources: List[LearningResource]
    timeline: str
    status: str = "not_started"
    progress: float = 0

class PlanPeriod(BaseModel):
    start_date: date
    end_date: date

class DevelopmentPlan(BaseModel):
    id: str
    employee_id: int
    type: str
    title: str
    period: PlanPeriod
    items: List[DevelopmentItem]
    mentor_id: Optional[int] = None
    check_in_frequency: str
    status: str = "active"
    created_at: datetime
    organization_id: Optional[int] = None

class Endorsement(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    employee_id: int
    competency_id: str
    endorser_id: int
    endorsed_at: datetime

class TeamMatrix(BaseModel):
    team_id: int
    competencies: List[str]
    members: List[int]
    matrix: Dict[int, Dict[str, int]]  # employee_id -> competency_id -> level
    team_averages: Dict[str, float]
    coverage_analysis: Dict[str, float]  # percent of members at proficient level or above

class SkilledEmployee(BaseModel):
    employee_id: int
    level: int

class SkillSearchResult(BaseModel):
    competency_id: str
    min_level: int
    employees: List[SkilledEmployee] = []
    total_count: int = 0

class CompetencyOverview(BaseModel):
    total_competencies: int = 0
    average_proficiency: float = 0
    skill_coverage: float = 0  # percent of assessed levels at proficient level or above

class CompetencyAnalytics(BaseModel):
    organization_overview: CompetencyOverview
    by_category: Dict[str, int] = {}
    average_by_competency: Dict[str, float] = {}
    skill_gaps: List[str] = []  # competencies averaging below proficient level


# --- Request envelopes ---

class GapAnalysisRequest(BaseModel):
    employee_id: int
    framework: RoleFramework
    assessments: List[CompetencyAssessment] = []
    competency_names: Dict[str, str] = {}

class DevelopmentPlanRequest(BaseModel):
    employee_id: int
    gaps: List[CompetencyGap]
    options: DevelopmentPlanOptions = DevelopmentPlanOptions()

class EndorsementRequest(BaseModel):
    employee_id: int
    competency_id: str
    endorser_id: int

class TeamMatrixRequest(BaseModel):
    team_id: int
    assessments: List[CompetencyAssessment]
    competency_ids: List[str] = []

class SkillSearchRequest(BaseModel):
    competency_id: str
    min_level: int = Field(1, ge=1, le=5)
    assessments: List[CompetencyAssessment] = []

class CompetencyAnalyticsRequest(BaseModel):
    competencies: List[Competency] = []
    assessments: List[CompetencyAssessment] = []
