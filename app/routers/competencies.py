from fastapi import APIRouter, Depends

from app.core.schemas import ApiResponse
from app.dependencies import get_competency_service
from app.schemas.competency import (
    AssessmentCreate,
    Competency,
    CompetencyAnalytics,
    CompetencyAnalyticsRequest,
    CompetencyAssessment,
    CompetencyCreate,
    DevelopmentPlan,
    DevelopmentPlanRequest,
    Endorsement,
    EndorsementRequest,
    GapAnalysis,
    GapAnalysisRequest,
    RoleFramework,
    RoleFrameworkCreate,
    SkillSearchRequest,
    SkillSearchResult,
    TeamMatrix,
    TeamMatrixRequest,
)
from app.services.competency_matrix import CompetencyMatrixService

router = APIRouter(prefix="/competencies", tags=["competencies"])


@router.post("", response_model=ApiResponse[Competency])
def create_competency(request: CompetencyCreate, service: CompetencyMatrixService = Depends(get_competency_service)):
    return ApiResponse.ok(service.create_competency(request))


@router.post("/frameworks/{role_id}", response_model=ApiResponse[RoleFramework])
def create_role_framework(
    role_id: str,
    request: RoleFrameworkCreate,
    service: CompetencyMatrixService = Depends(get_competency_service),
):
    return ApiResponse.ok(service.create_role_framework(role_id, request))


@router.post("/{competency_id}/assessments/{employee_id}", response_model=ApiResponse[CompetencyAssessment])
def assess_competency(
    competency_id: str,
    employee_id: int,
    request: AssessmentCreate,
    service: CompetencyMatrixService = Depends(get_competency_service),
):
    return ApiResponse.ok(service.assess_competency(employee_id, competency_id, request))


@router.post("/gap-analysis", response_model=ApiResponse[GapAnalysis])
def perform_gap_analysis(request: GapAnalysisRequest, service: CompetencyMatrixService = Depends(get_competency_service)):
    """Gaps, strengths and readiness of an employee against a role framework."""
    return ApiResponse.ok(service.perform_gap_analysis(
        request.employee_id, request.framework, request.assessments, request.competency_names
    ))


@router.post("/development-plans", response_model=ApiResponse[DevelopmentPlan])
def create_development_plan(
    request: DevelopmentPlanRequest,
    service: CompetencyMatrixService = Depends(get_competency_service),
):
    return ApiResponse.ok(service.create_development_plan(request.employee_id, request.gaps, request.options))


@router.post("/endorsements", response_model=ApiResponse[Endorsement])
def endorse_skill(request: EndorsementRequest, service: CompetencyMatrixService = Depends(get_competency_service)):
    return ApiResponse.ok(service.endorse_skill(request.employee_id, request.competency_id, request.endorser_id))


@router.post("/team-matrix", response_model=ApiResponse[TeamMatrix])
def generate_team_matrix(request: TeamMatrixRequest, service: CompetencyMatrixService = Depends(get_competency_service)):
    return ApiResponse.ok(service.generate_team_matrix(request.team_id, request.assessments, request.competency_ids))


@router.post("/search", response_model=ApiResponse[SkillSearchResult])
def find_by_skill(request: SkillSearchRequest, service: CompetencyMatrixService = Depends(get_competency_service)):
    """Employees at or above ``min_level`` in one competency."""
    return ApiResponse.ok(service.find_by_skill(request.assessments, request.competency_id, request.min_level))


@router.post("/analytics", response_model=ApiResponse[CompetencyAnalytics])
def competency_analytics(
    request: CompetencyAnalyticsRequest,
    service: CompetencyMatrixService = Depends(get_competency_service),
):
    return ApiResponse.ok(service.summarize_competencies(request.competencies, request.assessments))
