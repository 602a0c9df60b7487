"""
Reviews Router

360-degree review cycle endpoints. All business rules live in
PerformanceReviewService; handlers only unpack requests.
"""
from typing import List

from fastapi import APIRouter, Depends

from app.core.schemas import ApiResponse
from app.dependencies import get_review_service
from app.schemas.review import (
    AcknowledgeReviewRequest,
    Acknowledgement,
    AdvanceReviewRequest,
    Calibration,
    CalibrationRequest,
    CompleteReviewRequest,
    InitiateReviewRequest,
    ManagerEvaluation,
    ManagerEvaluationCreate,
    OverallScoreRequest,
    PeerFeedback,
    PeerFeedbackRequest,
    Review,
    ReviewAnalytics,
    ReviewAnalyticsRequest,
    ReviewCycle,
    ReviewCycleCreate,
    ReviewSummary,
    SelfAssessment,
    SelfAssessmentCreate,
)
from app.routers.progress import ScoreResponse
from app.services.performance_review import PerformanceReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("/cycles", response_model=ApiResponse[ReviewCycle])
def create_review_cycle(request: ReviewCycleCreate, service: PerformanceReviewService = Depends(get_review_service)):
    return ApiResponse.ok(service.create_review_cycle(request))


@router.post("", response_model=ApiResponse[Review])
def initiate_review(request: InitiateReviewRequest, service: PerformanceReviewService = Depends(get_review_service)):
    return ApiResponse.ok(service.initiate_review(request.cycle_id, request.employee_id, request.review))


@router.post("/advance", response_model=ApiResponse[Review])
def advance_review(request: AdvanceReviewRequest, service: PerformanceReviewService = Depends(get_review_service)):
    return ApiResponse.ok(service.advance_review(request.review))


@router.post("/calibrations", response_model=ApiResponse[List[Calibration]])
def calibrate(request: CalibrationRequest, service: PerformanceReviewService = Depends(get_review_service)):
    return ApiResponse.ok(service.calibrate(request.review_ids, request.entries, request.calibrated_by))


@router.post("/overall-score", response_model=ApiResponse[ScoreResponse])
def overall_score(request: OverallScoreRequest, service: PerformanceReviewService = Depends(get_review_service)):
    """Section-weighted overall score (0-100)."""
    score = service.calculate_overall_score(request.section_scores, request.sections or None)
    return ApiResponse.ok(ScoreResponse(progress=score))


@router.post("/analytics", response_model=ApiResponse[ReviewAnalytics])
def review_analytics(request: ReviewAnalyticsRequest, service: PerformanceReviewService = Depends(get_review_service)):
    """Completion stats and rating distribution across the supplied reviews."""
    return ApiResponse.ok(service.summarize_reviews(request.reviews, request.cycle_id))


@router.post("/{review_id}/self-assessment", response_model=ApiResponse[SelfAssessment])
def submit_self_assessment(
    review_id: str,
    request: SelfAssessmentCreate,
    service: PerformanceReviewService = Depends(get_review_service),
):
    return ApiResponse.ok(service.submit_self_assessment(review_id, request))


@router.post("/{review_id}/peer-feedback", response_model=ApiResponse[PeerFeedback])
def submit_peer_feedback(
    review_id: str,
    request: PeerFeedbackRequest,
    service: PerformanceReviewService = Depends(get_review_service),
):
    return ApiResponse.ok(service.submit_peer_feedback(review_id, request.reviewer_id, request.feedback))


@router.post("/{review_id}/manager-evaluation", response_model=ApiResponse[ManagerEvaluation])
def submit_manager_evaluation(
    review_id: str,
    request: ManagerEvaluationCreate,
    service: PerformanceReviewService = Depends(get_review_service),
):
    return ApiResponse.ok(service.submit_manager_evaluation(review_id, request))


@router.post("/{review_id}/complete", response_model=ApiResponse[ReviewSummary])
def complete_review(
    review_id: str,
    request: CompleteReviewRequest,
    service: PerformanceReviewService = Depends(get_review_service),
):
    return ApiResponse.ok(service.complete_review(review_id, request.completion, request.peer_feedback))


@router.post("/{review_id}/acknowledgement", response_model=ApiResponse[Acknowledgement])
def acknowledge_review(
    review_id: str,
    request: AcknowledgeReviewRequest,
    service: PerformanceReviewService = Depends(get_review_service),
):
    return ApiResponse.ok(service.acknowledge_review(review_id, request.employee_id, request.acknowledgement))
