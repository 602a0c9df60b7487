"""
Performance Review Service

360-degree performance reviews: review cycles with timed phases, reviewer
assignment, self/peer/manager submissions, calibration, completion and
employee acknowledgement.
"""
import math
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from app.core.exceptions import InvalidTransition, ValidationFailed
from app.core.progress import validate_weights, weighted_aggregate
from app.schemas.review import (
    Acknowledgement,
    AcknowledgementCreate,
    Calibration,
    CalibrationEntry,
    CompleteReviewCreate,
    CompletionStats,
    CyclePeriod,
    FeedbackSummary,
    ManagerEvaluation,
    ManagerEvaluationCreate,
    PeerFeedback,
    PeerFeedbackCreate,
    RATING_LABELS,
    RATING_SCALE_MAX,
    REVIEW_STATUS_SEQUENCE,
    Review,
    ReviewAnalytics,
    ReviewCycle,
    ReviewCycleCreate,
    ReviewInitiate,
    ReviewPhase,
    ReviewSection,
    ReviewStatus,
    ReviewSummary,
    Reviewer,
    ReviewerType,
    SelfAssessment,
    SelfAssessmentCreate,
)
from app.services.base import BaseService

DEFAULT_PHASES = [
    ReviewPhase(name="Self Review", duration_days=7),
    ReviewPhase(name="Peer Feedback", duration_days=10),
    ReviewPhase(name="Manager Review", duration_days=7),
    ReviewPhase(name="Calibration", duration_days=5),
    ReviewPhase(name="Employee Discussion", duration_days=7),
]

DEFAULT_SECTIONS = [
    ReviewSection(id="goals", name="Goals & Objectives", weight=40),
    ReviewSection(id="competencies", name="Core Competencies", weight=30),
    ReviewSection(id="values", name="Company Values", weight=20),
    ReviewSection(id="development", name="Development & Growth", weight=10),
]

# Mentioned by at least this many reviewers to count as "common"
COMMON_THEME_THRESHOLD = 2

FINISHED_REVIEW_STATUSES = (ReviewStatus.COMPLETED, ReviewStatus.ACKNOWLEDGED)


class PerformanceReviewService(BaseService):

    def create_review_cycle(self, data: ReviewCycleCreate) -> ReviewCycle:
        errors = []
        if data.start_date > data.end_date:
            errors.append("Start date must be before end date")
        if data.min_peers > data.max_peers:
            errors.append("Minimum peers cannot exceed maximum peers")
        if errors:
            raise ValidationFailed(errors, message="Invalid review cycle")

        cycle = ReviewCycle(
            id=self.new_id(),
            name=data.name,
            description=data.description,
            type=data.type,
            period=CyclePeriod(
                start_date=data.start_date,
                end_date=data.end_date,
                year=data.year or self.clock.today().year,
            ),
            phases=[*DEFAULT_PHASES, *data.phases],
            template_id=data.template_id,
            rating_scale=data.rating_scale,
            is_360=data.is_360,
            peer_selection=data.peer_selection,
            min_peers=data.min_peers,
            max_peers=data.max_peers,
            include_goals=data.include_goals,
            include_competencies=data.include_competencies,
            eligible_employees=data.eligible_employees,
            excluded_employees=data.excluded_employees,
            created_by=data.created_by,
            created_at=self.clock.now(),
            organization_id=self.org_id,
        )

        self.log_info("Review cycle created", cycle_id=cycle.id, review_type=cycle.type.value)
        return cycle

    def initiate_review(self, cycle_id: str, employee_id: int, data: Optional[ReviewInitiate] = None) -> Review:
        data = data or ReviewInitiate()
        review = Review(
            id=self.new_id(),
            cycle_id=cycle_id,
            employee_id=employee_id,
            manager_id=data.manager_id,
            status=ReviewStatus.DRAFT,
            reviewers=self.assign_reviewers(employee_id, data),
            sections=[section.model_copy() for section in DEFAULT_SECTIONS],
            goals_summary=data.goals_summary,
            started_at=self.clock.now(),
            due_dates=self.calculate_due_dates(data.phases or DEFAULT_PHASES),
            organization_id=self.org_id,
        )

        self.log_info("Review initiated", review_id=review.id, employee_id=employee_id, cycle_id=cycle_id)
        return review

    def advance_review(self, review: Review) -> Review:
        """Move a review to the next status in the review sequence."""
        position = REVIEW_STATUS_SEQUENCE.index(review.status)
        if position == len(REVIEW_STATUS_SEQUENCE) - 1:
            raise InvalidTransition(
                f"Review {review.id} is already {review.status.value}",
                current_status=review.status.value,
            )

        next_status = REVIEW_STATUS_SEQUENCE[position + 1]
        self.log_info(
            "Review advanced",
            review_id=review.id,
            from_status=review.status.value,
            to_status=next_status.value,
        )
        return review.model_copy(update={"status": next_status})

    def submit_self_assessment(self, review_id: str, data: SelfAssessmentCreate) -> SelfAssessment:
        assessment = SelfAssessment(
            review_id=review_id,
            submitted_at=self.clock.now(),
            **data.model_dump(),
        )
        self.log_info("Self assessment submitted", review_id=review_id)
        return assessment

    def submit_peer_feedback(self, review_id: str, reviewer_id: int, data: PeerFeedbackCreate) -> PeerFeedback:
        feedback = PeerFeedback(
            id=self.new_id(),
            review_id=review_id,
            reviewer_id=reviewer_id,
            submitted_at=self.clock.now(),
            **data.model_dump(),
        )
        self.log_info(
            "Peer feedback submitted",
            review_id=review_id,
            reviewer_id=reviewer_id,
            anonymous=feedback.is_anonymous,
        )
        return feedback

    def submit_manager_evaluation(self, review_id: str, data: ManagerEvaluationCreate) -> ManagerEvaluation:
        scale_max = RATING_SCALE_MAX.get(data.rating_scale)
        if data.overall_rating < 1 or (scale_max is not None and data.overall_rating > scale_max):
            raise ValidationFailed(
                [f"Overall rating must be between 1 and {scale_max or 'the scale maximum'}"],
                message="Invalid manager evaluation",
            )

        evaluation = ManagerEvaluation(
            review_id=review_id,
            submitted_at=self.clock.now(),
            **data.model_dump(),
        )
        self.log_info("Manager evaluation submitted", review_id=review_id, overall_rating=data.overall_rating)
        return evaluation

    def calibrate(
        self,
        review_ids: Sequence[str],
        entries: Dict[str, CalibrationEntry],
        calibrated_by: Optional[int] = None,
    ) -> List[Calibration]:
        calibrations = []
        for review_id in review_ids:
            entry = entries.get(review_id) or CalibrationEntry()
            calibrations.append(Calibration(
                review_id=review_id,
                original_rating=entry.original,
                calibrated_rating=entry.calibrated,
                adjustment_reason=entry.reason,
                calibrated_by=calibrated_by,
                calibrated_at=self.clock.now(),
            ))

        self.log_info("Ratings calibrated", review_count=len(review_ids))
        return calibrations

    def complete_review(
        self,
        review_id: str,
        data: Optional[CompleteReviewCreate] = None,
        peer_feedback: Sequence[PeerFeedback] = (),
    ) -> ReviewSummary:
        data = data or CompleteReviewCreate()
        summary = ReviewSummary(
            review_id=review_id,
            completed_at=self.clock.now(),
            final_rating=data.final_rating,
            rating_label=self.get_rating_label(data.final_rating or 0),
            feedback_summary=self.aggregate_feedback(
                [f for f in peer_feedback if f.review_id == review_id]
            ),
            development_plan=data.development_plan,
            goals_for_next_period=data.goals_for_next_period,
            compensation_impact=data.compensation_impact,
        )

        self.log_info("Review completed", review_id=review_id, final_rating=summary.final_rating)
        return summary

    def acknowledge_review(
        self,
        review_id: str,
        employee_id: int,
        data: Optional[AcknowledgementCreate] = None,
    ) -> Acknowledgement:
        data = data or AcknowledgementCreate()
        acknowledgement = Acknowledgement(
            review_id=review_id,
            employee_id=employee_id,
            acknowledged_at=self.clock.now(),
            agrees_with_rating=data.agrees,
            employee_comments=data.comments,
            dispute_requested=data.dispute,
            signature=data.signature,
        )

        self.log_info("Review acknowledged", review_id=review_id, employee_id=employee_id, agrees=data.agrees)
        return acknowledgement

    def calculate_overall_score(
        self,
        section_scores: Dict[str, float],
        sections: Optional[Sequence[ReviewSection]] = None,
    ) -> float:
        """Weighted 0-100 score across the sections that were scored."""
        sections = sections or DEFAULT_SECTIONS
        items = [
            {"progress": section_scores[section.id], "weight": section.weight}
            for section in sections
            if section.id in section_scores
        ]
        validate_weights(items)
        return weighted_aggregate(items)

    def calculate_due_dates(self, phases: Sequence[ReviewPhase]) -> Dict[str, date]:
        """Each phase is due ``duration_days`` after the previous one, starting today."""
        due_dates = {}
        current = self.clock.today()
        for phase in phases:
            current = current + timedelta(days=phase.duration_days)
            due_dates[phase.name] = current
        return due_dates

    def summarize_reviews(self, reviews: Sequence[Review], cycle_id: Optional[str] = None) -> ReviewAnalytics:
        """Completion counts and rating distribution, optionally limited to one cycle.

        A review's rating is its calibrated rating when present, otherwise its
        overall rating; unrated reviews are left out of the distribution.
        """
        if cycle_id is not None:
            reviews = [r for r in reviews if r.cycle_id == cycle_id]

        total = len(reviews)
        completed = sum(1 for r in reviews if r.status in FINISHED_REVIEW_STATUSES)
        not_started = sum(1 for r in reviews if r.status == ReviewStatus.DRAFT)

        ratings = [
            r.calibrated_rating if r.calibrated_rating is not None else r.overall_rating
            for r in reviews
        ]
        ratings = [rating for rating in ratings if rating is not None]

        return ReviewAnalytics(
            cycle_id=cycle_id,
            completion_stats=CompletionStats(
                total_reviews=total,
                completed=completed,
                in_progress=total - completed - not_started,
                not_started=not_started,
                completion_rate=round(completed / total * 100, 2) if total else 0.0,
            ),
            rating_distribution=dict(Counter(self.get_rating_label(rating) for rating in ratings)),
            average_rating=round(sum(ratings) / len(ratings), 2) if ratings else None,
        )

    @staticmethod
    def assign_reviewers(employee_id: int, data: ReviewInitiate) -> List[Reviewer]:
        reviewers = [Reviewer(id=BaseService.new_id(), reviewer_id=employee_id, type=ReviewerType.SELF)]

        if data.manager_id:
            reviewers.append(Reviewer(id=BaseService.new_id(), reviewer_id=data.manager_id, type=ReviewerType.MANAGER))

        for peer_id in data.peers:
            reviewers.append(Reviewer(id=BaseService.new_id(), reviewer_id=peer_id, type=ReviewerType.PEER))

        for report_id in data.direct_reports:
            reviewers.append(Reviewer(id=BaseService.new_id(), reviewer_id=report_id, type=ReviewerType.DIRECT_REPORT))

        return reviewers

    @staticmethod
    def get_rating_label(rating: float) -> str:
        if not math.isfinite(rating):
            return "Unknown"
        # round half up; Python's round() would send 2.5 to 2
        return RATING_LABELS.get(int(rating + 0.5), "Unknown")

    @staticmethod
    def aggregate_feedback(feedback: Sequence[PeerFeedback]) -> FeedbackSummary:
        ratings = [value for entry in feedback for value in entry.ratings.values()]
        strengths = Counter(s for entry in feedback for s in set(entry.strengths))
        improvements = Counter(a for entry in feedback for a in set(entry.areas_for_improvement))
        return FeedbackSummary(
            average_peer_rating=round(sum(ratings) / len(ratings), 2) if ratings else 0,
            common_strengths=[s for s, n in strengths.most_common() if n >= COMMON_THEME_THRESHOLD],
            common_improvements=[a for a, n in improvements.most_common() if n >= COMMON_THEME_THRESHOLD],
            response_count=len(feedback),
        )
