import pytest
from datetime import date
from app.core.exceptions import InvalidScoreInput, InvalidTransition, ValidationFailed
from app.schemas.review import (
    AcknowledgementCreate,
    CalibrationEntry,
    CompleteReviewCreate,
    ManagerEvaluationCreate,
    PeerFeedbackCreate,
    RatingScale,
    ReviewCycleCreate,
    ReviewInitiate,
    ReviewPhase,
    ReviewStatus,
    ReviewerType,
)

def test_create_cycle_appends_custom_phases(review_service):
    cycle = review_service.create_review_cycle(ReviewCycleCreate(
        name="FY24 Annual",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        phases=[ReviewPhase(name="HR Sign-off", duration_days=3)],
    ))
    assert [p.name for p in cycle.phases] == [
        "Self Review", "Peer Feedback", "Manager Review", "Calibration", "Employee Discussion", "HR Sign-off"
    ]
    assert cycle.period.year == 2024
    assert cycle.status == "draft"

def test_create_cycle_validation(review_service):
    with pytest.raises(ValidationFailed) as exc:
        review_service.create_review_cycle(ReviewCycleCreate(
            name="Broken", start_date=date(2024, 12, 31), end_date=date(2024, 1, 1), min_peers=6, max_peers=2
        ))
    assert len(exc.value.errors) == 2

def test_initiate_review_assigns_reviewers_and_due_dates(review_service):
    review = review_service.initiate_review("cycle-1", 5, ReviewInitiate(manager_id=2, peers=[6, 7], direct_reports=[8]))
    assert review.status == ReviewStatus.DRAFT
    assert [r.type for r in review.reviewers] == [
        ReviewerType.SELF, ReviewerType.MANAGER, ReviewerType.PEER, ReviewerType.PEER, ReviewerType.DIRECT_REPORT
    ]
    assert all(r.status == "pending" for r in review.reviewers)
    assert sum(s.weight for s in review.sections) == 100
    # due dates accumulate from 2024-04-01 through the default phases
    assert review.due_dates["Self Review"] == date(2024, 4, 8)
    assert review.due_dates["Peer Feedback"] == date(2024, 4, 18)
    assert review.due_dates["Employee Discussion"] == date(2024, 5, 7)

def test_initiate_review_without_manager(review_service):
    review = review_service.initiate_review("cycle-1", 5)
    assert [r.type for r in review.reviewers] == [ReviewerType.SELF]

def test_review_advances_through_every_status(review_service):
    review = review_service.initiate_review("cycle-1", 5)
    seen = [review.status]
    while review.status != ReviewStatus.ACKNOWLEDGED:
        review = review_service.advance_review(review)
        seen.append(review.status)
    assert seen == list(ReviewStatus)
    with pytest.raises(InvalidTransition):
        review_service.advance_review(review)

def test_manager_rating_must_fit_scale(review_service):
    with pytest.raises(ValidationFailed):
        review_service.submit_manager_evaluation("r1", ManagerEvaluationCreate(overall_rating=6))
    evaluation = review_service.submit_manager_evaluation(
        "r1", ManagerEvaluationCreate(overall_rating=8, rating_scale=RatingScale.TEN_POINT)
    )
    assert evaluation.overall_rating == 8

def test_peer_feedback_is_anonymous_by_default(review_service):
    feedback = review_service.submit_peer_feedback("r1", 6, PeerFeedbackCreate(ratings={"teamwork": 4}))
    assert feedback.is_anonymous is True
    assert feedback.reviewer_type == ReviewerType.PEER

def test_complete_review_aggregates_feedback(review_service):
    feedback = [
        review_service.submit_peer_feedback("r1", 6, PeerFeedbackCreate(
            ratings={"teamwork": 4, "delivery": 5}, strengths=["reliable", "clear writer"], areas_for_improvement=["delegation"]
        )),
        review_service.submit_peer_feedback("r1", 7, PeerFeedbackCreate(
            ratings={"teamwork": 3}, strengths=["reliable"], areas_for_improvement=["delegation"]
        )),
        review_service.submit_peer_feedback("r2", 8, PeerFeedbackCreate(ratings={"teamwork": 1})),
    ]
    summary = review_service.complete_review("r1", CompleteReviewCreate(final_rating=3.6), feedback)
    assert summary.rating_label == "Exceeds Expectations"
    assert summary.feedback_summary.response_count == 2
    assert summary.feedback_summary.average_peer_rating == 4
    assert summary.feedback_summary.common_strengths == ["reliable"]
    assert summary.feedback_summary.common_improvements == ["delegation"]

@pytest.mark.parametrize("rating,label", [(0, "Unknown"), (1.4, "Needs Improvement"), (2.5, "Meets Expectations"), (5, "Outstanding"), (7, "Unknown"), (float("inf"), "Unknown"), (float("nan"), "Unknown")])
def test_rating_labels(review_service, rating, label):
    assert review_service.get_rating_label(rating) == label

def test_calibrate_one_record_per_review(review_service):
    calibrations = review_service.calibrate(
        ["r1", "r2"], {"r1": CalibrationEntry(original=4, calibrated=3, reason="Normalised")}, calibrated_by=99
    )
    assert [c.review_id for c in calibrations] == ["r1", "r2"]
    assert calibrations[0].calibrated_rating == 3
    assert calibrations[1].calibrated_rating is None
    assert all(c.calibrated_by == 99 for c in calibrations)

def test_acknowledge_review(review_service):
    ack = review_service.acknowledge_review("r1", 5, AcknowledgementCreate(agrees=False, dispute=True))
    assert ack.dispute_requested is True
    assert ack.agrees_with_rating is False

def test_overall_score_weights_sections(review_service):
    score = review_service.calculate_overall_score({"goals": 80, "competencies": 60, "values": 100, "development": 50})
    assert score == 75
    # unscored sections are left out of the weighting
    assert review_service.calculate_overall_score({"goals": 80}) == 80
    assert review_service.calculate_overall_score({}) == 0

def test_overall_score_rejects_non_finite_scores(review_service):
    with pytest.raises(InvalidScoreInput):
        review_service.calculate_overall_score({"goals": float("nan")})

def test_non_finite_ratings_rejected_by_schemas():
    with pytest.raises(ValueError):
        CompleteReviewCreate(final_rating=float("inf"))
    with pytest.raises(ValueError):
        CalibrationEntry(calibrated=float("nan"))

def test_summarize_reviews(review_service):
    def review(cycle_id, status, **update):
        started = review_service.initiate_review(cycle_id, 5)
        return started.model_copy(update={"status": status, **update})

    reviews = [
        review("c1", ReviewStatus.DRAFT),
        review("c1", ReviewStatus.COMPLETED, overall_rating=4.2),
        review("c1", ReviewStatus.ACKNOWLEDGED, overall_rating=2, calibrated_rating=3),
        review("c1", ReviewStatus.MANAGER_REVIEW),
        review("c2", ReviewStatus.COMPLETED, overall_rating=5),
    ]

    analytics = review_service.summarize_reviews(reviews, "c1")
    stats = analytics.completion_stats
    assert (stats.total_reviews, stats.completed, stats.in_progress, stats.not_started) == (4, 2, 1, 1)
    assert stats.completion_rate == 50
    # calibrated rating wins over the manager's overall rating
    assert analytics.rating_distribution == {"Exceeds Expectations": 1, "Meets Expectations": 1}
    assert analytics.average_rating == 3.6

    everything = review_service.summarize_reviews(reviews)
    assert everything.cycle_id is None
    assert everything.completion_stats.completion_rate == 60

def test_summarize_no_reviews(review_service):
    analytics = review_service.summarize_reviews([])
    assert analytics.completion_stats.completion_rate == 0
    assert analytics.rating_distribution == {}
    assert analytics.average_rating is None
