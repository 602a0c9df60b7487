"""
Goal Setting Service

OKR (objectives and key results) management for employee performance
tracking. Goals and key results are plain records; every change returns an
updated copy and leaves the input untouched.
"""
from typing import List, Sequence

from app.core.config import settings
from app.core.exceptions import InvalidTransition, NotFound, ValidationFailed
from app.core.progress import scale_to_percent, weighted_aggregate
from app.schemas.goal import (
    CheckIn,
    CheckInCreate,
    ClosedGoal,
    Goal,
    GoalCloseRequest,
    GoalClosure,
    GoalCreate,
    GoalPeriod,
    GoalStatus,
    GoalSummary,
    KeyResult,
    KeyResultCreate,
    TERMINAL_GOAL_STATUSES,
)
from app.services.base import BaseService


class GoalSettingService(BaseService):

    def create_goal(self, data: GoalCreate) -> Goal:
        errors = self.validate_goal_data(data)
        if errors:
            self.log_warning("Goal rejected", errors=errors)
            raise ValidationFailed(errors, message="Invalid goal")

        goal_id = self.new_id()
        key_results = [self._build_key_result(goal_id, kr) for kr in data.key_results]
        goal = Goal(
            id=goal_id,
            title=data.title,
            description=data.description,
            type=data.type,
            priority=data.priority,
            status=GoalStatus.DRAFT,
            owner_id=data.owner_id,
            owner_type=data.owner_type,
            parent_goal_id=data.parent_goal_id,
            aligned_to=data.aligned_to,
            period=GoalPeriod(
                type=data.period_type,
                start_date=data.start_date,
                end_date=data.end_date,
                quarter=data.quarter,
                year=data.year or self.clock.today().year,
            ),
            key_results=key_results,
            weight=settings.scoring.default_weight if data.weight is None else data.weight,
            progress=self.calculate_goal_progress(key_results),
            tags=data.tags,
            visibility=data.visibility,
            created_by=data.created_by,
            created_at=self.clock.now(),
            organization_id=self.org_id,
            metadata=data.metadata,
        )

        self.log_info("Goal created", goal_id=goal.id, owner_id=goal.owner_id, goal_type=goal.type.value)
        return goal

    def add_key_result(self, goal: Goal, data: KeyResultCreate) -> Goal:
        """Attach a key result and recompute the goal's progress."""
        self._ensure_open(goal)
        key_result = self._build_key_result(goal.id, data)
        key_results = [*goal.key_results, key_result]

        self.log_info("Key result added", kr_id=key_result.id, goal_id=goal.id)
        return goal.model_copy(update={
            "key_results": key_results,
            "progress": self.calculate_goal_progress(key_results),
        })

    def check_in(self, goal: Goal, key_result_id: str, data: CheckInCreate) -> Goal:
        """Record a value update on one key result."""
        self._ensure_open(goal)
        key_results: List[KeyResult] = []
        found = False
        for kr in goal.key_results:
            if kr.id != key_result_id:
                key_results.append(kr)
                continue
            found = True
            entry = CheckIn(
                id=self.new_id(),
                key_result_id=kr.id,
                previous_value=kr.current_value,
                new_value=data.new_value,
                confidence=data.confidence,
                notes=data.notes,
                blockers=data.blockers,
                next_steps=data.next_steps,
                checked_in_by=data.checked_in_by,
                checked_in_at=self.clock.now(),
            )
            key_results.append(kr.model_copy(update={
                "current_value": data.new_value,
                "progress": scale_to_percent(kr.start_value, data.new_value, kr.target_value),
                "check_ins": [*kr.check_ins, entry],
            }))

        if not found:
            raise NotFound("Key result", key_result_id)

        self.log_info("Key result check-in", goal_id=goal.id, kr_id=key_result_id, new_value=data.new_value)
        return goal.model_copy(update={
            "key_results": key_results,
            "progress": self.calculate_goal_progress(key_results),
        })

    def calculate_goal_progress(self, key_results: Sequence[KeyResult]) -> float:
        return weighted_aggregate(key_results)

    def close_goal(self, goal: Goal, data: GoalCloseRequest) -> ClosedGoal:
        if goal.status in TERMINAL_GOAL_STATUSES:
            raise InvalidTransition(f"Goal {goal.id} is already closed", current_status=goal.status.value)

        final_progress = goal.progress if data.final_progress is None else data.final_progress
        closure = GoalClosure(
            goal_id=goal.id,
            final_progress=round(max(0.0, min(100.0, final_progress)), 2),
            outcome=data.outcome,
            learnings=data.learnings,
            closed_by=data.closed_by,
            closed_at=self.clock.now(),
        )

        self.log_info("Goal closed", goal_id=goal.id, outcome=closure.outcome.value)
        return ClosedGoal(
            goal=goal.model_copy(update={"status": GoalStatus.COMPLETED}),
            closure=closure,
        )

    def summarize_goals(self, goals: Sequence[Goal]) -> GoalSummary:
        total = len(goals)
        completed = sum(1 for g in goals if g.status == GoalStatus.COMPLETED)
        at_risk = sum(1 for g in goals if g.status in (GoalStatus.AT_RISK, GoalStatus.BEHIND))
        in_progress = sum(1 for g in goals if g.status not in TERMINAL_GOAL_STATUSES)
        average = round(sum(g.progress for g in goals) / total, 2) if total else 0.0
        return GoalSummary(
            total=total,
            completed=completed,
            in_progress=in_progress,
            at_risk=at_risk,
            average_progress=average,
            completion_rate=round(completed / total * 100, 2) if total else 0.0,
        )

    @staticmethod
    def validate_goal_data(data: GoalCreate) -> List[str]:
        errors = []

        if not data.title:
            errors.append("Goal title is required")

        if not data.owner_id:
            errors.append("Goal owner is required")

        if not data.start_date or not data.end_date:
            errors.append("Goal period dates are required")
        elif data.start_date > data.end_date:
            errors.append("Start date must be before end date")

        return errors

    def _build_key_result(self, goal_id: str, data: KeyResultCreate) -> KeyResult:
        current = data.start_value if data.current_value is None else data.current_value
        return KeyResult(
            id=self.new_id(),
            goal_id=goal_id,
            title=data.title,
            description=data.description,
            measurement_type=data.measurement_type,
            start_value=data.start_value,
            target_value=data.target_value,
            current_value=current,
            unit=data.unit,
            weight=data.weight,
            progress=scale_to_percent(data.start_value, current, data.target_value),
            milestones=data.milestones,
            status=GoalStatus.ACTIVE,
            owner_id=data.owner_id,
            due_date=data.due_date,
            created_at=self.clock.now(),
        )

    @staticmethod
    def _ensure_open(goal: Goal) -> None:
        if goal.status in TERMINAL_GOAL_STATUSES:
            raise InvalidTransition(f"Goal {goal.id} is closed", current_status=goal.status.value)
