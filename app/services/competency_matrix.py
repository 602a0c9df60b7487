"""
Competency Matrix Service

Skills, competencies and proficiency tracking for employee development and
career planning. Proficiency is an ordinal 1-5 scale; gap sizing and role
readiness reuse the shared progress scoring.
"""
import re
from collections import Counter, defaultdict
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import ValidationFailed
from app.core.progress import scale_to_percent, validate_weights, weighted_aggregate
from app.schemas.competency import (
    AssessmentCreate,
    Competency,
    CompetencyAnalytics,
    CompetencyAssessment,
    CompetencyCreate,
    CompetencyGap,
    CompetencyOverview,
    DevelopmentAction,
    DevelopmentItem,
    DevelopmentPlan,
    DevelopmentPlanOptions,
    Endorsement,
    FrameworkCompetency,
    GapAnalysis,
    LEVEL_DESCRIPTIONS,
    LEVEL_LABELS,
    LearningResource,
    LevelDefinition,
    ProficiencyLevel,
    RoleFramework,
    RoleFrameworkCreate,
    SkillSearchResult,
    SkilledEmployee,
    TeamMatrix,
)
from app.services.base import BaseService


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def latest_levels(assessments: Sequence[CompetencyAssessment]) -> Dict[int, Dict[str, int]]:
    """employee_id -> competency_id -> level from the most recent assessment."""
    ordered = sorted(assessments, key=lambda a: a.assessed_at)
    levels: Dict[int, Dict[str, int]] = defaultdict(dict)
    for assessment in ordered:
        levels[assessment.employee_id][assessment.competency_id] = assessment.current_level
    return dict(levels)


class CompetencyMatrixService(BaseService):

    def create_competency(self, data: CompetencyCreate) -> Competency:
        competency = Competency(
            id=self.new_id(),
            name=data.name,
            code=data.code or slugify(data.name),
            description=data.description,
            category=data.category,
            is_core=data.is_core,
            levels=self._build_level_definitions(data),
            behavioral_indicators=data.behavioral_indicators,
            applicable_roles=data.applicable_roles,
            applicable_departments=data.applicable_departments,
            related_competencies=data.related_competencies,
            assessment_methods=data.assessment_methods,
            weight=data.weight,
            created_at=self.clock.now(),
            organization_id=self.org_id,
            metadata=data.metadata,
        )

        self.log_info("Competency created", competency_id=competency.id, category=competency.category.value)
        return competency

    def create_role_framework(self, role_id: str, data: RoleFrameworkCreate) -> RoleFramework:
        framework = RoleFramework(
            id=self.new_id(),
            role_id=role_id,
            role_name=data.role_name,
            department_id=data.department_id,
            level=data.level,
            required_competencies=[FrameworkCompetency(**c.model_dump()) for c in data.competencies],
            nice_to_have_competencies=data.nice_to_have,
            career_path=data.career_path,
            effective_date=data.effective_date or self.clock.today(),
            created_at=self.clock.now(),
            organization_id=self.org_id,
        )

        self.log_info("Role framework created", framework_id=framework.id, role_id=role_id)
        return framework

    def assess_competency(self, employee_id: int, competency_id: str, data: AssessmentCreate) -> CompetencyAssessment:
        assessment = CompetencyAssessment(
            id=self.new_id(),
            employee_id=employee_id,
            competency_id=competency_id,
            assessor_id=data.assessor_id,
            assessor_type=data.assessor_type,
            current_level=data.current_level,
            target_level=data.target_level,
            evidence=data.evidence,
            observations=data.observations,
            development_suggestions=data.development_suggestions,
            assessed_at=self.clock.now(),
            next_assessment_date=data.next_assessment_date,
            organization_id=self.org_id,
            metadata=data.metadata,
        )

        self.log_info(
            "Competency assessed",
            assessment_id=assessment.id,
            employee_id=employee_id,
            competency_id=competency_id,
            level=data.current_level,
        )
        return assessment

    def perform_gap_analysis(
        self,
        employee_id: int,
        framework: RoleFramework,
        assessments: Sequence[CompetencyAssessment],
        competency_names: Optional[Dict[str, str]] = None,
    ) -> GapAnalysis:
        """
        Compare an employee's latest assessed levels with a role framework.

        A competency never assessed counts as level 0. Readiness is the
        weighted mean of how far each current level reaches its required
        level.
        """
        names = competency_names or {}
        current = latest_levels([a for a in assessments if a.employee_id == employee_id]).get(employee_id, {})

        gaps: List[CompetencyGap] = []
        strengths: List[str] = []
        readiness_items = []
        for required in framework.required_competencies:
            level = current.get(required.competency_id, 0)
            readiness_items.append({
                "progress": scale_to_percent(0, level, required.required_level),
                "weight": required.weight,
            })
            difference = required.required_level - level
            if difference <= 0:
                strengths.append(required.competency_id)
                continue
            gaps.append(CompetencyGap(
                competency_id=required.competency_id,
                competency_name=names.get(required.competency_id),
                current_level=level,
                target_level=required.required_level,
                gap=difference,
                priority="high" if required.is_critical or difference >= 2 else "medium",
                timeline=self._timeline(difference),
            ))

        validate_weights(readiness_items)
        largest_gap = max((g.gap for g in gaps), default=0)
        analysis = GapAnalysis(
            employee_id=employee_id,
            target_role_id=framework.role_id,
            gaps=gaps,
            strengths=strengths,
            readiness_score=weighted_aggregate(readiness_items),
            estimated_development_time=self._timeline(largest_gap) if largest_gap else None,
            recommended_actions=sorted({
                action.description for gap in gaps for action in self.suggest_development_actions(gap)
            }),
        )

        self.log_info(
            "Gap analysis performed",
            employee_id=employee_id,
            role_id=framework.role_id,
            gap_count=len(gaps),
            readiness_score=analysis.readiness_score,
        )
        return analysis

    def create_development_plan(
        self,
        employee_id: int,
        gaps: Sequence[CompetencyGap],
        options: Optional[DevelopmentPlanOptions] = None,
    ) -> DevelopmentPlan:
        options = options or DevelopmentPlanOptions()
        start = options.start_date or self.clock.today()
        end = options.end_date or start + timedelta(days=30 * settings.scoring.development_plan_months)
        if end < start:
            raise ValidationFailed(["Plan end date must not be before its start date"])

        items = [
            DevelopmentItem(
                id=self.new_id(),
                competency_id=gap.competency_id,
                competency_name=gap.competency_name,
                current_level=gap.current_level,
                target_level=gap.target_level,
                priority=gap.priority,
                actions=self.suggest_development_actions(gap),
                resources=self.suggest_learning_resources(gap),
                timeline=gap.timeline,
            )
            for gap in gaps
        ]

        plan = DevelopmentPlan(
            id=self.new_id(),
            employee_id=employee_id,
            type=options.type,
            title=options.title,
            period={"start_date": start, "end_date": end},
            items=items,
            mentor_id=options.mentor_id,
            check_in_frequency=options.check_in_frequency,
            created_at=self.clock.now(),
            organization_id=self.org_id,
        )

        self.log_info("Development plan created", plan_id=plan.id, employee_id=employee_id, items_count=len(items))
        return plan

    def endorse_skill(self, employee_id: int, competency_id: str, endorser_id: int) -> Endorsement:
        if employee_id == endorser_id:
            raise ValidationFailed(["Employees cannot endorse their own skills"])

        endorsement = Endorsement(
            id=self.new_id(),
            employee_id=employee_id,
            competency_id=competency_id,
            endorser_id=endorser_id,
            endorsed_at=self.clock.now(),
        )

        self.log_info("Skill endorsed", employee_id=employee_id, competency_id=competency_id, endorser_id=endorser_id)
        return endorsement

    def generate_team_matrix(
        self,
        team_id: int,
        assessments: Sequence[CompetencyAssessment],
        competency_ids: Sequence[str] = (),
    ) -> TeamMatrix:
        levels = latest_levels(assessments)
        competencies = list(competency_ids) or sorted({a.competency_id for a in assessments})
        members = sorted(levels)

        matrix = {
            employee_id: {cid: by_competency[cid] for cid in competencies if cid in by_competency}
            for employee_id, by_competency in levels.items()
        }

        averages: Dict[str, float] = {}
        coverage: Dict[str, float] = {}
        proficient = settings.scoring.proficient_level
        for cid in competencies:
            assessed = [row[cid] for row in matrix.values() if cid in row]
            averages[cid] = round(sum(assessed) / len(assessed), 2) if assessed else 0.0
            at_level = sum(1 for level in assessed if level >= proficient)
            coverage[cid] = round(at_level / len(members) * 100, 2) if members else 0.0

        return TeamMatrix(
            team_id=team_id,
            competencies=competencies,
            members=members,
            matrix=matrix,
            team_averages=averages,
            coverage_analysis=coverage,
        )

    def find_by_skill(
        self,
        assessments: Sequence[CompetencyAssessment],
        competency_id: str,
        min_level: int = 1,
    ) -> SkillSearchResult:
        """Employees whose latest level in ``competency_id`` is at least ``min_level``, strongest first."""
        matches = [
            SkilledEmployee(employee_id=employee_id, level=by_competency[competency_id])
            for employee_id, by_competency in latest_levels(assessments).items()
            if by_competency.get(competency_id, 0) >= min_level
        ]
        matches.sort(key=lambda m: (-m.level, m.employee_id))
        return SkillSearchResult(
            competency_id=competency_id,
            min_level=min_level,
            employees=matches,
            total_count=len(matches),
        )

    def summarize_competencies(
        self,
        competencies: Sequence[Competency],
        assessments: Sequence[CompetencyAssessment],
    ) -> CompetencyAnalytics:
        proficient = settings.scoring.proficient_level
        per_competency: Dict[str, List[int]] = defaultdict(list)
        for by_competency in latest_levels(assessments).values():
            for cid, level in by_competency.items():
                per_competency[cid].append(level)

        all_levels = [level for levels in per_competency.values() for level in levels]
        averages = {cid: round(sum(levels) / len(levels), 2) for cid, levels in sorted(per_competency.items())}
        at_level = sum(1 for level in all_levels if level >= proficient)

        return CompetencyAnalytics(
            organization_overview=CompetencyOverview(
                total_competencies=len(competencies) or len(per_competency),
                average_proficiency=round(sum(all_levels) / len(all_levels), 2) if all_levels else 0.0,
                skill_coverage=round(at_level / len(all_levels) * 100, 2) if all_levels else 0.0,
            ),
            by_category=dict(Counter(c.category.value for c in competencies)),
            average_by_competency=averages,
            skill_gaps=[cid for cid, average in averages.items() if average < proficient],
        )

    @staticmethod
    def suggest_development_actions(gap: CompetencyGap) -> List[DevelopmentAction]:
        level_diff = gap.target_level - gap.current_level
        actions = []

        if level_diff >= 1:
            actions.append(DevelopmentAction(type="training", description="Complete foundational training course"))

        if level_diff >= 2:
            actions.append(DevelopmentAction(type="mentoring", description="Work with a mentor on practical application"))
            actions.append(DevelopmentAction(type="project", description="Take on stretch project to apply skills"))

        if level_diff >= 3:
            actions.append(DevelopmentAction(type="certification", description="Pursue professional certification"))

        return actions

    @staticmethod
    def suggest_learning_resources(gap: CompetencyGap) -> List[LearningResource]:
        return [
            LearningResource(type="course", name="Online course recommendation", provider="Internal LMS"),
            LearningResource(type="book", name="Recommended reading"),
            LearningResource(type="workshop", name="Hands-on workshop"),
        ]

    @staticmethod
    def _timeline(level_diff: int) -> str:
        return f"{level_diff * settings.scoring.months_per_level} months"

    @staticmethod
    def _build_level_definitions(data: CompetencyCreate) -> Dict[int, LevelDefinition]:
        levels = {}
        for level in ProficiencyLevel:
            custom = data.levels.get(level.value)
            levels[level.value] = LevelDefinition(
                level=level.value,
                name=(custom and custom.name) or LEVEL_LABELS[level.value],
                description=(custom and custom.description) or LEVEL_DESCRIPTIONS[level.value],
                indicators=custom.indicators if custom else [],
            )
        return levels
