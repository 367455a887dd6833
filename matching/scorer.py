"""
Candidate scorer

Weighted match score of one candidate against a requirement set, with a
per-requirement breakdown. Mandatory requirements weigh twice as much as
optional ones by default.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from database.models import PROF_ORDER, EmployeeSkill, ProficiencyLevel

from .exceptions import NoRequirements, ValidationError
from .requirements import Requirement, RequirementSet

MANDATORY_WEIGHT = 2
OPTIONAL_WEIGHT = 1

# (lower bound, label), checked top-down
SCORE_BANDS = [(80, "strong"), (60, "good"), (40, "fair"), (0, "weak")]


@dataclass(frozen=True)
class SkillOutcome:
    skill_id: int
    required: bool                      # mandatory requirement
    satisfied: bool
    required_level: ProficiencyLevel
    candidate_level: Optional[ProficiencyLevel]
    candidate_years: Optional[float]
    min_years: Optional[float]
    weight: int
    skill_name: Optional[str] = None

    def to_dict(self):
        return {
            "skill_id": self.skill_id,
            "skill_name": self.skill_name,
            "required": self.required,
            "satisfied": self.satisfied,
            "required_level": self.required_level.value,
            "candidate_level": self.candidate_level.value if self.candidate_level else None,
            "candidate_years": self.candidate_years,
            "min_years": self.min_years,
        }


@dataclass(frozen=True)
class MatchResult:
    candidate_id: int
    score: int                          # 0..100
    breakdown: Tuple[SkillOutcome, ...]
    satisfied_mandatory: int
    relevant_years: float               # years on skills named by the requirement set

    @property
    def mandatory_met(self) -> bool:
        return all(o.satisfied for o in self.breakdown if o.required)

    @property
    def band(self) -> str:
        return score_band(self.score)

    def to_dict(self):
        return {
            "candidate_id": self.candidate_id,
            "score": self.score,
            "band": self.band,
            "satisfied_mandatory": self.satisfied_mandatory,
            "mandatory_met": self.mandatory_met,
            "relevant_years": self.relevant_years,
            "skill_breakdown": [o.to_dict() for o in self.breakdown],
        }


def score_band(score: int) -> str:
    for lower, label in SCORE_BANDS:
        if score >= lower:
            return label
    return SCORE_BANDS[-1][1]


def candidate_level(skill: Optional[EmployeeSkill]) -> Optional[ProficiencyLevel]:
    if skill is None:
        return None
    try:
        return ProficiencyLevel.parse(skill.proficiency_level)
    except ValueError as e:
        raise ValidationError(
            str(e),
            field="proficiency_level",
            details={"skill_id": skill.skill_id, "profile_id": skill.profile_id},
        ) from None


def is_satisfied(requirement: Requirement, skill: Optional[EmployeeSkill]) -> bool:
    """
    Candidate level must reach the required level on the ordered scale, and
    years must reach min_years when one is set. A missing skill ranks "none".
    """
    level = candidate_level(skill)
    if PROF_ORDER[level.value if level else "none"] < requirement.required_level.rank:
        return False
    if requirement.min_years is not None:
        years = skill.years_experience if skill else None
        if years is None or years < requirement.min_years:
            return False
    return True


def weighted_percentage(numerator: int, denominator: int) -> int:
    """round(100 * numerator / denominator), halves rounded up, clamped to 0..100"""
    value = (200 * numerator + denominator) // (2 * denominator)
    return max(0, min(100, value))


def index_candidate_skills(candidate_skills: Iterable[EmployeeSkill]) -> Dict[int, EmployeeSkill]:
    indexed: Dict[int, EmployeeSkill] = {}
    for skill in candidate_skills:
        if skill.skill_id in indexed:
            raise ValidationError(
                f"Skill {skill.skill_id} appears more than once for profile {skill.profile_id}",
                field="skill_id",
                details={"skill_id": skill.skill_id, "profile_id": skill.profile_id},
            )
        indexed[skill.skill_id] = skill
    return indexed


def score(
    candidate_id: int,
    candidate_skills: Iterable[EmployeeSkill],
    requirement_set: RequirementSet,
    mandatory_weight: int = MANDATORY_WEIGHT,
    optional_weight: int = OPTIONAL_WEIGHT,
) -> MatchResult:
    """Score one candidate against one requirement set"""
    if mandatory_weight < 0 or optional_weight < 0:
        raise ValueError("requirement weights must be non-negative")

    skills = index_candidate_skills(candidate_skills)

    outcomes: List[SkillOutcome] = []
    earned = 0
    total = 0
    satisfied_mandatory = 0
    relevant_years = 0.0

    for req in requirement_set:
        skill = skills.get(req.skill_id)
        weight = mandatory_weight if req.mandatory else optional_weight
        ok = is_satisfied(req, skill)

        total += weight
        if ok:
            earned += weight
            if req.mandatory:
                satisfied_mandatory += 1
        if skill is not None and skill.years_experience:
            relevant_years += skill.years_experience

        outcomes.append(
            SkillOutcome(
                skill_id=req.skill_id,
                skill_name=req.skill_name or (skill.skill_name if skill else None),
                required=req.mandatory,
                satisfied=ok,
                required_level=req.required_level,
                candidate_level=candidate_level(skill),
                candidate_years=skill.years_experience if skill else None,
                min_years=req.min_years,
                weight=weight,
            )
        )

    if total == 0:
        raise NoRequirements(requirement_set.project_id)

    return MatchResult(
        candidate_id=candidate_id,
        score=weighted_percentage(earned, total),
        breakdown=tuple(outcomes),
        satisfied_mandatory=satisfied_mandatory,
        relevant_years=round(relevant_years, 2),
    )


def ranking_key(result: MatchResult):
    """Score desc, satisfied mandatory desc, relevant years desc, candidate id asc"""
    return (-result.score, -result.satisfied_mandatory, -result.relevant_years, result.candidate_id)
