"""
Requirement extractor

Turns a project's required-skill rows into a validated RequirementSet.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from database.models import ProficiencyLevel

from .exceptions import NoRequirements, ProjectNotFound, ValidationError


@dataclass(frozen=True)
class Requirement:
    skill_id: int
    required_level: ProficiencyLevel
    mandatory: bool = False
    min_years: Optional[float] = None
    skill_name: Optional[str] = None


@dataclass(frozen=True)
class RequirementSet:
    project_id: Optional[int]
    requirements: Tuple[Requirement, ...]

    def __iter__(self) -> Iterator[Requirement]:
        return iter(self.requirements)

    def __len__(self) -> int:
        return len(self.requirements)

    @property
    def skill_ids(self) -> List[int]:
        return [r.skill_id for r in self.requirements]

    @property
    def mandatory_count(self) -> int:
        return sum(1 for r in self.requirements if r.mandatory)


def _parse_min_years(value: Any, skill_id: int) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        years = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"min_experience_years must be numeric for skill {skill_id}, got {value!r}",
            field="min_experience_years",
        ) from None
    if years < 0:
        raise ValidationError(
            f"min_experience_years must be >= 0 for skill {skill_id}, got {years}",
            field="min_experience_years",
        )
    # zero years is no constraint at all
    return years or None


def build_requirement_set(project_id: Optional[int], rows: Sequence[Dict[str, Any]]) -> RequirementSet:
    """
    Validate required-skill rows and build a RequirementSet.

    Each row carries skill_id, required_proficiency, is_mandatory,
    min_experience_years and optionally skill_name. Row order is kept.
    """
    if not rows:
        raise NoRequirements(project_id)

    requirements: List[Requirement] = []
    seen = set()
    for row in rows:
        skill_id = row.get("skill_id")
        if isinstance(skill_id, bool) or not isinstance(skill_id, int):
            raise ValidationError(f"Invalid skill_id: {skill_id!r}", field="skill_id")
        if skill_id in seen:
            raise ValidationError(
                f"Skill {skill_id} is required more than once",
                field="skill_id",
                details={"skill_id": skill_id},
            )
        seen.add(skill_id)

        try:
            level = ProficiencyLevel.parse(row.get("required_proficiency"))
        except ValueError as e:
            raise ValidationError(str(e), field="required_proficiency", details={"skill_id": skill_id}) from None

        requirements.append(
            Requirement(
                skill_id=skill_id,
                required_level=level,
                mandatory=bool(row.get("is_mandatory")),
                min_years=_parse_min_years(row.get("min_experience_years"), skill_id),
                skill_name=row.get("skill_name"),
            )
        )

    return RequirementSet(project_id=project_id, requirements=tuple(requirements))


class RequirementExtractor:
    """Reads a project's required skills from the store"""

    def __init__(self, db):
        self.db = db

    def extract_requirements(self, project_id: int) -> RequirementSet:
        """
        Raises ProjectNotFound if the project does not exist and
        NoRequirements if it exists without required skills.
        """
        if self.db.get_project_by_id(project_id) is None:
            raise ProjectNotFound(project_id)

        rows = self.db.get_required_skill_rows(project_id)
        return build_requirement_set(project_id, rows)
