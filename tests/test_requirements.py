"""Tests for the requirement extractor."""

import pytest

from database.models import ProficiencyLevel
from matching.exceptions import NoRequirements, ProjectNotFound, ValidationError
from matching.requirements import RequirementExtractor, build_requirement_set


def _row(skill_id, level="intermediate", mandatory=False, min_years=None):
    return {
        "skill_id": skill_id,
        "required_proficiency": level,
        "is_mandatory": mandatory,
        "min_experience_years": min_years,
    }


def test_extract_requirements_from_project(world, db):
    extractor = RequirementExtractor(db)

    reqs = extractor.extract_requirements(world['project_id'])

    assert reqs.project_id == world['project_id']
    assert len(reqs) == 2
    assert reqs.skill_ids == [world['skills']['React'], world['skills']['Node.js']]
    react = reqs.requirements[0]
    assert react.mandatory is True
    assert react.required_level is ProficiencyLevel.EXPERT
    assert react.min_years is None
    assert reqs.mandatory_count == 1


def test_missing_project_raises_project_not_found(world, db):
    with pytest.raises(ProjectNotFound) as exc:
        RequirementExtractor(db).extract_requirements(9999)
    assert exc.value.status_code == 404


def test_project_without_required_skills_raises_no_requirements(world, db):
    with pytest.raises(NoRequirements) as exc:
        RequirementExtractor(db).extract_requirements(world['empty_project_id'])
    assert exc.value.error_code == "NO_REQUIREMENTS"
    assert isinstance(exc.value, ValidationError)


def test_malformed_proficiency_in_store_is_a_validation_error(world, db):
    with db.get_connection() as conn:
        conn.execute(
            "UPDATE project_required_skills SET required_proficiency = 'wizard' WHERE project_id = ?",
            (world['project_id'],),
        )

    with pytest.raises(ValidationError) as exc:
        RequirementExtractor(db).extract_requirements(world['project_id'])
    assert exc.value.details["field"] == "required_proficiency"


def test_duplicate_skill_is_rejected():
    with pytest.raises(ValidationError):
        build_requirement_set(1, [_row(7), _row(7, "expert")])


def test_negative_min_years_is_rejected():
    with pytest.raises(ValidationError):
        build_requirement_set(1, [_row(7, min_years=-1)])


def test_zero_min_years_means_no_constraint():
    reqs = build_requirement_set(1, [_row(7, min_years=0), _row(8, min_years="2.5")])

    assert reqs.requirements[0].min_years is None
    assert reqs.requirements[1].min_years == 2.5


def test_empty_rows_raise_no_requirements():
    with pytest.raises(NoRequirements):
        build_requirement_set(None, [])
