"""Tests for the candidate scorer."""

import pytest

from database.models import EmployeeSkill, ProficiencyLevel
from matching.exceptions import NoRequirements, ValidationError
from matching.requirements import Requirement, RequirementSet
from matching.scorer import is_satisfied, ranking_key, score, score_band, weighted_percentage

REACT, NODE, AWS = 1, 2, 3


def _reqs(*requirements):
    return RequirementSet(project_id=1, requirements=tuple(requirements))


def _skill(skill_id, level, years=None, profile_id=10):
    return EmployeeSkill(profile_id=profile_id, skill_id=skill_id,
                         proficiency_level=ProficiencyLevel(level), years_experience=years)


REACT_EXPERT_MANDATORY = Requirement(REACT, ProficiencyLevel.EXPERT, mandatory=True, skill_name="React")
NODE_INTERMEDIATE_OPTIONAL = Requirement(NODE, ProficiencyLevel.INTERMEDIATE, skill_name="Node.js")


def test_mandatory_met_optional_missed_scores_67():
    result = score(
        10,
        [_skill(REACT, "expert"), _skill(NODE, "beginner")],
        _reqs(REACT_EXPERT_MANDATORY, NODE_INTERMEDIATE_OPTIONAL),
    )

    assert result.score == 67
    assert [(o.skill_id, o.required, o.satisfied) for o in result.breakdown] == [
        (REACT, True, True),
        (NODE, False, False),
    ]
    assert result.satisfied_mandatory == 1
    assert result.mandatory_met is True


def test_candidate_without_skills_scores_zero():
    result = score(10, [], _reqs(REACT_EXPERT_MANDATORY, NODE_INTERMEDIATE_OPTIONAL))

    assert result.score == 0
    assert all(not o.satisfied for o in result.breakdown)
    assert all(o.candidate_level is None for o in result.breakdown)
    assert result.mandatory_met is False


def test_empty_requirement_set_is_undefined():
    with pytest.raises(NoRequirements):
        score(10, [_skill(REACT, "expert")], _reqs())


def test_proficiency_order_is_not_lexical():
    # lexically "expert" < "intermediate"; on the scale it is higher
    req = Requirement(NODE, ProficiencyLevel.INTERMEDIATE)

    assert is_satisfied(req, _skill(NODE, "expert"))
    assert is_satisfied(req, _skill(NODE, "intermediate"))
    assert not is_satisfied(req, _skill(NODE, "beginner"))
    assert not is_satisfied(req, None)


def test_min_years_must_also_be_met():
    req = Requirement(AWS, ProficiencyLevel.BEGINNER, min_years=3)

    assert is_satisfied(req, _skill(AWS, "beginner", years=3))
    assert not is_satisfied(req, _skill(AWS, "expert", years=2.5))
    assert not is_satisfied(req, _skill(AWS, "expert", years=None))


def test_string_levels_are_accepted():
    skill = EmployeeSkill(profile_id=10, skill_id=REACT, proficiency_level="Expert")

    assert is_satisfied(REACT_EXPERT_MANDATORY, skill)


def test_duplicate_candidate_skill_is_rejected():
    with pytest.raises(ValidationError):
        score(10, [_skill(REACT, "expert"), _skill(REACT, "beginner")], _reqs(REACT_EXPERT_MANDATORY))


def test_score_is_monotonic_in_satisfied_requirements():
    reqs = _reqs(
        REACT_EXPERT_MANDATORY,
        NODE_INTERMEDIATE_OPTIONAL,
        Requirement(AWS, ProficiencyLevel.BEGINNER, mandatory=True),
    )
    held = []
    previous = -1
    for skill in [_skill(NODE, "expert"), _skill(AWS, "beginner"), _skill(REACT, "expert")]:
        held.append(skill)
        current = score(10, held, reqs).score
        assert 0 <= current <= 100
        assert current >= previous
        previous = current
    assert previous == 100


def test_custom_weights():
    result = score(
        10,
        [_skill(NODE, "intermediate")],
        _reqs(REACT_EXPERT_MANDATORY, NODE_INTERMEDIATE_OPTIONAL),
        mandatory_weight=3,
        optional_weight=1,
    )

    assert result.score == 25


def test_relevant_years_only_count_required_skills():
    result = score(
        10,
        [_skill(REACT, "expert", 4), _skill(NODE, "beginner", 1.5), _skill(AWS, "expert", 10)],
        _reqs(REACT_EXPERT_MANDATORY, NODE_INTERMEDIATE_OPTIONAL),
    )

    assert result.relevant_years == 5.5


@pytest.mark.parametrize("numerator,denominator,expected", [
    (2, 3, 67), (1, 3, 33), (1, 2, 50), (1, 8, 13), (0, 5, 0), (5, 5, 100),
])
def test_weighted_percentage_rounds_half_up(numerator, denominator, expected):
    assert weighted_percentage(numerator, denominator) == expected


@pytest.mark.parametrize("value,band", [(100, "strong"), (80, "strong"), (67, "good"), (40, "fair"), (39, "weak"), (0, "weak")])
def test_score_band(value, band):
    assert score_band(value) == band


def test_ranking_key_orders_ties_by_id():
    reqs = _reqs(REACT_EXPERT_MANDATORY, NODE_INTERMEDIATE_OPTIONAL)
    skills = [_skill(REACT, "expert", 2)]
    a = score(5, skills, reqs)
    b = score(3, skills, reqs)

    assert sorted([a, b], key=ranking_key)[0].candidate_id == 3


def test_invalid_candidate_level_is_a_validation_error():
    skill = EmployeeSkill(profile_id=10, skill_id=REACT, proficiency_level="guru")

    with pytest.raises(ValidationError) as exc:
        score(10, [skill], _reqs(REACT_EXPERT_MANDATORY))
    assert exc.value.details["field"] == "proficiency_level"
