"""Tests for the ranking engine."""

import pytest

from database.models import EmployeeSkill, ProficiencyLevel, Skill
from matching.exceptions import NoRequirements, ProfileNotFound, ProjectNotFound
from matching.normalizer import SkillNormalizer
from matching.ranking import RankingEngine, rank_candidates
from matching.requirements import Requirement, RequirementSet


def test_rank_orders_by_score_then_tie_break(world, db):
    p = world['profiles']
    engine = RankingEngine(db)

    ranking = engine.rank(world['project_id'], [p['carol'], p['dave'], p['alice'], p['bob']])

    assert [r.candidate_id for r in ranking] == [p['bob'], p['alice'], p['dave'], p['carol']]
    assert [r.score for r in ranking] == [100, 67, 67, 0]
    assert ranking.partial_failure is False


def test_rank_is_idempotent(world, db):
    p = world['profiles']
    engine = RankingEngine(db)
    pool = [p['dave'], p['bob'], p['carol'], p['alice']]

    first = engine.rank(world['project_id'], pool)
    second = engine.rank(world['project_id'], pool)

    assert first == second


def test_empty_pool_returns_empty_result(world, db):
    ranking = RankingEngine(db).rank(world['project_id'], [])

    assert list(ranking) == []
    assert ranking.failures == ()


def test_empty_pool_is_not_an_error_even_for_unknown_project(db):
    assert len(RankingEngine(db).rank(12345, [])) == 0


def test_project_without_requirements_aborts(world, db):
    with pytest.raises(NoRequirements):
        RankingEngine(db).rank(world['empty_project_id'], [world['profiles']['alice']])


def test_missing_project_aborts(world, db):
    with pytest.raises(ProjectNotFound):
        RankingEngine(db).rank(9999, [world['profiles']['alice']])


def test_unknown_profiles_are_reported_not_fatal(world, db):
    p = world['profiles']

    ranking = RankingEngine(db).rank(world['project_id'], [p['alice'], 4242])

    assert [r.candidate_id for r in ranking] == [p['alice']]
    assert ranking.partial_failure is True
    assert ranking.failures[0].candidate_id == 4242
    assert ranking.failures[0].error_code == "PROFILE_NOT_FOUND"


def test_unknown_skill_excludes_candidate_only(world, db):
    """A catalog snapshot missing one of bob's skills fails bob, not the batch"""
    p = world['profiles']
    s = world['skills']
    catalog = [Skill(id=s['React'], name="React", category="Frontend")]
    engine = RankingEngine(db, normalizer=SkillNormalizer(catalog))

    ranking = engine.rank(world['project_id'], [p['bob'], p['carol']])

    assert [r.candidate_id for r in ranking] == [p['carol']]
    assert {f.candidate_id for f in ranking.failures} == {p['bob']}
    assert ranking.failures[0].error_code == "UNKNOWN_SKILL"


def test_duplicate_ids_are_scored_once(world, db):
    p = world['profiles']

    ranking = RankingEngine(db).rank(world['project_id'], [p['bob'], p['bob'], p['alice']])

    assert [r.candidate_id for r in ranking] == [p['bob'], p['alice']]


def test_strict_mandatory_excludes_candidates(world, db):
    p = world['profiles']
    engine = RankingEngine(db)
    pool = [p['alice'], p['carol'], p['erin']]

    lenient = engine.rank(world['project_id'], pool)
    strict = engine.rank(world['project_id'], pool, strict_mandatory=True)

    assert len(lenient) == 3
    assert [r.candidate_id for r in strict] == [p['alice']]
    assert set(strict.excluded) == {p['carol'], p['erin']}


def test_limit(world, db):
    p = world['profiles']

    ranking = RankingEngine(db).rank(world['project_id'], list(p.values()), limit=2)

    assert [r.candidate_id for r in ranking] == [p['bob'], p['alice']]


def test_more_mandatory_hits_win_ties():
    catalog = [Skill(id=i, name=n, category="x") for i, n in [(1, "A"), (2, "B"), (3, "C"), (4, "D")]]
    reqs = RequirementSet(1, (
        Requirement(1, ProficiencyLevel.BEGINNER, mandatory=True),   # weight 2
        Requirement(2, ProficiencyLevel.BEGINNER),                   # weight 1
        Requirement(3, ProficiencyLevel.BEGINNER),                   # weight 1
        Requirement(4, ProficiencyLevel.BEGINNER, mandatory=True),   # weight 2
    ))

    def held(cid, *skill_ids, years=1):
        return [EmployeeSkill(profile_id=cid, skill_id=s, proficiency_level="beginner", years_experience=years)
                for s in skill_ids]

    # both earn 2 of 6 -> 33; candidate 1 via two optionals, candidate 2 via one mandatory
    candidates = {1: held(1, 2, 3, years=5), 2: held(2, 1)}

    ranking = rank_candidates(reqs, candidates, SkillNormalizer(catalog))

    assert [r.score for r in ranking] == [33, 33]
    assert [r.candidate_id for r in ranking] == [2, 1]


def test_score_candidate(world, db):
    result = RankingEngine(db).score_candidate(world['project_id'], world['profiles']['alice'])
    assert result.score == 67

    with pytest.raises(ProfileNotFound):
        RankingEngine(db).score_candidate(world['project_id'], 4242)


def test_to_dict_shape(world, db):
    p = world['profiles']
    payload = RankingEngine(db).rank(world['project_id'], [p['alice'], 4242]).to_dict()

    assert payload['partial_failure'] is True
    match = payload['matches'][0]
    assert match['candidate_id'] == p['alice']
    assert match['score'] == 67
    assert match['band'] == "good"
    assert match['skill_breakdown'][0] == {
        "skill_id": world['skills']['React'],
        "skill_name": "React",
        "required": True,
        "satisfied": True,
        "required_level": "expert",
        "candidate_level": "expert",
        "candidate_years": 5,
        "min_years": None,
    }


def test_more_relevant_years_win_remaining_ties():
    catalog = [Skill(id=1, name="React", category="Frontend"), Skill(id=2, name="Node.js", category="Backend")]
    reqs = RequirementSet(1, (
        Requirement(1, ProficiencyLevel.INTERMEDIATE, mandatory=True),
        Requirement(2, ProficiencyLevel.EXPERT),
    ))
    candidates = {
        1: [EmployeeSkill(profile_id=1, skill_id=1, proficiency_level="expert", years_experience=1)],
        2: [EmployeeSkill(profile_id=2, skill_id=1, proficiency_level="intermediate", years_experience=9)],
    }

    ranking = rank_candidates(reqs, candidates, SkillNormalizer(catalog))

    # same score, same mandatory hits; years decide before id
    assert [(r.score, r.satisfied_mandatory) for r in ranking] == [(67, 1), (67, 1)]
    assert [r.candidate_id for r in ranking] == [2, 1]


def test_invalid_candidate_level_fails_that_candidate_only():
    catalog = [Skill(id=1, name="React", category="Frontend")]
    reqs = RequirementSet(1, (Requirement(1, ProficiencyLevel.EXPERT, mandatory=True),))
    candidates = {
        1: [EmployeeSkill(profile_id=1, skill_id=1, proficiency_level="expert")],
        2: [EmployeeSkill(profile_id=2, skill_id=1, proficiency_level="guru")],
    }

    ranking = rank_candidates(reqs, candidates, SkillNormalizer(catalog))

    assert [r.candidate_id for r in ranking] == [1]
    assert ranking.partial_failure is True
    assert ranking.failures[0].candidate_id == 2
    assert ranking.failures[0].error_code == "VALIDATION_ERROR"
