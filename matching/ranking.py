"""
Ranking engine

Scores every candidate of a pool against one project's requirements and
orders the results. Per-candidate failures are collected, never fatal;
a missing project or an empty requirement set aborts the call.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from database.models import EmployeeSkill

from .exceptions import MatchingError, ProfileNotFound
from .normalizer import SkillNormalizer
from .requirements import RequirementExtractor, RequirementSet
from .scorer import MANDATORY_WEIGHT, OPTIONAL_WEIGHT, MatchResult, ranking_key, score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateFailure:
    candidate_id: int
    error_code: str
    message: str

    @classmethod
    def from_error(cls, candidate_id: int, error: MatchingError) -> "CandidateFailure":
        return cls(candidate_id=candidate_id, error_code=error.error_code, message=error.message)

    def to_dict(self):
        return {
            "candidate_id": self.candidate_id,
            "error_code": self.error_code,
            "message": self.message,
        }


@dataclass(frozen=True)
class RankingResult:
    project_id: Optional[int]
    results: Tuple[MatchResult, ...] = ()
    failures: Tuple[CandidateFailure, ...] = ()
    excluded: Tuple[int, ...] = ()      # dropped by strict mandatory mode

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def partial_failure(self) -> bool:
        return bool(self.failures)

    def to_dict(self):
        return {
            "project_id": self.project_id,
            "matches": [r.to_dict() for r in self.results],
            "failures": [f.to_dict() for f in self.failures],
            "excluded": list(self.excluded),
            "partial_failure": self.partial_failure,
        }


def dedupe_ids(candidate_ids: Iterable[int]) -> List[int]:
    seen = set()
    out: List[int] = []
    for cid in candidate_ids:
        if cid in seen:
            continue
        seen.add(cid)
        out.append(cid)
    return out


def canonicalize_skills(skills: Sequence[EmployeeSkill], normalizer: SkillNormalizer) -> List[EmployeeSkill]:
    """
    Resolve each skill's reference to a canonical catalog id.
    Skills given by name only (skill_id None) are looked up by skill_name.
    """
    out: List[EmployeeSkill] = []
    for skill in skills:
        ref = skill.skill_id if skill.skill_id is not None else skill.skill_name
        skill_id = normalizer.normalize(ref)
        out.append(dataclasses.replace(skill, skill_id=skill_id, skill_name=normalizer.name_of(skill_id)))
    return out


def rank_candidates(
    requirement_set: RequirementSet,
    candidates: Mapping[int, Sequence[EmployeeSkill]],
    normalizer: SkillNormalizer,
    candidate_ids: Optional[Sequence[int]] = None,
    mandatory_weight: int = MANDATORY_WEIGHT,
    optional_weight: int = OPTIONAL_WEIGHT,
    strict_mandatory: bool = False,
    limit: Optional[int] = None,
) -> RankingResult:
    """
    Score and order candidates whose skills are already loaded.

    candidate_ids fixes the pool (ids absent from `candidates` fail with
    PROFILE_NOT_FOUND); it defaults to the keys of `candidates`.
    """
    pool = dedupe_ids(candidate_ids if candidate_ids is not None else list(candidates))

    results: List[MatchResult] = []
    failures: List[CandidateFailure] = []
    excluded: List[int] = []

    for cid in pool:
        if cid not in candidates:
            failures.append(CandidateFailure.from_error(cid, ProfileNotFound(cid)))
            continue
        try:
            skills = canonicalize_skills(candidates[cid], normalizer)
            result = score(cid, skills, requirement_set, mandatory_weight, optional_weight)
        except MatchingError as e:
            logger.warning(f"Candidate {cid} skipped for project {requirement_set.project_id}: {e.message}")
            failures.append(CandidateFailure.from_error(cid, e))
            continue

        if strict_mandatory and not result.mandatory_met:
            excluded.append(cid)
            continue
        results.append(result)

    results.sort(key=ranking_key)
    if limit is not None:
        results = results[:limit]

    return RankingResult(
        project_id=requirement_set.project_id,
        results=tuple(results),
        failures=tuple(failures),
        excluded=tuple(excluded),
    )


class RankingEngine:
    """Ranks candidate pools for projects stored in the directory"""

    def __init__(
        self,
        db,
        normalizer: Optional[SkillNormalizer] = None,
        mandatory_weight: int = MANDATORY_WEIGHT,
        optional_weight: int = OPTIONAL_WEIGHT,
        strict_mandatory: bool = False,
    ):
        self.db = db
        self.normalizer = normalizer
        self.extractor = RequirementExtractor(db)
        self.mandatory_weight = mandatory_weight
        self.optional_weight = optional_weight
        self.strict_mandatory = strict_mandatory

    def _normalizer(self) -> SkillNormalizer:
        # without a fixed normalizer, snapshot the catalog on every call
        return self.normalizer or SkillNormalizer.from_db(self.db)

    def _load_candidates(self, candidate_ids: Sequence[int]) -> Dict[int, List[EmployeeSkill]]:
        profiles = self.db.get_profiles_by_ids(candidate_ids)
        return self.db.get_skills_for_profiles([cid for cid in candidate_ids if cid in profiles])

    def rank(
        self,
        project_id: int,
        candidate_ids: Iterable[int],
        strict_mandatory: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> RankingResult:
        """
        Rank a candidate pool for a project.
        Raises ProjectNotFound / NoRequirements; everything else is per-candidate.
        """
        pool = dedupe_ids(candidate_ids)
        if not pool:
            return RankingResult(project_id=project_id)

        requirement_set = self.extractor.extract_requirements(project_id)
        strict = self.strict_mandatory if strict_mandatory is None else strict_mandatory

        logger.info(
            f"Ranking {len(pool)} candidates for project {project_id} "
            f"against {len(requirement_set)} requirements (strict={strict})"
        )

        ranking = rank_candidates(
            requirement_set,
            self._load_candidates(pool),
            self._normalizer(),
            candidate_ids=pool,
            mandatory_weight=self.mandatory_weight,
            optional_weight=self.optional_weight,
            strict_mandatory=strict,
            limit=limit,
        )

        logger.info(
            f"Project {project_id}: {len(ranking.results)} ranked, "
            f"{len(ranking.failures)} failed, {len(ranking.excluded)} excluded"
        )
        return ranking

    def score_candidate(self, project_id: int, profile_id: int) -> MatchResult:
        """Score a single profile; every error is raised"""
        requirement_set = self.extractor.extract_requirements(project_id)
        if self.db.get_profile_by_id(profile_id) is None:
            raise ProfileNotFound(profile_id)

        skills = canonicalize_skills(self.db.get_skills_for_profile(profile_id), self._normalizer())
        return score(profile_id, skills, requirement_set, self.mandatory_weight, self.optional_weight)
