"""Skill-to-project matching engine"""
from .exceptions import (
    MatchingError,
    NoRequirements,
    NotFoundError,
    ProfileNotFound,
    ProjectNotFound,
    UnknownSkill,
    ValidationError,
)
from .gaps import analyze_skill_gaps
from .normalizer import SkillNormalizer
from .ranking import CandidateFailure, RankingEngine, RankingResult, rank_candidates
from .requirements import Requirement, RequirementExtractor, RequirementSet, build_requirement_set
from .scorer import MatchResult, SkillOutcome, score, score_band

__all__ = [
    'MatchingError',
    'NoRequirements',
    'NotFoundError',
    'ProfileNotFound',
    'ProjectNotFound',
    'UnknownSkill',
    'ValidationError',
    'analyze_skill_gaps',
    'SkillNormalizer',
    'CandidateFailure',
    'RankingEngine',
    'RankingResult',
    'rank_candidates',
    'Requirement',
    'RequirementExtractor',
    'RequirementSet',
    'build_requirement_set',
    'MatchResult',
    'SkillOutcome',
    'score',
    'score_band',
]
