"""
Skill gap analysis derived from a MatchResult
"""
from typing import List, Optional

from database.models import PROF_ORDER, SkillGap

from .scorer import MatchResult, SkillOutcome


def _pct(ratio: float) -> int:
    return max(0, min(100, int(100 * ratio + 0.5)))


def gap_for_outcome(outcome: SkillOutcome) -> tuple:
    """Return (gap_score 0..100, recommended action) for an unsatisfied outcome"""
    name = outcome.skill_name or f"skill {outcome.skill_id}"
    required_rank = outcome.required_level.rank
    current_rank = outcome.candidate_level.rank if outcome.candidate_level else PROF_ORDER["none"]

    level_short = max(0, required_rank - current_rank)
    years_short = 0.0
    if outcome.min_years:
        years_short = max(0.0, outcome.min_years - (outcome.candidate_years or 0.0))

    gap_score = max(
        _pct(level_short / required_rank) if level_short else 0,
        _pct(years_short / outcome.min_years) if years_short else 0,
    )

    if outcome.candidate_level is None:
        action = f"Start {name} training to reach {outcome.required_level.value} level"
    elif level_short:
        action = f"Upskill {name} from {outcome.candidate_level.value} to {outcome.required_level.value}"
    else:
        action = f"Gain {years_short:g} more year(s) of hands-on {name} experience"

    return gap_score, action


def analyze_skill_gaps(result: MatchResult, project_id: Optional[int] = None) -> List[SkillGap]:
    """One SkillGap per unsatisfied requirement, in breakdown order"""
    gaps: List[SkillGap] = []
    for outcome in result.breakdown:
        if outcome.satisfied:
            continue
        gap_score, action = gap_for_outcome(outcome)
        gaps.append(
            SkillGap(
                profile_id=result.candidate_id,
                project_id=project_id,
                skill_id=outcome.skill_id,
                skill_name=outcome.skill_name,
                current_level=outcome.candidate_level,
                required_level=outcome.required_level,
                gap_score=gap_score,
                recommended_action=action,
            )
        )
    return gaps
