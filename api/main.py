"""
FastAPI server for the Talent Allocation matching service

Includes:
- Candidate ranking per project (default pool = caller's company)
- Ad-hoc scoring of inline requirements / candidates
- Skill gap analysis
- Project allocations
- Dashboard statistics
"""
from __future__ import annotations

import asyncio
import logging
import time
import traceback
from functools import lru_cache
from typing import Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import config
from database.db_manager import DatabaseManager
from database.models import EmployeeSkill, ProficiencyLevel, ProjectAllocation
from matching.exceptions import MatchingError, ProfileNotFound, ProjectNotFound, ValidationError
from matching.gaps import analyze_skill_gaps
from matching.normalizer import SkillNormalizer
from matching.ranking import RankingEngine, rank_candidates
from matching.requirements import build_requirement_set

from .session import SessionContext, get_manager_session, get_session, require_manager

# Application logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

config.validate_config()

app = FastAPI(
    title="Talent Allocation Matching API",
    description="Skill-to-project matching for employee allocation",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MatchingError)
async def matching_exception_handler(request: Request, exc: MatchingError) -> JSONResponse:
    logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ---------------------------
# Dependencies
# ---------------------------
@lru_cache(maxsize=1)
def get_db() -> DatabaseManager:
    logger.info(f"📁 Opening database: {config.DATABASE_PATH}")
    return DatabaseManager(db_path=config.DATABASE_PATH)


def get_normalizer(db: DatabaseManager = Depends(get_db)) -> SkillNormalizer:
    # catalog snapshot per request
    return SkillNormalizer.from_db(
        db,
        fuzzy=config.ENABLE_FUZZY_SKILL_MATCHING,
        threshold=config.FUZZY_MATCH_THRESHOLD,
    )


def get_engine(
    db: DatabaseManager = Depends(get_db),
    normalizer: SkillNormalizer = Depends(get_normalizer),
) -> RankingEngine:
    return RankingEngine(
        db,
        normalizer=normalizer,
        mandatory_weight=config.MANDATORY_WEIGHT,
        optional_weight=config.OPTIONAL_WEIGHT,
        strict_mandatory=config.STRICT_MANDATORY,
    )


# ---------------------------
# Pydantic models
# ---------------------------
class MatchRequest(BaseModel):
    candidate_ids: Optional[List[int]] = None
    strict_mandatory: Optional[bool] = None
    limit: Optional[int] = Field(None, ge=1)
    include_on_leave: bool = False


class RequirementIn(BaseModel):
    skill: Union[int, str]
    required_proficiency: ProficiencyLevel
    is_mandatory: bool = False
    min_experience_years: Optional[float] = Field(None, ge=0)


class CandidateSkillIn(BaseModel):
    skill: Union[int, str]
    proficiency_level: ProficiencyLevel
    years_experience: Optional[float] = Field(None, ge=0)


class CandidateIn(BaseModel):
    candidate_id: int
    skills: List[CandidateSkillIn] = []


class ScoreRequest(BaseModel):
    requirements: List[RequirementIn]
    candidates: List[CandidateIn] = []
    strict_mandatory: bool = False


class AllocationRequest(BaseModel):
    profile_id: int
    role_in_project: str = Field(..., min_length=1)
    allocation_percentage: int = Field(100, ge=0, le=100)


# ---------------------------
# Health & statistics
# ---------------------------
@app.get("/health")
async def health_check(db: DatabaseManager = Depends(get_db)):
    try:
        stats = db.get_statistics()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Health check failed: {str(e)}")
    return {
        "status": "healthy",
        "database": "connected",
        "profiles": stats.get("total_profiles", 0),
        "projects": stats.get("total_projects", 0),
        "timestamp": time.time(),
    }


@app.get("/stats")
async def dashboard_stats(
    session: SessionContext = Depends(get_session),
    db: DatabaseManager = Depends(get_db),
):
    return db.get_statistics(company_id=session.company_id)


# ---------------------------
# Matching
# ---------------------------
@app.post("/projects/{project_id}/matches")
async def rank_project_candidates(
    project_id: int,
    request: MatchRequest,
    session: SessionContext = Depends(get_session),
    db: DatabaseManager = Depends(get_db),
    engine: RankingEngine = Depends(get_engine),
):
    if request.candidate_ids is not None:
        pool = request.candidate_ids
    else:
        pool = db.get_candidate_pool(session.company_id, include_on_leave=request.include_on_leave)

    logger.info(f"📥 Match request by {session.user_id}: project={project_id}, pool={len(pool)}")

    try:
        ranking = await asyncio.to_thread(
            engine.rank,
            project_id,
            pool,
            request.strict_mandatory,
            request.limit or config.MAX_RANKED_RESULTS,
        )
    except MatchingError:
        raise
    except Exception as e:
        logger.error(f"❌ Ranking failed for project {project_id}: {type(e).__name__}: {str(e)}")
        logger.error(f"📋 Full traceback:\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=f"Ranking failed: {str(e)}")

    if ranking.partial_failure:
        logger.warning(f"⚠️ Project {project_id}: {len(ranking.failures)} candidates could not be scored")

    return ranking.to_dict()


@app.post("/match/score")
async def score_inline(
    request: ScoreRequest,
    session: SessionContext = Depends(get_session),
    normalizer: SkillNormalizer = Depends(get_normalizer),
):
    """Score candidates against inline requirements; skills may be names or ids"""
    rows = []
    for req in request.requirements:
        skill_id = normalizer.normalize(req.skill)  # unknown requirement skill is fatal
        rows.append(
            {
                "skill_id": skill_id,
                "skill_name": normalizer.name_of(skill_id),
                "required_proficiency": req.required_proficiency,
                "is_mandatory": req.is_mandatory,
                "min_experience_years": req.min_experience_years,
            }
        )
    requirement_set = build_requirement_set(None, rows)

    candidates: Dict[int, List[EmployeeSkill]] = {}
    for cand in request.candidates:
        if cand.candidate_id in candidates:
            raise ValidationError(
                f"Candidate {cand.candidate_id} appears more than once",
                field="candidate_id",
                details={"candidate_id": cand.candidate_id},
            )
        candidates[cand.candidate_id] = [
            EmployeeSkill(
                profile_id=cand.candidate_id,
                skill_id=s.skill if isinstance(s.skill, int) else None,
                skill_name=s.skill if isinstance(s.skill, str) else None,
                proficiency_level=s.proficiency_level,
                years_experience=s.years_experience,
            )
            for s in cand.skills
        ]

    ranking = rank_candidates(
        requirement_set,
        candidates,
        normalizer,
        candidate_ids=[c.candidate_id for c in request.candidates],
        mandatory_weight=config.MANDATORY_WEIGHT,
        optional_weight=config.OPTIONAL_WEIGHT,
        strict_mandatory=request.strict_mandatory,
    )
    return ranking.to_dict()


@app.get("/projects/{project_id}/gaps/{profile_id}")
async def skill_gaps(
    project_id: int,
    profile_id: int,
    persist: bool = False,
    session: SessionContext = Depends(get_session),
    db: DatabaseManager = Depends(get_db),
    engine: RankingEngine = Depends(get_engine),
):
    if persist:
        require_manager(session)

    result = engine.score_candidate(project_id, profile_id)
    gaps = analyze_skill_gaps(result, project_id=project_id)

    if persist:
        db.replace_skill_gaps(profile_id, project_id, gaps)
        logger.info(f"💾 Stored {len(gaps)} skill gaps for profile {profile_id} / project {project_id}")

    return {
        "match": result.to_dict(),
        "gaps": [g.to_dict() for g in gaps],
    }


# ---------------------------
# Allocations
# ---------------------------
@app.post("/projects/{project_id}/allocations")
async def allocate_profile(
    project_id: int,
    request: AllocationRequest,
    session: SessionContext = Depends(get_manager_session),
    db: DatabaseManager = Depends(get_db),
):
    if db.get_project_by_id(project_id) is None:
        raise ProjectNotFound(project_id)
    if db.get_profile_by_id(request.profile_id) is None:
        raise ProfileNotFound(request.profile_id)

    allocation = ProjectAllocation(
        project_id=project_id,
        profile_id=request.profile_id,
        role_in_project=request.role_in_project,
        allocation_percentage=request.allocation_percentage,
    )
    allocation_id, committed = db.allocate_within_capacity(allocation)
    if allocation_id is None:
        raise ValidationError(
            f"Profile {request.profile_id} is already allocated {committed}%; "
            f"cannot add {request.allocation_percentage}%",
            field="allocation_percentage",
            details={"committed": committed},
        )

    allocation.id = allocation_id
    logger.info(
        f"✅ {session.user_id} allocated profile {request.profile_id} to project {project_id} "
        f"({request.allocation_percentage}%)"
    )
    return allocation.to_dict()
