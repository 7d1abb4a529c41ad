"""
API endpoints for recruiter accounts and their dashboard counters.
"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from talentmatch.core.database import get_db
from talentmatch.core.deps import get_lifecycle
from talentmatch.crud import candidate as candidate_crud
from talentmatch.crud import job as job_crud
from talentmatch.crud import match as match_crud
from talentmatch.crud import recruiter as recruiter_crud
from talentmatch.core.config import settings
from talentmatch.schemas.recruiter import RecruiterCreateRequest, RecruiterResponse, RecruiterStatsResponse
from talentmatch.services import match_classifier
from talentmatch.services.match_lifecycle import EntityNotFoundError, MatchLifecycle

router = APIRouter(prefix="/recruiters", tags=["Recruiters"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=RecruiterResponse)
def register_recruiter(request: RecruiterCreateRequest, db: Session = Depends(get_db)):
    """
    Get or create a recruiter by email.

    Emails are matched case-insensitively; signing in again with a known
    email returns the stored account unchanged.
    """
    recruiter = recruiter_crud.get_or_create(db, request)
    logger.info(f"Recruiter {recruiter.id} signed in")
    return recruiter


@router.get("/", response_model=list[RecruiterResponse])
def list_recruiters(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return recruiter_crud.get_multi(db, skip=skip, limit=min(limit, 100))


@router.get("/{recruiter_id}", response_model=RecruiterResponse)
def get_recruiter(recruiter_id: str, db: Session = Depends(get_db)):
    recruiter = recruiter_crud.get_by_id(db, recruiter_id)
    if not recruiter:
        raise HTTPException(status_code=404, detail="Recruiter not found")
    return recruiter


@router.get("/{recruiter_id}/stats", response_model=RecruiterStatsResponse)
def get_recruiter_stats(recruiter_id: str, db: Session = Depends(get_db)):
    """
    Dashboard counters for one recruiter.

    Matches count when the recruiter owns either the job or the candidate;
    ``active_matches`` only counts those above the high-value threshold.
    """
    if not recruiter_crud.get_by_id(db, recruiter_id):
        raise HTTPException(status_code=404, detail="Recruiter not found")

    stats = match_classifier.recruiter_stats(
        match_crud.get_all(db),
        recruiter_id,
        job_crud.get_multi(db, limit=None),
        candidate_crud.get_multi(db, limit=None),
        high_value_threshold=settings.HIGH_VALUE_THRESHOLD,
    )
    return RecruiterStatsResponse(recruiter_id=recruiter_id, **asdict(stats))


@router.delete("/{recruiter_id}")
def delete_recruiter(recruiter_id: str, lifecycle: MatchLifecycle = Depends(get_lifecycle)):
    """
    Delete a recruiter and all associated data (jobs, candidates, matches).

    This is a CASCADE delete operation.
    """
    try:
        removed = lifecycle.delete_recruiter(recruiter_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Recruiter not found")

    return {"message": f"Recruiter {recruiter_id} deleted successfully", "matches_deleted": removed}
