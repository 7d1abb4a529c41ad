"""
API endpoints for candidate management.

Candidates belong to a recruiter's pool, not to a job: a new candidate is
auto-matched against every OPEN job at creation time.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from talentmatch.core.database import get_db
from talentmatch.core.deps import get_lifecycle
from talentmatch.crud import candidate as candidate_crud
from talentmatch.crud import recruiter as recruiter_crud
from talentmatch.schemas.candidate import CandidateCreateRequest, CandidateCreateResponse, CandidateResponse
from talentmatch.services.match_lifecycle import EntityNotFoundError, MatchLifecycle

router = APIRouter(prefix="/candidates", tags=["Candidates"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=CandidateCreateResponse)
def create_candidate(
    request: CandidateCreateRequest,
    db: Session = Depends(get_db),
    lifecycle: MatchLifecycle = Depends(get_lifecycle)
):
    """
    Add a candidate and score them against every OPEN job.

    Returns:
        The stored candidate and how many matches were persisted

    Raises:
        HTTPException 404: If the owning recruiter doesn't exist
    """
    if not recruiter_crud.get_by_id(db, request.recruiter_id):
        raise HTTPException(status_code=404, detail="Recruiter not found")

    try:
        candidate = candidate_crud.create(db, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating candidate: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create candidate: {str(e)}")

    matches = lifecycle.auto_match_on_candidate_create(candidate)
    logger.info(f"Created candidate {candidate.id} | {len(matches)} matches")

    return CandidateCreateResponse(
        candidate=CandidateResponse.model_validate(candidate),
        matches_created=len(matches),
        message=f"Candidate created successfully. {len(matches)} matching open jobs found."
    )


@router.get("/", response_model=list[CandidateResponse])
def list_candidates(
    skip: int = 0,
    limit: int = 100,
    recruiter_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List candidates, optionally only those owned by one recruiter."""
    if limit > 100:
        limit = 100

    return candidate_crud.get_multi(db, skip=skip, limit=limit, recruiter_id=recruiter_id)


@router.get("/{candidate_id}", response_model=CandidateResponse)
def get_candidate(candidate_id: str, db: Session = Depends(get_db)):
    candidate = candidate_crud.get_by_id(db, candidate_id)

    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    return candidate


@router.delete("/{candidate_id}", status_code=204)
def delete_candidate(candidate_id: str, lifecycle: MatchLifecycle = Depends(get_lifecycle)):
    """
    Delete a candidate and every match referencing it.
    """
    try:
        removed = lifecycle.delete_candidate(candidate_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Candidate not found")

    logger.info(f"Deleted candidate {candidate_id} ({removed} matches)")
    return None
