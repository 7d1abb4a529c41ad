"""
Match views and re-matching.

GET returns the recruiter matching view for a job: stored matches split into
the high-match tab and the borderline tab. POST .../refresh re-scores the
job's candidates on demand.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talentmatch.core.config import settings
from talentmatch.core.database import get_db
from talentmatch.core.deps import get_lifecycle, get_scorer
from talentmatch.crud import candidate as candidate_crud
from talentmatch.crud import job as job_crud
from talentmatch.crud import match as match_crud
from talentmatch.schemas.match import (
    MatchAnalyzeRequest,
    MatchAnalyzeResponse,
    MatchPartitionResponse,
    MatchRefreshRequest,
    MatchResponse,
)
from talentmatch.services import match_classifier
from talentmatch.services.match_lifecycle import MatchLifecycle
from talentmatch.services.match_scorer import MatchScorer

router = APIRouter(tags=["Matches"])
logger = logging.getLogger(__name__)


@router.get("/jobs/{job_id}/matches", response_model=MatchPartitionResponse)
def get_job_matches(job_id: str, db: Session = Depends(get_db)):
    """
    Recruiter matching view for one job.

    Matches whose candidate no longer exists are left out. ``high`` holds
    scores at or above the display threshold, ``low`` the rest; both are
    sorted by score, highest first.
    """
    if not job_crud.get_by_id(db, job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    partition = match_classifier.partition_for_recruiter_view(
        match_crud.get_for_job(db, job_id),
        candidate_crud.get_all_ids(db),
        display_threshold=settings.DISPLAY_THRESHOLD,
    )

    return MatchPartitionResponse(
        job_id=job_id,
        display_threshold=settings.DISPLAY_THRESHOLD,
        high=[MatchResponse.model_validate(m) for m in partition.high],
        low=[MatchResponse.model_validate(m) for m in partition.low],
        internal_count=partition.internal_count,
        external_count=partition.external_count,
        new_candidates_count=partition.new_candidates_count,
    )


@router.post("/jobs/{job_id}/matches/refresh", response_model=list[MatchResponse])
def refresh_job_matches(
    job_id: str,
    request: Optional[MatchRefreshRequest] = None,
    db: Session = Depends(get_db),
    lifecycle: MatchLifecycle = Depends(get_lifecycle)
):
    """
    Re-score the job against the candidate pool.

    By default every candidate is re-scored and the job's stored matches are
    replaced by the new set. With ``only_missing`` only candidates without a
    stored match are scored and the results are added to the existing set.

    Returns:
        The matches written by this refresh, highest score first
    """
    request = request or MatchRefreshRequest()

    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        return lifecycle.refresh_matches_for_job(job, only_missing=request.only_missing, model=request.model)
    except SQLAlchemyError as e:
        logger.error(f"Error refreshing matches for job {job_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to refresh matches")


@router.post("/matches/analyze", response_model=MatchAnalyzeResponse)
def analyze_match(request: MatchAnalyzeRequest, scorer: MatchScorer = Depends(get_scorer)):
    """
    Ad-hoc analysis of a job text against a resume text.

    Nothing is stored. Scorer failures come back as score 0 with the
    failure reason in ``error_kind``.
    """
    result = scorer.score_with_insights(request.job_text, request.resume_text, model=request.model)

    return MatchAnalyzeResponse(
        score=result.score,
        reasoning=result.reasoning,
        pros=result.pros,
        cons=result.cons,
        error_kind=result.error_kind.value if result.error_kind else None,
    )
