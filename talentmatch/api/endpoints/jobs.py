import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from talentmatch.core.database import get_db
from talentmatch.core.deps import get_lifecycle
from talentmatch.crud import job as job_crud
from talentmatch.crud import recruiter as recruiter_crud
from talentmatch.models.job import JobStatus
from talentmatch.schemas.job import JobCreateRequest, JobResponse, JobCreateResponse, JobFillRequest, JobStatusEnum
from talentmatch.services.match_lifecycle import EntityNotFoundError, MatchLifecycle

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobCreateResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    lifecycle: MatchLifecycle = Depends(get_lifecycle)
):
    """
    Create a new job posting and auto-match it against every candidate.

    Scoring runs inside this request, one candidate at a time; the response
    is returned once the sweep has finished.

    Flow:
    1. Job saved to DB with status=OPEN (via CRUD layer)
    2. Every candidate is scored against the job description
    3. Pairs scoring at or above the persistence threshold are stored
    """
    if not recruiter_crud.get_by_id(db, request.recruiter_id):
        raise HTTPException(status_code=404, detail="Recruiter not found")

    try:
        new_job = job_crud.create(db, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create job: {str(e)}")

    matches = lifecycle.auto_match_on_job_create(new_job)
    logger.info(f"Created job {new_job.id}: {new_job.title} | {len(matches)} matches")

    return JobCreateResponse(
        job=JobResponse.model_validate(new_job),
        matches_created=len(matches),
        message=f"Job created successfully. {len(matches)} matching candidates found."
    )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.
    """
    job = job_crud.get_by_id(db, job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.get("/", response_model=list[JobResponse])
def list_jobs(
    skip: int = 0,
    limit: int = 100,
    status: Optional[JobStatusEnum] = None,
    recruiter_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List jobs with pagination and optional filtering.

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100, max: 100)
        status: Optional filter by job status (OPEN, FILLED, ARCHIVED)
        recruiter_id: Optional filter by owning recruiter
    """
    if limit > 100:
        limit = 100

    # Convert enum to JobStatus if provided
    status_filter = JobStatus[status.value] if status else None

    return job_crud.get_multi(db, skip=skip, limit=limit, status=status_filter, recruiter_id=recruiter_id)


@router.post("/{job_id}/toggle-status", response_model=JobResponse)
def toggle_job_status(job_id: str, lifecycle: MatchLifecycle = Depends(get_lifecycle)):
    """Switch a job between OPEN and FILLED."""
    try:
        return lifecycle.toggle_job_status(job_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")


@router.post("/{job_id}/fill", response_model=JobResponse)
def fill_job(
    job_id: str,
    request: JobFillRequest,
    lifecycle: MatchLifecycle = Depends(get_lifecycle)
):
    """
    Mark a job as filled by the given candidate.

    The job is closed (FILLED), the hire is recorded on it and the
    candidate's match for this job, if any, is flagged as a placement.
    """
    try:
        job = lifecycle.mark_job_filled(job_id, request.candidate_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"{e.entity} not found")

    logger.info(f"Job {job_id} filled by candidate {request.candidate_id}")
    return job


@router.delete("/{job_id}", status_code=204)
def delete_job(job_id: str, lifecycle: MatchLifecycle = Depends(get_lifecycle)):
    """
    Delete a job and every match referencing it.
    """
    try:
        lifecycle.delete_job(job_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")

    return None
