"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from talentmatch.models.job import Job, JobStatus
from talentmatch.schemas.job import JobCreateRequest


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id
    """
    db_job = Job(
        recruiter_id=job_data.recruiter_id,
        title=job_data.title,
        department=job_data.department,
        location=job_data.location,
        description=job_data.description,
        status=JobStatus.OPEN
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: str) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: Optional[int] = 100,
    status: Optional[JobStatus] = None,
    recruiter_id: Optional[str] = None
) -> List[Job]:
    """
    Retrieve multiple jobs with pagination and optional filtering.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return (None for a full scan)
        status: Optional status filter
        recruiter_id: Optional owner filter

    Returns:
        List of Job instances
    """
    query = db.query(Job)

    if status:
        query = query.filter(Job.status == status)
    if recruiter_id:
        query = query.filter(Job.recruiter_id == recruiter_id)

    query = query.order_by(Job.created_at, Job.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def get_all_ids(db: Session) -> set:
    """Return the ids of every job currently stored."""
    return {row[0] for row in db.query(Job.id).all()}


def update_status(db: Session, job_id: str, status: JobStatus) -> Optional[Job]:
    """
    Update job status.

    Returns:
        Updated Job instance if found, None otherwise
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    job.status = status

    db.commit()
    db.refresh(job)

    return job


def mark_filled(db: Session, job_id: str, candidate_id: str) -> Optional[Job]:
    """
    Close a job with the hired candidate recorded on it.

    Returns:
        Updated Job instance if found, None otherwise
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    job.status = JobStatus.FILLED
    job.hired_candidate_id = candidate_id

    db.commit()
    db.refresh(job)

    return job


def delete(db: Session, job_id: str) -> bool:
    """
    Delete a job by ID. Matches are not touched here; see MatchLifecycle.delete_job.

    Returns:
        True if deleted, False if not found
    """
    job = get_by_id(db, job_id)
    if not job:
        return False

    db.delete(job)
    db.commit()

    return True


def count(db: Session) -> int:
    return db.query(Job).count()


def delete_by_ids(db: Session, ids: Iterable[str], batch_size: int = 450) -> int:
    """
    Bulk-delete jobs by id, committing every ``batch_size`` rows.

    Returns:
        Number of ids submitted for deletion
    """
    ids = list(ids)
    for start in range(0, len(ids), batch_size):
        chunk = ids[start:start + batch_size]
        db.query(Job).filter(Job.id.in_(chunk)).delete(synchronize_session=False)
        db.commit()
    return len(ids)
