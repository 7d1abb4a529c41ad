"""
CRUD operations for Candidate model.
"""

from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from talentmatch.models.candidate import Candidate
from talentmatch.schemas.candidate import CandidateCreateRequest


def create(db: Session, candidate_data: CandidateCreateRequest) -> Candidate:
    """
    Create a new candidate in the database.

    Args:
        db: Database session
        candidate_data: Validated candidate creation data

    Returns:
        Created Candidate instance with id
    """
    db_candidate = Candidate(
        recruiter_id=candidate_data.recruiter_id,
        name=candidate_data.name,
        title=candidate_data.title,
        department=candidate_data.department,
        field=candidate_data.field,
        experience=candidate_data.experience,
        skills=list(candidate_data.skills),
        resume_text=candidate_data.resume_text,
        email=candidate_data.email,
        phone=candidate_data.phone,
        linkedin=candidate_data.linkedin,
    )

    db.add(db_candidate)
    db.commit()
    db.refresh(db_candidate)

    return db_candidate


def get_by_id(db: Session, candidate_id: str) -> Optional[Candidate]:
    return db.query(Candidate).filter(Candidate.id == candidate_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: Optional[int] = 100,
    recruiter_id: Optional[str] = None
) -> List[Candidate]:
    """
    Retrieve candidates with pagination and optional owner filtering.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return (None for a full scan)
        recruiter_id: Optional owner filter

    Returns:
        List of Candidate instances
    """
    query = db.query(Candidate)

    if recruiter_id:
        query = query.filter(Candidate.recruiter_id == recruiter_id)

    query = query.order_by(Candidate.created_at, Candidate.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def get_all_ids(db: Session) -> set:
    """Return the ids of every candidate currently stored."""
    return {row[0] for row in db.query(Candidate.id).all()}


def delete(db: Session, candidate_id: str) -> bool:
    """
    Delete a candidate by ID. Matches are not touched here; see MatchLifecycle.delete_candidate.

    Returns:
        True if deleted, False if not found
    """
    candidate = get_by_id(db, candidate_id)
    if not candidate:
        return False

    db.delete(candidate)
    db.commit()

    return True


def count(db: Session) -> int:
    return db.query(Candidate).count()


def delete_by_ids(db: Session, ids: Iterable[str], batch_size: int = 450) -> int:
    """Bulk-delete candidates by id, committing every ``batch_size`` rows."""
    ids = list(ids)
    for start in range(0, len(ids), batch_size):
        chunk = ids[start:start + batch_size]
        db.query(Candidate).filter(Candidate.id.in_(chunk)).delete(synchronize_session=False)
        db.commit()
    return len(ids)
