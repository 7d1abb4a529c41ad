"""
CRUD operations for MatchResult model.

Writes go through a deterministic key (``{job_id}_{candidate_id}``) so a
second write for the same pair overwrites the first. Deletes are always
query-then-delete in commit groups of ``batch_size`` rows.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from talentmatch.models.match import MatchResult, match_key

DEFAULT_BATCH_SIZE = 450


def upsert(
    db: Session,
    job_id: str,
    candidate_id: str,
    job_recruiter_id: str,
    candidate_recruiter_id: str,
    score: int,
    reasoning: str,
    commit: bool = True
) -> MatchResult:
    """
    Create or overwrite the match record for a (job, candidate) pair.

    Args:
        db: Database session
        job_id / candidate_id: The pair being written
        job_recruiter_id / candidate_recruiter_id: Owner snapshots taken now
        score: 0-100 score from the scorer
        reasoning: Scorer explanation
        commit: Commit immediately (False when the caller groups writes)

    Returns:
        The stored MatchResult
    """
    key = match_key(job_id, candidate_id)
    match = db.get(MatchResult, key)
    if match is None:
        match = MatchResult(id=key, job_id=job_id, candidate_id=candidate_id, is_placed=False)
        db.add(match)

    match.job_recruiter_id = job_recruiter_id
    match.candidate_recruiter_id = candidate_recruiter_id
    match.score = score
    match.reasoning = reasoning
    match.is_active = True
    match.updated_at = datetime.now(timezone.utc)

    if commit:
        db.commit()
        db.refresh(match)

    return match


def get_by_pair(db: Session, job_id: str, candidate_id: str) -> Optional[MatchResult]:
    return db.get(MatchResult, match_key(job_id, candidate_id))


def get_for_job(db: Session, job_id: str) -> List[MatchResult]:
    """All stored matches for a job, highest score first."""
    return (
        db.query(MatchResult)
        .filter(MatchResult.job_id == job_id)
        .order_by(MatchResult.score.desc(), MatchResult.id)
        .all()
    )


def get_all(db: Session) -> List[MatchResult]:
    return db.query(MatchResult).order_by(MatchResult.score.desc(), MatchResult.id).all()


def mark_placed(db: Session, job_id: str, candidate_id: str) -> bool:
    """
    Flag the pair's match as a placement.

    Returns:
        True if a match existed for the pair, False otherwise
    """
    match = get_by_pair(db, job_id, candidate_id)
    if match is None:
        return False

    match.is_placed = True
    db.commit()
    return True


def delete_by_ids(db: Session, ids: Iterable[str], batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    """
    Delete matches by id, committing every ``batch_size`` rows.

    Returns:
        Number of ids submitted for deletion
    """
    ids = list(ids)
    for start in range(0, len(ids), batch_size):
        chunk = ids[start:start + batch_size]
        db.query(MatchResult).filter(MatchResult.id.in_(chunk)).delete()
        db.commit()
    return len(ids)


def _ids_where(db: Session, *criteria) -> List[str]:
    query = db.query(MatchResult.id)
    if criteria:
        query = query.filter(*criteria)
    return [row[0] for row in query.all()]


def delete_for_job(db: Session, job_id: str, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    return delete_by_ids(db, _ids_where(db, MatchResult.job_id == job_id), batch_size)


def delete_for_candidate(db: Session, candidate_id: str, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    return delete_by_ids(db, _ids_where(db, MatchResult.candidate_id == candidate_id), batch_size)


def delete_for_recruiter(db: Session, recruiter_id: str, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    """Delete every match where the recruiter owns the job side or the candidate side."""
    ids = _ids_where(
        db,
        or_(MatchResult.job_recruiter_id == recruiter_id, MatchResult.candidate_recruiter_id == recruiter_id)
    )
    return delete_by_ids(db, ids, batch_size)


def delete_below(db: Session, threshold: int, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    return delete_by_ids(db, _ids_where(db, MatchResult.score < threshold), batch_size)


def delete_all(db: Session, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    return delete_by_ids(db, _ids_where(db), batch_size)
