"""
CRUD operations for Recruiter model.
"""

from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from talentmatch.models.recruiter import Recruiter
from talentmatch.schemas.recruiter import RecruiterCreateRequest


def get_or_create(db: Session, data: RecruiterCreateRequest) -> Recruiter:
    """
    Return the recruiter registered with this email, creating it on first sight.

    An existing record keeps its stored name and role.
    """
    email = data.email.strip().lower()
    existing = get_by_email(db, email)
    if existing:
        return existing

    recruiter = Recruiter(
        name=data.name,
        email=email,
        role=data.role,
        avatar=f"https://ui-avatars.com/api/?name={data.name}&background=random",
    )
    db.add(recruiter)
    db.commit()
    db.refresh(recruiter)

    return recruiter


def get_by_id(db: Session, recruiter_id: str) -> Optional[Recruiter]:
    return db.query(Recruiter).filter(Recruiter.id == recruiter_id).first()


def get_by_email(db: Session, email: str) -> Optional[Recruiter]:
    return db.query(Recruiter).filter(Recruiter.email == email.strip().lower()).first()


def get_multi(db: Session, skip: int = 0, limit: int = 100) -> List[Recruiter]:
    return db.query(Recruiter).order_by(Recruiter.created_at, Recruiter.id).offset(skip).limit(limit).all()


def count(db: Session) -> int:
    return db.query(Recruiter).count()


def get_all_ids(db: Session) -> set:
    return {row[0] for row in db.query(Recruiter.id).all()}


def delete_by_ids(db: Session, ids: Iterable[str], batch_size: int = 450) -> int:
    """
    Bulk-delete recruiters by id, committing every ``batch_size`` rows.

    This bypasses the ORM cascade; callers remove the recruiters' jobs,
    candidates and matches first.
    """
    ids = list(ids)
    for start in range(0, len(ids), batch_size):
        chunk = ids[start:start + batch_size]
        db.query(Recruiter).filter(Recruiter.id.in_(chunk)).delete(synchronize_session=False)
        db.commit()
    return len(ids)
