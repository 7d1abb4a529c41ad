"""
Recruiter model for ownership of jobs and candidates.

Each Recruiter owns the jobs they post and the candidates they upload.
Match records copy the owner ids of both sides at write time, which is what
makes a match "internal" (same owner) or "external" (different owners).
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum, func
from sqlalchemy.orm import relationship
from talentmatch.core.database import Base


class RecruiterRole(str, enum.Enum):
    """
    Account role.

    - ADMIN: sees every recruiter's jobs, candidates and the cross-recruiter audit
    - RECRUITER: works with their own jobs and candidates
    """
    ADMIN = "ADMIN"
    RECRUITER = "RECRUITER"


class Recruiter(Base):
    """
    Recruiter account.

    Deleting a recruiter cascades to their jobs and candidates (ORM cascade)
    and to every match that carries their id in either owner snapshot
    (handled by the match lifecycle, since matches have no FK to owners).
    """
    __tablename__ = "recruiters"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)

    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    role = Column(Enum(RecruiterRole), default=RecruiterRole.RECRUITER, nullable=False)
    avatar = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    jobs = relationship("Job", back_populates="recruiter", cascade="all, delete-orphan")
    candidates = relationship("Candidate", back_populates="recruiter", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Recruiter(id={self.id}, email='{self.email}', role={self.role.value})>"
