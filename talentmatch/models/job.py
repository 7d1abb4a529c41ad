import enum
import uuid
from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from talentmatch.core.database import Base


class JobStatus(str, enum.Enum):
    """
    Job lifecycle status enum.

    - OPEN: Accepting candidates; included in auto-matching of new candidates
    - FILLED: A candidate was hired (or the recruiter closed it)
    - ARCHIVED: Kept for history only
    """
    OPEN = "OPEN"
    FILLED = "FILLED"
    ARCHIVED = "ARCHIVED"


class Job(Base):
    """
    Job model representing a job posting in the system.
    The description is the text sent to the match scorer.
    """
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    recruiter_id = Column(String(36), ForeignKey("recruiters.id"), nullable=False, index=True)

    title = Column(String, nullable=False, index=True)
    department = Column(String, nullable=True)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=False)

    status = Column(Enum(JobStatus), default=JobStatus.OPEN, nullable=False, index=True)
    hired_candidate_id = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    recruiter = relationship("Recruiter", back_populates="jobs")

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status.value})>"
