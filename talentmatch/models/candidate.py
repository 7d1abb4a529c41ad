"""
Candidate database model.

Represents a candidate profile owned by a recruiter. The resume text is the
free-text profile sent to the match scorer; skills and contact fields are
carried for presentation only.
"""

import uuid
from sqlalchemy import Column, String, ForeignKey, Text, DateTime, JSON, func
from sqlalchemy.orm import relationship
from talentmatch.core.database import Base


class Candidate(Base):
    """
    A candidate in a recruiter's pool.

    Candidates are not tied to a single job: every candidate is scored
    against every open job when created, and against every job when a job
    is created or refreshed.
    """
    __tablename__ = "candidates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    recruiter_id = Column(String(36), ForeignKey("recruiters.id"), nullable=False, index=True)

    # Profile
    name = Column(String, nullable=False)
    title = Column(String, nullable=True)
    department = Column(String, nullable=True)  # Broad category (Sales, R&D)
    field = Column(String, nullable=True)  # Specific domain (Cyber Security, Digital Marketing)
    experience = Column(String, nullable=True)
    skills = Column(JSON, nullable=False, default=list)

    # Scorer input
    resume_text = Column(Text, nullable=False, default="")

    # Contact
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    recruiter = relationship("Recruiter", back_populates="candidates")
