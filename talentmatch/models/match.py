"""
MatchResult model for storing AI-scored job/candidate pairs.

One row per (job, candidate) pair, keyed deterministically so that writing
the same pair twice overwrites instead of duplicating.
"""

from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, Index
from talentmatch.core.database import Base


def match_key(job_id: str, candidate_id: str) -> str:
    """Deterministic primary key for a (job, candidate) pair."""
    return f"{job_id}_{candidate_id}"


class MatchResult(Base):
    """
    Scored pairing of a job and a candidate.

    job_recruiter_id / candidate_recruiter_id are snapshots of each side's
    owner taken when the match was written. They are not foreign keys and are
    not re-derived on read; see MatchLifecycle.reconcile_owner_snapshots.

    job_id / candidate_id are deliberately not foreign keys either: orphaned
    matches are a data-quality condition cleaned up by a maintenance sweep.
    """
    __tablename__ = "matches"

    id = Column(String, primary_key=True, index=True)  # "{job_id}_{candidate_id}"
    job_id = Column(String(36), nullable=False, index=True)
    candidate_id = Column(String(36), nullable=False, index=True)

    # Owner snapshots
    job_recruiter_id = Column(String(36), nullable=False, index=True)
    candidate_recruiter_id = Column(String(36), nullable=False, index=True)

    # The Headline Score (0-100)
    score = Column(Integer, nullable=False, index=True)
    reasoning = Column(Text, nullable=False, default="")

    is_active = Column(Boolean, nullable=False, default=True)
    is_placed = Column(Boolean, nullable=False, default=False)

    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_matches_job_score', 'job_id', 'score'),
    )

    @property
    def is_internal(self) -> bool:
        return self.job_recruiter_id == self.candidate_recruiter_id

    def __repr__(self):
        return f"<MatchResult(id={self.id}, score={self.score})>"
