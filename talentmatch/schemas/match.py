"""
Pydantic schemas for match views, refresh and maintenance responses.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class MatchResponse(BaseModel):
    id: str
    job_id: str
    candidate_id: str
    job_recruiter_id: str
    candidate_recruiter_id: str
    score: int = Field(..., ge=0, le=100)
    reasoning: str
    is_active: bool
    is_placed: bool = False
    is_internal: bool
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MatchPartitionResponse(BaseModel):
    """Recruiter matching view for one job: high-match tab and borderline tab."""
    job_id: str
    display_threshold: int
    high: List[MatchResponse]
    low: List[MatchResponse]
    internal_count: int
    external_count: int
    new_candidates_count: int = Field(..., description="Loaded candidates with no stored match for this job")


class MatchRefreshRequest(BaseModel):
    only_missing: bool = Field(False, description="Score only candidates without a stored match and merge")
    model: Optional[str] = Field(None, description="Override the scoring model for this refresh")


class MatchAnalyzeRequest(BaseModel):
    """Ad-hoc analysis of a job text against a resume text; nothing is stored."""
    job_text: str = Field(..., min_length=1)
    resume_text: str = Field(..., min_length=1)
    model: Optional[str] = None


class MatchAnalyzeResponse(BaseModel):
    score: int
    reasoning: str
    pros: List[str]
    cons: List[str]
    error_kind: Optional[str] = None


class AuditRow(BaseModel):
    """One row of the admin cross-recruiter match table."""
    match_id: str
    job_id: str
    job_title: str
    candidate_id: str
    candidate_name: str
    job_recruiter_id: str
    candidate_recruiter_id: str
    score: int
    reasoning: str
    is_external: bool


class MaintenanceResponse(BaseModel):
    affected: int
    message: str


class StoreStatsResponse(BaseModel):
    recruiters: int
    candidates: int
    jobs: int
    internal_matches: int
    external_matches: int
