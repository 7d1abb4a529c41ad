"""
Pydantic schemas for Recruiter API requests/responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from talentmatch.models.recruiter import RecruiterRole


class RecruiterCreateRequest(BaseModel):
    """Register a recruiter (or return the existing one for this email)."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: RecruiterRole = RecruiterRole.RECRUITER

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class RecruiterResponse(BaseModel):
    id: str
    name: str
    email: str
    role: RecruiterRole
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecruiterStatsResponse(BaseModel):
    """Per-recruiter dashboard counters."""
    recruiter_id: str
    total_jobs: int
    total_candidates: int
    active_matches: int = Field(..., description="Matches on either side of this recruiter scoring above the high-value threshold")
    filled_jobs: int
    internal_matches: int
    external_matches: int
