"""
Pydantic schemas for Candidate API requests/responses.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, EmailStr


class CandidateBase(BaseModel):
    """Base candidate schema with common fields."""
    name: str = Field(..., min_length=1, max_length=200)
    title: Optional[str] = None
    department: Optional[str] = Field(None, description="Broad category (Sales, R&D) used for filtering")
    field: Optional[str] = Field(None, description="Specific domain or industry")
    experience: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    resume_text: str = Field(..., min_length=1, description="Profile text sent to the match scorer")
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None


class CandidateCreateRequest(CandidateBase):
    recruiter_id: str = Field(..., min_length=1)


class CandidateResponse(CandidateBase):
    """Full candidate response."""
    id: str
    recruiter_id: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CandidateCreateResponse(BaseModel):
    candidate: CandidateResponse
    matches_created: int
    message: str
