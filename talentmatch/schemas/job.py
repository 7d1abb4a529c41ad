from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class JobStatusEnum(str, Enum):
    """Job lifecycle status"""
    OPEN = "OPEN"
    FILLED = "FILLED"
    ARCHIVED = "ARCHIVED"


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    recruiter_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10)
    department: Optional[str] = None
    location: Optional[str] = None


class JobResponse(BaseModel):
    """Schema for job response"""
    id: str
    recruiter_id: str
    title: str
    department: Optional[str] = None
    location: Optional[str] = None
    description: str
    status: JobStatusEnum
    hired_candidate_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models


class JobCreateResponse(BaseModel):
    """Schema for job creation response"""
    job: JobResponse
    matches_created: int
    message: str


class JobFillRequest(BaseModel):
    """Mark a job as filled by a specific candidate"""
    candidate_id: str = Field(..., min_length=1)
