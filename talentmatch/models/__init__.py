"""
Database models package.
"""

from talentmatch.models.recruiter import Recruiter, RecruiterRole
from talentmatch.models.job import Job, JobStatus
from talentmatch.models.candidate import Candidate
from talentmatch.models.match import MatchResult, match_key

__all__ = ["Recruiter", "RecruiterRole", "Job", "JobStatus", "Candidate", "MatchResult", "match_key"]
