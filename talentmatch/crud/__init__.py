"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from talentmatch.crud import recruiter, job, candidate, match

__all__ = ["recruiter", "job", "candidate", "match"]
