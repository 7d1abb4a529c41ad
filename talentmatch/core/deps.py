"""
FastAPI dependencies for the match services.

The scorer and the database handle are created once in the application
lifespan and stored on ``app.state``; these dependencies hand them to the
endpoints, so tests can swap either one through ``dependency_overrides``.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from talentmatch.core.config import settings
from talentmatch.core.database import get_db
from talentmatch.services.match_lifecycle import MatchLifecycle
from talentmatch.services.match_scorer import MatchScorer


def get_scorer(request: Request) -> MatchScorer:
    """Return the application's shared MatchScorer."""
    return request.app.state.scorer


def get_lifecycle(
    db: Session = Depends(get_db),
    scorer: MatchScorer = Depends(get_scorer)
) -> MatchLifecycle:
    """Build a MatchLifecycle bound to the request's session."""
    return MatchLifecycle(db, scorer, settings)
