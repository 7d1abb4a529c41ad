"""
Health check and monitoring endpoints.

Provides detailed health status for the database and the match scorer.
"""

import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime, timezone

from talentmatch.core.database import get_db
from talentmatch.core.deps import get_scorer
from talentmatch.services.match_scorer import MatchScorer

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    Use this for simple uptime monitoring and load balancer health checks.
    """
    return {
        "status": "healthy",
        "timestamp": _now()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(
    db: Session = Depends(get_db),
    scorer: MatchScorer = Depends(get_scorer)
) -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Database connectivity
    - Whether the match scorer has an API key (no call is made)
    """
    health_status = {
        "status": "healthy",
        "timestamp": _now(),
        "checks": {}
    }

    # Check database connectivity
    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database error: {str(e)}"
        }

    # Scorer without a key still answers, but every match scores 0
    if scorer.is_configured:
        health_status["checks"]["scorer"] = {
            "status": "healthy",
            "message": f"Scoring with {scorer.model}"
        }
    else:
        health_status["status"] = "degraded" if health_status["status"] == "healthy" else health_status["status"]
        health_status["checks"]["scorer"] = {
            "status": "degraded",
            "message": "OPENAI_API_KEY is not set; every match will score 0"
        }

    return health_status
