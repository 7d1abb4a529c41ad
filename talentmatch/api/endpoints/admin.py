"""
Admin API endpoints for the cross-recruiter match audit and store maintenance.

SECURITY WARNING: These endpoints should only be accessible to admin accounts.
In production, put them behind role-based access control (RBAC).
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from talentmatch.core.config import settings
from talentmatch.core.database import get_db, get_session_factory
from talentmatch.core.deps import get_lifecycle
from talentmatch.crud import candidate as candidate_crud
from talentmatch.crud import job as job_crud
from talentmatch.crud import match as match_crud
from talentmatch.crud import recruiter as recruiter_crud
from talentmatch.schemas.match import AuditRow, MaintenanceResponse, StoreStatsResponse
from talentmatch.services import match_classifier
from talentmatch.services.match_lifecycle import MatchLifecycle

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


class Collection(str, Enum):
    MATCHES = "matches"
    JOBS = "jobs"
    CANDIDATES = "candidates"
    RECRUITERS = "recruiters"


@router.get("/matches/audit", response_model=List[AuditRow])
def audit_matches(db: Session = Depends(get_db)):
    """
    Every strong match across all recruiters.

    Lists matches scoring above the audit threshold whose job and candidate
    both still exist. ``is_external`` compares the current owners of the job
    and the candidate.
    """
    entries = match_classifier.partition_for_admin_audit(
        match_crud.get_all(db),
        job_crud.get_multi(db, limit=None),
        candidate_crud.get_multi(db, limit=None),
        threshold=settings.ADMIN_AUDIT_THRESHOLD,
    )

    return [
        AuditRow(
            match_id=e.match.id,
            job_id=e.job.id,
            job_title=e.job.title,
            candidate_id=e.candidate.id,
            candidate_name=e.candidate.name,
            job_recruiter_id=e.job.recruiter_id,
            candidate_recruiter_id=e.candidate.recruiter_id,
            score=e.match.score,
            reasoning=e.match.reasoning,
            is_external=e.is_external,
        )
        for e in entries
    ]


def _collect_store_stats(session_factory: Callable[[], Session]) -> StoreStatsResponse:
    # Runs on an executor thread, so it owns its session end to end
    db = session_factory()
    try:
        ownership = match_classifier.count_ownership(match_crud.get_all(db))
        return StoreStatsResponse(
            recruiters=recruiter_crud.count(db),
            candidates=candidate_crud.count(db),
            jobs=job_crud.count(db),
            internal_matches=ownership.internal,
            external_matches=ownership.external,
        )
    finally:
        db.close()


@router.get("/stats", response_model=StoreStatsResponse)
async def store_stats(session_factory: Callable[[], Session] = Depends(get_session_factory)):
    """
    Global counters: recruiters, candidates, jobs and internal/external matches.

    The four-table read must finish within STATS_TIMEOUT_SECONDS, otherwise
    the request fails with 504. A read that overruns keeps going on its
    worker thread and closes its own session when done.
    """
    try:
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(None, _collect_store_stats, session_factory),
            timeout=settings.STATS_TIMEOUT_SECONDS
        )
    except asyncio.TimeoutError:
        logger.error(f"Admin stats read exceeded {settings.STATS_TIMEOUT_SECONDS}s")
        raise HTTPException(status_code=504, detail="Timed out reading store statistics")


@router.post("/matches/purge", response_model=MaintenanceResponse)
def purge_low_matches(
    threshold: Optional[int] = None,
    lifecycle: MatchLifecycle = Depends(get_lifecycle)
):
    """Delete stored matches scoring below the threshold (default: persistence threshold)."""
    if threshold is not None and not 0 <= threshold <= 100:
        raise HTTPException(status_code=422, detail="threshold must be between 0 and 100")

    removed = lifecycle.purge_below_threshold(threshold)
    return MaintenanceResponse(affected=removed, message=f"Deleted {removed} low-score matches")


@router.post("/matches/cleanup", response_model=MaintenanceResponse)
def cleanup_orphaned_matches(lifecycle: MatchLifecycle = Depends(get_lifecycle)):
    """Delete matches whose job or candidate no longer exists."""
    removed = lifecycle.cleanup_orphaned()
    return MaintenanceResponse(affected=removed, message=f"Deleted {removed} orphaned matches")


@router.post("/matches/reconcile", response_model=MaintenanceResponse)
def reconcile_match_owners(lifecycle: MatchLifecycle = Depends(get_lifecycle)):
    """Re-derive the owner snapshots on every match from the current owners."""
    corrected = lifecycle.reconcile_owner_snapshots()
    return MaintenanceResponse(affected=corrected, message=f"Corrected owner snapshots on {corrected} matches")


@router.delete("/{collection}", response_model=MaintenanceResponse)
def delete_collection(
    collection: Collection,
    keep_id: Optional[str] = None,
    lifecycle: MatchLifecycle = Depends(get_lifecycle)
):
    """
    Wipe one collection, in batches.

    Deleting jobs or candidates also deletes the matches that reference them.
    Deleting recruiters wipes everything except the recruiter ``keep_id``.
    """
    if collection == Collection.MATCHES:
        removed = lifecycle.delete_all_matches()
    elif collection == Collection.JOBS:
        removed = lifecycle.delete_all_jobs()
    elif collection == Collection.CANDIDATES:
        removed = lifecycle.delete_all_candidates()
    else:
        removed = lifecycle.delete_all_recruiters(keep_id=keep_id)

    logger.warning(f"Admin wiped {collection.value}: {removed} records")
    return MaintenanceResponse(affected=removed, message=f"Deleted {removed} {collection.value}")
