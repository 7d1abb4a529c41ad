"""
Match Lifecycle Controller.

Decides which (job, candidate) pairs get scored and what happens to the
stored match records afterwards:

    Unscored -> Scored-Below-Threshold (nothing written)
             -> Persisted (score >= persistence threshold)
             -> Stale (overwritten in place on refresh)

Scoring is synchronous and sequential: the request that creates a job or a
candidate returns only after every counterpart has been scored. Pair writes
commit one at a time, so a failure at pair k leaves pairs 1..k-1 stored and
pairs k+1..N still run.

Cascade deletes also live here, because matches carry no foreign keys to the
jobs, candidates and recruiters they reference.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from talentmatch.core.config import Settings, settings as default_settings
from talentmatch.crud import candidate as candidate_crud
from talentmatch.crud import job as job_crud
from talentmatch.crud import match as match_crud
from talentmatch.crud import recruiter as recruiter_crud
from talentmatch.models.candidate import Candidate
from talentmatch.models.job import Job, JobStatus
from talentmatch.models.match import MatchResult, match_key
from talentmatch.services import match_classifier
from talentmatch.services.match_scorer import MatchScorer, ScoreResult

logger = logging.getLogger(__name__)


class EntityNotFoundError(Exception):
    """An operation targeted a job, candidate or recruiter id that does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class MatchLifecycle:
    """
    Creation/refresh-triggered matching plus cascades and maintenance sweeps.

    Args:
        db: Session to work in, or None when the store is unavailable. With no
            store every operation logs a warning and returns an empty result
            without calling the scorer.
        scorer: Gateway used to score pairs
        settings: Thresholds and batch size
    """

    def __init__(self, db: Optional[Session], scorer: MatchScorer, settings: Optional[Settings] = None):
        self.db = db
        self.scorer = scorer
        self.settings = settings or default_settings

    @property
    def threshold(self) -> int:
        return self.settings.PERSISTENCE_THRESHOLD

    @property
    def batch_size(self) -> int:
        return self.settings.DELETE_BATCH_SIZE

    def _store_available(self, operation: str) -> bool:
        if self.db is None:
            logger.warning(f"Store unavailable; skipping {operation}")
            return False
        return True

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert_match(self, job: Job, candidate: Candidate, result: ScoreResult, commit: bool = True) -> MatchResult:
        """Write the pair under its deterministic key, snapshotting both owners."""
        return match_crud.upsert(
            self.db,
            job_id=job.id,
            candidate_id=candidate.id,
            job_recruiter_id=job.recruiter_id,
            candidate_recruiter_id=candidate.recruiter_id,
            score=result.score,
            reasoning=result.reasoning,
            commit=commit,
        )

    def _score_and_store(self, job: Job, candidate: Candidate, model: Optional[str] = None) -> Optional[MatchResult]:
        result = self.scorer.score(job.description, candidate.resume_text, model=model)
        if result.score < self.threshold:
            logger.debug(
                f"Pair {match_key(job.id, candidate.id)} scored {result.score}, below threshold",
                extra={"job_id": job.id, "candidate_id": candidate.id, "error_kind": result.error_kind},
            )
            return None

        try:
            return self.upsert_match(job, candidate, result)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Failed to store match {match_key(job.id, candidate.id)}: {e}",
                extra={"job_id": job.id, "candidate_id": candidate.id},
            )
            return None

    def auto_match_on_job_create(self, job: Job) -> List[MatchResult]:
        """
        Score a new job against every candidate in the store.

        Returns:
            The matches that were persisted, in candidate order
        """
        if not self._store_available("auto-match for new job"):
            return []

        candidates = candidate_crud.get_multi(self.db, limit=None)
        created = []
        for candidate in candidates:
            match = self._score_and_store(job, candidate)
            if match is not None:
                created.append(match)

        logger.info(
            f"Auto-match for job {job.id}: {len(created)}/{len(candidates)} candidates persisted",
            extra={"job_id": job.id, "scored": len(candidates), "persisted": len(created)},
        )
        return created

    def auto_match_on_candidate_create(self, candidate: Candidate) -> List[MatchResult]:
        """
        Score a new candidate against every OPEN job.

        Filled and archived jobs are never auto-matched.
        """
        if not self._store_available("auto-match for new candidate"):
            return []

        jobs = job_crud.get_multi(self.db, limit=None, status=JobStatus.OPEN)
        created = []
        for job in jobs:
            match = self._score_and_store(job, candidate)
            if match is not None:
                created.append(match)

        logger.info(
            f"Auto-match for candidate {candidate.id}: {len(created)}/{len(jobs)} open jobs persisted",
            extra={"candidate_id": candidate.id, "scored": len(jobs), "persisted": len(created)},
        )
        return created

    def refresh_matches_for_job(
        self,
        job: Job,
        only_missing: bool = False,
        model: Optional[str] = None
    ) -> List[MatchResult]:
        """
        Re-score the job's candidates and persist those at or above threshold.

        A full refresh replaces the job's stored set: previously persisted
        matches that did not make it this time are deleted in the same
        transaction as the re-insert. With ``only_missing`` only candidates
        without a stored match are scored, and the new matches are merged
        into the existing set.

        Args:
            job: Job to refresh
            only_missing: Score only candidates not yet represented
            model: Optional scorer model override for this sweep

        Returns:
            The matches written by this refresh, highest score first

        Raises:
            SQLAlchemyError: If the replacement transaction fails (rolled back)
        """
        if not self._store_available("match refresh"):
            return []

        candidates = candidate_crud.get_multi(self.db, limit=None)
        existing = match_crud.get_for_job(self.db, job.id)
        if only_missing:
            represented = {m.candidate_id for m in existing}
            candidates = [c for c in candidates if c.id not in represented]

        kept = []
        for candidate in candidates:
            result = self.scorer.score(job.description, candidate.resume_text, model=model)
            if result.score >= self.threshold:
                kept.append((candidate, result))

        kept.sort(key=lambda pair: pair[1].score, reverse=True)

        try:
            if not only_missing:
                fresh_keys = {match_key(job.id, candidate.id) for candidate, _ in kept}
                stale = [m.id for m in existing if m.id not in fresh_keys]
                if stale:
                    self.db.query(MatchResult).filter(MatchResult.id.in_(stale)).delete()
            written = [self.upsert_match(job, candidate, result, commit=False) for candidate, result in kept]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Refresh for job {job.id} failed, rolled back: {e}", extra={"job_id": job.id})
            raise

        for match in written:
            self.db.refresh(match)

        logger.info(
            f"Refreshed job {job.id}: {len(written)}/{len(candidates)} candidates persisted",
            extra={"job_id": job.id, "only_missing": only_missing, "persisted": len(written)},
        )
        return written

    # ------------------------------------------------------------------
    # Job state
    # ------------------------------------------------------------------

    def mark_job_filled(self, job_id: str, candidate_id: str) -> Optional[Job]:
        """Close the job with a hire and flag the pair's match as placed."""
        if not self._store_available("mark job filled"):
            return None

        if candidate_crud.get_by_id(self.db, candidate_id) is None:
            raise EntityNotFoundError("Candidate", candidate_id)

        job = job_crud.mark_filled(self.db, job_id, candidate_id)
        if job is None:
            raise EntityNotFoundError("Job", job_id)

        if not match_crud.mark_placed(self.db, job_id, candidate_id):
            logger.info(f"Job {job_id} filled by candidate {candidate_id} with no stored match")
        return job

    def toggle_job_status(self, job_id: str) -> Optional[Job]:
        """OPEN becomes FILLED; anything else becomes OPEN."""
        if not self._store_available("toggle job status"):
            return None

        job = job_crud.get_by_id(self.db, job_id)
        if job is None:
            raise EntityNotFoundError("Job", job_id)

        new_status = JobStatus.FILLED if job.status == JobStatus.OPEN else JobStatus.OPEN
        return job_crud.update_status(self.db, job_id, new_status)

    # ------------------------------------------------------------------
    # Cascades
    # ------------------------------------------------------------------

    def delete_job(self, job_id: str) -> int:
        """
        Delete a job and every match referencing it.

        Returns:
            Number of matches removed
        """
        if not self._store_available("job delete"):
            return 0

        if job_crud.get_by_id(self.db, job_id) is None:
            raise EntityNotFoundError("Job", job_id)

        removed = match_crud.delete_for_job(self.db, job_id, self.batch_size)
        job_crud.delete(self.db, job_id)
        logger.info(f"Deleted job {job_id} and {removed} matches")
        return removed

    def delete_candidate(self, candidate_id: str) -> int:
        """Delete a candidate and every match referencing it."""
        if not self._store_available("candidate delete"):
            return 0

        if candidate_crud.get_by_id(self.db, candidate_id) is None:
            raise EntityNotFoundError("Candidate", candidate_id)

        removed = match_crud.delete_for_candidate(self.db, candidate_id, self.batch_size)
        candidate_crud.delete(self.db, candidate_id)
        logger.info(f"Deleted candidate {candidate_id} and {removed} matches")
        return removed

    def delete_recruiter(self, recruiter_id: str) -> int:
        """
        Delete a recruiter with their jobs, candidates and matches.

        Matches are found by either owner snapshot and also through the
        recruiter's current jobs and candidates, so stale snapshots do not
        leave orphans behind.
        """
        if not self._store_available("recruiter delete"):
            return 0

        recruiter = recruiter_crud.get_by_id(self.db, recruiter_id)
        if recruiter is None:
            raise EntityNotFoundError("Recruiter", recruiter_id)

        removed = match_crud.delete_for_recruiter(self.db, recruiter_id, self.batch_size)
        for job in job_crud.get_multi(self.db, limit=None, recruiter_id=recruiter_id):
            removed += match_crud.delete_for_job(self.db, job.id, self.batch_size)
        for candidate in candidate_crud.get_multi(self.db, limit=None, recruiter_id=recruiter_id):
            removed += match_crud.delete_for_candidate(self.db, candidate.id, self.batch_size)

        # ORM cascade takes the recruiter's jobs and candidates with it
        self.db.delete(recruiter)
        self.db.commit()
        logger.info(f"Deleted recruiter {recruiter_id} and {removed} matches")
        return removed

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def purge_below_threshold(self, threshold: Optional[int] = None) -> int:
        """Delete every stored match scoring under ``threshold`` (default: persistence threshold)."""
        if not self._store_available("low-score purge"):
            return 0

        threshold = self.threshold if threshold is None else threshold
        removed = match_crud.delete_below(self.db, threshold, self.batch_size)
        logger.info(f"Purged {removed} matches below {threshold}")
        return removed

    def cleanup_orphaned(self) -> int:
        """Delete matches whose job or candidate no longer exists."""
        if not self._store_available("orphan cleanup"):
            return 0

        orphans = match_classifier.find_orphans(
            match_crud.get_all(self.db),
            job_crud.get_all_ids(self.db),
            candidate_crud.get_all_ids(self.db),
        )
        removed = match_crud.delete_by_ids(self.db, [m.id for m in orphans], self.batch_size)
        logger.info(f"Removed {removed} orphaned matches")
        return removed

    def reconcile_owner_snapshots(self) -> int:
        """
        Re-derive both owner snapshots from the current job and candidate owners.

        Orphaned matches are left alone. Returns the number of corrected records.
        """
        if not self._store_available("owner reconciliation"):
            return 0

        jobs = {j.id: j for j in job_crud.get_multi(self.db, limit=None)}
        candidates = {c.id: c for c in candidate_crud.get_multi(self.db, limit=None)}

        corrected = 0
        for match in match_crud.get_all(self.db):
            job = jobs.get(match.job_id)
            candidate = candidates.get(match.candidate_id)
            if job is None or candidate is None:
                continue
            if match.job_recruiter_id != job.recruiter_id or match.candidate_recruiter_id != candidate.recruiter_id:
                match.job_recruiter_id = job.recruiter_id
                match.candidate_recruiter_id = candidate.recruiter_id
                corrected += 1

        self.db.commit()
        logger.info(f"Reconciled owner snapshots on {corrected} matches")
        return corrected

    # ------------------------------------------------------------------
    # Bulk deletes (admin)
    # ------------------------------------------------------------------

    def delete_all_matches(self) -> int:
        if not self._store_available("delete all matches"):
            return 0
        return match_crud.delete_all(self.db, self.batch_size)

    def delete_all_jobs(self) -> int:
        """Delete every job and every match that references a job."""
        if not self._store_available("delete all jobs"):
            return 0

        job_ids = job_crud.get_all_ids(self.db)
        match_ids = [m.id for m in match_crud.get_all(self.db) if m.job_id in job_ids]
        match_crud.delete_by_ids(self.db, match_ids, self.batch_size)
        return job_crud.delete_by_ids(self.db, job_ids, self.batch_size)

    def delete_all_candidates(self) -> int:
        """Delete every candidate and every match that references a candidate."""
        if not self._store_available("delete all candidates"):
            return 0

        candidate_ids = candidate_crud.get_all_ids(self.db)
        match_ids = [m.id for m in match_crud.get_all(self.db) if m.candidate_id in candidate_ids]
        match_crud.delete_by_ids(self.db, match_ids, self.batch_size)
        return candidate_crud.delete_by_ids(self.db, candidate_ids, self.batch_size)

    def delete_all_recruiters(self, keep_id: Optional[str] = None) -> int:
        """
        Wipe the store down to a single account.

        Every match, job and candidate is removed, then every recruiter
        except ``keep_id`` (normally the admin running the wipe).
        """
        if not self._store_available("delete all recruiters"):
            return 0

        match_crud.delete_all(self.db, self.batch_size)
        job_crud.delete_by_ids(self.db, job_crud.get_all_ids(self.db), self.batch_size)
        candidate_crud.delete_by_ids(self.db, candidate_crud.get_all_ids(self.db), self.batch_size)

        recruiter_ids = recruiter_crud.get_all_ids(self.db)
        recruiter_ids.discard(keep_id)
        removed = recruiter_crud.delete_by_ids(self.db, recruiter_ids, self.batch_size)
        logger.warning(f"Deleted {removed} recruiters (kept {keep_id})")
        return removed
