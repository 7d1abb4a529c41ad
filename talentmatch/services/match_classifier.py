"""
Match Classifier & Aggregator.

Pure functions over already-persisted matches: display tiers by score,
ownership tiers (internal = same recruiter owns job and candidate,
external = different owners) and dashboard counters. Nothing here touches
the database; callers pass in the entity sets they have loaded.

Matches are any objects exposing job_id, candidate_id, job_recruiter_id,
candidate_recruiter_id and score.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from talentmatch.core.config import settings


@dataclass
class MatchPartition:
    high: List[Any] = field(default_factory=list)
    low: List[Any] = field(default_factory=list)
    internal_count: int = 0
    external_count: int = 0
    new_candidates_count: int = 0


@dataclass(frozen=True)
class OwnershipCounts:
    internal: int
    external: int


@dataclass(frozen=True)
class AuditEntry:
    job: Any
    candidate: Any
    match: Any
    is_external: bool


@dataclass(frozen=True)
class RecruiterStats:
    total_jobs: int
    total_candidates: int
    active_matches: int
    filled_jobs: int
    internal_matches: int
    external_matches: int


def is_external(job_recruiter_id: str, candidate_recruiter_id: str) -> bool:
    """A match is external when the job and the candidate have different owners."""
    return job_recruiter_id != candidate_recruiter_id


def sort_by_score(matches: Iterable[Any]) -> List[Any]:
    """Highest score first; equal scores keep their input order."""
    return sorted(matches, key=lambda m: m.score, reverse=True)


def filter_valid(matches: Iterable[Any], job_ids: Iterable[str], candidate_ids: Iterable[str]) -> List[Any]:
    """Drop orphaned matches: those whose job or candidate is not in the loaded sets."""
    job_ids = set(job_ids)
    candidate_ids = set(candidate_ids)
    return [m for m in matches if m.job_id in job_ids and m.candidate_id in candidate_ids]


def find_orphans(matches: Iterable[Any], job_ids: Iterable[str], candidate_ids: Iterable[str]) -> List[Any]:
    """Complement of filter_valid: the targets of the orphan cleanup sweep."""
    job_ids = set(job_ids)
    candidate_ids = set(candidate_ids)
    return [m for m in matches if m.job_id not in job_ids or m.candidate_id not in candidate_ids]


def count_ownership(matches: Iterable[Any]) -> OwnershipCounts:
    """Internal vs external counts, read from the owner snapshots on each match."""
    internal = 0
    external = 0
    for m in matches:
        if is_external(m.job_recruiter_id, m.candidate_recruiter_id):
            external += 1
        else:
            internal += 1
    return OwnershipCounts(internal=internal, external=external)


def partition_for_recruiter_view(
    matches: Iterable[Any],
    candidate_ids: Iterable[str],
    display_threshold: Optional[int] = None
) -> MatchPartition:
    """
    Split one job's matches into the "high match" and "borderline" tabs.

    Matches whose candidate is not in ``candidate_ids`` are orphans and are
    excluded from both tabs and from the counts. No lower bound is applied:
    only matches that passed the persistence threshold are stored.

    Args:
        matches: Stored matches for a single job
        candidate_ids: Ids of the candidates currently loaded
        display_threshold: Minimum score for the "high" tab (default: settings.DISPLAY_THRESHOLD)

    Returns:
        MatchPartition with both tabs sorted by score descending
    """
    if display_threshold is None:
        display_threshold = settings.DISPLAY_THRESHOLD
    candidate_ids = set(candidate_ids)
    valid = [m for m in matches if m.candidate_id in candidate_ids]
    ownership = count_ownership(valid)
    matched_candidates = {m.candidate_id for m in valid}

    return MatchPartition(
        high=sort_by_score(m for m in valid if m.score >= display_threshold),
        low=sort_by_score(m for m in valid if m.score < display_threshold),
        internal_count=ownership.internal,
        external_count=ownership.external,
        new_candidates_count=len(candidate_ids - matched_candidates),
    )


def partition_for_admin_audit(
    matches: Iterable[Any],
    jobs: Sequence[Any],
    candidates: Sequence[Any],
    threshold: Optional[int] = None
) -> List[AuditEntry]:
    """
    Cross-recruiter audit table for admins.

    Only matches scoring strictly above ``threshold`` whose job and candidate
    both still exist are listed. Here ownership comes from the live job and
    candidate owners, not from the snapshots.
    """
    if threshold is None:
        threshold = settings.ADMIN_AUDIT_THRESHOLD
    jobs_by_id = {j.id: j for j in jobs}
    candidates_by_id = {c.id: c for c in candidates}

    entries = []
    for m in matches:
        if m.score <= threshold:
            continue
        job = jobs_by_id.get(m.job_id)
        candidate = candidates_by_id.get(m.candidate_id)
        if job is None or candidate is None:
            continue
        entries.append(AuditEntry(
            job=job,
            candidate=candidate,
            match=m,
            is_external=is_external(job.recruiter_id, candidate.recruiter_id),
        ))

    return sorted(entries, key=lambda e: e.match.score, reverse=True)


def recruiter_stats(
    matches: Iterable[Any],
    recruiter_id: str,
    jobs: Sequence[Any],
    candidates: Sequence[Any],
    high_value_threshold: Optional[int] = None
) -> RecruiterStats:
    """
    Dashboard counters scoped to one recruiter.

    ``active_matches`` counts matches where the recruiter owns either side and
    the score is strictly above ``high_value_threshold``. Matches referencing
    jobs or candidates missing from the loaded sets are ignored.
    """
    if high_value_threshold is None:
        high_value_threshold = settings.HIGH_VALUE_THRESHOLD
    own_jobs = [j for j in jobs if j.recruiter_id == recruiter_id]
    own_candidates = [c for c in candidates if c.recruiter_id == recruiter_id]
    valid = filter_valid(matches, (j.id for j in jobs), (c.id for c in candidates))
    involved = [
        m for m in valid
        if m.job_recruiter_id == recruiter_id or m.candidate_recruiter_id == recruiter_id
    ]
    ownership = count_ownership(involved)

    return RecruiterStats(
        total_jobs=len(own_jobs),
        total_candidates=len(own_candidates),
        active_matches=sum(1 for m in involved if m.score > high_value_threshold),
        filled_jobs=sum(1 for j in own_jobs if _status_value(j.status) == "FILLED"),
        internal_matches=ownership.internal,
        external_matches=ownership.external,
    )


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)
