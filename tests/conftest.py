"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- A scripted scorer standing in for the OpenAI-backed MatchScorer
- Recruiter / job / candidate factories
"""

import os

# The app lifespan builds its own Database from settings; keep it local and keyless
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from talentmatch.core.config import settings
from talentmatch.core.database import Base, get_db, get_session_factory
from talentmatch.core.deps import get_scorer
from talentmatch.models import Candidate, Job, JobStatus, Recruiter, RecruiterRole
from talentmatch.services.match_lifecycle import MatchLifecycle
from talentmatch.services.match_scorer import (
    DualScoreResult,
    ScoreResult,
    failure_reasoning,
)
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeScorer:
    """
    Scripted scorer.

    ``scores`` maps either a (job_text, candidate_text) pair or a bare
    candidate_text to a score; anything unscripted gets ``default``. Pairs
    listed in ``failures`` come back as zero-score failures of that kind.
    Every call is recorded in ``calls``.
    """

    model = "fake-model"
    is_configured = True

    def __init__(self, scores=None, default=0, failures=None):
        self.scores = dict(scores or {})
        self.default = default
        self.failures = dict(failures or {})
        self.calls = []

    def _lookup(self, table, job_text, candidate_text, fallback=None):
        if (job_text, candidate_text) in table:
            return table[(job_text, candidate_text)]
        return table.get(candidate_text, fallback)

    def score(self, job_text, candidate_text, model=None):
        self.calls.append((job_text, candidate_text, model))
        kind = self._lookup(self.failures, job_text, candidate_text)
        if kind is not None:
            return ScoreResult(score=0, reasoning=failure_reasoning(kind), error_kind=kind)
        value = self._lookup(self.scores, job_text, candidate_text, self.default)
        return ScoreResult(score=value, reasoning=f"scripted {value}")

    def score_with_insights(self, job_text, candidate_text, model=None):
        result = self.score(job_text, candidate_text, model)
        if result.failed:
            return DualScoreResult(score=0, reasoning=result.reasoning, error_kind=result.error_kind)
        return DualScoreResult(
            score=result.score,
            reasoning=result.reasoning,
            pros=["Python"],
            cons=["No Kubernetes"],
        )

    def close(self):
        pass


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_scorer():
    return FakeScorer()


@pytest.fixture
def lifecycle(db_session, fake_scorer):
    return MatchLifecycle(db_session, fake_scorer, settings)


@pytest.fixture
def client(db_session, fake_scorer):
    """
    FastAPI test client with overridden database and scorer dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[get_scorer] = lambda: fake_scorer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_recruiter(db_session):
    counter = {"n": 0}

    def _make(name=None, role=RecruiterRole.RECRUITER):
        counter["n"] += 1
        name = name or f"Recruiter {counter['n']}"
        recruiter = Recruiter(name=name, email=f"recruiter{counter['n']}@example.com", role=role)
        db_session.add(recruiter)
        db_session.commit()
        db_session.refresh(recruiter)
        return recruiter

    return _make


@pytest.fixture
def make_job(db_session):
    def _make(recruiter, description="Senior Python developer, FastAPI and PostgreSQL", title="Backend Engineer",
              status=JobStatus.OPEN):
        job = Job(recruiter_id=recruiter.id, title=title, description=description, status=status)
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _make


@pytest.fixture
def make_candidate(db_session):
    def _make(recruiter, resume_text="Python developer, 6 years", name="Dana Levi"):
        candidate = Candidate(recruiter_id=recruiter.id, name=name, resume_text=resume_text, skills=["Python"])
        db_session.add(candidate)
        db_session.commit()
        db_session.refresh(candidate)
        return candidate

    return _make


@pytest.fixture
def sample_job_data():
    """Sample job data for testing (recruiter_id filled in by the test)"""
    return {
        "title": "Senior Python Developer",
        "description": """
        We are looking for a Senior Python Developer with 5+ years of experience.

        Requirements:
        - Expert knowledge of Python and FastAPI
        - Strong experience with PostgreSQL
        """,
        "department": "R&D",
        "location": "Tel Aviv (Hybrid)",
    }


@pytest.fixture
def sample_candidate_data():
    return {
        "name": "Noa Cohen",
        "title": "Backend Developer",
        "department": "R&D",
        "field": "Web",
        "experience": "6 years",
        "skills": ["Python", "FastAPI"],
        "resume_text": "Backend developer with six years of Python, FastAPI and PostgreSQL.",
        "email": "Noa.Cohen@Example.com",
    }


