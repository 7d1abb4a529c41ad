"""
Test suite for candidate endpoints.

Tests cover:
- Candidate creation with auto-matching against OPEN jobs
- Retrieval and owner filtering
- Cascade delete
"""

from talentmatch.crud import match as match_crud
from talentmatch.models import Candidate, JobStatus, MatchResult


class TestCandidateCreation:

    def test_create_candidate_matches_open_jobs_only(self, client, db_session, fake_scorer, sample_candidate_data,
                                                     make_recruiter, make_job):
        recruiter = make_recruiter()
        open_job = make_job(recruiter, description="open python role")
        make_job(recruiter, description="closed python role", status=JobStatus.FILLED)
        fake_scorer.default = 82

        response = client.post("/api/v1/candidates/", json={**sample_candidate_data, "recruiter_id": recruiter.id})

        assert response.status_code == 201
        data = response.json()
        assert data["matches_created"] == 1
        assert data["candidate"]["name"] == "Noa Cohen"
        assert data["candidate"]["email"].lower() == "noa.cohen@example.com"
        assert data["candidate"]["skills"] == ["Python", "FastAPI"]

        stored = db_session.query(MatchResult).all()
        assert [m.job_id for m in stored] == [open_job.id]
        assert stored[0].candidate_id == data["candidate"]["id"]

    def test_create_candidate_below_threshold(self, client, db_session, fake_scorer, sample_candidate_data,
                                              make_recruiter, make_job):
        recruiter = make_recruiter()
        make_job(recruiter)
        fake_scorer.default = 49

        response = client.post("/api/v1/candidates/", json={**sample_candidate_data, "recruiter_id": recruiter.id})

        assert response.json()["matches_created"] == 0
        assert db_session.query(MatchResult).count() == 0

    def test_create_candidate_unknown_recruiter(self, client, sample_candidate_data):
        response = client.post("/api/v1/candidates/", json={**sample_candidate_data, "recruiter_id": "nobody"})

        assert response.status_code == 404

    def test_create_candidate_requires_resume_text(self, client, sample_candidate_data, make_recruiter):
        payload = {**sample_candidate_data, "recruiter_id": make_recruiter().id, "resume_text": ""}

        assert client.post("/api/v1/candidates/", json=payload).status_code == 422

    def test_create_candidate_invalid_email(self, client, sample_candidate_data, make_recruiter):
        payload = {**sample_candidate_data, "recruiter_id": make_recruiter().id, "email": "not-an-email"}

        assert client.post("/api/v1/candidates/", json=payload).status_code == 422


class TestCandidateRetrieval:

    def test_get_candidate(self, client, make_recruiter, make_candidate):
        candidate = make_candidate(make_recruiter(), name="Avi")

        response = client.get(f"/api/v1/candidates/{candidate.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "Avi"

    def test_get_missing_candidate(self, client):
        assert client.get("/api/v1/candidates/missing").status_code == 404

    def test_list_by_recruiter(self, client, make_recruiter, make_candidate):
        alice = make_recruiter()
        bob = make_recruiter()
        make_candidate(alice)
        make_candidate(bob)
        make_candidate(bob)

        response = client.get("/api/v1/candidates/", params={"recruiter_id": bob.id})

        assert len(response.json()) == 2
        assert {c["recruiter_id"] for c in response.json()} == {bob.id}


class TestCandidateDeletion:

    def test_delete_candidate_cascades(self, client, db_session, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        candidate = make_candidate(recruiter)
        match_crud.upsert(db_session, job.id, candidate.id, recruiter.id, recruiter.id, 70, "x")

        response = client.delete(f"/api/v1/candidates/{candidate.id}")

        assert response.status_code == 204
        assert db_session.get(Candidate, candidate.id) is None
        assert db_session.query(MatchResult).count() == 0

    def test_delete_missing_candidate(self, client):
        assert client.delete("/api/v1/candidates/missing").status_code == 404
