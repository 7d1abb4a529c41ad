"""
Test suite for job-related endpoints and functionality.

Tests cover:
- Job creation with auto-matching
- Job retrieval and filtering
- Status toggling and filling
- Cascade delete
- Error handling
"""

from talentmatch.crud import match as match_crud
from talentmatch.models import Job, JobStatus, MatchResult


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_auto_matches(self, client, db_session, fake_scorer, sample_job_data,
                                     make_recruiter, make_candidate):
        """A new job is scored against every candidate; only >= 50 is stored"""
        owner = make_recruiter()
        other = make_recruiter()
        strong = make_candidate(other, resume_text="strong")
        make_candidate(owner, resume_text="weak")
        fake_scorer.scores = {"strong": 75, "weak": 20}

        response = client.post("/api/v1/jobs/", json={**sample_job_data, "recruiter_id": owner.id})

        assert response.status_code == 201
        data = response.json()
        assert data["job"]["status"] == "OPEN"
        assert data["job"]["recruiter_id"] == owner.id
        assert data["matches_created"] == 1

        stored = match_crud.get_by_pair(db_session, data["job"]["id"], strong.id)
        assert stored.score == 75
        assert stored.job_recruiter_id == owner.id
        assert stored.candidate_recruiter_id == other.id

    def test_create_job_without_candidates(self, client, sample_job_data, make_recruiter):
        recruiter = make_recruiter()

        response = client.post("/api/v1/jobs/", json={**sample_job_data, "recruiter_id": recruiter.id})

        assert response.status_code == 201
        assert response.json()["matches_created"] == 0

    def test_create_job_unknown_recruiter(self, client, sample_job_data):
        response = client.post("/api/v1/jobs/", json={**sample_job_data, "recruiter_id": "nobody"})

        assert response.status_code == 404

    def test_create_job_missing_fields(self, client):
        """Test job creation with missing required fields"""
        response = client.post("/api/v1/jobs/", json={
            "title": "Test Job"
            # Missing description and recruiter
        })

        assert response.status_code == 422  # Validation error

    def test_create_job_invalid_description(self, client, make_recruiter):
        """Test job creation with too short description"""
        response = client.post("/api/v1/jobs/", json={
            "recruiter_id": make_recruiter().id,
            "title": "Test Job",
            "description": "short"  # Less than 10 characters
        })

        assert response.status_code == 422


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_job_by_id(self, client, make_recruiter, make_job):
        job = make_job(make_recruiter(), title="Data Engineer")

        response = client.get(f"/api/v1/jobs/{job.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == job.id
        assert data["title"] == "Data Engineer"

    def test_get_nonexistent_job(self, client):
        response = client.get("/api/v1/jobs/does-not-exist")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()

    def test_list_jobs_filters(self, client, make_recruiter, make_job):
        alice = make_recruiter()
        bob = make_recruiter()
        make_job(alice)
        make_job(alice, status=JobStatus.FILLED)
        make_job(bob)

        assert len(client.get("/api/v1/jobs/").json()) == 3
        assert len(client.get("/api/v1/jobs/", params={"recruiter_id": alice.id}).json()) == 2
        filled = client.get("/api/v1/jobs/", params={"status": "FILLED"}).json()
        assert [j["status"] for j in filled] == ["FILLED"]

    def test_list_jobs_limit_capped(self, client, make_recruiter, make_job):
        recruiter = make_recruiter()
        for _ in range(3):
            make_job(recruiter)

        response = client.get("/api/v1/jobs/", params={"limit": 500})

        assert response.status_code == 200
        assert len(response.json()) == 3


class TestJobStatus:

    def test_toggle_status(self, client, make_recruiter, make_job):
        job = make_job(make_recruiter())

        first = client.post(f"/api/v1/jobs/{job.id}/toggle-status")
        second = client.post(f"/api/v1/jobs/{job.id}/toggle-status")

        assert first.json()["status"] == "FILLED"
        assert second.json()["status"] == "OPEN"

    def test_toggle_unknown_job(self, client):
        assert client.post("/api/v1/jobs/missing/toggle-status").status_code == 404

    def test_fill_job(self, client, db_session, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        candidate = make_candidate(recruiter)
        match_crud.upsert(db_session, job.id, candidate.id, recruiter.id, recruiter.id, 91, "great")

        response = client.post(f"/api/v1/jobs/{job.id}/fill", json={"candidate_id": candidate.id})

        assert response.status_code == 200
        assert response.json()["status"] == "FILLED"
        assert response.json()["hired_candidate_id"] == candidate.id
        db_session.expire_all()
        assert match_crud.get_by_pair(db_session, job.id, candidate.id).is_placed is True

    def test_fill_with_unknown_candidate(self, client, make_recruiter, make_job):
        job = make_job(make_recruiter())

        response = client.post(f"/api/v1/jobs/{job.id}/fill", json={"candidate_id": "ghost"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Candidate not found"


class TestJobDeletion:

    def test_delete_job_cascades_to_matches(self, client, db_session, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        keep = make_job(recruiter)
        candidate = make_candidate(recruiter)
        match_crud.upsert(db_session, job.id, candidate.id, recruiter.id, recruiter.id, 70, "x")
        match_crud.upsert(db_session, keep.id, candidate.id, recruiter.id, recruiter.id, 70, "x")

        response = client.delete(f"/api/v1/jobs/{job.id}")

        assert response.status_code == 204
        assert db_session.get(Job, job.id) is None
        assert [m.job_id for m in db_session.query(MatchResult)] == [keep.id]

    def test_delete_nonexistent_job(self, client):
        assert client.delete("/api/v1/jobs/missing").status_code == 404
