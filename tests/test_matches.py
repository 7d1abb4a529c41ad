"""
Tests for the match view, refresh and ad-hoc analysis endpoints.
"""

from talentmatch.crud import match as match_crud
from talentmatch.models import MatchResult
from talentmatch.services.match_scorer import OracleErrorKind


class TestMatchView:

    def test_partition_into_tabs(self, client, db_session, make_recruiter, make_job, make_candidate):
        alice = make_recruiter()
        bob = make_recruiter()
        job = make_job(alice)
        high = make_candidate(alice)
        border = make_candidate(bob)
        make_candidate(bob)  # never matched
        match_crud.upsert(db_session, job.id, high.id, alice.id, alice.id, 60, "x")
        match_crud.upsert(db_session, job.id, border.id, alice.id, bob.id, 59, "x")
        match_crud.upsert(db_session, job.id, "deleted-candidate", alice.id, bob.id, 99, "orphan")

        response = client.get(f"/api/v1/jobs/{job.id}/matches")

        assert response.status_code == 200
        data = response.json()
        assert data["display_threshold"] == 60
        assert [m["candidate_id"] for m in data["high"]] == [high.id]
        assert [m["candidate_id"] for m in data["low"]] == [border.id]
        assert data["high"][0]["is_internal"] is True
        assert data["low"][0]["is_internal"] is False
        assert data["internal_count"] == 1
        assert data["external_count"] == 1
        assert data["new_candidates_count"] == 1

    def test_equal_scores_ordered_by_match_id(self, client, db_session, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        tied = [make_candidate(recruiter, name=f"Tied {i}") for i in range(4)]
        for candidate in tied:
            match_crud.upsert(db_session, job.id, candidate.id, recruiter.id, recruiter.id, 70, "x")

        first = client.get(f"/api/v1/jobs/{job.id}/matches").json()
        second = client.get(f"/api/v1/jobs/{job.id}/matches").json()

        ids = [m["id"] for m in first["high"]]
        assert ids == sorted(ids)
        assert ids == [m["id"] for m in second["high"]]

    def test_unknown_job(self, client):
        assert client.get("/api/v1/jobs/missing/matches").status_code == 404


class TestRefresh:

    def test_full_refresh_drops_stale(self, client, db_session, fake_scorer, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        faded = make_candidate(recruiter, resume_text="faded")
        rising = make_candidate(recruiter, resume_text="rising")
        match_crud.upsert(db_session, job.id, faded.id, recruiter.id, recruiter.id, 70, "old")
        fake_scorer.scores = {"faded": 40, "rising": 77}

        response = client.post(f"/api/v1/jobs/{job.id}/matches/refresh", json={})

        assert response.status_code == 200
        assert [m["candidate_id"] for m in response.json()] == [rising.id]
        db_session.expire_all()
        assert [m.candidate_id for m in db_session.query(MatchResult)] == [rising.id]

    def test_refresh_without_body(self, client, fake_scorer, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        make_candidate(recruiter)
        fake_scorer.default = 55

        response = client.post(f"/api/v1/jobs/{job.id}/matches/refresh")

        assert response.status_code == 200
        assert [m["score"] for m in response.json()] == [55]

    def test_only_missing_and_model(self, client, db_session, fake_scorer, make_recruiter, make_job, make_candidate):
        recruiter = make_recruiter()
        job = make_job(recruiter)
        existing = make_candidate(recruiter, resume_text="existing")
        make_candidate(recruiter, resume_text="new")
        match_crud.upsert(db_session, job.id, existing.id, recruiter.id, recruiter.id, 70, "kept")
        fake_scorer.scores = {"new": 64}

        response = client.post(
            f"/api/v1/jobs/{job.id}/matches/refresh",
            json={"only_missing": True, "model": "gpt-4o-mini"}
        )

        assert response.status_code == 200
        assert fake_scorer.calls == [(job.description, "new", "gpt-4o-mini")]
        assert db_session.query(MatchResult).count() == 2

    def test_refresh_unknown_job(self, client):
        assert client.post("/api/v1/jobs/missing/matches/refresh", json={}).status_code == 404


class TestAnalyze:

    def test_analyze_returns_insights_and_stores_nothing(self, client, db_session, fake_scorer):
        fake_scorer.default = 83

        response = client.post("/api/v1/matches/analyze", json={
            "job_text": "Python backend role",
            "resume_text": "Python developer"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 83
        assert data["pros"] == ["Python"]
        assert data["cons"] == ["No Kubernetes"]
        assert data["error_kind"] is None
        assert db_session.query(MatchResult).count() == 0

    def test_analyze_reports_failure_kind(self, client, fake_scorer):
        fake_scorer.failures = {"cv": OracleErrorKind.AUTHENTICATION}

        response = client.post("/api/v1/matches/analyze", json={"job_text": "job", "resume_text": "cv"})

        assert response.status_code == 200
        assert response.json()["score"] == 0
        assert response.json()["error_kind"] == "AUTHENTICATION"

    def test_analyze_requires_texts(self, client):
        assert client.post("/api/v1/matches/analyze", json={"job_text": ""}).status_code == 422
