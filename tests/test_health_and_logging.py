"""
Tests for health endpoints and the JSON log formatter.
"""

import json
import logging

from talentmatch.core.logging_config import CustomJsonFormatter
from talentmatch.services.match_scorer import OracleErrorKind


class TestHealth:

    def test_basic_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["scorer"]["status"] == "healthy"

    def test_detailed_health_without_api_key(self, client, fake_scorer):
        fake_scorer.is_configured = False

        data = client.get("/health/detailed").json()

        assert data["status"] == "degraded"
        assert data["checks"]["scorer"]["status"] == "degraded"


class TestJsonFormatter:

    def test_match_context_fields(self):
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')
        record = logging.LogRecord(
            name="talentmatch.services.match_lifecycle",
            level=logging.WARNING,
            pathname=__file__,
            lineno=10,
            msg="Pair scored below threshold",
            args=(),
            exc_info=None,
        )
        record.job_id = "job-1"
        record.error_kind = OracleErrorKind.QUOTA_EXHAUSTED

        payload = json.loads(formatter.format(record))

        assert payload["service"] == "talentmatch"
        assert payload["level"] == "WARNING"
        assert payload["job_id"] == "job-1"
        assert payload["error_kind"] == "QUOTA_EXHAUSTED"
        assert payload["timestamp"].endswith("Z")
        assert payload["line"] == 10
