"""
Unit tests for the commissioning service.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from shared.errors import ConfigurationError
from service_commissioning.app.config import CommissioningConfig
from service_commissioning.app.main import CommissioningService
from service_commissioning.tests.helpers import DocumentFactory


def _payload(**overrides):
    document = DocumentFactory.document(**overrides)
    return {"document": json.loads(document.to_json()), "signature": "signature"}


class TestCommissioningService:
    """Test cases for CommissioningService."""

    @pytest.fixture
    def config(self):
        """Create service configuration."""
        return CommissioningConfig(
            api_url="https://crpt.example/create",
            user_token="test-token",
            time_unit="SECONDS",
            request_limit=1,
        )

    @pytest.fixture
    def responses(self):
        """Queue of (status, body) replies from the fake CRPT API."""
        return []

    @pytest.fixture
    def service(self, config, responses):
        """Create CommissioningService backed by a mock transport."""
        def handler(request: httpx.Request) -> httpx.Response:
            status, body = responses.pop(0) if responses else (201, b"OK")
            return httpx.Response(status, content=body)

        return CommissioningService(config=config, transport=httpx.MockTransport(handler))

    @pytest.fixture
    def client(self, service):
        """Create test client."""
        return TestClient(service.app)

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "commissioning"

    def test_health_endpoint(self, client):
        """Health reports the configured API endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["dependencies"] == {"crpt_api": "https://crpt.example/create"}

    def test_rate_limit_endpoint(self, client):
        """The configured budget is exposed."""
        response = client.get("/api/v1/rate-limit")
        assert response.json() == {"request_limit": 1, "request_interval_ms": 1000}

    def test_submit_document_success(self, client):
        """A successful submission returns the API body."""
        response = client.post("/api/v1/documents/commissioning", json=_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["body"] == "OK"
        assert response.headers["X-Request-ID"]

    def test_submit_document_api_error(self, client, responses):
        """An API error is reported as a bad gateway with the generic body."""
        responses.append((500, b"internal"))

        response = client.post("/api/v1/documents/commissioning", json=_payload())

        assert response.status_code == 502
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "EXTERNAL_SERVICE_ERROR"
        assert "error message" in json.loads(data["body"])

    def test_submit_invalid_document(self, client):
        """Domain validation failures map to 422 error responses."""
        response = client.post(
            "/api/v1/documents/commissioning",
            json=_payload(production_type="UNKNOWN"),
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_submit_unsupported_type(self, client):
        """Unknown document types map to 422 error responses."""
        response = client.post(
            "/api/v1/documents/commissioning",
            json=_payload(doc_type="LP_SHIP_GOODS"),
        )

        assert response.status_code == 422
        assert response.json()["code"] == "UNSUPPORTED_FORMAT"

    def test_submit_malformed_body(self, client):
        """Bodies missing required document fields are rejected by the schema."""
        payload = _payload()
        del payload["document"]["doc_id"]

        response = client.post("/api/v1/documents/commissioning", json=payload)

        assert response.status_code == 422

    def test_submit_over_quota(self, client):
        """A second back-to-back submission with a limit of one is refused."""
        first = client.post("/api/v1/documents/commissioning", json=_payload())
        second = client.post("/api/v1/documents/commissioning", json=_payload())

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.json()["code"] == "RATE_LIMIT_ERROR"

    def test_metrics_endpoint(self, client):
        """Submission metrics are exported."""
        client.post("/api/v1/documents/commissioning", json=_payload())

        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'submissions_total{outcome="success"} 1.0' in response.text

    def test_invalid_limit_fails_construction(self, config):
        """A limit below one is rejected when the service starts."""
        with pytest.raises(ConfigurationError):
            CommissioningService(config=config.model_copy(update={"request_limit": 0}))


class TestCommissioningConfig:
    """Test cases for CommissioningConfig."""

    def test_reads_environment(self, monkeypatch):
        """Settings come from CRPT_* environment variables."""
        monkeypatch.setenv("CRPT_TIME_UNIT", "MINUTES")
        monkeypatch.setenv("CRPT_REQUEST_LIMIT", "10")
        monkeypatch.setenv("CRPT_USER_TOKEN", "env-token")

        config = CommissioningConfig()

        assert config.time_unit.value == "MINUTES"
        assert config.request_limit == 10
        assert config.user_token == "env-token"

    def test_defaults(self, monkeypatch):
        """The default endpoint is the commissioning contract URL."""
        for name in ("CRPT_API_URL", "CRPT_TIME_UNIT", "CRPT_REQUEST_LIMIT"):
            monkeypatch.delenv(name, raising=False)

        config = CommissioningConfig()

        assert config.api_url.endswith("/documents/commissioning/contract/create")
        assert config.time_unit.value == "SECONDS"
        assert config.request_limit == 1
