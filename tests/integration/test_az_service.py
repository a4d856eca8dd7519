"""Integration tests for the AZ reporting service HTTP API."""

import pytest
from fastapi.testclient import TestClient

from az_probe.core.exceptions import ConfigurationError, NodeLookupError
from az_probe.main import create_app


class TestAZEndpoint:
    """Tests for GET /api/az."""

    def test_reports_node_zone_as_json(self, client):
        response = client.get("/api/az")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["az"] == "AZ1"
        assert body["region"] == "REGION1"
        assert body["node_name"] == "worker-1"
        assert body["node_ip"] == "10.0.0.12"
        assert body["pod_name"] == "az-reporter-0"
        assert body["pod_ip"] == "10.1.0.4"
        assert body["last_error"] == "-"
        assert body["updated_at"] != "-"
        assert body["source"] == "in-memory-cache"
        assert body["api_timeout"] == "2s"

    def test_echoes_request_id(self, client):
        response = client.get("/api/az", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    def test_answers_from_cache_without_api_calls(self, client, fake_node_client):
        calls_after_warmup = fake_node_client.get_node.call_count

        for _ in range(5):
            client.get("/api/az")

        assert fake_node_client.get_node.call_count == calls_after_warmup


class TestInfoPage:
    """Tests for GET /."""

    def test_renders_pod_and_node_info(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "az-reporter-0" in response.text
        assert "worker-1" in response.text
        assert "AZ1" in response.text
        assert "REGION1" in response.text


class TestHealthEndpoints:
    """Tests for /healthz and /readyz."""

    def test_liveness(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.text == "ok\n"

    def test_ready_when_zone_known(self, client):
        response = client.get("/readyz")

        assert response.status_code == 200
        assert response.text == "ready\n"

    def test_not_ready_when_zone_unknown(self, service_settings, fake_node_client, node_object):
        fake_node_client.get_node.return_value = node_object(zone=None)
        app = create_app(settings=service_settings, node_client=fake_node_client)

        with TestClient(app) as client:
            response = client.get("/readyz")
            az = client.get("/api/az").json()

        assert response.status_code == 503
        assert response.text == "zone not ready\n"
        assert az["az"] == "ZONE UNKNOWN"

    def test_not_ready_when_warmup_lookup_fails(self, service_settings, fake_node_client):
        fake_node_client.get_node.side_effect = NodeLookupError("failed to get node worker-1")
        app = create_app(settings=service_settings, node_client=fake_node_client)

        with TestClient(app) as client:
            ready = client.get("/readyz")
            az = client.get("/api/az").json()

        assert ready.status_code == 503
        assert az["last_error"] == "failed to get node worker-1"
        assert az["node_ip"] == "0.0.0.0"


class TestMetricsEndpoint:
    """Tests for the Prometheus exposition endpoint."""

    def test_exposes_service_metrics(self, client):
        client.get("/api/az")

        response = client.get("/metrics/")

        assert response.status_code == 200
        assert "az_probe_served_requests_total" in response.text


class TestStartup:
    """Tests for startup configuration checks."""

    def test_missing_node_name_fails_startup(self, service_settings, fake_node_client):
        settings = service_settings.model_copy(update={"node_name": None})
        app = create_app(settings=settings, node_client=fake_node_client)

        with pytest.raises(ConfigurationError, match="NODE_NAME"):
            with TestClient(app):
                pass
