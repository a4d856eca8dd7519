"""Fixtures for integration tests.

Provides the AZ reporting service wired to a fake Kubernetes node
client, so the full HTTP stack runs without a cluster.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from az_probe.core.config import Settings
from az_probe.main import create_app
from az_probe.services.node_metadata import KubeNodeClient


@pytest.fixture
def fake_node_client(node_object):
    """Create a mock KubeNodeClient returning a labelled node.

    Returns:
        Mock client whose get_node can be reconfigured per test.
    """
    client = Mock(spec=KubeNodeClient)
    client.get_node.return_value = node_object(zone="AZ1", region="REGION1")
    return client


@pytest.fixture
def service_settings() -> Settings:
    return Settings(
        _env_file=None,
        node_name="worker-1",
        node_ip="192.168.0.9",
        pod_name="az-reporter-0",
        pod_namespace="probe",
        pod_ip="10.1.0.4",
        az_refresh_interval_sec=3600,
        log_format="console",
        access_log=True,
    )


@pytest.fixture
def client(service_settings, fake_node_client):
    """Create a TestClient with the lifespan running.

    Yields:
        TestClient for the AZ reporting service.
    """
    app = create_app(settings=service_settings, node_client=fake_node_client)
    with TestClient(app) as test_client:
        yield test_client
