"""Shared pytest fixtures for all test layers.

This module provides response builders and recording collaborators
used by both unit and integration tests.
"""

import pytest

from az_probe.services.probe import ProbeResponse

JSON_HEADERS = {"Content-Type": "application/json"}


class RecordingSink:
    """MetricSink that remembers every observation."""

    def __init__(self) -> None:
        self.observations: list[str] = []

    def record(self, az: str) -> None:
        self.observations.append(az)


class RecordingReporter:
    """CheckReporter that remembers every check report."""

    def __init__(self) -> None:
        self.reports: list[tuple[str, bool]] = []

    def report(self, check: str, passed: bool) -> None:
        self.reports.append((check, passed))

    def failed(self) -> list[str]:
        return [name for name, passed in self.reports if not passed]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def az_response():
    """Build a successful /api/az response for a given zone.

    Returns:
        Factory taking the AZ label and returning a ProbeResponse.
    """

    def _build(az: str = "AZ1") -> ProbeResponse:
        return ProbeResponse.build(200, JSON_HEADERS, f'{{"az": "{az}"}}')

    return _build


@pytest.fixture
def node_object():
    """Build a Kubernetes node object with topology labels and addresses.

    Returns:
        Factory producing node dictionaries as returned by the API server.
    """

    def _build(
        zone: str | None = "eu-west-1a",
        region: str | None = "eu-west-1",
        addresses: list[dict[str, str]] | None = None,
    ) -> dict:
        labels = {"kubernetes.io/hostname": "worker-1"}
        if zone is not None:
            labels["topology.kubernetes.io/zone"] = zone
        if region is not None:
            labels["topology.kubernetes.io/region"] = region
        if addresses is None:
            addresses = [
                {"type": "ExternalIP", "address": "51.68.127.91"},
                {"type": "InternalIP", "address": "10.0.0.12"},
            ]
        return {
            "kind": "Node",
            "metadata": {"name": "worker-1", "labels": labels},
            "status": {"addresses": addresses},
        }

    return _build
