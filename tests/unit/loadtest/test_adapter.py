"""Unit tests for marking locust responses from probe results.

Locust responses are stood in for by requests.Response objects with
Mock success/failure hooks, so locust itself is never started.
"""

from unittest.mock import Mock

import pytest
import requests

from az_probe.loadtest.adapter import probe_response
from az_probe.services.probe import AZProbe, ProbeOutcome


def make_response(status_code=200, content_type="application/json", body=b'{"az": "AZ1"}'):
    response = requests.Response()
    response.status_code = status_code
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    response._content = body
    response.success = Mock()
    response.failure = Mock()
    return response


@pytest.fixture
def probe(sink, reporter) -> AZProbe:
    return AZProbe(sink=sink, reporter=reporter)


class TestProbeResponse:
    """Tests for probe_response."""

    def test_observation_marks_success(self, probe, sink):
        response = make_response()

        result = probe_response(probe, response)

        assert result.outcome == ProbeOutcome.OBSERVATION_RECORDED
        response.success.assert_called_once_with()
        response.failure.assert_not_called()
        assert sink.observations == ["AZ1"]

    def test_missing_az_marks_success(self, probe, sink):
        response = make_response(body=b"{}")

        result = probe_response(probe, response)

        assert result.outcome == ProbeOutcome.NO_AZ_FIELD
        response.success.assert_called_once_with()
        assert sink.observations == []

    def test_validation_failure_marks_failure(self, probe, sink):
        response = make_response(status_code=500, body=b"")

        probe_response(probe, response)

        response.failure.assert_called_once()
        message = response.failure.call_args.args[0]
        assert message.startswith("validation_failed: ")
        assert "status_ok" in message
        response.success.assert_not_called()
        assert sink.observations == []

    def test_malformed_json_marks_failure(self, probe):
        response = make_response(body=b"not-json")

        result = probe_response(probe, response)

        assert result.outcome == ProbeOutcome.PARSE_FAILED
        assert response.failure.call_args.args[0].startswith("parse_failed: ")

    def test_transport_failure_marks_failure(self, probe, reporter):
        """Locust reports connection errors as status 0 with an error attached."""
        response = make_response(status_code=0, content_type=None, body=None)
        response.error = requests.ConnectionError("Connection refused")

        result = probe_response(probe, response)

        assert result.outcome == ProbeOutcome.TRANSPORT_FAILED
        assert "Connection refused" in response.failure.call_args.args[0]
        assert reporter.reports == []
