"""Unit tests for API response schemas."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from az_probe.api.schemas import AZResponse
from az_probe.services.node_metadata import NodeMetadata


class TestAZResponse:
    """Tests for AZResponse."""

    def test_from_metadata_fresh_node(self):
        meta = NodeMetadata(
            zone="eu-west-1a",
            region="eu-west-1",
            node_ip="10.0.0.12",
            last_update=datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc),
            last_error="",
        )

        body = AZResponse.from_metadata(
            meta, node_name="worker-1", pod_name="az-7d9f", pod_ip="10.1.0.4", api_timeout_sec=2.0
        )

        assert body.model_dump() == {
            "az": "eu-west-1a",
            "region": "eu-west-1",
            "node_name": "worker-1",
            "node_ip": "10.0.0.12",
            "pod_name": "az-7d9f",
            "pod_ip": "10.1.0.4",
            "updated_at": "2026-10-19T08:00:00Z",
            "last_error": "-",
            "source": "in-memory-cache",
            "api_timeout": "2s",
        }

    def test_from_metadata_uninitialized_node(self):
        body = AZResponse.from_metadata(
            NodeMetadata(), node_name="w", pod_name="", pod_ip="", api_timeout_sec=1.5
        )

        assert body.az == "ZONE UNKNOWN"
        assert body.updated_at == "-"
        assert body.last_error == "not initialized"
        assert body.api_timeout == "1.5s"

    def test_az_is_required(self):
        with pytest.raises(ValidationError):
            AZResponse(
                region="r",
                node_name="n",
                node_ip="i",
                pod_name="p",
                pod_ip="i",
                updated_at="-",
                last_error="-",
                api_timeout="2s",
            )
