"""Service layer for the AZ probe."""

from az_probe.services.node_metadata import (
    KubeNodeClient,
    MetadataRefresher,
    NodeMetadata,
    NodeMetadataCache,
)
from az_probe.services.probe import AZProbe, ProbeOutcome, ProbeResponse, ProbeResult

__all__ = [
    "AZProbe",
    "ProbeOutcome",
    "ProbeResponse",
    "ProbeResult",
    "KubeNodeClient",
    "MetadataRefresher",
    "NodeMetadata",
    "NodeMetadataCache",
]
