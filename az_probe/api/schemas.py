"""Pydantic schemas for the AZ reporting service responses."""

from pydantic import BaseModel, Field

from az_probe.services.node_metadata import NodeMetadata, empty_as_dash, format_time


class AZResponse(BaseModel):
    """Body of GET /api/az.

    Attributes:
        az: Availability zone of the node serving the request.
        region: Region of the node.
        node_name: Kubernetes node name.
        node_ip: Resolved node address.
        pod_name: Pod serving the request.
        pod_ip: Pod address.
        updated_at: Time of the last successful metadata refresh, or "-".
        last_error: Last refresh error, or "-".
        source: Where the values came from.
        api_timeout: Kubernetes API timeout in use.
    """

    az: str = Field(..., description="Availability zone", examples=["eu-west-1a"])
    region: str = Field(..., description="Region", examples=["eu-west-1"])
    node_name: str = Field(..., description="Node name")
    node_ip: str = Field(..., description="Node IP")
    pod_name: str = Field(..., description="Pod name")
    pod_ip: str = Field(..., description="Pod IP")
    updated_at: str = Field(..., description="Last refresh time (RFC 3339) or '-'")
    last_error: str = Field(..., description="Last refresh error or '-'")
    source: str = Field(default="in-memory-cache", description="Value source")
    api_timeout: str = Field(..., description="Kubernetes API timeout", examples=["2s"])

    @classmethod
    def from_metadata(
        cls,
        meta: NodeMetadata,
        node_name: str,
        pod_name: str,
        pod_ip: str,
        api_timeout_sec: float,
    ) -> "AZResponse":
        return cls(
            az=meta.zone,
            region=meta.region,
            node_name=node_name,
            node_ip=meta.node_ip,
            pod_name=pod_name,
            pod_ip=pod_ip,
            updated_at=format_time(meta.last_update),
            last_error=empty_as_dash(meta.last_error),
            api_timeout=f"{api_timeout_sec:g}s",
        )
