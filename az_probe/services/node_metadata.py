"""Node topology lookup and caching for the AZ reporting service.

The service answers every /api/az request from an in-memory snapshot.
A background refresher keeps the snapshot current by reading the node
object from the Kubernetes API:

- zone and region come from the well-known topology labels
- the node IP prefers InternalIP, then ExternalIP, then the IP injected
  via the Downward API

A failed refresh keeps the last known values and records the error text,
so a flaky API server never blanks out the reported zone.
"""

import asyncio
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import requests

from az_probe.core.config import Settings
from az_probe.core.exceptions import ConfigurationError, NodeLookupError
from az_probe.core.logging import get_logger
from az_probe.core.metrics import METADATA_REFRESH_COUNT, ZONE_READY

logger = get_logger(__name__)

ZONE_LABEL_KEY = "topology.kubernetes.io/zone"
REGION_LABEL_KEY = "topology.kubernetes.io/region"

UNKNOWN_ZONE = "ZONE UNKNOWN"
UNKNOWN_REGION = "REGION UNKNOWN"
UNKNOWN_NODE_IP = "0.0.0.0"


@dataclass(frozen=True)
class NodeMetadata:
    """Snapshot of the node's topology.

    Attributes:
        zone: Availability zone label value.
        region: Region label value.
        node_ip: Resolved node address.
        last_update: Time of the last successful refresh (None if never).
        last_error: Error text of the last failed refresh, empty if none.
    """

    zone: str = UNKNOWN_ZONE
    region: str = UNKNOWN_REGION
    node_ip: str = UNKNOWN_NODE_IP
    last_update: datetime | None = None
    last_error: str = "not initialized"

    @property
    def zone_known(self) -> bool:
        return bool(self.zone) and self.zone != UNKNOWN_ZONE


class NodeMetadataCache:
    """Thread-safe holder for the current NodeMetadata snapshot."""

    def __init__(self, initial: NodeMetadata | None = None) -> None:
        self._lock = threading.Lock()
        self._meta = initial or NodeMetadata()

    def set(
        self,
        zone: str,
        region: str,
        node_ip: str,
        last_error: str,
        last_update: datetime | None,
    ) -> None:
        with self._lock:
            self._meta = NodeMetadata(
                zone=zone,
                region=region,
                node_ip=node_ip,
                last_update=last_update,
                last_error=last_error,
            )
        ZONE_READY.set(1 if self._meta.zone_known else 0)

    def record_error(self, error: str) -> None:
        """Store an error while keeping the last known topology."""
        with self._lock:
            self._meta = replace(self._meta, last_error=error)

    def snapshot(self) -> NodeMetadata:
        with self._lock:
            return self._meta


class KubeNodeClient:
    """Minimal in-cluster client for reading node objects.

    Only `GET /api/v1/nodes/{name}` is needed, so this talks to the API
    server directly with the pod's service account credentials.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        ca_path: str | bool = True,
        timeout: float = 2.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize KubeNodeClient.

        Args:
            api_url: API server base URL.
            token: Bearer token for authentication.
            ca_path: CA bundle path for TLS verification (or a requests verify flag).
            timeout: Per-request timeout in seconds.
            session: Optional pre-configured session.
        """
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Accept"] = "application/json"
        self._session.verify = ca_path

    @classmethod
    def in_cluster(cls, settings: Settings) -> "KubeNodeClient":
        """Build a client from the mounted service account.

        Raises:
            ConfigurationError: If the token or CA bundle is not mounted.
        """
        token_path = Path(settings.kube_token_path)
        ca_path = Path(settings.kube_ca_path)
        if not token_path.is_file():
            raise ConfigurationError(f"Service account token not found at {token_path}")
        if not ca_path.is_file():
            raise ConfigurationError(f"Cluster CA bundle not found at {ca_path}")

        return cls(
            api_url=settings.kube_api_url,
            token=token_path.read_text(encoding="utf-8").strip(),
            ca_path=str(ca_path),
            timeout=settings.kube_api_timeout_sec,
        )

    def get_node(self, name: str) -> dict[str, Any]:
        """Fetch a node object.

        Args:
            name: Node name.

        Returns:
            Decoded node object.

        Raises:
            NodeLookupError: If the request fails, returns a non-2xx status,
                or the body is not a JSON object.
        """
        url = f"{self._api_url}/api/v1/nodes/{name}"
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise NodeLookupError(
                f"failed to get node {name}: {e}",
                details=[{"node": name}],
            ) from e
        except ValueError as e:
            raise NodeLookupError(f"invalid node object for {name}: {e}") from e

        if not isinstance(payload, dict):
            raise NodeLookupError(
                f"invalid node object for {name}: expected an object, got {type(payload).__name__}",
                details=[{"node": name}],
            )
        return payload

    def close(self) -> None:
        self._session.close()


def find_node_ip(node: dict[str, Any]) -> str:
    """Pick the node address, preferring InternalIP over ExternalIP."""
    external = ""
    for address in node.get("status", {}).get("addresses", []) or []:
        kind = address.get("type")
        if kind == "InternalIP":
            return address.get("address", "")
        if kind == "ExternalIP":
            external = address.get("address", "")
    return external


def refresh_node_metadata(
    cache: NodeMetadataCache,
    client: KubeNodeClient,
    node_name: str,
    fallback_node_ip: str = "",
) -> NodeMetadata:
    """Refresh the cache from the node object.

    Args:
        cache: Cache to update.
        client: Kubernetes node client.
        node_name: Node to look up.
        fallback_node_ip: Node IP from the Downward API, used when the node
            object lists no usable address.

    Returns:
        The snapshot after the refresh attempt.
    """
    try:
        node = client.get_node(node_name)
    except NodeLookupError as e:
        cache.record_error(e.message)
        METADATA_REFRESH_COUNT.labels(result="error").inc()
        logger.warning("AZ refresh failed", node=node_name, error=e.message)
        return cache.snapshot()

    labels = node.get("metadata", {}).get("labels", {}) or {}
    zone = labels.get(ZONE_LABEL_KEY) or UNKNOWN_ZONE
    region = labels.get(REGION_LABEL_KEY) or UNKNOWN_REGION
    node_ip = find_node_ip(node) or fallback_node_ip or UNKNOWN_NODE_IP

    cache.set(zone, region, node_ip, "", datetime.now(timezone.utc))
    METADATA_REFRESH_COUNT.labels(result="ok").inc()
    logger.debug("AZ refreshed", node=node_name, zone=zone, region=region)
    return cache.snapshot()


class MetadataRefresher:
    """Background task that refreshes node metadata on a fixed interval."""

    def __init__(
        self,
        cache: NodeMetadataCache,
        client: KubeNodeClient,
        node_name: str,
        interval_sec: float,
        fallback_node_ip: str = "",
    ) -> None:
        self._cache = cache
        self._client = client
        self._node_name = node_name
        self._interval = interval_sec
        self._fallback_node_ip = fallback_node_ip
        self._task: asyncio.Task[None] | None = None

    async def refresh_once(self) -> NodeMetadata:
        """Run one refresh without blocking the event loop."""
        return await asyncio.to_thread(
            refresh_node_metadata,
            self._cache,
            self._client,
            self._node_name,
            self._fallback_node_ip,
        )

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh_once()
            except Exception as e:
                logger.error(
                    "Error in metadata refresher",
                    node=self._node_name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop())
            logger.info("Metadata refresher started", interval_sec=self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Metadata refresher stopped")

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()


def format_time(value: datetime | None) -> str:
    """Format as RFC 3339, or "-" when unset."""
    if value is None:
        return "-"
    return value.isoformat(timespec="seconds").replace("+00:00", "Z")


def empty_as_dash(value: str) -> str:
    return value if value else "-"
