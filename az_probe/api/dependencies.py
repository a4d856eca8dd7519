"""FastAPI dependencies for the AZ reporting service.

Service instances are created in the application lifespan and handed
to routes through these accessors.
"""

from az_probe.core.config import Settings
from az_probe.core.exceptions import ConfigurationError
from az_probe.core.logging import get_logger
from az_probe.services.node_metadata import (
    KubeNodeClient,
    MetadataRefresher,
    NodeMetadataCache,
)

logger = get_logger(__name__)

# Global service instances (initialized in lifespan)
_metadata_cache: NodeMetadataCache | None = None
_node_client: KubeNodeClient | None = None
_refresher: MetadataRefresher | None = None


def get_metadata_cache() -> NodeMetadataCache:
    """Get the NodeMetadataCache instance.

    Raises:
        RuntimeError: If not initialized.
    """
    if _metadata_cache is None:
        raise RuntimeError("NodeMetadataCache not initialized")
    return _metadata_cache


async def init_services(settings: Settings, client: KubeNodeClient | None = None) -> None:
    """Initialize the metadata cache and start the refresher.

    The cache is warmed up with one refresh before the app serves traffic.

    Args:
        settings: Application settings.
        client: Node client to use; built from the in-cluster service
            account when omitted.

    Raises:
        ConfigurationError: If NODE_NAME is unset or the service account is
            not mounted.
    """
    global _metadata_cache, _node_client, _refresher

    if not settings.node_name:
        raise ConfigurationError("NODE_NAME environment variable not set")

    logger.info(
        "Initializing node metadata",
        pod=settings.pod_name,
        node=settings.node_name,
        node_ip=settings.node_ip,
    )

    _node_client = client or KubeNodeClient.in_cluster(settings)
    _metadata_cache = NodeMetadataCache()
    _refresher = MetadataRefresher(
        cache=_metadata_cache,
        client=_node_client,
        node_name=settings.node_name,
        interval_sec=settings.az_refresh_interval_sec,
        fallback_node_ip=settings.node_ip,
    )

    meta = await _refresher.refresh_once()
    logger.info("Node metadata warmed up", zone=meta.zone, region=meta.region)
    _refresher.start()


async def cleanup_services() -> None:
    """Stop the refresher and release the API client."""
    global _metadata_cache, _node_client, _refresher

    if _refresher is not None:
        await _refresher.stop()
        _refresher = None

    if _node_client is not None:
        _node_client.close()
        _node_client = None

    _metadata_cache = None
    logger.info("All services cleaned up")
