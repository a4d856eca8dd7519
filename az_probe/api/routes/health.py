"""Health check endpoints for Kubernetes probes.

GET /healthz - Liveness probe (is the process running?)
GET /readyz  - Readiness probe (is the node zone known?)
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from az_probe.api.dependencies import get_metadata_cache
from az_probe.core.logging import get_logger
from az_probe.services.node_metadata import NodeMetadataCache

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz", response_class=PlainTextResponse)
async def liveness() -> PlainTextResponse:
    """Liveness probe. Does not look at node metadata."""
    return PlainTextResponse("ok\n")


@router.get(
    "/readyz",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Zone is known"},
        503: {"description": "Zone not resolved yet"},
    },
)
async def readiness(
    cache: NodeMetadataCache = Depends(get_metadata_cache),
) -> PlainTextResponse:
    """Readiness probe.

    The pod only takes traffic once it can report a real zone, so
    load tests never see "ZONE UNKNOWN" from a pod still warming up.
    """
    meta = cache.snapshot()
    if not meta.zone_known:
        logger.warning("Readiness check failed", zone=meta.zone, last_error=meta.last_error)
        return PlainTextResponse(
            "zone not ready\n",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return PlainTextResponse("ready\n")
