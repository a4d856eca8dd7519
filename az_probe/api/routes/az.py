"""Availability zone endpoints.

GET /api/az - JSON description of the node serving the request
GET /       - Human-readable pod and node page
"""

from datetime import datetime, timezone
from html import escape

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from az_probe.api.dependencies import get_metadata_cache
from az_probe.api.schemas import AZResponse
from az_probe.core.config import Settings
from az_probe.core.logging import get_logger
from az_probe.core.metrics import SERVED_REQUESTS
from az_probe.services.node_metadata import NodeMetadataCache, empty_as_dash, format_time

logger = get_logger(__name__)

router = APIRouter(tags=["az"])

INFO_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Pod &amp; Node Info</title>
  <style>
    body {{ font-family: Arial, sans-serif; background-color: #f5f7fa; margin: 0; }}
    .container {{ max-width: 720px; margin: 60px auto; background: #ffffff;
                 padding: 30px 40px; border-radius: 8px; }}
    ul {{ list-style: none; padding: 0; }}
    li {{ margin: 6px 0; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Pod &amp; Node Information</h1>
    <h2>Pod</h2>
    <ul>
      <li><strong>Name:</strong> {pod_name}</li>
      <li><strong>Namespace:</strong> {pod_namespace}</li>
      <li><strong>IP:</strong> {pod_ip}</li>
    </ul>
    <h2>Node</h2>
    <ul>
      <li><strong>Name:</strong> {node_name}</li>
      <li><strong>IP:</strong> {node_ip}</li>
      <li><strong>Region:</strong> <span style="color: green;">{region}</span></li>
      <li><strong>Zone:</strong> <span style="color: blue;">{zone}</span></li>
    </ul>
    <h2>Time</h2>
    <ul>
      <li><strong>Server Time (UTC):</strong> {server_time}</li>
      <li><strong>Client Time:</strong> <span id="clientTime">loading...</span></li>
      <li><strong>Last AZ Refresh:</strong> {last_update}</li>
      <li><strong>Last AZ Error:</strong> {last_error}</li>
    </ul>
  </div>
  <script>
    document.getElementById("clientTime").innerText = new Date().toISOString();
  </script>
</body>
</html>
"""


def _settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/api/az", response_model=AZResponse)
async def get_az(
    request: Request,
    cache: NodeMetadataCache = Depends(get_metadata_cache),
) -> AZResponse:
    """Report the zone of the node serving this request.

    Always answers from the in-memory snapshot; the Kubernetes API is never
    called on the request path.
    """
    settings = _settings(request)
    meta = cache.snapshot()
    SERVED_REQUESTS.labels(endpoint="/api/az").inc()

    if settings.access_log:
        logger.info("Served /api/az", zone=meta.zone, region=meta.region)

    return AZResponse.from_metadata(
        meta,
        node_name=settings.node_name or "",
        pod_name=settings.pod_name,
        pod_ip=settings.pod_ip,
        api_timeout_sec=settings.kube_api_timeout_sec,
    )


@router.get("/", response_class=HTMLResponse)
async def info_page(
    request: Request,
    cache: NodeMetadataCache = Depends(get_metadata_cache),
) -> HTMLResponse:
    """Render pod and node information for humans."""
    settings = _settings(request)
    meta = cache.snapshot()
    server_time = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
    SERVED_REQUESTS.labels(endpoint="/").inc()

    html = INFO_PAGE.format(
        pod_name=escape(settings.pod_name),
        pod_namespace=escape(settings.pod_namespace),
        pod_ip=escape(settings.pod_ip),
        node_name=escape(settings.node_name or ""),
        node_ip=escape(meta.node_ip),
        region=escape(meta.region),
        zone=escape(meta.zone),
        server_time=server_time,
        last_update=format_time(meta.last_update),
        last_error=escape(empty_as_dash(meta.last_error)),
    )

    if settings.access_log:
        logger.info("Served /", zone=meta.zone, region=meta.region, server_time=server_time)

    return HTMLResponse(content=html)
