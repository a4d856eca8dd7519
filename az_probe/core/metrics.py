"""Prometheus metrics definitions.

Probe-side counters are written by load iterations; service-side metrics
describe the AZ reporting service. Apart from `az_responses`, metric names
follow {namespace}_{name}_{unit}.
Reference: https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import Counter, Gauge

NAMESPACE = "az_probe"

# Probe metrics

# Name is fixed: dashboards and run summaries key on it.
AZ_RESPONSES = Counter(
    name="az_responses",
    documentation="Successful probe responses by reported availability zone",
    labelnames=["az"],
)

CHECK_RESULTS = Counter(
    name="checks",
    documentation="Probe check outcomes",
    labelnames=["check", "result"],
    namespace=NAMESPACE,
)

PROBE_OUTCOMES = Counter(
    name="iterations",
    documentation="Probe iterations by terminal outcome",
    labelnames=["outcome"],
    namespace=NAMESPACE,
)

# Service metrics
METADATA_REFRESH_COUNT = Counter(
    name="metadata_refreshes",
    documentation="Node metadata refresh attempts",
    labelnames=["result"],
    namespace=NAMESPACE,
)

ZONE_READY = Gauge(
    name="zone_ready",
    documentation="Whether the node zone is known (1=known, 0=unknown)",
    namespace=NAMESPACE,
)

SERVED_REQUESTS = Counter(
    name="served_requests",
    documentation="Requests served by the AZ reporting service",
    labelnames=["endpoint"],
    namespace=NAMESPACE,
)
