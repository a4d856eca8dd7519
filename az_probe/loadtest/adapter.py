"""Bridges probe results into locust's request statistics."""

from typing import Any

from az_probe.services.probe import AZProbe, ProbeResponse, ProbeResult


def probe_response(probe: AZProbe, response: Any) -> ProbeResult:
    """Evaluate a locust response and mark it for the request statistics.

    Args:
        probe: Probe that validates and attributes the response.
        response: Locust response opened with catch_response=True.

    Returns:
        ProbeResult for the iteration.
    """
    result = probe.run(lambda: ProbeResponse.from_response(response))
    if result.ok:
        response.success()
    else:
        response.failure(f"{result.outcome.value}: {result.reason}")
    return result
