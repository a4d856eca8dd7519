"""Locust event handlers for the probe run.

Importing this module registers the handlers.
"""

from locust import events
from prometheus_client import start_http_server

from az_probe.core.config import get_settings
from az_probe.core.logging import configure_logging, get_logger
from az_probe.loadtest.stages import total_duration
from az_probe.loadtest.summary import (
    collect_az_counts,
    collect_check_results,
    collect_outcomes,
    render_summary,
)

logger = get_logger(__name__)

_metrics_server_started = False


@events.init.add_listener
def on_init(environment, **kwargs):
    """Configure logging once the locust environment exists."""
    settings = get_settings()
    configure_logging(level=settings.log_level, format=settings.log_format)


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """Log the run parameters and expose counters if a port is configured.

    Args:
        environment: Locust environment object.
        **kwargs: Additional keyword arguments.
    """
    global _metrics_server_started

    settings = get_settings()
    logger.info(
        "AZ probe run started",
        target_url=settings.target_url,
        host=environment.host,
        users=environment.runner.target_user_count if environment.runner else None,
        ramping=settings.is_ramping,
        run_time_sec=(
            total_duration(settings.probe_stages)
            if settings.is_ramping
            else settings.probe_run_time_sec
        ),
    )

    if settings.probe_metrics_port is not None and not _metrics_server_started:
        start_http_server(settings.probe_metrics_port)
        _metrics_server_started = True
        logger.info("Probe metrics exposed", port=settings.probe_metrics_port)


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """Print per-AZ totals and check outcomes.

    Args:
        environment: Locust environment object.
        **kwargs: Additional keyword arguments.
    """
    settings = get_settings()
    az_counts = collect_az_counts(settings.probe_expected_azs)
    check_results = collect_check_results()
    outcomes = collect_outcomes()

    logger.info(
        "AZ probe run completed",
        az_counts=az_counts,
        outcomes=outcomes,
    )
    print("=" * 60)
    print(render_summary(az_counts, check_results, outcomes))
    print("=" * 60)
