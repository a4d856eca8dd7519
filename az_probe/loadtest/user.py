"""Locust user that runs the AZ probe.

Usage:
    # Constant load, PROBE_USERS users for PROBE_RUN_TIME (10 users, 1m)
    TARGET_URL=http://10.0.0.1:31570/api/az \\
        locust -f tests/load/locustfile.py --headless
"""

from locust import HttpUser, between, task

from az_probe.core.config import get_settings
from az_probe.loadtest.adapter import probe_response
from az_probe.services.probe import AZProbe

REQUEST_NAME = "GET /api/az"

_settings = get_settings()


class AZProbeUser(HttpUser):
    """Repeatedly asks the target which availability zone served it.

    Each task execution is one probe iteration. Iterations share only
    the write-only Prometheus counters.
    """

    host = _settings.target_url
    wait_time = between(_settings.probe_wait_min_sec, _settings.probe_wait_max_sec)

    probe = AZProbe()

    def on_start(self):
        self.target_url = _settings.target_url
        self.timeout = _settings.probe_request_timeout_sec

    @task
    def probe_az(self):
        """GET the target URL and attribute the response to an AZ."""
        with self.client.get(
            self.target_url,
            catch_response=True,
            name=REQUEST_NAME,
            timeout=self.timeout,
        ) as response:
            probe_response(self.probe, response)
