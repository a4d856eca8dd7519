"""Load profiles driven by settings."""

from collections.abc import Sequence

from locust import LoadTestShape

from az_probe.core.config import Stage, get_settings
from az_probe.loadtest.stages import constant_target, stage_at


class ConstantShape(LoadTestShape):
    """Holds PROBE_USERS users for PROBE_RUN_TIME, then stops the run.

    Users are started at PROBE_SPAWN_RATE per second. Defaults are
    10 users for 1m.
    """

    def __init__(
        self,
        users: int | None = None,
        spawn_rate: float | None = None,
        run_time_sec: float | None = None,
    ):
        super().__init__()
        settings = get_settings()
        self.users = users if users is not None else settings.probe_users
        self.spawn_rate = spawn_rate if spawn_rate is not None else settings.probe_spawn_rate
        self.run_time_sec = (
            run_time_sec if run_time_sec is not None else settings.probe_run_time_sec
        )

    def tick(self):
        return constant_target(self.users, self.spawn_rate, self.run_time_sec, self.get_run_time())


class StagesShape(LoadTestShape):
    """Steps through stages of (duration, users, spawn rate).

    Stages run back to back and the run stops once the last stage has
    elapsed. Configure with PROBE_STAGES, e.g.
    '[{"duration_sec": 30, "users": 10}, {"duration_sec": 60, "users": 50}]'.
    """

    def __init__(self, stages: Sequence[Stage] | None = None):
        super().__init__()
        self.stages = list(stages if stages is not None else get_settings().probe_stages)

    def tick(self):
        return stage_at(self.stages, self.get_run_time())
