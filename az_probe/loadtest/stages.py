"""Stage arithmetic for ramping load profiles."""

from collections.abc import Sequence

from az_probe.core.config import Stage


def stage_at(stages: Sequence[Stage], run_time: float) -> tuple[int, float] | None:
    """Find the load target for a point in the run.

    Args:
        stages: Stages run back to back.
        run_time: Seconds since the run started.

    Returns:
        (users, spawn_rate) of the active stage, or None once every stage
        has elapsed.
    """
    elapsed = 0.0
    for stage in stages:
        elapsed += stage.duration_sec
        if run_time < elapsed:
            return stage.users, stage.spawn_rate
    return None


def total_duration(stages: Sequence[Stage]) -> float:
    return sum(stage.duration_sec for stage in stages)


def constant_target(
    users: int, spawn_rate: float, run_time_sec: float, elapsed: float
) -> tuple[int, float] | None:
    """Hold a fixed user count until the run time has elapsed.

    Returns:
        (users, spawn_rate) while the run is active, then None.
    """
    if elapsed < run_time_sec:
        return users, spawn_rate
    return None
