"""End-of-run summary of AZ observations and check outcomes.

Reads the probe counters back out of prometheus_client so the locust run
can print per-AZ totals. Expected AZs are always listed, at zero when
never observed, which makes a silent zone visible in the summary.
"""

from collections.abc import Iterable

from prometheus_client import Counter

from az_probe.core.metrics import AZ_RESPONSES, CHECK_RESULTS, PROBE_OUTCOMES


def _totals(counter: Counter) -> Iterable[tuple[dict[str, str], float]]:
    for metric in counter.collect():
        for sample in metric.samples:
            if sample.name.endswith("_total"):
                yield sample.labels, sample.value


def collect_az_counts(
    expected_azs: Iterable[str] = (),
    counter: Counter = AZ_RESPONSES,
) -> dict[str, int]:
    """Get observation counts per AZ.

    Args:
        expected_azs: AZ labels to include even if never observed.
        counter: Counter to read (the process-wide az_responses by default).

    Returns:
        Mapping of AZ label to count, expected AZs first.
    """
    counts = {az: 0 for az in expected_azs}
    for labels, value in _totals(counter):
        counts[labels["az"]] = int(value)
    return counts


def collect_check_results(counter: Counter = CHECK_RESULTS) -> dict[str, dict[str, int]]:
    """Get pass/fail totals per check name."""
    results: dict[str, dict[str, int]] = {}
    for labels, value in _totals(counter):
        entry = results.setdefault(labels["check"], {"pass": 0, "fail": 0})
        entry[labels["result"]] = int(value)
    return results


def collect_outcomes(counter: Counter = PROBE_OUTCOMES) -> dict[str, int]:
    """Get iteration totals per terminal outcome."""
    return {labels["outcome"]: int(value) for labels, value in _totals(counter)}


def render_summary(
    az_counts: dict[str, int],
    check_results: dict[str, dict[str, int]],
    outcomes: dict[str, int] | None = None,
) -> str:
    """Format the summary as plain text lines."""
    lines = ["checks:"]
    if not check_results:
        lines.append("  (no checks recorded)")
    for name, result in check_results.items():
        mark = "✓" if result["fail"] == 0 else "✗"
        lines.append(f"  {mark} {name:<14} pass={result['pass']} fail={result['fail']}")

    lines.append("az_responses:")
    if not az_counts:
        lines.append("  (no observations)")
    for az, count in sorted(az_counts.items()):
        lines.append(f"  az={az:<20} {count}")

    if outcomes:
        lines.append("iterations:")
        for outcome, count in sorted(outcomes.items()):
            lines.append(f"  {outcome:<22} {count}")

    return "\n".join(lines)
