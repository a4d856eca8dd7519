"""Parsing for human-readable duration strings."""

import math
import re

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str | float | int) -> float:
    """Convert a duration to seconds.

    Accepts plain numbers (seconds) and unit strings such as "500ms",
    "60s", "1m" or "1h30m", the format used by Kubernetes manifests and
    the locust --run-time flag.

    Args:
        value: Number of seconds or a duration string.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the string is empty, negative, or not a duration.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().replace(" ", "")
        if not text:
            raise ValueError("invalid duration: empty string")
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_components(text)

    if not math.isfinite(seconds):
        raise ValueError(f"invalid duration: {value!r}")
    if seconds < 0:
        raise ValueError(f"invalid duration: {value!r} is negative")
    return seconds


def _parse_components(text: str) -> float:
    position = 0
    total = 0.0
    for match in _COMPONENT.finditer(text):
        if match.start() != position:
            break
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration: {text!r}")
    return total
