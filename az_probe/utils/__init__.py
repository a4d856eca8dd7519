"""Utility functions for the AZ probe."""

from az_probe.utils.durations import parse_duration

__all__ = ["parse_duration"]
