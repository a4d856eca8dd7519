"""Availability-zone probe: load iterations that tally which AZ answered,
plus the AZ reporting service they target."""

__version__ = "0.1.0"
