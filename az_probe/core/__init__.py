"""Core components for the AZ probe."""

from az_probe.core.config import Settings, Stage, get_settings
from az_probe.core.exceptions import (
    ConfigurationError,
    IntegrityError,
    InternalError,
    NodeLookupError,
    ProbeError,
    ServiceError,
    TransportError,
    ValidationFailedError,
)

__all__ = [
    "Settings",
    "Stage",
    "get_settings",
    "ServiceError",
    "ProbeError",
    "TransportError",
    "ValidationFailedError",
    "IntegrityError",
    "ConfigurationError",
    "NodeLookupError",
    "InternalError",
]
