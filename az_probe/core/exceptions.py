"""Custom exception classes following Google Cloud API error model.

Two families live here: probe faults, which describe why a single load
iteration did not yield an AZ observation, and service errors raised by
the AZ reporting service and mapped to HTTP responses.

Reference: https://cloud.google.com/apis/design/errors
"""

from enum import Enum
from typing import Any


class ErrorStatus(str, Enum):
    """Standard error status codes following Google API conventions."""

    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    UNAVAILABLE = "UNAVAILABLE"
    DATA_LOSS = "DATA_LOSS"
    INTERNAL = "INTERNAL"


class ServiceError(Exception):
    """Base exception for all service errors.

    Attributes:
        message: Human-readable error description.
        code: HTTP status code.
        status: Error status following Google API conventions.
        details: Additional error details.
    """

    def __init__(
        self,
        message: str,
        code: int = 500,
        status: ErrorStatus = ErrorStatus.INTERNAL,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize ServiceError.

        Args:
            message: Human-readable error description.
            code: HTTP status code.
            status: Error status enum value.
            details: Optional list of additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to Google API error response format.

        Returns:
            Dictionary following Google Cloud API error format.
        """
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status.value,
                "details": self.details,
            }
        }


class ProbeError(ServiceError):
    """Base exception for faults local to one probe iteration.

    Probe errors never leave the iteration that produced them; the probe
    converts them into a ProbeResult and the load runtime counts the
    iteration as failed.
    """


class TransportError(ProbeError):
    """Exception for connection, timeout, or TLS failures.

    No response exists, so no checks are evaluated and nothing is parsed.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        """Initialize TransportError.

        Args:
            message: Description of the transport failure.
            cause: Underlying client exception, if any.
        """
        details = []
        if cause is not None:
            details.append({"error_type": type(cause).__name__})
        super().__init__(
            message=message,
            code=503,
            status=ErrorStatus.UNAVAILABLE,
            details=details,
        )
        self.cause = cause


class ValidationFailedError(ProbeError):
    """Exception when one or more response checks fail.

    Attributes:
        failed_checks: Names of the checks that did not pass.
    """

    def __init__(self, failed_checks: list[str]) -> None:
        """Initialize ValidationFailedError.

        Args:
            failed_checks: Names of the failed checks, in evaluation order.
        """
        super().__init__(
            message=f"Checks failed: {', '.join(failed_checks)}",
            code=502,
            status=ErrorStatus.FAILED_PRECONDITION,
            details=[{"check": name} for name in failed_checks],
        )
        self.failed_checks = failed_checks


class IntegrityError(ProbeError):
    """Exception when a body that passed validation is not valid JSON."""

    def __init__(self, message: str = "Response body is not valid JSON") -> None:
        """Initialize IntegrityError.

        Args:
            message: Description of the parse failure.
        """
        super().__init__(
            message=message,
            code=502,
            status=ErrorStatus.DATA_LOSS,
        )


class ConfigurationError(ServiceError):
    """Exception for missing or unusable configuration at startup."""

    def __init__(self, message: str) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Which setting is missing or invalid.
        """
        super().__init__(
            message=message,
            code=500,
            status=ErrorStatus.FAILED_PRECONDITION,
        )


class NodeLookupError(ServiceError):
    """Exception when the Kubernetes API node lookup fails.

    Note: This exception is caught by the metadata refresher, which keeps
    the last known values and records the error text.
    """

    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize NodeLookupError.

        Args:
            message: Description of the lookup failure.
            details: Optional additional details about the failure.
        """
        super().__init__(
            message=message,
            code=503,
            status=ErrorStatus.UNAVAILABLE,
            details=details,
        )


class InternalError(ServiceError):
    """Exception for unexpected internal errors.

    Used as a catch-all for unhandled exceptions. Internal details
    should not be exposed to clients.
    """

    def __init__(
        self,
        message: str = "An internal error occurred",
    ) -> None:
        """Initialize InternalError.

        Args:
            message: Generic error message (avoid exposing internals).
        """
        super().__init__(
            message=message,
            code=500,
            status=ErrorStatus.INTERNAL,
        )
