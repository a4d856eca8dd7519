"""Unit tests for custom exception classes.

Tests cover exception initialization, error response formatting,
and the exception hierarchy.
"""

from az_probe.core.exceptions import (
    ConfigurationError,
    ErrorStatus,
    IntegrityError,
    InternalError,
    NodeLookupError,
    ProbeError,
    ServiceError,
    TransportError,
    ValidationFailedError,
)


class TestServiceError:
    """Tests for ServiceError base exception."""

    def test_service_error_initialization_with_defaults(self):
        error = ServiceError(message="Something went wrong")

        assert error.message == "Something went wrong"
        assert error.code == 500
        assert error.status == ErrorStatus.INTERNAL
        assert error.details == []

    def test_service_error_to_dict(self):
        """ServiceError.to_dict() formats error as Google API response."""
        error = ServiceError(
            message="Test error",
            code=412,
            status=ErrorStatus.FAILED_PRECONDITION,
            details=[{"field": "target_url"}],
        )

        assert error.to_dict() == {
            "error": {
                "code": 412,
                "message": "Test error",
                "status": "FAILED_PRECONDITION",
                "details": [{"field": "target_url"}],
            }
        }

    def test_service_error_is_exception(self):
        error = ServiceError(message="Test")

        assert isinstance(error, Exception)
        assert str(error) == "Test"


class TestTransportError:
    """Tests for TransportError."""

    def test_transport_error_defaults(self):
        error = TransportError("Connection refused")

        assert error.code == 503
        assert error.status == ErrorStatus.UNAVAILABLE
        assert error.details == []
        assert error.cause is None

    def test_transport_error_records_cause_type(self):
        cause = TimeoutError("read timed out")
        error = TransportError("read timed out", cause=cause)

        assert error.cause is cause
        assert error.details == [{"error_type": "TimeoutError"}]


class TestValidationFailedError:
    """Tests for ValidationFailedError."""

    def test_message_lists_failed_checks(self):
        error = ValidationFailedError(["status_ok", "is_json"])

        assert error.message == "Checks failed: status_ok, is_json"
        assert error.failed_checks == ["status_ok", "is_json"]
        assert error.status == ErrorStatus.FAILED_PRECONDITION

    def test_details_have_one_entry_per_check(self):
        error = ValidationFailedError(["body_present"])

        assert error.to_dict()["error"]["details"] == [{"check": "body_present"}]


class TestIntegrityError:
    """Tests for IntegrityError."""

    def test_integrity_error_defaults(self):
        error = IntegrityError()

        assert error.message == "Response body is not valid JSON"
        assert error.status == ErrorStatus.DATA_LOSS


class TestServiceSideErrors:
    """Tests for errors raised by the AZ reporting service."""

    def test_configuration_error(self):
        error = ConfigurationError("NODE_NAME environment variable not set")

        assert error.code == 500
        assert error.status == ErrorStatus.FAILED_PRECONDITION

    def test_node_lookup_error(self):
        error = NodeLookupError("failed to get node", details=[{"node": "w1"}])

        assert error.code == 503
        assert error.to_dict()["error"]["details"] == [{"node": "w1"}]

    def test_internal_error_default_message(self):
        error = InternalError()

        assert error.message == "An internal error occurred"
        assert error.to_dict()["error"]["status"] == "INTERNAL"


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_probe_faults_inherit_from_probe_error(self):
        assert issubclass(TransportError, ProbeError)
        assert issubclass(ValidationFailedError, ProbeError)
        assert issubclass(IntegrityError, ProbeError)
        assert issubclass(ProbeError, ServiceError)

    def test_service_errors_are_not_probe_errors(self):
        assert not issubclass(ConfigurationError, ProbeError)
        assert not issubclass(NodeLookupError, ProbeError)

    def test_error_status_values_match_names(self):
        assert [status.value for status in ErrorStatus] == [
            "FAILED_PRECONDITION",
            "UNAVAILABLE",
            "DATA_LOSS",
            "INTERNAL",
        ]
