"""Response validation and AZ attribution for one probe iteration.

Each iteration runs the same pipeline:

1. Fetch the target URL (transport faults end the iteration).
2. Evaluate every check: status_ok, body_present, is_json.
3. Only if all checks pass, parse the body as JSON.
4. If the body carries a non-empty "az", record one observation tagged
   with that value.

The probe is stateless across iterations. Its only outputs are check
reports and at most one metric increment, both written through narrow
sink interfaces so the load runtime and tests can supply their own.
"""

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from requests.structures import CaseInsensitiveDict

from az_probe.core.exceptions import (
    IntegrityError,
    ProbeError,
    TransportError,
    ValidationFailedError,
)
from az_probe.core.logging import get_logger
from az_probe.core.metrics import AZ_RESPONSES, CHECK_RESULTS, PROBE_OUTCOMES

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
AZ_FIELD = "az"


class ProbeOutcome(str, Enum):
    """Terminal state of one probe iteration."""

    TRANSPORT_FAILED = "transport_failed"
    VALIDATION_FAILED = "validation_failed"
    PARSE_FAILED = "parse_failed"
    OBSERVATION_RECORDED = "observation_recorded"
    NO_AZ_FIELD = "no_az_field"

    @property
    def is_failure(self) -> bool:
        """Whether the load runtime should count the iteration as failed."""
        return self in (
            ProbeOutcome.TRANSPORT_FAILED,
            ProbeOutcome.VALIDATION_FAILED,
            ProbeOutcome.PARSE_FAILED,
        )


@dataclass(frozen=True)
class ProbeResponse:
    """Read-only view of an HTTP response.

    Attributes:
        status_code: HTTP status code.
        headers: Header mapping with case-insensitive lookup.
        body: Raw body bytes, or None when the response had no body.
    """

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes | None = None

    @classmethod
    def build(
        cls,
        status_code: int,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> "ProbeResponse":
        """Create a response from plain values, encoding str bodies as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(
            status_code=status_code,
            headers=CaseInsensitiveDict(headers or {}),
            body=body,
        )

    @classmethod
    def from_response(cls, response: Any) -> "ProbeResponse":
        """Adapt a requests-style response (requests, locust).

        Raises:
            TransportError: If the client recorded a transport failure
                instead of receiving a response.
        """
        error = getattr(response, "error", None)
        if error is not None and not response.status_code:
            raise TransportError(str(error) or type(error).__name__, cause=error)
        return cls(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers or {}),
            body=response.content,
        )


@dataclass(frozen=True)
class CheckResult:
    """Pass/fail result of one named check."""

    name: str
    passed: bool


@dataclass
class ProbeResult:
    """Everything one iteration produced.

    Attributes:
        outcome: Terminal state reached.
        checks: Check results in evaluation order (empty on transport failure).
        az: Recorded AZ label, set only for OBSERVATION_RECORDED.
        error: The probe fault behind a failed outcome.
    """

    outcome: ProbeOutcome
    checks: list[CheckResult] = field(default_factory=list)
    az: str | None = None
    error: ProbeError | None = None

    @property
    def ok(self) -> bool:
        """True when the iteration did not end in a fault."""
        return not self.outcome.is_failure

    @property
    def reason(self) -> str:
        """Human-readable failure reason, empty for successful iterations."""
        return self.error.message if self.error is not None else ""


class MetricSink(Protocol):
    """Write-only destination for AZ observations."""

    def record(self, az: str) -> None: ...


class CheckReporter(Protocol):
    """Write-only destination for per-check results."""

    def report(self, check: str, passed: bool) -> None: ...


class PrometheusMetricSink:
    """Adds each observation to the process-wide az_responses counter."""

    def record(self, az: str) -> None:
        AZ_RESPONSES.labels(az=az).inc()


class PrometheusCheckReporter:
    """Counts check outcomes per check name."""

    def report(self, check: str, passed: bool) -> None:
        CHECK_RESULTS.labels(check=check, result="pass" if passed else "fail").inc()


def _status_ok(response: ProbeResponse) -> bool:
    return response.status_code == 200


def _body_present(response: ProbeResponse) -> bool:
    return response.body is not None and len(response.body) > 0


def _is_json(response: ProbeResponse) -> bool:
    content_type = response.headers.get("Content-Type")
    return bool(content_type) and JSON_CONTENT_TYPE in content_type


CHECKS: tuple[tuple[str, Callable[[ProbeResponse], bool]], ...] = (
    ("status_ok", _status_ok),
    ("body_present", _body_present),
    ("is_json", _is_json),
)


def evaluate_checks(response: ProbeResponse) -> list[CheckResult]:
    """Evaluate every check against a response.

    All checks run regardless of earlier failures so that diagnostics
    stay granular.

    Args:
        response: Response to validate.

    Returns:
        One CheckResult per check, in a fixed order.
    """
    return [CheckResult(name=name, passed=predicate(response)) for name, predicate in CHECKS]


def extract_az(body: bytes | str) -> str | None:
    """Parse a JSON body and return its AZ label.

    Args:
        body: Response body that passed validation.

    Returns:
        The "az" value when it is a non-empty string, otherwise None.

    Raises:
        IntegrityError: If the body is not valid JSON, including bodies
            nested too deeply to decode.
    """
    try:
        payload = json.loads(body)
    except (ValueError, RecursionError) as e:
        raise IntegrityError(f"Invalid JSON body: {e}") from e

    if not isinstance(payload, dict):
        return None
    az = payload.get(AZ_FIELD)
    if isinstance(az, str) and az:
        return az
    return None


class AZProbe:
    """Runs the request-check-attribute cycle for one iteration at a time.

    Instances hold no per-iteration state, so one probe can be shared by
    any number of concurrent users.
    """

    def __init__(
        self,
        sink: MetricSink | None = None,
        reporter: CheckReporter | None = None,
    ) -> None:
        """Initialize AZProbe.

        Args:
            sink: Destination for AZ observations (Prometheus by default).
            reporter: Destination for check results (Prometheus by default).
        """
        self._sink = sink if sink is not None else PrometheusMetricSink()
        self._reporter = reporter if reporter is not None else PrometheusCheckReporter()

    def run(self, fetch: Callable[[], ProbeResponse]) -> ProbeResult:
        """Fetch a response and evaluate it.

        Args:
            fetch: Performs the GET request. Raises TransportError when no
                response could be obtained.

        Returns:
            ProbeResult for the iteration.
        """
        try:
            response = fetch()
        except TransportError as e:
            logger.debug("Probe transport failure", error=e.message)
            return self._finish(ProbeResult(outcome=ProbeOutcome.TRANSPORT_FAILED, error=e))
        return self.evaluate(response)

    def evaluate(self, response: ProbeResponse) -> ProbeResult:
        """Validate a response and record an observation if it carries an AZ.

        Args:
            response: Response received for this iteration.

        Returns:
            ProbeResult for the iteration.
        """
        checks = evaluate_checks(response)
        for check in checks:
            self._reporter.report(check.name, check.passed)

        failed = [check.name for check in checks if not check.passed]
        if failed:
            logger.debug(
                "Probe checks failed",
                failed_checks=failed,
                status_code=response.status_code,
            )
            return self._finish(
                ProbeResult(
                    outcome=ProbeOutcome.VALIDATION_FAILED,
                    checks=checks,
                    error=ValidationFailedError(failed),
                )
            )

        try:
            az = extract_az(response.body)
        except IntegrityError as e:
            logger.warning("Probe received malformed JSON", error=e.message)
            return self._finish(
                ProbeResult(outcome=ProbeOutcome.PARSE_FAILED, checks=checks, error=e)
            )

        if az is None:
            return self._finish(ProbeResult(outcome=ProbeOutcome.NO_AZ_FIELD, checks=checks))

        self._sink.record(az)
        return self._finish(
            ProbeResult(outcome=ProbeOutcome.OBSERVATION_RECORDED, checks=checks, az=az)
        )

    @staticmethod
    def _finish(result: ProbeResult) -> ProbeResult:
        PROBE_OUTCOMES.labels(outcome=result.outcome.value).inc()
        return result
