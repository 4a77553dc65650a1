"""Project-native typed exceptions for remote workflow adapter failures."""

from __future__ import annotations

from typing import Any


class WorkflowAdapterError(Exception):
    """Base exception for adapter-level workflow service failures.

    Attributes:
        error_code: Deterministic error code used by API fault payloads.
        raw_payload: Raw upstream text or parsed payload kept for diagnostics.
    """

    default_error_code = "WORKFLOW_ADAPTER_ERROR"

    def __init__(self, message: str, raw_payload: Any = None, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code or self.default_error_code
        self.raw_payload = raw_payload


class WorkflowAdapterConnectionError(WorkflowAdapterError, ConnectionError):
    """Transport-level connectivity failure while talking to the workflow service."""

    default_error_code = "UPSTREAM_CONNECTION_ERROR"


class WorkflowAdapterTimeoutError(WorkflowAdapterError, TimeoutError):
    """Transport timeout while waiting for one workflow service response."""

    default_error_code = "UPSTREAM_TIMEOUT"


class MalformedUpstreamResponseError(WorkflowAdapterError, ValueError):
    """Upstream response body could not be parsed as JSON."""

    default_error_code = "MALFORMED_UPSTREAM_RESPONSE"


class UpstreamRejectedError(WorkflowAdapterError, ValueError):
    """Upstream answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code reported by the transport.
    """

    default_error_code = "UPSTREAM_REJECTED"

    def __init__(self, message: str, status_code: int, raw_payload: Any = None):
        super().__init__(message=message, raw_payload=raw_payload)
        self.status_code = status_code


class HandleMissingError(WorkflowAdapterError, ValueError):
    """Submission response did not carry a job handle at any known location."""

    default_error_code = "HANDLE_MISSING"


class InconclusivePollError(WorkflowAdapterError, RuntimeError):
    """One status query produced no usable status; retried within the wait budget."""

    default_error_code = "INCONCLUSIVE_POLL"
