"""Typed domain models shared across runtime layers.

This module provides the immutable data contracts that flow between the job
submitter, the poll orchestrator and the API surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

JobHandle = str


class ExecutionStatus(str, Enum):
    """Lifecycle states reported for one workflow orchestration."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class JobRequest:
    """One invocation request for the remote workflow service.

    Attributes:
        target_id: Remote workflow identifier.
        parameters: Workflow input parameters.
        execute_asynchronously: Whether the remote service should return before completion.
        connector_id: Optional remote connector identifier passed through unchanged.
    """

    target_id: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    execute_asynchronously: bool = False
    connector_id: str | None = None


@dataclass(frozen=True)
class PollAttempt:
    """Accounting record for one status query.

    Attributes:
        sequence_number: One-based poll counter.
        elapsed_seconds: Seconds since orchestration start when the poll was issued.
        raw_status: Status string reported by the remote service, or an inconclusive marker.
    """

    sequence_number: int
    elapsed_seconds: float
    raw_status: str


@dataclass(frozen=True)
class JobStatusSnapshot:
    """Parsed result of one status query.

    Attributes:
        handle: Job handle the query was issued for.
        raw_status: Status string exactly as reported upstream.
        status: Classified status (`pending`, `succeeded` or `failed`).
        normalized_output: Unwrapped output when the payload carried one.
        raw_response: Parsed status-query payload.
        debug_url: Optional upstream debug trace URL.
        error_message: Failure message when status is `failed`.
    """

    handle: JobHandle
    raw_status: str
    status: ExecutionStatus
    normalized_output: Any
    raw_response: Any
    debug_url: str | None
    error_message: str | None

    def snapshot_is_terminal(self) -> bool:
        """Return whether polling should stop for this snapshot."""

        return self.status in (ExecutionStatus.SUCCEEDED, ExecutionStatus.FAILED)


@dataclass(frozen=True)
class ExecutionOutcome:
    """Terminal result of one execute-and-wait orchestration.

    Attributes:
        succeeded: True only when the remote job finished successfully.
        status: Terminal status (`succeeded`, `failed` or `timed_out`).
        normalized_output: Unwrapped job output, None on timeout or when absent.
        raw_response: Last raw payload received from the remote service.
        debug_url: Optional upstream debug trace URL.
        elapsed_seconds: Seconds spent waiting for completion.
        attempts: Number of status queries issued.
        error_message: Failure description for failed and timed-out outcomes.
        handle: Job handle, kept so callers can query again out-of-band.
        diagnostics: Structured stage timeline captured during orchestration.
    """

    succeeded: bool
    status: ExecutionStatus
    normalized_output: Any
    raw_response: Any
    debug_url: str | None
    elapsed_seconds: float
    attempts: int
    error_message: str | None
    handle: JobHandle | None = None
    diagnostics: list[dict[str, object]] = field(default_factory=list)

    def outcome_to_payload(self) -> dict[str, object]:
        """Serialize outcome to a JSON-compatible payload.

        Returns:
            dict[str, object]: Stable response payload for API and CLI surfaces.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return {
            "success": self.succeeded,
            "status": self.status.value,
            "execute_id": self.handle,
            "output": self.normalized_output,
            "raw_response": self.raw_response,
            "debug_url": self.debug_url,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "attempts": self.attempts,
            "error": self.error_message,
            "diagnostics": self.diagnostics,
        }
