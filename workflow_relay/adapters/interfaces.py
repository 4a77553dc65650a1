"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from workflow_relay.domain import JobHandle, JobRequest, JobStatusSnapshot


@dataclass(frozen=True)
class TransportResponse:
    """Raw transport result for one remote call.

    Attributes:
        status_code: HTTP status code.
        body_text: Undecoded response body text.
    """

    status_code: int
    body_text: str

    def response_is_success(self) -> bool:
        """Return whether the transport reported a success status."""

        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class SubmissionReceipt:
    """Result contract for one job submission.

    Attributes:
        handle: Extracted job handle, None when the response carried none.
        raw_response: Parsed submission response payload.
        debug_url: Optional upstream debug trace URL.
        completed_inline: True when the remote call blocked until completion and returned output.
        stage_timeline: Structured stage events captured during submission.
    """

    handle: JobHandle | None
    raw_response: Any
    debug_url: str | None
    completed_inline: bool
    stage_timeline: list[dict[str, Any]] = field(default_factory=list)


class WorkflowTransportPort(Protocol):
    """Port definition for the two remote workflow service calls."""

    def transport_submit_job(self, payload: Mapping[str, Any], credential: str) -> TransportResponse:
        """Send one job submission request.

        Args:
            payload: JSON request body.
            credential: Bearer credential.

        Returns:
            TransportResponse: Raw status code and body text.

        Raises:
            ConnectionError: Raised when the remote service cannot be reached.
            TimeoutError: Raised when the request exceeds the transport timeout.
        """

    def transport_query_job(self, handle: JobHandle, credential: str) -> TransportResponse:
        """Send one job status query.

        Args:
            handle: Job handle to query.
            credential: Bearer credential.

        Returns:
            TransportResponse: Raw status code and body text.

        Raises:
            ConnectionError: Raised when the remote service cannot be reached.
            TimeoutError: Raised when the request exceeds the transport timeout.
        """


class JobSubmitterPort(Protocol):
    """Port definition for submitting jobs and extracting handles."""

    def adapter_dispatch_job(self, request: JobRequest, credential: str) -> SubmissionReceipt:
        """Submit a job; the receipt handle may be None for inline completions."""

    def adapter_submit_job(self, request: JobRequest, credential: str) -> SubmissionReceipt:
        """Submit a job and guarantee a non-null handle on the receipt."""


class JobStatusReaderPort(Protocol):
    """Port definition for reading one job status snapshot."""

    def adapter_read_status(self, handle: JobHandle, credential: str) -> JobStatusSnapshot:
        """Query and parse the current status of one job.

        Args:
            handle: Job handle.
            credential: Bearer credential.

        Returns:
            JobStatusSnapshot: Parsed and classified status.

        Raises:
            MalformedUpstreamResponseError: Raised when the body is not JSON.
            UpstreamRejectedError: Raised for non-success transport status.
            ConnectionError: Raised for transport failures.
        """
