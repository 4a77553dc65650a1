"""Typed interfaces for job-layer orchestration responsibilities."""

from typing import Any, Mapping, Protocol

from workflow_relay.adapters import SubmissionReceipt
from workflow_relay.domain import ExecutionOutcome, JobHandle, JobStatusSnapshot


class CompletionWaiterPort(Protocol):
    """Port definition for waiting on one submitted job."""

    def job_wait_for_completion(
        self,
        handle: JobHandle,
        credential: str,
        max_wait_seconds: float,
        submission_debug_url: str | None = None,
    ) -> ExecutionOutcome:
        """Poll one job until it reaches a terminal state or the deadline expires.

        Args:
            handle: Job handle.
            credential: Bearer credential.
            max_wait_seconds: Overall wait budget.
            submission_debug_url: Debug URL captured at submission.

        Returns:
            ExecutionOutcome: Succeeded, failed or timed-out outcome.

        Raises:
            ValueError: Raised when arguments are invalid.
        """


class WorkflowExecutionPort(Protocol):
    """Port definition for the caller-facing workflow operations."""

    def job_execute_and_wait(
        self,
        target_id: str,
        parameters: Mapping[str, Any],
        credential: str,
        max_wait_seconds: float = 60.0,
        execute_asynchronously: bool = False,
        connector_id: str | None = None,
    ) -> ExecutionOutcome:
        """Submit one workflow job and wait for its terminal outcome.

        Raises:
            WorkflowAdapterError: Raised for fatal submission-phase faults.
        """

    def job_submit(
        self,
        target_id: str,
        parameters: Mapping[str, Any],
        credential: str,
        connector_id: str | None = None,
    ) -> SubmissionReceipt:
        """Submit one asynchronous workflow job without waiting.

        Raises:
            WorkflowAdapterError: Raised for fatal submission-phase faults.
        """

    def job_read_status(self, handle: JobHandle, credential: str) -> JobStatusSnapshot:
        """Query the current status of one job once.

        Raises:
            WorkflowAdapterError: Raised when the status query fails.
        """
