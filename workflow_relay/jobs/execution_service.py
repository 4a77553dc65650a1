"""Caller-facing execute-and-wait service wiring submission and polling."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import math
import time
from typing import Any, Callable, Mapping

from workflow_relay.adapters import (
    HandleMissingError,
    JobStatusReaderPort,
    JobSubmitterPort,
    SubmissionReceipt,
)
from workflow_relay.domain import (
    STAGE_RUN,
    ExecutionOutcome,
    ExecutionStatus,
    JobHandle,
    JobRequest,
    JobStatusSnapshot,
    domain_build_stage_event,
    domain_unwrap_response,
)

from .interfaces import CompletionWaiterPort, WorkflowExecutionPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_WAIT_SECONDS = 60.0


@dataclass(frozen=True)
class WorkflowExecutionServiceConfig:
    """Configuration values for caller-facing execution.

    Attributes:
        max_wait_seconds_limit: Upper bound applied to caller-supplied wait budgets.
    """

    max_wait_seconds_limit: float = 600.0


class WorkflowExecutionService(WorkflowExecutionPort):
    """Concrete workflow execution service for submit, wait and status operations."""

    def __init__(
        self,
        submitter: JobSubmitterPort,
        completion_waiter: CompletionWaiterPort,
        status_reader: JobStatusReaderPort,
        config: WorkflowExecutionServiceConfig | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize execution service dependencies.

        Args:
            submitter: Adapter submitting jobs.
            completion_waiter: Orchestrator waiting for terminal states.
            status_reader: Adapter reading one status snapshot.
            config: Optional execution configuration.
            clock: Optional monotonic clock provider returning seconds.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if submitter is None:
            raise ValueError("submitter must not be None")
        if completion_waiter is None:
            raise ValueError("completion_waiter must not be None")
        if status_reader is None:
            raise ValueError("status_reader must not be None")
        resolved_config = config or WorkflowExecutionServiceConfig()
        if resolved_config.max_wait_seconds_limit <= 0:
            raise ValueError("config.max_wait_seconds_limit must be > 0")

        self._submitter = submitter
        self._completion_waiter = completion_waiter
        self._status_reader = status_reader
        self._config = resolved_config
        self._clock = clock or time.monotonic

    def job_execute_and_wait(
        self,
        target_id: str,
        parameters: Mapping[str, Any],
        credential: str,
        max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
        execute_asynchronously: bool = False,
        connector_id: str | None = None,
    ) -> ExecutionOutcome:
        """Submit one workflow job and wait for its terminal outcome.

        A synchronous submission that already returned the job output
        short-circuits without polling.

        Args:
            target_id: Remote workflow identifier.
            parameters: Workflow input parameters.
            credential: Bearer credential, already resolved by the caller.
            max_wait_seconds: Overall wait budget, capped by configuration.
            execute_asynchronously: Whether to request asynchronous remote execution.
            connector_id: Optional remote connector identifier.

        Returns:
            ExecutionOutcome: Succeeded, failed or timed-out outcome.

        Raises:
            ValueError: Raised when arguments are invalid.
            UpstreamRejectedError: Raised when submission is rejected.
            MalformedUpstreamResponseError: Raised when submission response is not JSON.
            HandleMissingError: Raised when no handle is available for polling.
            ConnectionError: Raised for submission transport failures.
        """

        if not math.isfinite(max_wait_seconds) or max_wait_seconds < 0:
            raise ValueError("max_wait_seconds must be a finite number >= 0")
        applied_max_wait_seconds = min(float(max_wait_seconds), self._config.max_wait_seconds_limit)

        request = JobRequest(
            target_id=target_id,
            parameters=dict(parameters),
            execute_asynchronously=execute_asynchronously,
            connector_id=connector_id,
        )
        started_at = self._clock()
        receipt = self._submitter.adapter_dispatch_job(request=request, credential=credential)

        if receipt.completed_inline:
            logger.info("Workflow target=%s completed inline without polling", target_id)
            return self._job_build_inline_outcome(receipt=receipt, elapsed_seconds=self._clock() - started_at)

        if receipt.handle is None:
            raise HandleMissingError(
                "Workflow submission response missing execute_id",
                raw_payload=receipt.raw_response,
            )

        outcome = self._completion_waiter.job_wait_for_completion(
            handle=receipt.handle,
            credential=credential,
            max_wait_seconds=applied_max_wait_seconds,
            submission_debug_url=receipt.debug_url,
        )
        run_status = "success" if outcome.succeeded else outcome.status.value
        diagnostics = [
            *receipt.stage_timeline,
            *outcome.diagnostics,
            domain_build_stage_event(stage=STAGE_RUN, status=run_status),
        ]
        return replace(outcome, diagnostics=diagnostics)

    def job_submit(
        self,
        target_id: str,
        parameters: Mapping[str, Any],
        credential: str,
        connector_id: str | None = None,
    ) -> SubmissionReceipt:
        """Submit one asynchronous job and return its handle without waiting.

        Args:
            target_id: Remote workflow identifier.
            parameters: Workflow input parameters.
            credential: Bearer credential.
            connector_id: Optional remote connector identifier.

        Returns:
            SubmissionReceipt: Receipt with non-null handle.

        Raises:
            HandleMissingError: Raised when the response carried no handle.
            UpstreamRejectedError: Raised when submission is rejected.
            MalformedUpstreamResponseError: Raised when submission response is not JSON.
        """

        request = JobRequest(
            target_id=target_id,
            parameters=dict(parameters),
            execute_asynchronously=True,
            connector_id=connector_id,
        )
        return self._submitter.adapter_submit_job(request=request, credential=credential)

    def job_read_status(self, handle: JobHandle, credential: str) -> JobStatusSnapshot:
        """Query the current status of one job once."""

        return self._status_reader.adapter_read_status(handle=handle, credential=credential)

    def _job_build_inline_outcome(self, receipt: SubmissionReceipt, elapsed_seconds: float) -> ExecutionOutcome:
        diagnostics = [
            *receipt.stage_timeline,
            domain_build_stage_event(stage=STAGE_RUN, status="success", details={"completed_inline": True}),
        ]
        return ExecutionOutcome(
            succeeded=True,
            status=ExecutionStatus.SUCCEEDED,
            normalized_output=domain_unwrap_response(receipt.raw_response),
            raw_response=receipt.raw_response,
            debug_url=receipt.debug_url,
            elapsed_seconds=elapsed_seconds,
            attempts=0,
            error_message=None,
            handle=receipt.handle,
            diagnostics=diagnostics,
        )
