"""Poll-until-terminal orchestrator for submitted workflow jobs."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Final

from workflow_relay.adapters import (
    InconclusivePollError,
    JobStatusReaderPort,
    MalformedUpstreamResponseError,
    UpstreamRejectedError,
    WorkflowAdapterConnectionError,
    WorkflowAdapterTimeoutError,
)
from workflow_relay.domain import (
    STAGE_POLL,
    ExecutionOutcome,
    ExecutionStatus,
    JobHandle,
    JobStatusSnapshot,
    PollAttempt,
    domain_build_stage_event,
)

from .interfaces import CompletionWaiterPort

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS: Final[float] = 2.0


class PollUntilTerminalOrchestrator(CompletionWaiterPort):
    """Trigger-then-poll state machine: Polling -> Succeeded | Failed | TimedOut.

    The deadline is checked before every status query and never interrupts a
    query in flight. Inconclusive polls (transport errors, non-success status,
    unparseable bodies) do not change state; by default they are retried until
    the deadline, optionally capped by `max_consecutive_inconclusive_polls`.
    """

    def __init__(
        self,
        status_reader: JobStatusReaderPort,
        max_consecutive_inconclusive_polls: int | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        """Initialize poll orchestrator.

        Args:
            status_reader: Adapter reading one job status snapshot.
            max_consecutive_inconclusive_polls: Optional fail-fast cap; None retries until deadline.
            clock: Optional monotonic clock provider returning seconds.
            sleep: Optional sleep function used between polls.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if status_reader is None:
            raise ValueError("status_reader must not be None")
        if max_consecutive_inconclusive_polls is not None and max_consecutive_inconclusive_polls < 1:
            raise ValueError("max_consecutive_inconclusive_polls must be >= 1 when set")

        self._status_reader = status_reader
        self._max_consecutive_inconclusive_polls = max_consecutive_inconclusive_polls
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep

    def job_wait_for_completion(
        self,
        handle: JobHandle,
        credential: str,
        max_wait_seconds: float,
        submission_debug_url: str | None = None,
    ) -> ExecutionOutcome:
        """Poll one job until a terminal status or deadline expiry.

        Args:
            handle: Job handle.
            credential: Bearer credential.
            max_wait_seconds: Overall wait budget in seconds.
            submission_debug_url: Debug URL from the submission response, used when polls carry none.

        Returns:
            ExecutionOutcome: Terminal outcome; timed-out outcomes keep handle, attempts and debug URL.

        Raises:
            ValueError: Raised when handle is blank or max_wait_seconds is negative or not finite.
        """

        normalized_handle = handle.strip()
        if not normalized_handle:
            raise ValueError("handle must not be blank")
        if not math.isfinite(max_wait_seconds) or max_wait_seconds < 0:
            raise ValueError("max_wait_seconds must be a finite number >= 0")

        timeline: list[dict[str, object]] = [
            domain_build_stage_event(
                stage=STAGE_POLL,
                status="started",
                details={"execute_id": normalized_handle, "max_wait_seconds": max_wait_seconds},
            )
        ]
        started_at = self._clock()
        attempts = 0
        consecutive_inconclusive = 0
        last_raw_response: object = None
        last_debug_url = submission_debug_url

        while True:
            elapsed_seconds = self._clock() - started_at
            if elapsed_seconds > max_wait_seconds:
                logger.warning(
                    "Workflow execute_id=%s timed out after %.1fs and %s polls",
                    normalized_handle,
                    elapsed_seconds,
                    attempts,
                )
                timeline.append(
                    domain_build_stage_event(
                        stage=STAGE_POLL,
                        status="timed_out",
                        details={"attempts": attempts, "elapsed_seconds": round(elapsed_seconds, 3)},
                    )
                )
                return ExecutionOutcome(
                    succeeded=False,
                    status=ExecutionStatus.TIMED_OUT,
                    normalized_output=None,
                    raw_response=last_raw_response,
                    debug_url=last_debug_url,
                    elapsed_seconds=elapsed_seconds,
                    attempts=attempts,
                    error_message=f"workflow did not complete within {max_wait_seconds:g} seconds",
                    handle=normalized_handle,
                    diagnostics=timeline,
                )

            attempts += 1
            try:
                snapshot = self._job_poll_once(handle=normalized_handle, credential=credential)
            except InconclusivePollError as error:
                consecutive_inconclusive += 1
                attempt = PollAttempt(
                    sequence_number=attempts,
                    elapsed_seconds=elapsed_seconds,
                    raw_status="inconclusive",
                )
                self._job_record_inconclusive(attempt=attempt, error=error, timeline=timeline)
                if (
                    self._max_consecutive_inconclusive_polls is not None
                    and consecutive_inconclusive >= self._max_consecutive_inconclusive_polls
                ):
                    return self._job_build_inconclusive_failure(
                        handle=normalized_handle,
                        error=error,
                        elapsed_seconds=self._clock() - started_at,
                        attempts=attempts,
                        debug_url=last_debug_url,
                        timeline=timeline,
                    )
                self._sleep(POLL_INTERVAL_SECONDS)
                continue

            consecutive_inconclusive = 0
            attempt = PollAttempt(
                sequence_number=attempts,
                elapsed_seconds=elapsed_seconds,
                raw_status=snapshot.raw_status,
            )
            last_raw_response = snapshot.raw_response
            last_debug_url = snapshot.debug_url or last_debug_url
            logger.info(
                "Workflow execute_id=%s poll=%s elapsed=%.1fs status=%s",
                normalized_handle,
                attempt.sequence_number,
                attempt.elapsed_seconds,
                attempt.raw_status,
            )

            if snapshot.snapshot_is_terminal():
                return self._job_build_terminal_outcome(
                    snapshot=snapshot,
                    elapsed_seconds=self._clock() - started_at,
                    attempts=attempts,
                    debug_url=last_debug_url,
                    timeline=timeline,
                )

            self._sleep(POLL_INTERVAL_SECONDS)

    def _job_poll_once(self, handle: JobHandle, credential: str) -> JobStatusSnapshot:
        """Issue one status query, folding transient faults into `InconclusivePollError`.

        Raises:
            InconclusivePollError: Raised when the query produced no usable status.
        """

        try:
            return self._status_reader.adapter_read_status(handle=handle, credential=credential)
        except (
            MalformedUpstreamResponseError,
            UpstreamRejectedError,
            WorkflowAdapterConnectionError,
            WorkflowAdapterTimeoutError,
        ) as error:
            raise InconclusivePollError(str(error), raw_payload=error.raw_payload) from error

    def _job_record_inconclusive(
        self,
        attempt: PollAttempt,
        error: InconclusivePollError,
        timeline: list[dict[str, object]],
    ) -> None:
        cause = error.__cause__ if error.__cause__ is not None else error
        logger.warning(
            "Inconclusive poll %s at %.1fs: %s",
            attempt.sequence_number,
            attempt.elapsed_seconds,
            error,
        )
        timeline.append(
            domain_build_stage_event(
                stage=STAGE_POLL,
                status="retrying",
                details={
                    "poll_attempt": attempt.sequence_number,
                    "error_type": type(cause).__name__,
                    "error_message": str(error),
                },
            )
        )

    def _job_build_terminal_outcome(
        self,
        snapshot: JobStatusSnapshot,
        elapsed_seconds: float,
        attempts: int,
        debug_url: str | None,
        timeline: list[dict[str, object]],
    ) -> ExecutionOutcome:
        """Build the outcome for a succeeded or failed snapshot.

        Args:
            snapshot: Terminal status snapshot.
            elapsed_seconds: Seconds since orchestration start.
            attempts: Number of polls issued.
            debug_url: Resolved debug URL (poll response wins over submission).
            timeline: Mutable stage timeline.

        Returns:
            ExecutionOutcome: Terminal outcome.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        succeeded = snapshot.status == ExecutionStatus.SUCCEEDED
        timeline.append(
            domain_build_stage_event(
                stage=STAGE_POLL,
                status="completed" if succeeded else "failed",
                details={"attempts": attempts, "raw_status": snapshot.raw_status},
            )
        )
        if not succeeded:
            logger.warning("Workflow execute_id=%s failed: %s", snapshot.handle, snapshot.error_message)
        return ExecutionOutcome(
            succeeded=succeeded,
            status=snapshot.status,
            normalized_output=snapshot.normalized_output,
            raw_response=snapshot.raw_response,
            debug_url=debug_url,
            elapsed_seconds=elapsed_seconds,
            attempts=attempts,
            error_message=snapshot.error_message,
            handle=snapshot.handle,
            diagnostics=timeline,
        )

    def _job_build_inconclusive_failure(
        self,
        handle: JobHandle,
        error: InconclusivePollError,
        elapsed_seconds: float,
        attempts: int,
        debug_url: str | None,
        timeline: list[dict[str, object]],
    ) -> ExecutionOutcome:
        timeline.append(
            domain_build_stage_event(
                stage=STAGE_POLL,
                status="failed",
                details={"attempts": attempts, "reason": "too_many_inconclusive_polls"},
            )
        )
        return ExecutionOutcome(
            succeeded=False,
            status=ExecutionStatus.FAILED,
            normalized_output=None,
            raw_response=error.raw_payload,
            debug_url=debug_url,
            elapsed_seconds=elapsed_seconds,
            attempts=attempts,
            error_message=(
                f"status polling gave up after {self._max_consecutive_inconclusive_polls} "
                f"consecutive inconclusive polls: {error}"
            ),
            handle=handle,
            diagnostics=timeline,
        )
