"""Status-query adapter that parses and classifies one job status response."""

from __future__ import annotations

import logging

from workflow_relay.domain import (
    ExecutionStatus,
    JobHandle,
    JobStatusSnapshot,
    domain_classify_status,
    domain_extract_debug_url,
    domain_extract_error_message,
    domain_extract_raw_status,
    domain_extract_terminal_output,
)

from .interfaces import JobStatusReaderPort, WorkflowTransportPort
from .response_parsing import adapter_parse_json_response

logger = logging.getLogger(__name__)


class WorkflowStatusReader(JobStatusReaderPort):
    """Reader implementation for the remote workflow status endpoint."""

    def __init__(self, transport: WorkflowTransportPort):
        if transport is None:
            raise ValueError("transport must not be None")
        self._transport = transport

    def adapter_read_status(self, handle: JobHandle, credential: str) -> JobStatusSnapshot:
        """Query one job status and build a classified snapshot.

        Output is only unwrapped for terminal states, so pending snapshots
        always carry `normalized_output=None`.

        Args:
            handle: Job handle.
            credential: Bearer credential.

        Returns:
            JobStatusSnapshot: Parsed status snapshot.

        Raises:
            ValueError: Raised when handle is blank.
            UpstreamRejectedError: Raised for non-success transport status.
            MalformedUpstreamResponseError: Raised when the response body is not JSON.
            ConnectionError: Raised for transport failures.
            TimeoutError: Raised for transport timeouts.
        """

        normalized_handle = handle.strip()
        if not normalized_handle:
            raise ValueError("handle must not be blank")

        response = self._transport.transport_query_job(handle=normalized_handle, credential=credential.strip())
        payload = adapter_parse_json_response(response, context_label="status")

        raw_status = domain_extract_raw_status(payload)
        status = domain_classify_status(raw_status)
        normalized_output = None
        error_message = None
        if status in (ExecutionStatus.SUCCEEDED, ExecutionStatus.FAILED):
            normalized_output = domain_extract_terminal_output(payload)
        if status == ExecutionStatus.FAILED:
            error_message = domain_extract_error_message(payload)

        logger.debug("Workflow status execute_id=%s raw_status=%s status=%s", normalized_handle, raw_status, status.value)
        return JobStatusSnapshot(
            handle=normalized_handle,
            raw_status=raw_status,
            status=status,
            normalized_output=normalized_output,
            raw_response=payload,
            debug_url=domain_extract_debug_url(payload),
            error_message=error_message,
        )
