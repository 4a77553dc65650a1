"""Job submission adapter: builds run payloads and extracts job handles."""

from __future__ import annotations

import logging
from typing import Any, Final

from workflow_relay.domain import (
    STAGE_SUBMIT,
    ExecutionStatus,
    JobHandle,
    JobRequest,
    domain_build_stage_event,
    domain_classify_status,
    domain_read_record_status,
)

from .interfaces import JobSubmitterPort, SubmissionReceipt, WorkflowTransportPort
from .response_parsing import adapter_parse_json_response
from .workflow_errors import HandleMissingError

logger = logging.getLogger(__name__)

HANDLE_FIELD: Final[str] = "execute_id"
RESULT_ENVELOPE_FIELD: Final[str] = "data"
ALTERNATE_HANDLE_FIELDS: Final[tuple[str, ...]] = ("executeId", "execution_id", "id")


def adapter_mask_credential(credential: str) -> str:
    """Return a log-safe credential prefix."""

    return f"{credential[:6]}..." if len(credential) > 6 else "***"


def adapter_build_run_payload(request: JobRequest) -> dict[str, Any]:
    """Build the remote run payload for one job request.

    Args:
        request: Job request.

    Returns:
        dict[str, Any]: JSON body for the submission endpoint.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload: dict[str, Any] = {
        "workflow_id": request.target_id,
        "parameters": dict(request.parameters),
    }
    if request.execute_asynchronously:
        payload["is_async"] = True
    if request.connector_id:
        payload["connector_id"] = request.connector_id
    return payload


def adapter_extract_handle(response_payload: Any) -> JobHandle | None:
    """Find the job handle in a submission response.

    Candidates are checked in order: top-level `execute_id`, `data.execute_id`,
    then the alternate spellings under `data`.

    Args:
        response_payload: Parsed submission response.

    Returns:
        JobHandle | None: First non-blank candidate, or None.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not isinstance(response_payload, dict):
        return None

    candidates: list[Any] = [response_payload.get(HANDLE_FIELD)]
    envelope = response_payload.get(RESULT_ENVELOPE_FIELD)
    if isinstance(envelope, dict):
        candidates.append(envelope.get(HANDLE_FIELD))
        candidates.extend(envelope.get(field_name) for field_name in ALTERNATE_HANDLE_FIELDS)

    for candidate in candidates:
        if isinstance(candidate, bool) or candidate is None:
            continue
        if isinstance(candidate, (str, int)) and str(candidate).strip():
            return str(candidate).strip()
    return None


def adapter_response_completed_inline(request: JobRequest, response_payload: Any) -> bool:
    """Return whether a synchronous submission already carries the job output.

    Args:
        request: Submitted job request.
        response_payload: Parsed submission response.

    Returns:
        bool: True for synchronous requests whose `data` holds more than an identifier envelope
            and whose embedded status, when present, already reports success.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if request.execute_asynchronously or not isinstance(response_payload, dict):
        return False
    data_value = response_payload.get(RESULT_ENVELOPE_FIELD)
    if data_value is None or data_value in ("", {}, []):
        return False
    if isinstance(data_value, dict):
        identifier_fields = {HANDLE_FIELD, *ALTERNATE_HANDLE_FIELDS}
        if set(data_value.keys()) <= identifier_fields:
            return False
        embedded_status = domain_read_record_status(data_value)
        if embedded_status is not None:
            return domain_classify_status(embedded_status) == ExecutionStatus.SUCCEEDED
    return True


class WorkflowJobSubmitter(JobSubmitterPort):
    """Submitter implementation for the remote workflow run endpoint."""

    def __init__(self, transport: WorkflowTransportPort):
        """Initialize job submitter.

        Args:
            transport: Remote workflow transport.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when transport is None.
        """

        if transport is None:
            raise ValueError("transport must not be None")
        self._transport = transport

    def adapter_dispatch_job(self, request: JobRequest, credential: str) -> SubmissionReceipt:
        """Submit one job and return a receipt whose handle may be None.

        Args:
            request: Job request.
            credential: Bearer credential.

        Returns:
            SubmissionReceipt: Parsed submission result.

        Raises:
            ValueError: Raised when request target or credential is blank.
            UpstreamRejectedError: Raised for non-success transport status.
            MalformedUpstreamResponseError: Raised when the response body is not JSON.
            ConnectionError: Raised for transport failures.
            TimeoutError: Raised for transport timeouts.
        """

        normalized_target_id = request.target_id.strip()
        normalized_credential = credential.strip()
        if not normalized_target_id:
            raise ValueError("request.target_id must not be blank")
        if not normalized_credential:
            raise ValueError("credential must not be blank")

        stage_timeline: list[dict[str, Any]] = [
            domain_build_stage_event(
                stage=STAGE_SUBMIT,
                status="started",
                details={"target_id": normalized_target_id, "async": request.execute_asynchronously},
            )
        ]
        run_payload = adapter_build_run_payload(request)
        run_payload["workflow_id"] = normalized_target_id
        logger.info(
            "Submitting workflow target=%s async=%s credential=%s",
            normalized_target_id,
            request.execute_asynchronously,
            adapter_mask_credential(normalized_credential),
        )

        response = self._transport.transport_submit_job(payload=run_payload, credential=normalized_credential)
        response_payload = adapter_parse_json_response(response, context_label="submit")

        handle = adapter_extract_handle(response_payload)
        completed_inline = adapter_response_completed_inline(request, response_payload)
        debug_url = response_payload.get("debug_url") if isinstance(response_payload, dict) else None
        stage_timeline.append(
            domain_build_stage_event(
                stage=STAGE_SUBMIT,
                status="completed",
                details={"execute_id": handle, "completed_inline": completed_inline},
            )
        )
        logger.info("Workflow submitted execute_id=%s completed_inline=%s", handle, completed_inline)
        return SubmissionReceipt(
            handle=handle,
            raw_response=response_payload,
            debug_url=debug_url if isinstance(debug_url, str) and debug_url else None,
            completed_inline=completed_inline,
            stage_timeline=stage_timeline,
        )

    def adapter_submit_job(self, request: JobRequest, credential: str) -> SubmissionReceipt:
        """Submit one job and require a job handle in the response.

        Args:
            request: Job request.
            credential: Bearer credential.

        Returns:
            SubmissionReceipt: Receipt with non-null handle.

        Raises:
            HandleMissingError: Raised when no handle candidate is present.
            UpstreamRejectedError: Raised for non-success transport status.
            MalformedUpstreamResponseError: Raised when the response body is not JSON.
        """

        receipt = self.adapter_dispatch_job(request=request, credential=credential)
        if receipt.handle is None:
            raise HandleMissingError(
                "Workflow submission response missing execute_id",
                raw_payload=receipt.raw_response,
            )
        return receipt
