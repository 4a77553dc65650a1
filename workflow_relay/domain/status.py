"""Canonical remote status semantics and status-payload readers."""

from __future__ import annotations

from typing import Any, Final

from .models import ExecutionStatus
from .unwrapping import domain_unwrap_response

SUCCESS_STATUS_SYNONYMS: Final[frozenset[str]] = frozenset({"success", "completed", "finished", "succeed"})
FAILURE_STATUS_SYNONYMS: Final[frozenset[str]] = frozenset({"failed", "error", "timeout"})
UNKNOWN_RAW_STATUS: Final[str] = "unknown"
DEFAULT_FAILURE_MESSAGE: Final[str] = "workflow execution failed"

_STATUS_RECORD_FIELDS: Final[tuple[str, ...]] = ("status", "execute_status")


def domain_classify_status(raw_status: str | None) -> ExecutionStatus:
    """Map an upstream status string to pending, succeeded or failed.

    Args:
        raw_status: Status string reported by the remote service.

    Returns:
        ExecutionStatus: `SUCCEEDED` or `FAILED` for known synonyms, `PENDING` otherwise.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_status = str(raw_status or "").strip().lower()
    if normalized_status in SUCCESS_STATUS_SYNONYMS:
        return ExecutionStatus.SUCCEEDED
    if normalized_status in FAILURE_STATUS_SYNONYMS:
        return ExecutionStatus.FAILED
    return ExecutionStatus.PENDING


def domain_locate_status_record(payload: Any) -> dict[str, Any]:
    """Return the object that carries status fields inside a status payload.

    The record is `data` when it is an object, the first object of `data` when
    it is a list, otherwise the payload itself.

    Args:
        payload: Parsed status-query payload.

    Returns:
        dict[str, Any]: Status record, empty when payload is not an object.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not isinstance(payload, dict):
        return {}
    data_value = payload.get("data")
    if isinstance(data_value, dict):
        return data_value
    if isinstance(data_value, list) and data_value and isinstance(data_value[0], dict):
        return data_value[0]
    return payload


def domain_extract_raw_status(payload: Any) -> str:
    """Extract the raw status string from a status payload."""

    record_status = domain_read_record_status(domain_locate_status_record(payload))
    if record_status is not None:
        return record_status
    if isinstance(payload, dict):
        top_level_status = payload.get("status")
        if isinstance(top_level_status, str) and top_level_status.strip():
            return top_level_status.strip()
    return UNKNOWN_RAW_STATUS


def domain_locate_output(payload: Any) -> Any:
    """Return the `output` field of the status record, or None when absent."""

    record = domain_locate_status_record(payload)
    output_value = record.get("output")
    if output_value is None or output_value == "":
        return None
    return output_value


def domain_extract_debug_url(payload: Any) -> str | None:
    """Return the debug trace URL from the status record or payload top level."""

    record = domain_locate_status_record(payload)
    for source in (record, payload if isinstance(payload, dict) else {}):
        candidate = source.get("debug_url")
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def domain_extract_error_message(payload: Any) -> str:
    """Resolve a failure message for a failed job.

    Args:
        payload: Parsed status-query payload.

    Returns:
        str: Embedded `error_message`, else top-level `error`, else a generic message.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    record = domain_locate_status_record(payload)
    embedded_message = record.get("error_message")
    if embedded_message:
        return str(embedded_message)
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return DEFAULT_FAILURE_MESSAGE


def domain_read_record_status(record: Any) -> str | None:
    """Return the non-blank `status` or `execute_status` of one record, if any."""

    if not isinstance(record, dict):
        return None
    for field_name in _STATUS_RECORD_FIELDS:
        candidate = record.get(field_name)
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def domain_extract_terminal_output(payload: Any) -> Any:
    """Resolve the normalized output of a terminal status payload.

    The record's `output` field wins. Without one, the whole payload is
    unwrapped, and the result is kept only when it is more than the status
    record itself, so envelope-shaped outputs are not dropped.

    Args:
        payload: Parsed status-query payload.

    Returns:
        Any: Normalized output, or None when no output can be extracted.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    output_value = domain_locate_output(payload)
    if output_value is not None:
        return domain_unwrap_response(output_value)

    record = domain_locate_status_record(payload)
    unwrapped = domain_unwrap_response(payload)
    if unwrapped is payload or unwrapped is None or unwrapped == "":
        return None
    if domain_read_record_status(record) is not None and (
        unwrapped == record or (isinstance(unwrapped, list) and record in unwrapped)
    ):
        return None
    return unwrapped
