"""Shared transport-response parsing helpers for workflow adapters."""

from __future__ import annotations

import json
from typing import Any

from .interfaces import TransportResponse
from .workflow_errors import MalformedUpstreamResponseError, UpstreamRejectedError


def adapter_parse_json_response(response: TransportResponse, context_label: str) -> Any:
    """Validate transport status and decode the JSON body.

    Args:
        response: Raw transport response.
        context_label: Context label for error messages (`submit`, `status`).

    Returns:
        Any: Decoded JSON payload.

    Raises:
        UpstreamRejectedError: Raised when transport status is not a success status.
        MalformedUpstreamResponseError: Raised when the body is not valid JSON.
    """

    if not response.response_is_success():
        raise UpstreamRejectedError(
            f"Workflow service rejected context={context_label}: HTTP {response.status_code}",
            status_code=response.status_code,
            raw_payload=adapter_try_parse_json_body(response.body_text),
        )

    try:
        return json.loads(response.body_text)
    except ValueError as error:
        raise MalformedUpstreamResponseError(
            f"Workflow service returned non-JSON body for context={context_label}",
            raw_payload=response.body_text,
        ) from error


def adapter_try_parse_json_body(body_text: str) -> Any:
    """Best-effort JSON decode that keeps the raw text when decoding fails."""

    try:
        return json.loads(body_text)
    except ValueError:
        return body_text
