"""Best-effort normalization of workflow output payloads.

The remote service wraps the real workflow output inconsistently: as a raw
value, as JSON encoded inside a string, inside an HTTP-response-shaped
envelope, or inside a singleton `{"output": ...}` object. Normalization runs a
fixed, ordered tuple of layers over the value. Every layer is a pure total
function: when its shape does not match, or parsing fails, the value passes
through unchanged.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Final

UnwrapLayer = Callable[[Any], Any]

_OUTER_DATA_FIELD: Final[str] = "data"
_OUTPUT_FIELD: Final[str] = "output"
_ENVELOPE_BODY_FIELD: Final[str] = "body"
_ENVELOPE_STATUS_CODE_FIELDS: Final[tuple[str, ...]] = ("statusCode", "status_code")


def domain_try_parse_json(value: Any) -> Any:
    """Parse a string as JSON, returning the input unchanged on failure.

    Args:
        value: Candidate value.

    Returns:
        Any: Parsed JSON value for valid JSON strings, otherwise the original value.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not isinstance(value, (str, bytes, bytearray)):
        return value
    try:
        return json.loads(value)
    except (ValueError, TypeError, RecursionError):
        return value


def unwrap_layer_outer_data(value: Any) -> Any:
    """Descend into the distinguished outer `data` field."""

    if isinstance(value, dict) and _OUTER_DATA_FIELD in value:
        return value[_OUTER_DATA_FIELD]
    return value


def unwrap_layer_json_string(value: Any) -> Any:
    """Decode JSON-encoded-as-string output; plain text passes through."""

    if isinstance(value, str):
        return domain_try_parse_json(value)
    return value


def unwrap_layer_http_envelope(value: Any) -> Any:
    """Descend into the body of an HTTP-response-shaped envelope."""

    if not isinstance(value, dict) or _ENVELOPE_BODY_FIELD not in value:
        return value
    if not any(status_field in value for status_field in _ENVELOPE_STATUS_CODE_FIELDS):
        return value
    return unwrap_layer_json_string(value[_ENVELOPE_BODY_FIELD])


def unwrap_layer_singleton_output(value: Any) -> Any:
    """Descend into a wrapper object whose only key is `output`."""

    if isinstance(value, dict) and len(value) == 1 and _OUTPUT_FIELD in value:
        return value[_OUTPUT_FIELD]
    return value


UNWRAP_LAYERS: Final[tuple[UnwrapLayer, ...]] = (
    unwrap_layer_outer_data,
    unwrap_layer_json_string,
    unwrap_layer_http_envelope,
    unwrap_layer_singleton_output,
)


def domain_unwrap_response(raw: Any) -> Any:
    """Apply every unwrap layer once, in fixed order.

    Args:
        raw: Raw upstream value (parsed payload, string, or any JSON value).

    Returns:
        Any: Normalized output. Never raises; unmatched layers are no-ops.

    Raises:
        RuntimeError: This function does not raise runtime errors.
    """

    value = raw
    for layer in UNWRAP_LAYERS:
        value = layer(value)
    return value
