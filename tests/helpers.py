"""Shared test doubles for transport and clock dependencies."""

from __future__ import annotations

import json
from typing import Any, Mapping

from workflow_relay.adapters import TransportResponse


def json_response(payload: Any, status_code: int = 200) -> TransportResponse:
    """Build a transport response with a JSON-encoded body."""

    return TransportResponse(status_code=status_code, body_text=json.dumps(payload))


class ScriptedTransport:
    """Transport double replaying scripted responses or raising scripted errors."""

    def __init__(
        self,
        submit_responses: list[TransportResponse | Exception] | None = None,
        query_responses: list[TransportResponse | Exception] | None = None,
    ):
        self._submit_responses = list(submit_responses or [])
        self._query_responses = list(query_responses or [])
        self.submitted_payloads: list[dict[str, Any]] = []
        self.queried_handles: list[str] = []
        self.credentials: list[str] = []

    def transport_submit_job(self, payload: Mapping[str, Any], credential: str) -> TransportResponse:
        self.submitted_payloads.append(dict(payload))
        self.credentials.append(credential)
        return self._next(self._submit_responses)

    def transport_query_job(self, handle: str, credential: str) -> TransportResponse:
        self.queried_handles.append(handle)
        self.credentials.append(credential)
        return self._next(self._query_responses)

    @staticmethod
    def _next(responses: list[TransportResponse | Exception]) -> TransportResponse:
        if len(responses) > 1:
            scripted = responses.pop(0)
        else:
            scripted = responses[0]
        if isinstance(scripted, Exception):
            raise scripted
        return scripted


class FakeClock:
    """Deterministic monotonic clock advanced only by `sleep` calls."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleep_calls: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleep_calls.append(seconds)
        self.now += seconds


def status_payload(status: str, **record_fields: Any) -> dict[str, Any]:
    """Build a status-query payload with fields nested under `data`."""

    return {"code": 0, "msg": "", "data": {"status": status, **record_fields}}
