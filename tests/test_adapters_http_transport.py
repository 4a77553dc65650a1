"""Regression tests for the pooled httpx workflow transport."""

from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from workflow_relay.adapters import WorkflowAdapterConnectionError, WorkflowAdapterTimeoutError
from workflow_relay.adapters.http_transport import WorkflowHttpTransport
import workflow_relay.adapters.http_transport as transport_module


def _install_fake_client(monkeypatch: pytest.MonkeyPatch, fake_client: Mock) -> list[dict[str, object]]:
    """Replace `httpx.Client` with a factory returning one shared fake client.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        fake_client: Mock used as the pooled client.

    Returns:
        list[dict[str, object]]: Captured client construction keyword arguments.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    constructions: list[dict[str, object]] = []

    def _fake_client_factory(*args: object, **kwargs: object) -> Mock:
        _ = args
        constructions.append(kwargs)
        return fake_client

    monkeypatch.setattr(transport_module.httpx, "Client", _fake_client_factory)
    return constructions


def test_adapters_transport_reuses_one_client_for_submit_and_query(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reuse one pooled client and send bearer-authenticated requests.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions verify pooled client reuse and request shape.

    Raises:
        AssertionError: Raised when requests are built incorrectly.
    """

    submit_response = Mock(status_code=200, text='{"execute_id": "EX1"}')
    query_response = Mock(status_code=200, text='{"data": {"status": "running"}}')
    fake_client = Mock()
    fake_client.request.side_effect = [submit_response, query_response]
    constructions = _install_fake_client(monkeypatch, fake_client)

    transport = WorkflowHttpTransport(base_url="https://example.test/", request_timeout_seconds=15)
    submit_result = transport.transport_submit_job(payload={"workflow_id": "wf"}, credential="tok")
    query_result = transport.transport_query_job(handle="EX1", credential="tok")

    assert len(constructions) == 1
    assert constructions[0]["timeout"] == 15
    assert submit_result.status_code == 200
    assert submit_result.body_text == '{"execute_id": "EX1"}'
    assert query_result.body_text == '{"data": {"status": "running"}}'

    submit_call, query_call = fake_client.request.call_args_list
    assert submit_call.args == ("POST", "https://example.test/v1/workflow/run")
    assert submit_call.kwargs["json"] == {"workflow_id": "wf"}
    assert submit_call.kwargs["headers"]["Authorization"] == "Bearer tok"
    assert query_call.args == ("GET", "https://example.test/v1/workflow/run/retrieve")
    assert query_call.kwargs["params"] == {"execute_id": "EX1"}


def test_adapters_transport_returns_non_success_status_without_raising(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_client = Mock()
    fake_client.request.return_value = Mock(status_code=502, text="bad gateway")
    _install_fake_client(monkeypatch, fake_client)

    result = WorkflowHttpTransport().transport_query_job(handle="EX1", credential="tok")

    assert result.status_code == 502
    assert result.response_is_success() is False


def test_adapters_transport_maps_timeout_to_typed_timeout_error(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_client = Mock()
    fake_client.request.side_effect = httpx.ReadTimeout("timed out")
    _install_fake_client(monkeypatch, fake_client)

    with pytest.raises(WorkflowAdapterTimeoutError, match="timed out"):
        WorkflowHttpTransport().transport_submit_job(payload={}, credential="tok")


def test_adapters_transport_maps_connect_error_to_typed_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_client = Mock()
    fake_client.request.side_effect = httpx.ConnectError("refused")
    _install_fake_client(monkeypatch, fake_client)

    with pytest.raises(WorkflowAdapterConnectionError):
        WorkflowHttpTransport().transport_query_job(handle="EX1", credential="tok")


def test_adapters_transport_rejects_invalid_configuration() -> None:
    with pytest.raises(ValueError, match="base_url"):
        WorkflowHttpTransport(base_url=" ")
    with pytest.raises(ValueError, match="request_timeout_seconds"):
        WorkflowHttpTransport(request_timeout_seconds=0)
