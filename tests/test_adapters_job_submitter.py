"""Regression tests for job submission payloads, handle extraction and fault typing."""

from __future__ import annotations

import pytest

from helpers import ScriptedTransport, json_response
from workflow_relay.adapters import (
    HandleMissingError,
    MalformedUpstreamResponseError,
    TransportResponse,
    UpstreamRejectedError,
    WorkflowAdapterConnectionError,
    WorkflowJobSubmitter,
    adapter_extract_handle,
)
from workflow_relay.adapters.job_submitter import adapter_build_run_payload
from workflow_relay.domain import JobRequest


@pytest.mark.parametrize(
    "response_payload",
    [
        {"execute_id": "EX1"},
        {"data": {"execute_id": "EX1"}},
        {"data": {"executeId": "EX1"}},
        {"data": {"execution_id": "EX1"}},
        {"data": {"id": "EX1"}},
    ],
)
def test_adapters_extract_handle_from_every_candidate_location(response_payload: dict[str, object]) -> None:
    """Extract the handle from each documented candidate location.

    Args:
        response_payload: Submission response variant.

    Returns:
        None: Assertions validate handle extraction.

    Raises:
        AssertionError: Raised when a candidate location is missed.
    """

    assert adapter_extract_handle(response_payload) == "EX1"


def test_adapters_extract_handle_prefers_top_level_identifier() -> None:
    payload = {"execute_id": "TOP", "data": {"execute_id": "NESTED", "id": "ALT"}}

    assert adapter_extract_handle(payload) == "TOP"


def test_adapters_extract_handle_accepts_numeric_identifiers_and_skips_blanks() -> None:
    assert adapter_extract_handle({"execute_id": "  ", "data": {"id": 7559227}}) == "7559227"
    assert adapter_extract_handle({"data": "some output"}) is None
    assert adapter_extract_handle(["not", "an", "object"]) is None


def test_adapters_build_run_payload_sets_async_and_connector_only_when_requested() -> None:
    sync_payload = adapter_build_run_payload(JobRequest(target_id="wf", parameters={"input": "hi"}))
    async_payload = adapter_build_run_payload(
        JobRequest(target_id="wf", parameters={}, execute_asynchronously=True, connector_id="1024")
    )

    assert sync_payload == {"workflow_id": "wf", "parameters": {"input": "hi"}}
    assert async_payload == {"workflow_id": "wf", "parameters": {}, "is_async": True, "connector_id": "1024"}


def test_adapters_submit_returns_receipt_with_handle_and_debug_url() -> None:
    """Return receipt with handle, debug URL and submission timeline.

    Returns:
        None: Assertions validate receipt contents.

    Raises:
        AssertionError: Raised when receipt contents are wrong.
    """

    transport = ScriptedTransport(
        submit_responses=[json_response({"code": 0, "execute_id": "EX1", "debug_url": "https://debug/EX1"})]
    )
    submitter = WorkflowJobSubmitter(transport=transport)

    receipt = submitter.adapter_submit_job(
        JobRequest(target_id=" wf ", parameters={"input": "hi"}, execute_asynchronously=True),
        credential="secret-token",
    )

    assert receipt.handle == "EX1"
    assert receipt.debug_url == "https://debug/EX1"
    assert receipt.completed_inline is False
    assert [event["status"] for event in receipt.stage_timeline] == ["started", "completed"]
    assert transport.submitted_payloads[0]["workflow_id"] == "wf"
    assert transport.credentials == ["secret-token"]


def test_adapters_submit_raises_handle_missing_with_raw_response() -> None:
    raw_response = {"code": 0, "msg": "ok", "data": {"status": "queued"}}
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[json_response(raw_response)]))

    with pytest.raises(HandleMissingError) as error_info:
        submitter.adapter_submit_job(JobRequest(target_id="wf", execute_asynchronously=True), credential="token")

    assert error_info.value.raw_payload == raw_response
    assert error_info.value.error_code == "HANDLE_MISSING"


def test_adapters_submit_raises_upstream_rejected_with_status_and_body() -> None:
    """Raise typed rejection carrying status code and raw body for non-success status.

    Returns:
        None: Assertions validate rejection mapping.

    Raises:
        AssertionError: Raised when rejection is not typed.
    """

    rejected = json_response({"code": 4100, "msg": "invalid token"}, status_code=401)
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[rejected]))

    with pytest.raises(UpstreamRejectedError) as error_info:
        submitter.adapter_submit_job(JobRequest(target_id="wf"), credential="token")

    assert error_info.value.status_code == 401
    assert error_info.value.raw_payload == {"code": 4100, "msg": "invalid token"}


def test_adapters_submit_raises_malformed_response_with_raw_text() -> None:
    malformed = TransportResponse(status_code=200, body_text="<html>gateway</html>")
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[malformed]))

    with pytest.raises(MalformedUpstreamResponseError) as error_info:
        submitter.adapter_submit_job(JobRequest(target_id="wf"), credential="token")

    assert error_info.value.raw_payload == "<html>gateway</html>"


def test_adapters_submit_propagates_transport_failures() -> None:
    failing = ScriptedTransport(submit_responses=[WorkflowAdapterConnectionError("connection refused")])
    submitter = WorkflowJobSubmitter(transport=failing)

    with pytest.raises(ConnectionError, match="connection refused"):
        submitter.adapter_submit_job(JobRequest(target_id="wf"), credential="token")


def test_adapters_dispatch_detects_inline_completion_for_sync_requests() -> None:
    """Flag synchronous responses that already carry the workflow output.

    Returns:
        None: Assertions validate inline-completion detection.

    Raises:
        AssertionError: Raised when inline completion is misdetected.
    """

    sync_result = json_response({"code": 0, "data": '{"output":"done"}', "execute_id": "EX1"})
    identifier_only = json_response({"code": 0, "data": {"execute_id": "EX2"}})
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[sync_result, identifier_only]))

    inline_receipt = submitter.adapter_dispatch_job(JobRequest(target_id="wf"), credential="token")
    handle_receipt = submitter.adapter_dispatch_job(JobRequest(target_id="wf"), credential="token")

    assert inline_receipt.completed_inline is True
    assert handle_receipt.completed_inline is False
    assert handle_receipt.handle == "EX2"


def test_adapters_dispatch_never_reports_inline_completion_for_async_requests() -> None:
    response = json_response({"code": 0, "data": "EX3", "execute_id": "EX3"})
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[response]))

    receipt = submitter.adapter_dispatch_job(JobRequest(target_id="wf", execute_asynchronously=True), "token")

    assert receipt.completed_inline is False


def test_adapters_dispatch_rejects_blank_target_and_credential() -> None:
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[json_response({})]))

    with pytest.raises(ValueError, match="target_id"):
        submitter.adapter_dispatch_job(JobRequest(target_id="  "), credential="token")
    with pytest.raises(ValueError, match="credential"):
        submitter.adapter_dispatch_job(JobRequest(target_id="wf"), credential=" ")


def test_adapters_dispatch_requires_success_status_for_inline_completion() -> None:
    """Treat a synchronous response with a non-success embedded status as still running.

    Returns:
        None: Assertions validate status-aware inline detection.

    Raises:
        AssertionError: Raised when a running job is reported as finished.
    """

    running = json_response({"code": 0, "data": {"execute_id": "h1", "status": "running"}})
    finished = json_response({"code": 0, "data": {"execute_id": "h2", "status": "Success", "output": "ok"}})
    submitter = WorkflowJobSubmitter(transport=ScriptedTransport(submit_responses=[running, finished]))

    running_receipt = submitter.adapter_dispatch_job(JobRequest(target_id="wf"), credential="token")
    finished_receipt = submitter.adapter_dispatch_job(JobRequest(target_id="wf"), credential="token")

    assert running_receipt.completed_inline is False
    assert running_receipt.handle == "h1"
    assert finished_receipt.completed_inline is True
