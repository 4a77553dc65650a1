"""Tests for the caller-facing execute-and-wait service."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from helpers import FakeClock, ScriptedTransport, json_response, status_payload
from workflow_relay.adapters import HandleMissingError, UpstreamRejectedError, WorkflowJobSubmitter, WorkflowStatusReader
from workflow_relay.domain import ExecutionOutcome, ExecutionStatus
from workflow_relay.jobs import (
    PollUntilTerminalOrchestrator,
    WorkflowExecutionService,
    WorkflowExecutionServiceConfig,
)


def _build_service(
    transport: ScriptedTransport,
    clock: FakeClock,
    config: WorkflowExecutionServiceConfig | None = None,
) -> WorkflowExecutionService:
    """Wire the execution service over one scripted transport.

    Args:
        transport: Scripted transport shared by submitter and reader.
        clock: Fake clock used by orchestrator and service.
        config: Optional service configuration.

    Returns:
        WorkflowExecutionService: Service under test.

    Raises:
        ValueError: Raised when wiring is invalid.
    """

    status_reader = WorkflowStatusReader(transport=transport)
    return WorkflowExecutionService(
        submitter=WorkflowJobSubmitter(transport=transport),
        completion_waiter=PollUntilTerminalOrchestrator(status_reader=status_reader, clock=clock, sleep=clock.sleep),
        status_reader=status_reader,
        config=config,
        clock=clock,
    )


def test_jobs_execute_and_wait_polls_until_success() -> None:
    """Submit, poll and return normalized output with a full stage timeline.

    Returns:
        None: Assertions validate outcome and diagnostics.

    Raises:
        AssertionError: Raised when orchestration is wrong.
    """

    clock = FakeClock()
    transport = ScriptedTransport(
        submit_responses=[json_response({"code": 0, "execute_id": "EX1", "debug_url": "https://debug/submit"})],
        query_responses=[
            json_response(status_payload("running")),
            json_response(status_payload("Success", output='{"output": {"answer": 42}}')),
        ],
    )
    service = _build_service(transport, clock)

    outcome = service.job_execute_and_wait(
        target_id="wf",
        parameters={"input": "hi"},
        credential="token",
        max_wait_seconds=30,
        execute_asynchronously=True,
    )

    assert outcome.succeeded is True
    assert outcome.normalized_output == {"answer": 42}
    assert outcome.attempts == 2
    assert outcome.handle == "EX1"
    assert outcome.debug_url == "https://debug/submit"
    assert transport.submitted_payloads == [{"workflow_id": "wf", "parameters": {"input": "hi"}, "is_async": True}]
    stages = [(event["stage"], event["status"]) for event in outcome.diagnostics]
    assert stages[:2] == [("submit", "started"), ("submit", "completed")]
    assert stages[-1] == ("run", "success")


def test_jobs_execute_and_wait_short_circuits_inline_sync_result() -> None:
    clock = FakeClock()
    transport = ScriptedTransport(
        submit_responses=[json_response({"code": 0, "data": '{"output":"done"}', "execute_id": "EX1"})],
        query_responses=[json_response(status_payload("running"))],
    )
    service = _build_service(transport, clock)

    outcome = service.job_execute_and_wait(target_id="wf", parameters={}, credential="token")

    assert outcome.status == ExecutionStatus.SUCCEEDED
    assert outcome.normalized_output == "done"
    assert outcome.attempts == 0
    assert transport.queried_handles == []


def test_jobs_execute_and_wait_raises_handle_missing_before_polling() -> None:
    raw_response = {"code": 0, "msg": "accepted"}
    transport = ScriptedTransport(submit_responses=[json_response(raw_response)])
    service = _build_service(transport, FakeClock())

    with pytest.raises(HandleMissingError) as error_info:
        service.job_execute_and_wait(target_id="wf", parameters={}, credential="token", execute_asynchronously=True)

    assert error_info.value.raw_payload == raw_response
    assert transport.queried_handles == []


def test_jobs_execute_and_wait_propagates_submission_rejection() -> None:
    transport = ScriptedTransport(submit_responses=[json_response({"msg": "bad workflow"}, status_code=400)])
    service = _build_service(transport, FakeClock())

    with pytest.raises(UpstreamRejectedError):
        service.job_execute_and_wait(target_id="wf", parameters={}, credential="token")


def test_jobs_execute_and_wait_caps_wait_budget_and_rejects_negative_values() -> None:
    """Cap caller wait budget to configured limit and reject negative values.

    Returns:
        None: Assertions validate wait budget handling.

    Raises:
        AssertionError: Raised when budget handling is wrong.
    """

    submitter = Mock()
    submitter.adapter_dispatch_job.return_value = Mock(
        completed_inline=False,
        handle="EX1",
        debug_url=None,
        stage_timeline=[],
    )
    waiter = Mock()
    waiter.job_wait_for_completion.return_value = ExecutionOutcome(
        succeeded=False,
        status=ExecutionStatus.TIMED_OUT,
        normalized_output=None,
        raw_response=None,
        debug_url=None,
        elapsed_seconds=6.0,
        attempts=3,
        error_message="workflow did not complete within 5 seconds",
        handle="EX1",
    )
    service = WorkflowExecutionService(
        submitter=submitter,
        completion_waiter=waiter,
        status_reader=Mock(),
        config=WorkflowExecutionServiceConfig(max_wait_seconds_limit=5),
    )

    outcome = service.job_execute_and_wait(target_id="wf", parameters={}, credential="token", max_wait_seconds=100)

    assert waiter.job_wait_for_completion.call_args.kwargs["max_wait_seconds"] == 5
    assert outcome.status == ExecutionStatus.TIMED_OUT
    assert outcome.diagnostics[-1]["status"] == "timed_out"
    with pytest.raises(ValueError, match="max_wait_seconds"):
        service.job_execute_and_wait(target_id="wf", parameters={}, credential="token", max_wait_seconds=-1)


def test_jobs_submit_forces_async_and_returns_handle() -> None:
    transport = ScriptedTransport(submit_responses=[json_response({"code": 0, "execute_id": "EX9"})])
    service = _build_service(transport, FakeClock())

    receipt = service.job_submit(target_id="wf", parameters={"input": "x"}, credential="token", connector_id="1024")

    assert receipt.handle == "EX9"
    assert transport.submitted_payloads[0]["is_async"] is True
    assert transport.submitted_payloads[0]["connector_id"] == "1024"


def test_jobs_read_status_returns_single_snapshot() -> None:
    transport = ScriptedTransport(query_responses=[json_response(status_payload("completed", output="ok"))])
    service = _build_service(transport, FakeClock())

    snapshot = service.job_read_status(handle="EX1", credential="token")

    assert snapshot.status == ExecutionStatus.SUCCEEDED
    assert snapshot.normalized_output == "ok"
    assert transport.queried_handles == ["EX1"]


def test_jobs_execution_service_rejects_missing_dependencies() -> None:
    with pytest.raises(ValueError, match="submitter"):
        WorkflowExecutionService(submitter=None, completion_waiter=Mock(), status_reader=Mock())  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="max_wait_seconds_limit"):
        WorkflowExecutionService(
            submitter=Mock(),
            completion_waiter=Mock(),
            status_reader=Mock(),
            config=WorkflowExecutionServiceConfig(max_wait_seconds_limit=0),
        )


def test_jobs_execute_and_wait_polls_sync_submission_that_reports_running() -> None:
    clock = FakeClock()
    transport = ScriptedTransport(
        submit_responses=[json_response({"code": 0, "data": {"execute_id": "h1", "status": "running"}})],
        query_responses=[json_response(status_payload("success", output="done"))],
    )
    service = _build_service(transport, clock)

    outcome = service.job_execute_and_wait(target_id="wf", parameters={}, credential="token", max_wait_seconds=10)

    assert outcome.status == ExecutionStatus.SUCCEEDED
    assert outcome.attempts == 1
    assert outcome.normalized_output == "done"
    assert transport.queried_handles == ["h1"]


def test_jobs_execute_and_wait_rejects_non_finite_wait_before_submitting() -> None:
    transport = ScriptedTransport(
        submit_responses=[json_response({"code": 0, "execute_id": "EX1"})],
        query_responses=[json_response(status_payload("running"))],
    )
    service = _build_service(transport, FakeClock())

    with pytest.raises(ValueError, match="finite"):
        service.job_execute_and_wait(target_id="wf", parameters={}, credential="token", max_wait_seconds=float("nan"))

    assert transport.submitted_payloads == []
