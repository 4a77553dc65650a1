"""Workflow API router composition for execute and result-query endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import math
from typing import Any, Final

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import JSONResponse

from workflow_relay.adapters import (
    HandleMissingError,
    MalformedUpstreamResponseError,
    UpstreamRejectedError,
    WorkflowAdapterConnectionError,
    WorkflowAdapterError,
    WorkflowAdapterTimeoutError,
)
from workflow_relay.config import AppSettings
from workflow_relay.domain import ExecutionStatus, JobStatusSnapshot
from workflow_relay.jobs import WorkflowExecutionPort

logger = logging.getLogger(__name__)

CONTROL_FIELDS: Final[frozenset[str]] = frozenset(
    {"api_token", "workflow_id", "is_async", "connector_id", "max_wait_seconds", "wait"}
)
INPUT_ALIAS_FIELDS: Final[tuple[str, ...]] = ("input_text", "message", "text")


def api_resolve_workflow_parameters(user_parameters: dict[str, Any]) -> dict[str, Any]:
    """Map caller fields to workflow parameters.

    An explicit `input` keeps every field; otherwise the first of `input_text`,
    `message` or `text` becomes `input`; otherwise every field passes through.

    Args:
        user_parameters: Request body without control fields.

    Returns:
        dict[str, Any]: Workflow parameters.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if "input" in user_parameters:
        return dict(user_parameters)
    for alias_field in INPUT_ALIAS_FIELDS:
        if alias_field in user_parameters:
            return {"input": user_parameters[alias_field]}
    return dict(user_parameters)


def api_utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def api_error_response(error: Exception) -> JSONResponse:
    """Convert a submission or query fault into a structured JSON fault.

    Args:
        error: Caught adapter or validation exception.

    Returns:
        JSONResponse: Fault payload with raw upstream diagnostics attached.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload: dict[str, object] = {"success": False, "timestamp": api_utc_timestamp()}
    if isinstance(error, UpstreamRejectedError):
        payload.update(
            {
                "error": "workflow service rejected the request",
                "code": error.error_code,
                "details": error.raw_payload,
                "statusCode": error.status_code,
            }
        )
        status_code = error.status_code if error.status_code >= 400 else status.HTTP_502_BAD_GATEWAY
        return JSONResponse(content=payload, status_code=status_code)
    if isinstance(error, MalformedUpstreamResponseError):
        payload.update(
            {
                "error": "workflow service response could not be parsed as JSON",
                "code": error.error_code,
                "responseText": error.raw_payload,
            }
        )
        return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)
    if isinstance(error, HandleMissingError):
        payload.update(
            {
                "error": "workflow service response carried no execute_id",
                "code": error.error_code,
                "details": error.raw_payload,
            }
        )
        return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)
    if isinstance(error, WorkflowAdapterTimeoutError):
        payload.update({"error": str(error), "code": error.error_code})
        return JSONResponse(content=payload, status_code=status.HTTP_504_GATEWAY_TIMEOUT)
    if isinstance(error, (WorkflowAdapterConnectionError, WorkflowAdapterError)):
        payload.update({"error": str(error), "code": error.error_code})
        return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)
    if isinstance(error, ValueError):
        payload.update({"error": str(error), "code": "INVALID_REQUEST"})
        return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

    payload.update({"error": str(error), "code": "UNEXPECTED_ERROR", "errorType": type(error).__name__})
    return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def api_serialize_status_snapshot(snapshot: JobStatusSnapshot) -> dict[str, object]:
    """Serialize one status snapshot to the result-query payload."""

    is_completed = snapshot.status == ExecutionStatus.SUCCEEDED
    is_failed = snapshot.status == ExecutionStatus.FAILED
    is_running = not is_completed and not is_failed
    if is_completed:
        message = "workflow execution completed"
    elif is_failed:
        message = "workflow execution failed"
    else:
        message = "workflow is still running, query again later"
    return {
        "success": True,
        "execute_id": snapshot.handle,
        "status": snapshot.raw_status,
        "normalized_status": snapshot.status.value,
        "is_completed": is_completed,
        "is_failed": is_failed,
        "is_running": is_running,
        "output": snapshot.normalized_output,
        "error": snapshot.error_message,
        "raw_response": snapshot.raw_response,
        "debug_url": snapshot.debug_url,
        "message": message,
        "timestamp": api_utc_timestamp(),
    }


def api_create_workflow_router(settings: AppSettings, execution_service: WorkflowExecutionPort) -> APIRouter:
    """Create workflow router with execute and result-query endpoints.

    Credential and workflow id are resolved here, request body first and
    settings second, so the execution service only sees resolved values.

    Args:
        settings: Runtime settings with fallback credential and defaults.
        execution_service: Job-layer execution service.

    Returns:
        APIRouter: Router exposing `/api/workflow` and `/api/workflow-result`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if execution_service is None:
        raise ValueError("execution_service must not be None")

    router = APIRouter(prefix="/api", tags=["workflow"])

    @router.get("/workflow")
    def api_workflow_describe() -> JSONResponse:
        """Return execute endpoint description for health-style checks."""

        payload = {
            "status": "ok",
            "message": "workflow relay is running",
            "usage": {
                "health_check": "GET /api/workflow",
                "execute_workflow": "POST /api/workflow",
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/workflow")
    def api_workflow_execute(request_body: dict[str, Any] | None = Body(default=None)) -> JSONResponse:
        """Execute one workflow and wait for its terminal outcome.

        Args:
            request_body: Control fields plus workflow parameters.

        Returns:
            JSONResponse: Serialized outcome, async receipt, or structured fault.

        Raises:
            RuntimeError: This handler converts every failure into a JSON fault.
        """

        body = dict(request_body or {})
        credential = str(body.get("api_token") or settings.workflow_api_token or "").strip()
        workflow_id = str(body.get("workflow_id") or settings.workflow_default_id or "").strip()
        if not credential or not workflow_id:
            payload = {
                "success": False,
                "error": "missing required parameter: api_token or workflow_id",
                "hint": "pass them in the request body or configure WORKFLOW_API_TOKEN and WORKFLOW_DEFAULT_ID",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        execute_asynchronously = body.get("is_async") is True
        wait_for_result = body.get("wait", True) is not False
        connector_id = body.get("connector_id") or None
        raw_max_wait_seconds = body.get("max_wait_seconds", settings.workflow_default_max_wait_seconds)
        if (
            isinstance(raw_max_wait_seconds, bool)
            or not isinstance(raw_max_wait_seconds, (int, float))
            or not math.isfinite(raw_max_wait_seconds)
        ):
            payload = {"success": False, "error": "max_wait_seconds must be a finite number"}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        parameters = api_resolve_workflow_parameters(
            {key: value for key, value in body.items() if key not in CONTROL_FIELDS}
        )
        logger.info("Workflow request workflow_id=%s async=%s wait=%s", workflow_id, execute_asynchronously, wait_for_result)

        try:
            if execute_asynchronously and not wait_for_result:
                receipt = execution_service.job_submit(
                    target_id=workflow_id,
                    parameters=parameters,
                    credential=credential,
                    connector_id=connector_id,
                )
                payload = {
                    "success": True,
                    "mode": "async",
                    "execute_id": receipt.handle,
                    "debug_url": receipt.debug_url,
                    "message": "workflow submitted, query /api/workflow-result with execute_id",
                    "timestamp": api_utc_timestamp(),
                }
                return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

            outcome = execution_service.job_execute_and_wait(
                target_id=workflow_id,
                parameters=parameters,
                credential=credential,
                max_wait_seconds=float(raw_max_wait_seconds),
                execute_asynchronously=execute_asynchronously,
                connector_id=connector_id,
            )
        except (WorkflowAdapterError, ValueError) as error:
            logger.warning("Workflow request workflow_id=%s failed: %s", workflow_id, error)
            return api_error_response(error)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected failure executing workflow_id=%s", workflow_id)
            return api_error_response(error)

        payload = {
            **outcome.outcome_to_payload(),
            "mode": "async" if execute_asynchronously else "sync",
            "timestamp": api_utc_timestamp(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/workflow-result")
    def api_workflow_result_get(
        execute_id: str | None = Query(default=None),
        api_token: str | None = Query(default=None),
    ) -> JSONResponse:
        """Query one job status by query-string parameters.

        Without `execute_id` the endpoint returns its usage description.
        """

        if not execute_id:
            payload = {
                "status": "ok",
                "message": "workflow result query service is running",
                "usage": {
                    "query_by_get": "GET /api/workflow-result?execute_id=xxx&api_token=xxx",
                    "query_by_post": "POST /api/workflow-result with body: { execute_id, api_token }",
                },
            }
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        return _api_query_status(execute_id=execute_id, api_token=api_token)

    @router.post("/workflow-result")
    def api_workflow_result_post(request_body: dict[str, Any] | None = Body(default=None)) -> JSONResponse:
        """Query one job status by JSON body parameters."""

        body = request_body or {}
        return _api_query_status(
            execute_id=str(body.get("execute_id") or ""),
            api_token=body.get("api_token"),
        )

    def _api_query_status(execute_id: str, api_token: str | None) -> JSONResponse:
        normalized_execute_id = execute_id.strip()
        credential = str(api_token or settings.workflow_api_token or "").strip()
        if not normalized_execute_id:
            payload = {"success": False, "error": "missing required parameter: execute_id"}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)
        if not credential:
            payload = {
                "success": False,
                "error": "missing required parameter: api_token",
                "hint": "pass it in the request or configure WORKFLOW_API_TOKEN",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        try:
            snapshot = execution_service.job_read_status(handle=normalized_execute_id, credential=credential)
        except (WorkflowAdapterError, ValueError) as error:
            logger.warning("Workflow status query execute_id=%s failed: %s", normalized_execute_id, error)
            return api_error_response(error)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected failure querying execute_id=%s", normalized_execute_id)
            return api_error_response(error)
        return JSONResponse(content=api_serialize_status_snapshot(snapshot), status_code=status.HTTP_200_OK)

    return router
