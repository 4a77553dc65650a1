"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from workflow_relay.adapters import WorkflowHttpTransport, WorkflowJobSubmitter, WorkflowStatusReader
from workflow_relay.api import create_api_application
from workflow_relay.config import AppSettings, config_load_settings
from workflow_relay.jobs import (
    PollUntilTerminalOrchestrator,
    WorkflowExecutionService,
    WorkflowExecutionServiceConfig,
)


def bootstrap_create_execution_service(settings: AppSettings) -> WorkflowExecutionService:
    """Build the execution service from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        WorkflowExecutionService: Fully wired execution service sharing one pooled transport.

    Raises:
        ValueError: Raised when transport configuration is invalid.
    """

    transport = WorkflowHttpTransport(
        base_url=settings.workflow_api_base_url,
        run_path=settings.workflow_run_path,
        retrieve_path=settings.workflow_retrieve_path,
        request_timeout_seconds=settings.workflow_request_timeout_seconds,
    )
    status_reader = WorkflowStatusReader(transport=transport)
    return WorkflowExecutionService(
        submitter=WorkflowJobSubmitter(transport=transport),
        completion_waiter=PollUntilTerminalOrchestrator(
            status_reader=status_reader,
            max_consecutive_inconclusive_polls=settings.workflow_max_consecutive_inconclusive_polls,
        ),
        status_reader=status_reader,
        config=WorkflowExecutionServiceConfig(
            max_wait_seconds_limit=settings.workflow_max_wait_seconds_limit,
        ),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return create_api_application(
        settings=resolved_settings,
        execution_service=bootstrap_create_execution_service(resolved_settings),
    )
