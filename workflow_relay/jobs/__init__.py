"""Job layer package for workflow orchestration boundaries."""

from .execution_service import (
    DEFAULT_MAX_WAIT_SECONDS,
    WorkflowExecutionService,
    WorkflowExecutionServiceConfig,
)
from .interfaces import CompletionWaiterPort, WorkflowExecutionPort
from .poll_orchestrator import POLL_INTERVAL_SECONDS, PollUntilTerminalOrchestrator

__all__ = [
    "CompletionWaiterPort",
    "DEFAULT_MAX_WAIT_SECONDS",
    "POLL_INTERVAL_SECONDS",
    "PollUntilTerminalOrchestrator",
    "WorkflowExecutionPort",
    "WorkflowExecutionService",
    "WorkflowExecutionServiceConfig",
]
