"""FastAPI application factory for the workflow relay service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_relay import __version__
from workflow_relay.config import AppSettings
from workflow_relay.jobs import WorkflowExecutionPort

from .routers import api_create_health_router, api_create_workflow_router


def create_api_application(settings: AppSettings, execution_service: WorkflowExecutionPort) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings.
        execution_service: Job-layer execution service used by workflow endpoints.

    Returns:
        FastAPI: Framework application instance with CORS and routers installed.

    Raises:
        ValueError: Raised when router dependencies are invalid.
    """

    application = FastAPI(title="Workflow Relay", version=__version__)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service identification payload."""

        return {
            "service": "workflow-relay",
            "version": __version__,
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(settings=settings))
    application.include_router(api_create_workflow_router(settings=settings, execution_service=execution_service))
    return application
