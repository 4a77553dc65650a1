"""Health endpoint router composition for service liveness checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from workflow_relay.config import AppSettings
from workflow_relay.domain import HealthStatus


def api_build_health_status(settings: AppSettings) -> HealthStatus:
    """Return service health with a note on fallback credential configuration."""

    if settings.workflow_api_token and settings.workflow_default_id:
        return HealthStatus(status="ok", detail="fallback credential and workflow id configured")
    return HealthStatus(status="ok", detail="requests must supply api_token and workflow_id")


def api_create_health_router(settings: AppSettings) -> APIRouter:
    """Create health-check router.

    Args:
        settings: Runtime settings used for environment and fallback metadata.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when settings is invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health and usage summary.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        health = api_build_health_status(settings)
        payload = {
            "status": health.status,
            "app": "up",
            "detail": health.detail,
            "environment": settings.environment_name,
            "upstream": settings.workflow_api_base_url,
            "endpoints": {
                "execute": "POST /api/workflow",
                "result": "GET|POST /api/workflow-result",
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
