"""HTTP surface for workflow execution, result queries and health checks."""

from .application import create_api_application
from .routers.workflow import api_error_response, api_serialize_status_snapshot

__all__ = ["api_error_response", "api_serialize_status_snapshot", "create_api_application"]
