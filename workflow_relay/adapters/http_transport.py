"""HTTP transport for the remote workflow service built on a pooled httpx client."""

from __future__ import annotations

import logging
from typing import Any, Final, Mapping

import httpx

from workflow_relay.domain import JobHandle

from .interfaces import TransportResponse, WorkflowTransportPort
from .workflow_errors import WorkflowAdapterConnectionError, WorkflowAdapterTimeoutError

logger = logging.getLogger(__name__)


class WorkflowHttpTransport(WorkflowTransportPort):
    """Transport implementation for the `workflow/run` and `workflow/run/retrieve` endpoints."""

    _USER_AGENT: Final[str] = "workflow-relay/1.0 (Python/httpx)"

    def __init__(
        self,
        base_url: str = "https://api.coze.cn",
        run_path: str = "/v1/workflow/run",
        retrieve_path: str = "/v1/workflow/run/retrieve",
        request_timeout_seconds: float = 120.0,
    ):
        """Initialize the workflow HTTP transport.

        Args:
            base_url: Remote service base URL.
            run_path: Path of the job submission endpoint.
            retrieve_path: Path of the job status endpoint.
            request_timeout_seconds: Per-request timeout in seconds.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if not run_path.strip():
            raise ValueError("run_path must not be blank")
        if not retrieve_path.strip():
            raise ValueError("retrieve_path must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._base_url = normalized_base_url.rstrip("/")
        self._run_url = f"{self._base_url}/{run_path.strip().lstrip('/')}"
        self._retrieve_url = f"{self._base_url}/{retrieve_path.strip().lstrip('/')}"
        self._client = httpx.Client(
            timeout=request_timeout_seconds,
            headers={"User-Agent": self._USER_AGENT},
        )

    def transport_submit_job(self, payload: Mapping[str, Any], credential: str) -> TransportResponse:
        """POST one job submission and return the raw response.

        Args:
            payload: JSON request body.
            credential: Bearer credential.

        Returns:
            TransportResponse: Raw status code and body text.

        Raises:
            WorkflowAdapterTimeoutError: Raised when the request times out.
            WorkflowAdapterConnectionError: Raised for other transport failures.
        """

        return self._transport_send(
            method="POST",
            url=self._run_url,
            credential=credential,
            json_body=dict(payload),
        )

    def transport_query_job(self, handle: JobHandle, credential: str) -> TransportResponse:
        """GET the current status of one job and return the raw response.

        Args:
            handle: Job handle.
            credential: Bearer credential.

        Returns:
            TransportResponse: Raw status code and body text.

        Raises:
            WorkflowAdapterTimeoutError: Raised when the request times out.
            WorkflowAdapterConnectionError: Raised for other transport failures.
        """

        return self._transport_send(
            method="GET",
            url=self._retrieve_url,
            credential=credential,
            query_parameters={"execute_id": handle},
        )

    def transport_close(self) -> None:
        """Release pooled connections held by the underlying client."""

        self._client.close()

    def _transport_send(
        self,
        method: str,
        url: str,
        credential: str,
        json_body: dict[str, Any] | None = None,
        query_parameters: dict[str, str] | None = None,
    ) -> TransportResponse:
        """Execute one authenticated HTTP request.

        Raises:
            WorkflowAdapterTimeoutError: Raised when the request times out.
            WorkflowAdapterConnectionError: Raised for other transport failures.
        """

        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }
        try:
            response = self._client.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=query_parameters,
            )
        except httpx.TimeoutException as error:
            raise WorkflowAdapterTimeoutError(f"Workflow transport request timed out: {method} {url}") from error
        except httpx.HTTPError as error:
            raise WorkflowAdapterConnectionError(f"Workflow transport request failed: {method} {url}") from error

        logger.debug("Workflow transport %s %s -> HTTP %s", method, url, response.status_code)
        return TransportResponse(status_code=int(response.status_code), body_text=response.text)
