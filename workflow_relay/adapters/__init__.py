"""Adapter layer package for remote workflow service boundaries."""

from .http_transport import WorkflowHttpTransport
from .interfaces import (
    JobStatusReaderPort,
    JobSubmitterPort,
    SubmissionReceipt,
    TransportResponse,
    WorkflowTransportPort,
)
from .job_submitter import WorkflowJobSubmitter, adapter_extract_handle
from .status_reader import WorkflowStatusReader
from .workflow_errors import (
    HandleMissingError,
    InconclusivePollError,
    MalformedUpstreamResponseError,
    UpstreamRejectedError,
    WorkflowAdapterConnectionError,
    WorkflowAdapterError,
    WorkflowAdapterTimeoutError,
)

__all__ = [
    "HandleMissingError",
    "InconclusivePollError",
    "JobStatusReaderPort",
    "JobSubmitterPort",
    "MalformedUpstreamResponseError",
    "SubmissionReceipt",
    "TransportResponse",
    "UpstreamRejectedError",
    "WorkflowAdapterConnectionError",
    "WorkflowAdapterError",
    "WorkflowAdapterTimeoutError",
    "WorkflowHttpTransport",
    "WorkflowJobSubmitter",
    "WorkflowStatusReader",
    "WorkflowTransportPort",
    "adapter_extract_handle",
]
