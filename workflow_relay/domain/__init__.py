"""Domain models and pure normalization rules used across layer boundaries."""

from .models import (
    ExecutionOutcome,
    ExecutionStatus,
    HealthStatus,
    JobHandle,
    JobRequest,
    JobStatusSnapshot,
    PollAttempt,
)
from .status import (
    DEFAULT_FAILURE_MESSAGE,
    FAILURE_STATUS_SYNONYMS,
    SUCCESS_STATUS_SYNONYMS,
    domain_classify_status,
    domain_extract_debug_url,
    domain_extract_error_message,
    domain_extract_raw_status,
    domain_extract_terminal_output,
    domain_locate_output,
    domain_locate_status_record,
    domain_read_record_status,
)
from .timeline import STAGE_POLL, STAGE_RUN, STAGE_SUBMIT, TIMELINE_STAGES, domain_build_stage_event
from .unwrapping import UNWRAP_LAYERS, domain_try_parse_json, domain_unwrap_response

__all__ = [
    "DEFAULT_FAILURE_MESSAGE",
    "ExecutionOutcome",
    "ExecutionStatus",
    "FAILURE_STATUS_SYNONYMS",
    "HealthStatus",
    "JobHandle",
    "JobRequest",
    "JobStatusSnapshot",
    "PollAttempt",
    "STAGE_POLL",
    "STAGE_RUN",
    "STAGE_SUBMIT",
    "SUCCESS_STATUS_SYNONYMS",
    "TIMELINE_STAGES",
    "UNWRAP_LAYERS",
    "domain_build_stage_event",
    "domain_classify_status",
    "domain_extract_debug_url",
    "domain_extract_error_message",
    "domain_extract_raw_status",
    "domain_extract_terminal_output",
    "domain_locate_output",
    "domain_locate_status_record",
    "domain_read_record_status",
    "domain_try_parse_json",
    "domain_unwrap_response",
]
