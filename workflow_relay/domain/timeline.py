"""Orchestration timeline events returned to callers as `diagnostics`."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Final, Mapping

STAGE_SUBMIT: Final[str] = "submit"
STAGE_POLL: Final[str] = "poll"
STAGE_RUN: Final[str] = "run"
TIMELINE_STAGES: Final[frozenset[str]] = frozenset({STAGE_SUBMIT, STAGE_POLL, STAGE_RUN})


def domain_build_stage_event(
    stage: str,
    status: str,
    details: Mapping[str, Any] | None = None,
) -> dict[str, object]:
    """Build one diagnostics event stamped with the current UTC time.

    Args:
        stage: Orchestration stage, one of `TIMELINE_STAGES`.
        status: Stage status marker such as `started`, `retrying` or `timed_out`.
        details: Optional structured details; omitted from the event when empty.

    Returns:
        dict[str, object]: JSON-compatible timeline event.

    Raises:
        ValueError: Raised when stage is not a known orchestration stage.
    """

    if stage not in TIMELINE_STAGES:
        raise ValueError(f"unknown timeline stage={stage}")

    stage_event: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
    }
    if details:
        stage_event["details"] = dict(details)
    return stage_event
