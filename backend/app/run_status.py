"""Pass/fail verdicts derived from command entry statuses."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

from pydantic import ValidationError

from .command_kinds import command_name
from .models import CommandEntryModel, FailureSummary, FlowStatus, StatusCounts, TestStatus

logger = logging.getLogger(__name__)


def count_command_statuses(commands: Any) -> StatusCounts:
    """Count top-level entries by ``metadata.status``; non-lists count as empty."""
    counts = StatusCounts()
    if not isinstance(commands, list):
        return counts

    for entry in commands:
        counts.total += 1
        metadata = entry.get("metadata") if isinstance(entry, dict) else None
        status = (metadata or {}).get("status")
        if status == "SKIPPED":
            counts.skipped += 1
        elif status == "COMPLETED":
            counts.completed += 1
        elif status == "FAILED":
            counts.failed += 1
    return counts


def is_test_failed(commands: Any) -> bool:
    return count_command_statuses(commands).failed > 0


def get_test_status(commands: Any) -> TestStatus:
    return "FAILED" if is_test_failed(commands) else "COMPLETED"


def get_flow_status(test_statuses: Iterable[TestStatus]) -> FlowStatus:
    """A flow fails as soon as one of its tests failed."""
    statuses: List[str] = list(test_statuses or [])
    if not statuses:
        return "PASSED"
    return "FAILED" if "FAILED" in statuses else "PASSED"


def collect_failures(commands: Any) -> List[FailureSummary]:
    """Summaries of the FAILED entries in a flat command list, in list order."""
    failures: List[FailureSummary] = []
    if not isinstance(commands, list):
        return failures

    for entry in commands:
        if not isinstance(entry, dict) or (entry.get("metadata") or {}).get("status") != "FAILED":
            continue
        try:
            parsed = CommandEntryModel.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Skipping unparseable failed entry: %s", exc)
            continue

        error = parsed.metadata.error
        failures.append(
            FailureSummary(
                command_name=command_name(parsed.command),
                timestamp=parsed.metadata.timestamp,
                message=error.message if error else "",
                stack_trace=(error.stack_trace or []) if error else [],
                has_hierarchy=bool(error and error.hierarchy_root),
            )
        )
    return failures
