"""Helpers for loading Maestro test command files from disk."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import settings
from .flow_reconciler import ReconcileReport, reconcile
from .models import TestPathInfo
from .run_status import collect_failures, count_command_statuses, get_test_status
from .schemas import TestDetails
from .screenshots import find_flow_images, inject_automatic_screenshots

TESTS_ROOT = Path(settings.tests_root).expanduser()
COMMANDS_FILE_REGEX = re.compile(r"commands-\((?P<flow>.*?)\)\.json$")

logger = logging.getLogger(__name__)


class TestFileNotFoundError(FileNotFoundError):
    """Raised when a commands file does not exist."""


class TestFileFormatError(ValueError):
    """Raised when a commands file is not valid JSON."""


def extract_test_path_info(test_id: str) -> TestPathInfo:
    """Split ``<dir>/commands-(<flow>).json`` into flow name and directory."""
    if not test_id:
        return TestPathInfo()

    match = COMMANDS_FILE_REGEX.search(test_id)
    if not match:
        logger.warning("No flow name match found for test id %s", test_id)
        return TestPathInfo()

    last_slash = test_id.rfind("/")
    if last_slash == -1:
        logger.warning("No directory path found in test id %s", test_id)
        return TestPathInfo()

    return TestPathInfo(flow_name=match.group("flow"), directory=test_id[:last_slash])


def format_timestamp(timestamp: Optional[float], index: int, start_time: Optional[float]) -> str:
    """
    Label a command row.

    Without a timestamp the row is ``Step <n>``; with a start time it is the
    ``MM:SS`` offset from the start, otherwise the local wall-clock time.
    """
    if not timestamp:
        return f"Step {index + 1}"

    if start_time:
        seconds = int((timestamp - start_time) // 1000)
        minutes = seconds // 60
        if minutes > 0:
            return f"{minutes:02d}:{seconds % 60:02d}"
        return f"00:{seconds:02d}"

    return datetime.fromtimestamp(timestamp / 1000).strftime("%H:%M:%S")


def _timestamp_of(entry: Any) -> float:
    if not isinstance(entry, dict):
        return 0
    metadata = entry.get("metadata")
    if not isinstance(metadata, dict):
        return 0
    timestamp = metadata.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return 0
    return timestamp


def sort_by_timestamp(entries: List[Any]) -> List[Any]:
    return sorted(entries, key=_timestamp_of)


def load_commands_file(path: Path | str) -> Any:
    """Return the parsed JSON content of a commands file."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise TestFileNotFoundError(f"Commands file not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise TestFileFormatError(f"Invalid JSON in {file_path}: {exc}") from exc


def load_test_details(
    path: Path | str,
    *,
    with_screenshots: bool = False,
    strict: Optional[bool] = None,
) -> TestDetails:
    """Load, sort and reconcile one test's commands file."""
    raw = load_commands_file(path)
    path_info = extract_test_path_info(str(path))
    report = ReconcileReport()

    strict_mode = settings.strict_reconcile if strict is None else strict

    # Verdicts come from the flat list so failures inside sub-flows count.
    flat: List[Any] = raw if isinstance(raw, list) else []

    commands: List[Dict[str, Any]] = []
    if isinstance(raw, list):
        commands = reconcile(sort_by_timestamp(raw), strict=strict_mode, report=report)
    elif strict_mode:
        # Raises InvalidInputError.
        reconcile(raw, strict=True)
    else:
        logger.warning("Received non-array data from %s", path)

    if with_screenshots and path_info.directory and path_info.flow_name:
        images = find_flow_images(path_info.directory, path_info.flow_name)
        commands = inject_automatic_screenshots(commands, images)

    start_time = "N/A"
    if commands:
        first_timestamp = _timestamp_of(commands[0])
        if first_timestamp:
            start_time = str(first_timestamp)

    return TestDetails(
        path=str(path),
        commands=commands,
        test_name=path_info.flow_name,
        flow_name=path_info.flow_name,
        directory=path_info.directory,
        start_time=start_time,
        status=get_test_status(flat),
        counts=count_command_statuses(flat),
        failures=collect_failures(sort_by_timestamp(flat)),
        skipped_entries=len(report.skipped_entries),
        unresolved_commands=len(report.unresolved_commands),
    )


def list_test_files(directory: Path | str) -> List[Path]:
    """Return every ``commands-(<flow>).json`` file below ``directory``, newest run first."""
    root = Path(directory).expanduser()
    if not root.is_dir():
        return []
    matches = [path for path in root.rglob("commands-*.json") if COMMANDS_FILE_REGEX.search(path.name)]
    matches.sort(key=lambda path: (path.parent.name, path.name), reverse=True)
    return matches
