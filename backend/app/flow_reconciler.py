"""Rebuild nested run-flow trees from the flat list of executed Maestro commands.

Maestro writes every executed command as one flat, timestamp-ordered entry.
A ``runFlowCommand`` entry only *declares* its children (bare commands with no
metadata); the executed children appear further down the same list. The
reconciler matches each declared child with its executed entry by deep
equality of the command payload and nests it under the run-flow entry.

Known limitations:

* Matching is first-match in list order. Two executed entries with identical
  payloads (a loop tapping the same element twice) are bound positionally.
* A matched run-flow child is never consumed, whether or not its own
  children resolved, so the same executed run-flow entry can be matched
  again by a later declaration with the same payload.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .command_kinds import RUN_FLOW_KIND, is_run_flow

logger = logging.getLogger(__name__)

CommandEntry = Dict[str, Any]
Command = Dict[str, Any]


class InvalidInputError(ValueError):
    """Raised in strict mode when the top-level input is not a sequence."""


@dataclass
class ReconcileReport:
    """Diagnostics collected during one reconcile call."""

    skipped_entries: List[Any] = field(default_factory=list)
    unresolved_commands: List[Command] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.skipped_entries and not self.unresolved_commands


def is_valid_command_entry(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and isinstance(entry.get("command"), dict)
        and isinstance(entry.get("metadata"), dict)
    )


def commands_equal(left: Any, right: Any) -> bool:
    """
    Structural equality of two JSON values.

    Mapping key order is ignored, list order is not. Booleans only equal
    booleans, so ``true`` never matches ``1`` the way Python's ``==`` would.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, dict):
        if not isinstance(right, dict) or left.keys() != right.keys():
            return False
        return all(commands_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)):
        if not isinstance(right, (list, tuple)) or len(left) != len(right):
            return False
        return all(commands_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


class WorkingList:
    """
    Deep copy of the executed entries plus a consumed flag per entry.

    One instance is shared by the whole recursion of a reconcile call;
    consuming an entry hides it from every later lookup.
    """

    def __init__(self, entries: List[Any]) -> None:
        self.entries: List[Any] = copy.deepcopy(list(entries))
        self._consumed: List[bool] = [False] * len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def is_consumed(self, index: int) -> bool:
        return self._consumed[index]

    def consume(self, index: int) -> None:
        self._consumed[index] = True

    def find(self, command: Command) -> Optional[int]:
        for index, entry in enumerate(self.entries):
            # Malformed entries are left for the top-level walk to report.
            if self._consumed[index] or not is_valid_command_entry(entry):
                continue
            if commands_equal(entry.get("command"), command):
                return index
        return None


def _declared_children(command: Command) -> Optional[List[Command]]:
    children = command[RUN_FLOW_KIND].get("commands")
    return children if isinstance(children, list) else None


def _with_children(entry: CommandEntry, command: Command, children: List[CommandEntry]) -> CommandEntry:
    run_flow = dict(command[RUN_FLOW_KIND])
    run_flow["commands"] = children
    nested_command = dict(command)
    nested_command[RUN_FLOW_KIND] = run_flow
    nested = dict(entry)
    nested["command"] = nested_command
    return nested


def resolve_children(
    declared: List[Command],
    working: WorkingList,
    report: Optional[ReconcileReport] = None,
) -> List[CommandEntry]:
    """Replace declared child commands with their executed entries from ``working``."""
    resolved: List[CommandEntry] = []

    for child in declared:
        index = working.find(child)

        if is_run_flow(child):
            if index is None:
                logger.debug("Executed run-flow entry not found for %s", child)
                if report is not None:
                    report.unresolved_commands.append(child)
                continue

            grandchildren = resolve_children(
                _declared_children(child) or [], working, report
            )
            if grandchildren:
                resolved.append(_with_children(working.entries[index], child, grandchildren))
            continue

        if index is None:
            logger.debug("Executed entry not found for %s", child)
            if report is not None:
                report.unresolved_commands.append(child)
            continue

        resolved.append(working.entries[index])
        working.consume(index)

    return resolved


def reconcile(
    flat_entries: Any,
    *,
    strict: bool = False,
    report: Optional[ReconcileReport] = None,
) -> List[CommandEntry]:
    """
    Nest executed entries under the run-flow entries that declared them.

    ``flat_entries`` must be a list (or tuple) sorted by timestamp. Anything
    else yields ``[]`` with a warning, or :class:`InvalidInputError` when
    ``strict`` is set. The caller's data is never modified.

    Run-flow entries whose declared ``commands`` are missing or empty pass
    through unchanged. Run-flow entries that declare children of which none
    resolved are dropped.
    """
    if not isinstance(flat_entries, (list, tuple)):
        if strict:
            raise InvalidInputError(
                f"Expected a list of command entries, got {type(flat_entries).__name__}"
            )
        logger.warning("reconcile received invalid input: %r", flat_entries)
        return []

    working = WorkingList(flat_entries)
    result: List[CommandEntry] = []

    for index in range(len(working)):
        if working.is_consumed(index):
            continue
        entry = working.entries[index]

        if not is_valid_command_entry(entry):
            logger.warning("Skipping invalid command entry: %r", entry)
            if report is not None:
                report.skipped_entries.append(entry)
            continue

        command = entry["command"]
        declared = _declared_children(command) if is_run_flow(command) else None
        if not declared:
            if not is_run_flow(command):
                working.consume(index)
            result.append(entry)
            continue

        children = resolve_children(declared, working, report)
        if children:
            result.append(_with_children(entry, command, children))

    return result
