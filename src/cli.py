# File: src/cli.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from backend.app.command_kinds import RUN_FLOW_KIND, command_details, command_name
from backend.app.flow_reconciler import InvalidInputError
from backend.app.models import FailureSummary, StatusCounts
from backend.app.run_loader import (
    TestFileFormatError,
    TestFileNotFoundError,
    format_timestamp,
    list_test_files,
    load_commands_file,
    load_test_details,
    sort_by_timestamp,
)
from backend.app.run_status import (
    collect_failures,
    count_command_statuses,
    get_flow_status,
    get_test_status,
)
from src.config import DEFAULT_TESTS_ROOT, STATUS_STYLES, ViewOptions, configure_logging

app = typer.Typer(help="Maestro flow log viewer CLI")
console = Console()
logger = logging.getLogger(__name__)


def _status_of(entry: Dict[str, Any]) -> str:
    return (entry.get("metadata") or {}).get("status", "UNKNOWN")


def format_entry(entry: Dict[str, Any], index: int, start_time: Optional[float], show_details: bool = True) -> str:
    command = entry.get("command") or {}
    metadata = entry.get("metadata") or {}
    status = _status_of(entry)
    style = STATUS_STYLES.get(status, "white")

    label = f"[dim]{format_timestamp(metadata.get('timestamp'), index, start_time)}[/dim] "
    label += f"[{style}]{escape(command_name(command))}[/{style}]"
    if show_details:
        label += f" {escape(command_details(command))}"
    duration = metadata.get("duration")
    if duration is not None:
        label += f" [dim]({duration}ms)[/dim]"
    error = metadata.get("error") or {}
    if error.get("message"):
        label += f"\n[red]{escape(error['message'])}[/red]"
    return label


def _add_entries(
    parent: Tree,
    entries: List[Dict[str, Any]],
    start_time: Optional[float],
    show_details: bool,
) -> None:
    for index, entry in enumerate(entries):
        node = parent.add(format_entry(entry, index, start_time, show_details))
        run_flow = (entry.get("command") or {}).get(RUN_FLOW_KIND)
        children = run_flow.get("commands") if isinstance(run_flow, dict) else None
        # Only executed children carry metadata; unreconciled declarations are skipped.
        executed = [child for child in children or [] if isinstance(child, dict) and "metadata" in child]
        if executed:
            _add_entries(node, executed, start_time, show_details)


def render_tree(title: str, entries: List[Dict[str, Any]], show_details: bool = True) -> Tree:
    start_time = None
    if entries:
        start_time = (entries[0].get("metadata") or {}).get("timestamp")
    tree = Tree(f"[bold]{escape(title)}[/bold]")
    _add_entries(tree, entries, start_time, show_details)
    return tree


def _counts_table(counts: StatusCounts) -> Table:
    table = Table(title="Commands Overview", box=box.SIMPLE_HEAVY)
    table.add_column("Total")
    table.add_column("COMPLETED", style="green")
    table.add_column("FAILED", style="red")
    table.add_column("SKIPPED", style="yellow")
    table.add_row(str(counts.total), str(counts.completed), str(counts.failed), str(counts.skipped))
    return table


def _failure_panel(failure: FailureSummary) -> Panel:
    lines = [escape(failure.message or "No error message")]
    for frame in failure.stack_trace[:5]:
        lines.append(
            f"  [dim]at {escape(frame.class_name or '?')}.{escape(frame.method_name or '?')}"
            f"({escape(frame.file_name or '?')}:{frame.line_number})[/dim]"
        )
    if failure.has_hierarchy:
        lines.append("[dim]UI hierarchy snapshot available[/dim]")
    return Panel("\n".join(lines), title=f"[red]{escape(failure.command_name)} failed[/red]", expand=False)


@app.command("show")
def show_test(
    path: Path = typer.Argument(..., help="Path to a commands-(<flow>).json file."),
    raw: bool = typer.Option(False, "--raw", help="Show the flat executed list without nesting."),
    screenshots: bool = typer.Option(False, "--screenshots", help="Merge flow screenshots into the list."),
    as_json: bool = typer.Option(False, "--json", help="Print the reconstructed commands as JSON."),
    no_details: bool = typer.Option(False, "--no-details", help="Only show command names."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log unresolved matches."),
) -> None:
    configure_logging(verbose)
    options = ViewOptions(raw=raw, with_screenshots=screenshots, show_details=not no_details)
    logger.debug("Rendering %s with %s", path, options.to_dict())

    try:
        if options.raw:
            data = load_commands_file(path)
            entries = sort_by_timestamp(data) if isinstance(data, list) else []
            title = path.name
            status = get_test_status(entries)
            counts = count_command_statuses(entries)
            failures = collect_failures(entries)
        else:
            details = load_test_details(path, with_screenshots=options.with_screenshots)
            entries = details.commands
            title = details.test_name or path.name
            status = details.status
            counts = details.counts
            failures = details.failures
    except (TestFileNotFoundError, TestFileFormatError, InvalidInputError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if as_json:
        console.print_json(json.dumps(entries))
        return

    console.print(render_tree(title, entries, options.show_details))
    console.print(_counts_table(counts))
    style = STATUS_STYLES.get(status, "white")
    console.print(Panel(f"[{style}]{status}[/{style}]", title="Test Status", expand=False))
    for failure in failures:
        console.print(_failure_panel(failure))


@app.command("summarize")
def summarize_directory(
    directory: Path = typer.Argument(DEFAULT_TESTS_ROOT, help="Maestro tests output directory."),
) -> None:
    configure_logging()
    test_files = list_test_files(directory)
    if not test_files:
        console.print(f"No commands files found under: {directory}")
        raise typer.Exit(code=1)

    table = Table(title="Test Runs", box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Run")
    table.add_column("Flow")
    table.add_column("Commands")
    table.add_column("Failed", style="red")
    table.add_column("Status")

    statuses = []
    for test_file in test_files:
        try:
            details = load_test_details(test_file)
        except (TestFileFormatError, InvalidInputError) as exc:
            logger.warning("Skipping %s: %s", test_file, exc)
            continue
        statuses.append(details.status)
        style = STATUS_STYLES.get(details.status, "white")
        table.add_row(
            test_file.parent.name,
            escape(details.flow_name or test_file.name),
            str(details.counts.total),
            str(details.counts.failed),
            f"[{style}]{details.status}[/{style}]",
        )

    console.print(table)
    console.print(f"Overall: {get_flow_status(statuses)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
