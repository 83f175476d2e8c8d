"""Centralized configuration helpers for the flow viewer CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from rich.logging import RichHandler

from backend.app.config import settings

# Absolute project root derived from this file's location.
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

DEFAULT_TESTS_ROOT: Path = Path(settings.tests_root).expanduser()

STATUS_STYLES: Dict[str, str] = {
    "COMPLETED": "green",
    "FAILED": "bold red",
    "SKIPPED": "yellow",
}


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich so warnings line up with CLI output."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@dataclass
class ViewOptions:
    """Describes how a single test file should be rendered."""

    raw: bool = False
    with_screenshots: bool = False
    show_details: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the options into a dictionary for logging."""
        return {
            "raw": self.raw,
            "with_screenshots": self.with_screenshots,
            "show_details": self.show_details,
        }
