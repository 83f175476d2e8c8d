"""Screenshot lookup for Maestro test output directories."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .command_kinds import AUTOMATIC_SCREENSHOT_KIND
from .models import FlowImage

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg")
FAILURE_SCREENSHOT_PREFIX = "screenshot-❌-"
FILENAME_TIMESTAMP_REGEX = re.compile(r"-(\d{13})-")
FILENAME_TIMESTAMP_ALT_REGEX = re.compile(r"-(\d{13})\(")
FLOW_NAME_REGEX = re.compile(r"\(([^)]+)\)")
FIRST_DIGITS_REGEX = re.compile(r"\d+")

logger = logging.getLogger(__name__)


def file_content_url(path: Path | str) -> str:
    return f"/api/files/content?path={quote(str(path), safe='')}"


def is_image_file(name: str) -> bool:
    return name.lower().endswith(IMAGE_SUFFIXES)


def extract_timestamp_from_filename(filename: str, default_timestamp: Optional[int]) -> Optional[int]:
    """Pull the 13-digit epoch-ms stamp out of ``screenshot-❌-<ts>-(<flow>).png``."""
    match = FILENAME_TIMESTAMP_REGEX.search(filename) or FILENAME_TIMESTAMP_ALT_REGEX.search(filename)
    if match:
        return int(match.group(1))
    return default_timestamp


def _image_files(directory: Path | str) -> List[Path]:
    root = Path(directory).expanduser()
    if not root.is_dir():
        logger.warning("Screenshot directory not found: %s", root)
        return []
    return sorted(path for path in root.iterdir() if path.is_file() and is_image_file(path.name))


def find_flow_images(directory: Path | str, flow_name: str) -> List[FlowImage]:
    """Images whose parenthesised flow name equals ``flow_name`` exactly."""
    images: List[FlowImage] = []
    for path in _image_files(directory):
        match = FLOW_NAME_REGEX.search(path.name)
        if not match or match.group(1) != flow_name:
            continue
        mtime_ms = int(path.stat().st_mtime * 1000)
        images.append(
            FlowImage(
                name=path.name,
                path=str(path),
                url=file_content_url(path),
                timestamp=extract_timestamp_from_filename(path.name, mtime_ms),
            )
        )
    logger.debug("Found %d images for flow %s in %s", len(images), flow_name, directory)
    return images


def find_failure_screenshot(
    directory: Path | str,
    timestamp: Optional[str] = None,
    command_name: Optional[str] = None,
) -> Optional[Path]:
    prefix = f"{FAILURE_SCREENSHOT_PREFIX}{timestamp}-" if timestamp else FAILURE_SCREENSHOT_PREFIX
    for path in _image_files(directory):
        if path.suffix.lower() not in (".png", ".jpg"):
            continue
        if prefix not in path.name:
            continue
        if command_name and f"({command_name})" not in path.name:
            continue
        return path
    return None


def find_command_images(directory: Path | str, command_name: str, timestamp: str) -> List[Path]:
    matches = [
        path
        for path in _image_files(directory)
        if command_name in path.name and timestamp in path.name
    ]

    def first_digits(path: Path) -> str:
        found = FIRST_DIGITS_REGEX.search(path.name)
        return found.group(0) if found else ""

    matches.sort(key=first_digits)
    return matches


def inject_automatic_screenshots(
    commands: List[Dict[str, Any]],
    flow_images: List[FlowImage],
) -> List[Dict[str, Any]]:
    """
    Merge one ``automaticScreenshotCommand`` entry per flow image into the
    top-level commands, ordered by timestamp.
    """
    if not flow_images:
        return commands

    screenshot_entries = [
        {
            "command": {
                AUTOMATIC_SCREENSHOT_KIND: {
                    "imageUrl": image.url,
                    "imagePath": image.path,
                    "optional": False,
                }
            },
            "metadata": {
                "status": "COMPLETED",
                "timestamp": extract_timestamp_from_filename(image.path, image.timestamp),
                "duration": 0,
            },
        }
        for image in flow_images
    ]

    def timestamp_of(entry: Dict[str, Any]) -> float:
        return (entry.get("metadata") or {}).get("timestamp") or 0

    return sorted([*commands, *screenshot_entries], key=timestamp_of)
