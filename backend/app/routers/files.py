"""Read-only file browsing endpoints."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import FileResponse

from ..run_loader import TESTS_ROOT
from ..schemas import FileInfo
from ..screenshots import is_image_file

router = APIRouter(prefix="/files", tags=["files"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[FileInfo], response_model_by_alias=True)
def list_directory(dir: Optional[str] = Query(None, description="Directory to list")) -> List[FileInfo]:
    directory = Path(dir).expanduser() if dir else TESTS_ROOT
    if not directory.is_dir():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Directory not found: {directory}",
        )

    infos: List[FileInfo] = []
    for entry in sorted(directory.iterdir(), key=lambda path: path.name):
        size: Optional[int] = None
        modified: Optional[str] = None
        try:
            stats = entry.stat()
            size = stats.st_size
            modified = datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).isoformat()
        except OSError as exc:
            logger.error("Error getting stats for %s: %s", entry, exc)

        infos.append(
            FileInfo(
                name=entry.name,
                path=str(entry),
                type="directory" if entry.is_dir() else "file",
                size=size,
                modified_time=modified,
            )
        )
    return infos


@router.get("/content")
def get_file_content(path: str = Query(..., description="File to read")) -> Any:
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File not found: {path}")

    if is_image_file(file_path.name):
        return FileResponse(file_path)

    try:
        with file_path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Error reading file %s: %s", file_path, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="File is not valid JSON",
        ) from exc
