"""Screenshot endpoints for flow, failure and per-command images."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import FileResponse

from ..schemas import ImageRef, ImagesResponse
from ..screenshots import (
    file_content_url,
    find_command_images,
    find_failure_screenshot,
    find_flow_images,
)

router = APIRouter(tags=["images"])


@router.get("/flow-images", response_model=ImagesResponse)
def get_flow_images(
    directory: str = Query(...),
    flow_name: str = Query(..., alias="flowName"),
) -> ImagesResponse:
    images = find_flow_images(directory, flow_name)
    return ImagesResponse(
        images=[ImageRef(name=image.name, path=image.path, url=image.url) for image in images]
    )


@router.get("/screenshot")
def get_screenshot(
    directory: str = Query(...),
    timestamp: Optional[str] = Query(None),
    command_name: Optional[str] = Query(None, alias="commandName"),
) -> FileResponse:
    screenshot = find_failure_screenshot(directory, timestamp=timestamp, command_name=command_name)
    if screenshot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Screenshot not found")
    return FileResponse(screenshot)


@router.get("/command-images/{command_name}", response_model=ImagesResponse)
def get_command_images(
    command_name: str,
    dir: str = Query(...),
    timestamp: str = Query(...),
) -> ImagesResponse:
    paths = find_command_images(dir, command_name, timestamp)
    return ImagesResponse(
        images=[ImageRef(path=str(path), url=file_content_url(path)) for path in paths]
    )
