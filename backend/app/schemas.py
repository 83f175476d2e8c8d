"""Pydantic schemas describing backend payloads."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import FailureSummary, StatusCounts, TestStatus

FileType = Literal["file", "directory"]


class FileInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    type: FileType
    size: Optional[int] = None
    modified_time: Optional[str] = Field(None, alias="modifiedTime")


class TestDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str
    commands: List[Dict[str, Any]] = Field(default_factory=list)
    test_name: str = Field("", alias="testName")
    flow_name: str = Field("", alias="flowName")
    directory: str = ""
    start_time: str = Field("N/A", alias="startTime")
    status: TestStatus = "COMPLETED"
    counts: StatusCounts = Field(default_factory=StatusCounts)
    failures: List[FailureSummary] = Field(default_factory=list)
    skipped_entries: int = Field(0, alias="skippedEntries")
    unresolved_commands: int = Field(0, alias="unresolvedCommands")


class ImageRef(BaseModel):
    name: Optional[str] = None
    path: str
    url: str


class ImagesResponse(BaseModel):
    images: List[ImageRef] = Field(default_factory=list)
