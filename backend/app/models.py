# app/models.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CommandStatus = Literal["COMPLETED", "FAILED", "SKIPPED"]
TestStatus = Literal["COMPLETED", "FAILED"]
FlowStatus = Literal["PASSED", "FAILED"]


class StackTraceFrame(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_loader_name: Optional[str] = Field(None, alias="classLoaderName")
    method_name: Optional[str] = Field(None, alias="methodName")
    file_name: Optional[str] = Field(None, alias="fileName")
    line_number: Optional[int] = Field(None, alias="lineNumber")
    native_method: Optional[bool] = Field(None, alias="nativeMethod")
    class_name: Optional[str] = Field(None, alias="className")


class CommandError(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    message: str = ""
    stack_trace: Optional[List[StackTraceFrame]] = Field(None, alias="stackTrace")
    hierarchy_root: Optional[Dict[str, Any]] = Field(None, alias="hierarchyRoot")


class CommandMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: CommandStatus
    timestamp: Optional[float] = None
    duration: Optional[float] = None
    error: Optional[CommandError] = None


class CommandEntryModel(BaseModel):
    """
    One executed step as found in a Maestro commands file.

    The command payload stays an untyped mapping: its single key is the
    command kind (see command_kinds.COMMAND_KINDS) and run-flow payloads nest
    further command mappings under "commands".
    """

    model_config = ConfigDict(extra="allow")

    command: Dict[str, Any]
    metadata: CommandMetadata


class StatusCounts(BaseModel):
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    total: int = 0


class TestPathInfo(BaseModel):
    flow_name: str = ""
    directory: str = ""


class FlowImage(BaseModel):
    name: str
    path: str
    url: str
    timestamp: Optional[int] = None


class FailureSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    command_name: str = Field(..., alias="commandName")
    timestamp: Optional[float] = None
    message: str = ""
    stack_trace: List[StackTraceFrame] = Field(default_factory=list, alias="stackTrace")
    has_hierarchy: bool = Field(False, alias="hasHierarchy")
