# app/config.py
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    backend_name: str = "flow-viewer-backend"
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    tests_root: str = Field(
        default=str(Path.home() / ".maestro" / "tests"),
        description="Directory holding Maestro test output folders",
    )
    log_level: str = "INFO"
    strict_reconcile: bool = Field(
        default=False,
        description="Raise instead of returning an empty list for non-array test files",
    )

    class Config:
        env_prefix = "FLOW_VIEWER_"
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
