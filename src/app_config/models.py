from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field


class FileRotationSettings(BaseModel):
    """How many midnight-rotated settings log files `init_logging` keeps."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    backup_count: int = 5


class FileLoggingSettings(BaseModel):
    """Optional log file written next to the console output."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "data/logs/app.log"
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    file: Optional[FileLoggingSettings] = None


@dataclass(frozen=True, slots=True)
class SettingsFileRequest:
    """
    Where the production configuration source is read from.

    Relative paths are resolved against the working directory at first use.
    `path_env_var` names an environment variable that, when set, replaces `path`.
    """

    path: str = "data/config/app.env"
    common_paths: Sequence[str] = ("data/config/common.env",)
    path_env_var: Optional[str] = "APP_CONFIG_FILE"
