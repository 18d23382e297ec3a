"""Listing configuration schema for prefix-manifest."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ListingConfig(BaseModel):
    """Configuration for one manifest listing run."""

    model_config = ConfigDict(extra="forbid")

    bucket: str = Field(..., min_length=1, description="Bucket to list")
    path_prefix: Optional[str] = Field(
        default=None, description="Only list objects whose path starts with this"
    )
    last_path: Optional[str] = Field(
        default=None, description="Resume listing after this path"
    )
    incremental: bool = Field(
        default=True, description="Report the last listed path for the next run"
    )
    paths: list[str] = Field(
        default_factory=list, description="Explicit object paths, skips listing"
    )
    stop_when_file_not_found: bool = Field(
        default=False, description="Fail when the prefix holds no file"
    )
    min_task_size: int = Field(
        default=0, ge=0, description="Minimum aggregate bytes per task"
    )
    max_task_count: Optional[int] = Field(
        default=None, ge=1, description="Maximum number of tasks"
    )
    path_match_pattern: Optional[str] = Field(
        default=None, description="Regex listed paths must match"
    )
    total_file_count_limit: Optional[int] = Field(
        default=None, ge=1, description="Maximum number of files in the manifest"
    )

    @field_validator("path_match_pattern")
    @classmethod
    def _check_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"Invalid path_match_pattern '{value}': {e}") from e
        return value
