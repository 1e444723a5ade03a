"""Pydantic models for the Post Uploader."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadOptions(BaseModel):
    """Desired front matter values for an uploaded post.

    Empty strings and an empty category list mean "not supplied"; the
    normalizer fills them with defaults.
    """

    model_config = ConfigDict(frozen=True)

    layout: str = ""
    title: str = ""
    date: str = ""
    categories: List[str] = Field(default_factory=list)


class FileInfo(BaseModel):
    """Describes a stored post file."""

    filename: str
    size: int
    upload_time: datetime
    content_type: str


class APIResponse(BaseModel):
    """Envelope returned by every JSON endpoint."""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
