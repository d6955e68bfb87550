"""Application settings model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AppSettings(BaseModel):
    """Settings that live outside any single project."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    last_project_path: str | None = Field(default=None, alias="lastProjectPath")
    font_family: str | None = Field(default=None, alias="fontFamily")
