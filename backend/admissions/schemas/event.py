"""Event Schemas — Slack archival request and summary."""

from pydantic import BaseModel, Field


class ProjectChannel(BaseModel):
    id: str
    slack_channel_id: str | None = None


class ArchiveEventRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    projects: list[ProjectChannel] = Field(default_factory=list)


class ArchiveSummaryResponse(BaseModel):
    archived: dict[str, str]
    skipped: list[str]
