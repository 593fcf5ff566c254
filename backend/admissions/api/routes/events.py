"""Event Routes — post-event Slack channel archival (admin only)."""

import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Depends

from admissions.api.dependencies import require_admin
from admissions.config import Settings, get_settings
from admissions.core.enforce_roles import CallerContext
from admissions.infrastructure.slack_client import SlackClient
from admissions.schemas.event import ArchiveEventRequest, ArchiveSummaryResponse
from admissions.services.archive_slack_channels import (
    SlackEvent, SlackProject, archive_slack_channels,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/events", tags=["events"])


async def get_slack_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[SlackClient, None]:
    client = SlackClient(
        settings.slack_bot_token,
        base_url=settings.slack_api_base_url,
        timeout_seconds=settings.slack_timeout_seconds,
        max_retries=settings.slack_max_retries,
    )
    try:
        yield client
    finally:
        await client.aclose()


@router.post("/archive-slack-channels", response_model=ArchiveSummaryResponse)
async def archive_event_slack_channels(
    body: ArchiveEventRequest,
    _: CallerContext = Depends(require_admin),
    slack: SlackClient = Depends(get_slack_client),
):
    """Rename every project channel with the event suffix, then archive it."""
    event = SlackEvent(
        name=body.name,
        projects=[
            SlackProject(id=p.id, slack_channel_id=p.slack_channel_id)
            for p in body.projects
        ],
    )
    summary = await archive_slack_channels(event, slack)
    logger.info(
        f"Archived {len(summary.archived)} channel(s), skipped {len(summary.skipped)}",
    )
    return ArchiveSummaryResponse(archived=summary.archived, skipped=summary.skipped)
