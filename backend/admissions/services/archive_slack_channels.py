"""Slack Channel Archival — renames and archives every project channel of a finished event.

Invariants:
    - Projects without a slack_channel_id are skipped
    - Channel is renamed to "{name_normalized}-{event suffix}" BEFORE it is archived
    - A failed lookup or Slack error for one project is logged and skipped;
      the remaining projects are still processed
    - Returns which channels were archived and which were skipped
"""

import logging
from dataclasses import dataclass, field

from admissions.core.channel_names import archived_channel_name, event_archive_suffix
from admissions.core.errors import SlackAPIError
from admissions.core.repository_protocols import SlackConversations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlackProject:
    id: str
    slack_channel_id: str | None = None


@dataclass(frozen=True)
class SlackEvent:
    name: str
    projects: list[SlackProject] = field(default_factory=list)


@dataclass
class ArchiveSummary:
    archived: dict[str, str] = field(default_factory=dict)   # channel_id -> new name
    skipped: list[str] = field(default_factory=list)          # channel ids


async def archive_slack_channels(
    event: SlackEvent, slack: SlackConversations,
) -> ArchiveSummary:
    """Rename and archive all project channels for an event."""
    suffix = event_archive_suffix(event.name)
    summary = ArchiveSummary()

    for project in event.projects:
        channel_id = project.slack_channel_id
        if not channel_id:
            continue
        try:
            channel = await slack.conversations_info(channel_id)
            current_name = channel.get("name_normalized")
            if not current_name:
                logger.warning(
                    f"Channel for project {project.id} has no name, skipping",
                    extra={"channel_id": channel_id},
                )
                summary.skipped.append(channel_id)
                continue

            archived_name = archived_channel_name(current_name, suffix)
            logger.info(
                f"Archiving {current_name} as {archived_name}",
                extra={"channel_id": channel_id},
            )
            await slack.conversations_rename(channel_id, archived_name)
            await slack.conversations_archive(channel_id)
            summary.archived[channel_id] = archived_name
        except SlackAPIError as e:
            logger.warning(
                f"Could not archive channel for project {project.id}: {e.message}",
                extra={"channel_id": channel_id, "error_code": e.code},
            )
            summary.skipped.append(channel_id)

    return summary
