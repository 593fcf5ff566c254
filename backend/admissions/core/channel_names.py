"""Slack channel naming — archive names for project channels once an event ends.

Invariants:
    - Output only contains lowercase letters, digits, hyphens, underscores
    - Archived names never exceed Slack's 80 character limit
"""

import re

MAX_CHANNEL_NAME_LENGTH = 80

_INVALID_CHARS = re.compile(r"[^a-z0-9_]+")


def event_archive_suffix(event_name: str) -> str:
    """'CodeDay Labs Summer 2024' -> 'codeday-labs-summer-2024'."""
    return _INVALID_CHARS.sub("-", event_name.lower()).strip("-")


def archived_channel_name(name_normalized: str, suffix: str) -> str:
    name = f"{name_normalized}-{suffix}" if suffix else name_normalized
    return name[:MAX_CHANNEL_NAME_LENGTH].rstrip("-")
