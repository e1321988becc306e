"""Plain-text transcript export for conversations."""

from datetime import datetime
from typing import Sequence

from agentchat.models.base import as_utc
from agentchat.models.message import Message, MessageRole


def format_timestamp(value: datetime) -> str:
    """Render like an en-US locale string, e.g. '3/7/2025, 4:05:09 PM' (UTC)."""
    value = as_utc(value)
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value.month}/{value.day}/{value.year}, {hour}:{value.minute:02d}:{value.second:02d} {meridiem}"


def format_transcript(messages: Sequence[Message]) -> str:
    """
    Format messages as `[timestamp] Speaker: content` entries separated by a blank line.

    User turns are labelled "User", assistant turns "AI Agent".
    """
    formatted = []
    for msg in messages:
        speaker = "User" if msg.role == MessageRole.USER.value else "AI Agent"
        formatted.append(f"[{format_timestamp(msg.created_at)}] {speaker}: {msg.content}")
    return "\n\n".join(formatted)
