"""Domain layer: pure Python, no framework dependencies."""

from mentor_bot.domain.composer import (
    APOLOGY_TEXT,
    compose_direct_message,
    compose_greeting,
    compose_out_of_hours_reply,
    role_mention,
)
from mentor_bot.domain.cooldown import CooldownTracker
from mentor_bot.domain.router import MENTION_BOT, MENTION_MENTOR, MessageRouter
from mentor_bot.domain.work_hours import format_local_time, is_within_work_hours, local_time

__all__ = [
    "APOLOGY_TEXT",
    "compose_direct_message",
    "compose_greeting",
    "compose_out_of_hours_reply",
    "role_mention",
    "CooldownTracker",
    "MENTION_BOT",
    "MENTION_MENTOR",
    "MessageRouter",
    "format_local_time",
    "is_within_work_hours",
    "local_time",
]
