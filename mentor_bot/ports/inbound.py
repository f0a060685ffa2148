"""Inbound port: platform-agnostic message representation."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional


@dataclass
class IncomingMessage:
    """Discord-agnostic view of a message created event."""

    author_id: str
    author_name: str
    author_mention: str
    is_bot: bool
    channel_id: str
    mentioned_role_ids: FrozenSet[str] = field(default_factory=frozenset)
    mentioned_user_ids: FrozenSet[str] = field(default_factory=frozenset)
    guild_id: Optional[str] = None  # None for direct messages
