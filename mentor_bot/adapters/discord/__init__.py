"""Discord adapter: discord.py client and reply channel."""

from mentor_bot.adapters.discord.bot import MentorBot, to_incoming
from mentor_bot.adapters.discord.notification import DiscordReplyChannel

__all__ = ["MentorBot", "DiscordReplyChannel", "to_incoming"]
