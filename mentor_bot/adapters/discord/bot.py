"""Discord client: bridges discord.Client events to MessageRouter."""

import asyncio
import sys
import traceback
from typing import Optional

import discord

from mentor_bot.adapters.discord.notification import DiscordReplyChannel
from mentor_bot.domain.composer import APOLOGY_TEXT
from mentor_bot.domain.router import MessageRouter
from mentor_bot.ports.inbound import IncomingMessage

_COOLDOWN_SWEEP_SECONDS = 300


def _log(msg: str):
    print(msg, file=sys.stderr)


def to_incoming(message: discord.Message) -> IncomingMessage:
    """Convert a Discord message to platform-agnostic IncomingMessage."""
    author = message.author
    return IncomingMessage(
        author_id=str(author.id),
        author_name=str(author),
        author_mention=author.mention,
        is_bot=author.bot,
        channel_id=str(message.channel.id),
        mentioned_role_ids=frozenset(str(r) for r in message.raw_role_mentions),
        # raw_mentions only covers <@id> in the content, not the implicit reply ping
        mentioned_user_ids=frozenset(str(uid) for uid in message.raw_mentions),
        guild_id=str(message.guild.id) if message.guild else None,
    )


class MentorBot(discord.Client):
    """Thin Discord client that delegates message handling to MessageRouter."""

    def __init__(self, router: MessageRouter, **discord_kwargs):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents, **discord_kwargs)
        self._router = router
        self._ready_handled = False
        self._sweep_task: Optional[asyncio.Task] = None

    async def on_ready(self):
        # discord.py fires on_ready again after every reconnect
        if self._ready_handled:
            return
        self._ready_handled = True
        self._router.bot_user_id = str(self.user.id)
        _log(f"[MentorBot] Bot ready: {self.user}")
        if not self._sweep_task or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._cooldown_sweep_loop())

    async def on_message(self, message: discord.Message):
        # Guard: self.user can be None before on_ready fires
        if not self.user or message.author == self.user:
            return
        channel = DiscordReplyChannel(message)
        try:
            incoming = to_incoming(message)
        except Exception as e:
            _log(f"[MentorBot] error reading message: {e!r}")
            try:
                await channel.reply(APOLOGY_TEXT)
            except Exception as reply_err:
                _log(f"[MentorBot] also failed to send fallback reply in channel: {reply_err!r}")
            return
        await self._router.handle(incoming, channel)

    async def on_error(self, event_method: str, *args, **kwargs):
        _log(f"[MentorBot] unhandled error in {event_method}:\n{traceback.format_exc()}")

    async def _cooldown_sweep_loop(self):
        """Evict expired cooldown entries periodically."""
        while not self.is_closed():
            await asyncio.sleep(_COOLDOWN_SWEEP_SECONDS)
            try:
                removed = self._router.prune_cooldowns()
                if removed:
                    _log(f"[MentorBot] cooldown sweep: evicted {removed} expired entries")
            except Exception as e:
                _log(f"[MentorBot] cooldown sweep error: {e}")

    async def close(self):
        if self._sweep_task and not self._sweep_task.done():
            self._sweep_task.cancel()
        await super().close()
