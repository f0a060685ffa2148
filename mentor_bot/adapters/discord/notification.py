"""MessageChannelPort implementation bound to a discord.Message."""

from typing import Sequence

import discord

from mentor_bot.ports.outbound import DeliveryResult


class DiscordReplyChannel:
    """Replies in the message's channel and DMs its author."""

    def __init__(self, message: discord.Message):
        self._message = message

    async def reply(self, text: str, ping_role_ids: Sequence[str] = ()) -> None:
        # Only explicitly listed roles may ping; never users, @everyone or the author
        allowed = discord.AllowedMentions(
            everyone=False,
            users=False,
            roles=[discord.Object(id=int(r)) for r in ping_role_ids] or False,
            replied_user=False,
        )
        await self._message.reply(text, allowed_mentions=allowed)

    async def send_direct(self, text: str) -> DeliveryResult:
        try:
            await self._message.author.send(text)
        except discord.HTTPException as e:
            # Forbidden when the user has DMs from server members disabled
            return DeliveryResult(success=False, error=e.text or str(e))
        return DeliveryResult(success=True)
