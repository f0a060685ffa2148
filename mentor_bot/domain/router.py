"""Message router: decides whether and how to answer a message.

Pure orchestration over the ports; the Discord adapter feeds it
IncomingMessage objects and a MessageChannelPort bound to the message.
"""

import sys
from typing import Optional

from mentor_bot.config import BotConfig
from mentor_bot.domain.composer import (
    APOLOGY_TEXT,
    compose_direct_message,
    compose_greeting,
    compose_out_of_hours_reply,
)
from mentor_bot.domain.cooldown import CooldownTracker
from mentor_bot.domain.work_hours import format_local_time, is_within_work_hours
from mentor_bot.ports.inbound import IncomingMessage
from mentor_bot.ports.outbound import ClockPort, DeliveryResult, MessageChannelPort

MENTION_BOT = "bot"
MENTION_MENTOR = "mentor"


def _log(msg: str):
    print(msg, file=sys.stderr)


class MessageRouter:
    """Routes mentor-role and bot mentions to the right replies.

    Handles:
    - bot authors: ignored
    - per-user cooldown, consumed by every relevant message
    - mentor mention: notice + self-help link outside work hours only
    - bot mention: greeting at any time
    """

    def __init__(self, config: BotConfig, cooldowns: CooldownTracker, clock: ClockPort):
        self._config = config
        self._cooldowns = cooldowns
        self._clock = clock
        self.bot_user_id: Optional[str] = None  # bound once the client is ready

    def prune_cooldowns(self) -> int:
        """Evict expired cooldown entries. Returns count removed."""
        now_ms = int(self._clock.now().timestamp() * 1000)
        return self._cooldowns.prune(now_ms, self._config.cooldown_ms)

    def classify(self, message: IncomingMessage) -> Optional[str]:
        """Return MENTION_BOT, MENTION_MENTOR or None for irrelevant messages."""
        if self.bot_user_id and self.bot_user_id in message.mentioned_user_ids:
            return MENTION_BOT
        if self._config.mentor_role_id in message.mentioned_role_ids:
            return MENTION_MENTOR
        return None

    async def handle(self, message: IncomingMessage, channel: MessageChannelPort) -> None:
        """Process one message. Never raises."""
        if message.is_bot:
            return
        try:
            await self._handle(message, channel)
        except Exception as e:
            _log(f"[MessageRouter] error processing message from {message.author_name} "
                 f"in channel {message.channel_id}: {e!r}")
            try:
                await channel.reply(APOLOGY_TEXT)
            except Exception as reply_err:
                _log(f"[MessageRouter] also failed to send fallback reply in channel: {reply_err!r}")

    async def _handle(self, message: IncomingMessage, channel: MessageChannelPort) -> None:
        kind = self.classify(message)
        if kind is None:
            return

        now = self._clock.now()
        now_ms = int(now.timestamp() * 1000)
        # No await between check and mark: atomic within the event loop
        if self._cooldowns.is_on_cooldown(message.author_id, now_ms, self._config.cooldown_ms):
            return
        self._cooldowns.mark_triggered(message.author_id, now_ms)

        share_url = self._config.share_chat_url

        if kind == MENTION_BOT:
            await channel.reply(compose_greeting(message.author_mention, share_url))
        else:
            work_hours = self._config.work_hours
            if is_within_work_hours(now, work_hours):
                return
            on_duty = self._config.on_duty_role_id
            text = compose_out_of_hours_reply(
                message.author_mention,
                format_local_time(now, work_hours.timezone),
                share_url,
                on_duty_role_id=on_duty,
            )
            await channel.reply(text, ping_role_ids=(on_duty,) if on_duty else ())

        if self._config.fallback_dm:
            await self._send_direct_best_effort(message, channel, compose_direct_message(share_url))

    async def _send_direct_best_effort(
        self, message: IncomingMessage, channel: MessageChannelPort, text: str,
    ) -> DeliveryResult:
        """Send a DM; failures are logged and reported, never raised."""
        try:
            result = await channel.send_direct(text)
        except Exception as e:
            result = DeliveryResult(success=False, error=str(e) or type(e).__name__)
        if result.success:
            _log(f"[MessageRouter] DM sent to {message.author_name}")
        else:
            # Channel reply already went out, which is the canonical path
            _log(f"[MessageRouter] could not send DM to {message.author_name}: {result.error}")
        return result
