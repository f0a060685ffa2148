"""Tests for MessageRouter: mention routing, cooldown and work-hours gating."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from zoneinfo import ZoneInfo

from mentor_bot.config import BotConfig, WorkHoursConfig
from mentor_bot.domain.composer import APOLOGY_TEXT
from mentor_bot.domain.cooldown import CooldownTracker
from mentor_bot.domain.router import MENTION_BOT, MENTION_MENTOR, MessageRouter
from mentor_bot.ports.inbound import IncomingMessage
from mentor_bot.ports.outbound import DeliveryResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

KYIV = ZoneInfo("Europe/Kyiv")
MENTOR_ROLE = "111"
ON_DUTY_ROLE = "222"
BOT_USER_ID = "999"
SHARE_URL = "https://example.com/chat"

WED_NIGHT = datetime(2025, 1, 15, 21, 30, tzinfo=KYIV)
WED_NOON = datetime(2025, 1, 15, 12, 0, tzinfo=KYIV)


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, ms: int):
        self.current += timedelta(milliseconds=ms)


def _make_channel(dm_result=None):
    channel = AsyncMock()
    channel.reply = AsyncMock()
    channel.send_direct = AsyncMock(return_value=dm_result or DeliveryResult(success=True))
    return channel


def _make_config(**overrides) -> BotConfig:
    values = dict(
        discord_token="token",
        mentor_role_id=MENTOR_ROLE,
        share_chat_url=SHARE_URL,
        work_hours=WorkHoursConfig(),
        cooldown_ms=3000,
        fallback_dm=True,
    )
    values.update(overrides)
    return BotConfig(**values)


def _make_router(now=WED_NIGHT, **config_overrides):
    clock = FakeClock(now)
    router = MessageRouter(_make_config(**config_overrides), CooldownTracker(), clock)
    router.bot_user_id = BOT_USER_ID
    return router, clock


def _msg(author_id="1", *, roles=(MENTOR_ROLE,), users=(), is_bot=False) -> IncomingMessage:
    return IncomingMessage(
        author_id=author_id,
        author_name=f"user{author_id}",
        author_mention=f"<@{author_id}>",
        is_bot=is_bot,
        channel_id="500",
        mentioned_role_ids=frozenset(roles),
        mentioned_user_ids=frozenset(users),
        guild_id="600",
    )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassify:
    def test_mentor_mention(self):
        router, _ = _make_router()
        assert router.classify(_msg()) == MENTION_MENTOR

    def test_bot_mention(self):
        router, _ = _make_router()
        assert router.classify(_msg(roles=(), users=(BOT_USER_ID,))) == MENTION_BOT

    def test_bot_mention_wins_over_mentor(self):
        router, _ = _make_router()
        assert router.classify(_msg(users=(BOT_USER_ID,))) == MENTION_BOT

    def test_irrelevant(self):
        router, _ = _make_router()
        assert router.classify(_msg(roles=("333",), users=("444",))) is None

    def test_bot_mention_ignored_before_ready(self):
        router, _ = _make_router()
        router.bot_user_id = None
        assert router.classify(_msg(roles=(), users=(BOT_USER_ID,))) is None


# ---------------------------------------------------------------------------
# Mentor mentions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_out_of_hours_reply_and_dm():
    router, _ = _make_router(now=WED_NIGHT)
    channel = _make_channel()

    await router.handle(_msg(), channel)

    channel.reply.assert_awaited_once()
    text = channel.reply.call_args[0][0]
    assert "<@1>" in text
    assert "Wednesday, 21:30" in text
    assert SHARE_URL in text
    assert channel.reply.call_args.kwargs["ping_role_ids"] == ()
    channel.send_direct.assert_awaited_once()
    assert SHARE_URL in channel.send_direct.call_args[0][0]


@pytest.mark.asyncio
async def test_out_of_hours_pings_on_duty_role():
    router, _ = _make_router(now=WED_NIGHT, on_duty_role_id=ON_DUTY_ROLE)
    channel = _make_channel()

    await router.handle(_msg(), channel)

    assert channel.reply.call_args.kwargs["ping_role_ids"] == (ON_DUTY_ROLE,)
    assert f"<@&{ON_DUTY_ROLE}>" in channel.reply.call_args[0][0]


@pytest.mark.asyncio
async def test_fallback_dm_disabled():
    router, _ = _make_router(now=WED_NIGHT, fallback_dm=False)
    channel = _make_channel()

    await router.handle(_msg(), channel)

    channel.reply.assert_awaited_once()
    channel.send_direct.assert_not_awaited()


@pytest.mark.asyncio
async def test_in_hours_no_reply():
    router, _ = _make_router(now=WED_NOON)
    channel = _make_channel()

    await router.handle(_msg(), channel)

    channel.reply.assert_not_awaited()
    channel.send_direct.assert_not_awaited()


@pytest.mark.asyncio
async def test_in_hours_mention_still_consumes_cooldown():
    """A mention at 17:59:59.5 blocks a second one a second later, after hours end."""
    router, clock = _make_router(now=datetime(2025, 1, 15, 17, 59, 59, 500000, tzinfo=KYIV))
    channel = _make_channel()

    await router.handle(_msg(), channel)
    clock.advance(1000)
    await router.handle(_msg(), channel)

    channel.reply.assert_not_awaited()
    channel.send_direct.assert_not_awaited()


@pytest.mark.asyncio
async def test_weekend_noon_replies():
    router, _ = _make_router(now=datetime(2025, 1, 18, 12, 0, tzinfo=KYIV))
    channel = _make_channel()

    await router.handle(_msg(), channel)

    channel.reply.assert_awaited_once()


# ---------------------------------------------------------------------------
# Bot mentions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("now", [WED_NOON, WED_NIGHT])
async def test_bot_mention_always_greets(now):
    router, _ = _make_router(now=now)
    channel = _make_channel()

    await router.handle(_msg(roles=(), users=(BOT_USER_ID,)), channel)

    channel.reply.assert_awaited_once()
    assert "<@1>" in channel.reply.call_args[0][0]
    channel.send_direct.assert_awaited_once()


# ---------------------------------------------------------------------------
# Filtering and cooldown
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_bot_author_ignored():
    router, _ = _make_router()
    channel = _make_channel()

    await router.handle(_msg(is_bot=True), channel)

    channel.reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_irrelevant_message_does_not_consume_cooldown():
    router, _ = _make_router()
    channel = _make_channel()

    await router.handle(_msg(roles=()), channel)
    await router.handle(_msg(), channel)

    channel.reply.assert_awaited_once()


@pytest.mark.asyncio
async def test_cooldown_suppresses_second_message():
    router, clock = _make_router()
    channel = _make_channel()

    await router.handle(_msg(), channel)
    clock.advance(1000)
    await router.handle(_msg(), channel)

    assert channel.reply.await_count == 1


@pytest.mark.asyncio
async def test_cooldown_expires():
    router, clock = _make_router()
    channel = _make_channel()

    await router.handle(_msg(), channel)
    clock.advance(3500)
    await router.handle(_msg(), channel)

    assert channel.reply.await_count == 2


@pytest.mark.asyncio
async def test_cooldown_is_per_user():
    router, _ = _make_router()
    channel = _make_channel()

    await router.handle(_msg("1"), channel)
    await router.handle(_msg("2"), channel)

    assert channel.reply.await_count == 2


@pytest.mark.asyncio
async def test_prune_cooldowns():
    router, clock = _make_router()
    await router.handle(_msg("1"), _make_channel())
    clock.advance(3000)
    assert router.prune_cooldowns() == 1


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_dm_failure_result_does_not_affect_reply(capsys):
    router, _ = _make_router()
    channel = _make_channel(dm_result=DeliveryResult(success=False, error="Cannot send messages to this user"))

    await router.handle(_msg(), channel)

    channel.reply.assert_awaited_once()
    assert channel.reply.call_args[0][0] != APOLOGY_TEXT
    assert "could not send DM" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_dm_exception_is_swallowed():
    router, _ = _make_router()
    channel = _make_channel()
    channel.send_direct = AsyncMock(side_effect=RuntimeError("DMs closed"))

    await router.handle(_msg(), channel)

    # Only the notice; no apology
    channel.reply.assert_awaited_once()
    assert channel.reply.call_args[0][0] != APOLOGY_TEXT


@pytest.mark.asyncio
async def test_malformed_event_gets_one_apology_then_recovers():
    router, _ = _make_router()
    channel = _make_channel()
    broken = _msg("1")
    broken.mentioned_role_ids = None  # `in None` raises TypeError

    await router.handle(broken, channel)

    channel.reply.assert_awaited_once_with(APOLOGY_TEXT)

    channel.reply.reset_mock()
    await router.handle(_msg("2"), channel)
    channel.reply.assert_awaited_once()
    assert channel.reply.call_args[0][0] != APOLOGY_TEXT


@pytest.mark.asyncio
async def test_apology_failure_is_swallowed(capsys):
    router, _ = _make_router()
    channel = _make_channel()
    channel.reply = AsyncMock(side_effect=RuntimeError("channel gone"))

    await router.handle(_msg(), channel)

    # Notice attempt + one apology attempt, neither propagated
    assert channel.reply.await_count == 2
    assert "also failed" in capsys.readouterr().err
