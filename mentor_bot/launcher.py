"""Entry point: wires config, domain and adapters, then runs the bot."""

import asyncio
import sys

from mentor_bot.adapters.discord.bot import MentorBot
from mentor_bot.adapters.web.health import serve_health
from mentor_bot.config import BotConfig, load_config_or_exit
from mentor_bot.domain.cooldown import CooldownTracker
from mentor_bot.domain.router import MessageRouter
from mentor_bot.infrastructure.clock import SystemClock


def _log(msg: str):
    print(msg, file=sys.stderr)


def _log_unhandled(loop: asyncio.AbstractEventLoop, context: dict):
    """Loop-wide exception handler: log and keep running."""
    exc = context.get("exception")
    _log(f"Unhandled exception: {exc!r}" if exc else f"Unhandled exception: {context.get('message')}")


def build_bot(config: BotConfig) -> MentorBot:
    router = MessageRouter(config, CooldownTracker(), SystemClock())
    return MentorBot(router)


async def run(config: BotConfig):
    """Run the bot (and the health server, if enabled) until the client closes."""
    asyncio.get_running_loop().set_exception_handler(_log_unhandled)

    bot = build_bot(config)
    health_task = None
    if config.health_port:
        async def _serve():
            try:
                await serve_health(config.health_port)
            except Exception as e:
                _log(f"Health server failed: {e}")

        health_task = asyncio.create_task(_serve())

    try:
        await bot.start(config.discord_token)
    finally:
        if not bot.is_closed():
            await bot.close()
        if health_task:
            health_task.cancel()


def main():
    # Exits with status 1 before any network activity on bad config
    config = load_config_or_exit()
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        _log("Shutting down")


if __name__ == "__main__":
    main()
