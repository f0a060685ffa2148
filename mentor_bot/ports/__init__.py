"""Port interfaces (Hexagonal Architecture)."""

from mentor_bot.ports.inbound import IncomingMessage
from mentor_bot.ports.outbound import ClockPort, DeliveryResult, MessageChannelPort

__all__ = [
    "IncomingMessage",
    "ClockPort",
    "DeliveryResult",
    "MessageChannelPort",
]
