"""Outbound ports: interfaces for external system adapters."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence, runtime_checkable


@dataclass
class DeliveryResult:
    """Outcome of a best-effort delivery (e.g. a direct message)."""

    success: bool
    error: Optional[str] = None


@runtime_checkable
class MessageChannelPort(Protocol):
    """Replies bound to the message being handled."""

    async def reply(self, text: str, ping_role_ids: Sequence[str] = ()) -> None: ...

    async def send_direct(self, text: str) -> DeliveryResult: ...


@runtime_checkable
class ClockPort(Protocol):
    """Source of the current time. Must return timezone-aware datetimes."""

    def now(self) -> datetime: ...
