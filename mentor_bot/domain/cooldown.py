"""Per-user cooldown tracking.

The tracker only stores timestamps; callers pass ``now`` in epoch
milliseconds so the logic stays deterministic under test.
"""

from typing import Dict


class CooldownTracker:
    """Maps user id -> last triggered time (epoch ms)."""

    def __init__(self):
        self._last_triggered: Dict[str, int] = {}

    def is_on_cooldown(self, user_id: str, now_ms: int, cooldown_ms: int) -> bool:
        last = self._last_triggered.get(user_id)
        if last is None:
            return False
        return now_ms - last < cooldown_ms

    def mark_triggered(self, user_id: str, now_ms: int) -> None:
        self._last_triggered[user_id] = now_ms

    def prune(self, now_ms: int, cooldown_ms: int) -> int:
        """Drop entries whose cooldown window has passed. Returns count removed."""
        expired = [
            user_id for user_id, last in self._last_triggered.items()
            if now_ms - last >= cooldown_ms
        ]
        for user_id in expired:
            del self._last_triggered[user_id]
        return len(expired)

    def __len__(self) -> int:
        return len(self._last_triggered)
