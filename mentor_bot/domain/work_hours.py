"""Work-hours policy: pure domain logic, no framework dependencies."""

from datetime import datetime

from zoneinfo import ZoneInfo

from mentor_bot.config import WorkHoursConfig

# Fixed English names so output does not depend on the process locale
_WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def local_time(now: datetime, timezone: str) -> datetime:
    """Convert an aware datetime to the given IANA zone."""
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(ZoneInfo(timezone))


def is_within_work_hours(now: datetime, config: WorkHoursConfig) -> bool:
    """True iff ``now`` falls on a work day inside [start_hour, end_hour)."""
    local = local_time(now, config.timezone)
    return (
        local.isoweekday() in config.work_days
        and config.start_hour <= local.hour < config.end_hour
    )


def format_local_time(now: datetime, timezone: str) -> str:
    """Render e.g. ``"Wednesday, 21:30"`` in the given zone."""
    local = local_time(now, timezone)
    return f"{_WEEKDAY_NAMES[local.weekday()]}, {local:%H:%M}"
