"""Configuration loaded from environment variables."""

import os
import sys
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional

from dotenv import load_dotenv
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

DEFAULTS = {
    "WORK_DAYS": "1,2,3,4,5",
    "WORK_START": "9",
    "WORK_END": "18",
    "KYIV_TZ": "Europe/Kyiv",
    "COOLDOWN_MS": "3000",
    "FALLBACK_DM": "true",
    "HEALTH_PORT": "8080",
}

REQUIRED = ("DISCORD_TOKEN", "MENTOR_ROLE_ID")


class ConfigError(ValueError):
    """Raised when an environment setting cannot be used."""
    pass


class MissingSettingError(ConfigError):
    """Raised when a mandatory environment setting is absent."""

    def __init__(self, name: str):
        super().__init__(f"Missing {name} in env")
        self.name = name


@dataclass(frozen=True)
class WorkHoursConfig:
    work_days: FrozenSet[int] = frozenset({1, 2, 3, 4, 5})  # ISO weekday, Monday=1
    start_hour: int = 9
    end_hour: int = 18  # exclusive
    timezone: str = "Europe/Kyiv"


@dataclass(frozen=True)
class BotConfig:
    """Typed, immutable bot configuration."""

    discord_token: str
    mentor_role_id: str
    on_duty_role_id: Optional[str] = None
    share_chat_url: Optional[str] = None
    work_hours: WorkHoursConfig = field(default_factory=WorkHoursConfig)
    cooldown_ms: int = 3000
    fallback_dm: bool = True
    health_port: Optional[int] = 8080

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotConfig":
        """Create BotConfig from environment variables.

        Raises MissingSettingError for an absent mandatory variable and
        ConfigError for a value that does not parse or is out of range.
        """
        env = os.environ if environ is None else environ

        for name in REQUIRED:
            if not env.get(name, "").strip():
                raise MissingSettingError(name)

        def get(name: str) -> str:
            return env.get(name, DEFAULTS[name]).strip()

        work_hours = WorkHoursConfig(
            work_days=_parse_work_days(get("WORK_DAYS")),
            start_hour=_parse_hour("WORK_START", get("WORK_START")),
            end_hour=_parse_hour("WORK_END", get("WORK_END")),
            timezone=_parse_timezone(get("KYIV_TZ")),
        )
        if work_hours.start_hour >= work_hours.end_hour:
            raise ConfigError(
                f"WORK_START ({work_hours.start_hour}) must be earlier than "
                f"WORK_END ({work_hours.end_hour}); overnight windows are not supported"
            )

        cooldown_ms = _parse_int("COOLDOWN_MS", get("COOLDOWN_MS"))
        if cooldown_ms < 0:
            raise ConfigError(f"COOLDOWN_MS must not be negative, got {cooldown_ms}")

        on_duty_role_id = env.get("ON_DUTY_ROLE_ID", "").strip() or None

        return cls(
            discord_token=env["DISCORD_TOKEN"].strip(),
            mentor_role_id=_parse_snowflake("MENTOR_ROLE_ID", env["MENTOR_ROLE_ID"].strip()),
            on_duty_role_id=on_duty_role_id and _parse_snowflake("ON_DUTY_ROLE_ID", on_duty_role_id),
            share_chat_url=env.get("SHARE_CHAT_URL", "").strip() or None,
            work_hours=work_hours,
            cooldown_ms=cooldown_ms,
            fallback_dm=get("FALLBACK_DM").lower() == "true",
            health_port=_parse_port(env.get("HEALTH_PORT", DEFAULTS["HEALTH_PORT"]).strip()),
        )


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _parse_hour(name: str, raw: str) -> int:
    hour = _parse_int(name, raw)
    if not 0 <= hour <= 23:
        raise ConfigError(f"{name} must be between 0 and 23, got {hour}")
    return hour


def _parse_snowflake(name: str, raw: str) -> str:
    # Discord ids are numeric; kept as strings
    if not raw.isdigit():
        raise ConfigError(f"{name} must be a numeric Discord id, got {raw!r}")
    return raw


def _parse_work_days(raw: str) -> FrozenSet[int]:
    days = set()
    for part in raw.split(","):
        day = _parse_int("WORK_DAYS", part.strip())
        if not 1 <= day <= 7:
            raise ConfigError(f"WORK_DAYS entries must be ISO weekdays 1-7, got {day}")
        days.add(day)
    return frozenset(days)


def _parse_timezone(raw: str) -> str:
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError, KeyError):
        raise ConfigError(f"KYIV_TZ is not a known timezone: {raw!r}")
    return raw


def _parse_port(raw: str) -> Optional[int]:
    if not raw:
        return None
    port = _parse_int("HEALTH_PORT", raw)
    if not 0 <= port <= 65535:
        raise ConfigError(f"HEALTH_PORT must be between 0 and 65535, got {port}")
    return port or None


def load_config_or_exit(environ: Optional[Mapping[str, str]] = None) -> BotConfig:
    """Load config, or report the problem on stderr and exit with status 1."""
    try:
        return BotConfig.from_env(environ)
    except MissingSettingError as e:
        _stderr_print(str(e))
        raise SystemExit(1)
    except ConfigError as e:
        _stderr_print(f"Invalid configuration: {e}")
        raise SystemExit(1)
