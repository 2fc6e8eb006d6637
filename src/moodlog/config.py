"""Configuration management for moodlog."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.entries import DEFAULT_MOODS

logger = logging.getLogger(__name__)

MOODLOG_HOME = Path(os.environ.get("MOODLOG_HOME", Path.home() / "moodlog"))
CONFIG_FILE = MOODLOG_HOME / "config" / "moodlog.conf"


@dataclass
class Config:
    """moodlog configuration."""

    firestore_project_id: str = ""
    firestore_api_key: str = ""
    firestore_database: str = "(default)"
    firestore_collection: str = "moodEntries"
    firestore_emulator_host: str = ""
    request_timeout: float = 10.0
    moods: list[str] = field(default_factory=lambda: list(DEFAULT_MOODS))
    timezone: str = "UTC"
    modal_appear_delay: float = 0.01
    modal_dismiss_delay: float = 0.3
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)
    telegram_reminder_time: str = ""


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_float(key: str, value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}, using {default}")
        return default


def _parse_timezone(value: str, default: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown TIMEZONE: {value!r}, using {default}")
        return default
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from moodlog.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "firestore_project_id":
                config.firestore_project_id = value
            case "firestore_api_key":
                config.firestore_api_key = value
            case "firestore_database":
                config.firestore_database = value or config.firestore_database
            case "firestore_collection":
                config.firestore_collection = value or config.firestore_collection
            case "firestore_emulator_host":
                config.firestore_emulator_host = value
            case "request_timeout":
                config.request_timeout = _parse_float(key, value, config.request_timeout)
            case "moods":
                moods = [m.strip() for m in value.split(",") if m.strip()]
                if moods:
                    config.moods = moods
            case "timezone":
                config.timezone = _parse_timezone(value, config.timezone)
            case "modal_appear_delay":
                config.modal_appear_delay = _parse_float(key, value, config.modal_appear_delay)
            case "modal_dismiss_delay":
                config.modal_dismiss_delay = _parse_float(key, value, config.modal_dismiss_delay)
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                users = []
                for u in value.split(","):
                    u = u.strip()
                    if not u:
                        continue
                    try:
                        users.append(int(u))
                    except ValueError:
                        logger.warning(f"Ignoring invalid Telegram user id: {u!r}")
                config.telegram_allowed_users = users
            case "telegram_reminder_time":
                config.telegram_reminder_time = value

    return config
