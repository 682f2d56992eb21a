"""Configuration management"""
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from hapien.exceptions import ConfigurationError

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Monitoring
ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "false").lower() == "true"

# Gamification
# IANA timezone used for every hour-of-day and calendar-day rule.
# Empty means the process' local time.
GAMIFICATION_TIMEZONE: str = os.getenv("GAMIFICATION_TIMEZONE", "")

# Optional JSON file overriding any subset of the economy tables
_economy_file = os.getenv("GAMIFICATION_ECONOMY_FILE", "")
GAMIFICATION_ECONOMY_FILE: Optional[Path] = Path(_economy_file) if _economy_file else None


def get_timezone() -> Optional[ZoneInfo]:
    """Configured gamification timezone, or None for process local time"""
    if not GAMIFICATION_TIMEZONE:
        return None
    try:
        return ZoneInfo(GAMIFICATION_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown timezone '{GAMIFICATION_TIMEZONE}'",
            config_key="GAMIFICATION_TIMEZONE",
            cause=e,
        )


# Validation
def validate_config() -> None:
    """Validate configuration"""
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Invalid LOG_LEVEL '{LOG_LEVEL}'", config_key="LOG_LEVEL")
    get_timezone()
    if GAMIFICATION_ECONOMY_FILE is not None and not GAMIFICATION_ECONOMY_FILE.is_file():
        raise ConfigurationError(
            f"Economy file not found: {GAMIFICATION_ECONOMY_FILE}",
            config_key="GAMIFICATION_ECONOMY_FILE",
        )
