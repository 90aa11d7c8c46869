# settings.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from personalization.errors import ValidationError

load_dotenv()

PREFIX = "TRAVELMATE_"


def get_env_var(key, default=None):
    """Read TRAVELMATE_<key> from the environment (or .env)."""
    return os.getenv(PREFIX + key, default)


def _bool(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _number(key, default, cast=float):
    raw = get_env_var(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValidationError(f"{PREFIX}{key} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    secret_key: str = "dev-secret-key"
    log_level: str = "INFO"
    storage: str = "memory"
    sqlite_path: str = "travelmate.db"
    seed_data: bool = True
    default_radius_km: float = 10
    local_places_radius_km: float = 5
    flush_interval: float = 5
    tracker_autostart: bool = True
    ai_reply_delay: float = 1.5
    location_timeout: float = 10
    location_max_age: float = 300
    tracking_max_age: float = 60
    geolocation_url: str = "http://ip-api.com/json/"

    @classmethod
    def from_env(cls):
        storage = get_env_var("STORAGE", "memory").lower()
        if storage not in ("memory", "sqlite"):
            raise ValidationError(f"{PREFIX}STORAGE must be 'memory' or 'sqlite', got {storage!r}")

        return cls(
            secret_key=get_env_var("SECRET_KEY", "dev-secret-key"),
            log_level=get_env_var("LOG_LEVEL", "INFO").upper(),
            storage=storage,
            sqlite_path=get_env_var("SQLITE_PATH", "travelmate.db"),
            seed_data=_bool(get_env_var("SEED_DATA", "true")),
            default_radius_km=_number("DEFAULT_RADIUS_KM", 10),
            local_places_radius_km=_number("LOCAL_PLACES_RADIUS_KM", 5),
            flush_interval=_number("FLUSH_INTERVAL", 5),
            tracker_autostart=_bool(get_env_var("TRACKER_AUTOSTART", "true")),
            ai_reply_delay=_number("AI_REPLY_DELAY", 1.5),
            location_timeout=_number("LOCATION_TIMEOUT", 10),
            location_max_age=_number("LOCATION_MAX_AGE", 300),
            tracking_max_age=_number("TRACKING_MAX_AGE", 60),
            geolocation_url=get_env_var("GEOLOCATION_URL", "http://ip-api.com/json/"),
        )
