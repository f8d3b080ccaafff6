import os
from dataclasses import dataclass
from typing import Optional

from sipbuddy.config.paths import PRODUCTS_FEED_PATH, DEPARTMENT_FEED_PATH, SETTINGS_DB_PATH


def _env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment."""

    feed_path: str = PRODUCTS_FEED_PATH
    feed_format: str = "shop"
    fallback_feed_path: Optional[str] = DEPARTMENT_FEED_PATH
    fallback_feed_format: str = "department"
    db_path: str = SETTINGS_DB_PATH
    cors_origin: str = "http://localhost:3000"
    port: int = 4000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            feed_path=_env("SIPBUDDY_FEED_PATH", PRODUCTS_FEED_PATH),
            feed_format=_env("SIPBUDDY_FEED_FORMAT", "shop").lower(),
            fallback_feed_path=_env("SIPBUDDY_FALLBACK_FEED_PATH", DEPARTMENT_FEED_PATH),
            fallback_feed_format=_env("SIPBUDDY_FALLBACK_FEED_FORMAT", "department").lower(),
            db_path=_env("SIPBUDDY_DB_PATH", SETTINGS_DB_PATH),
            cors_origin=_env("SIPBUDDY_CORS_ORIGIN", "http://localhost:3000"),
            port=_env_int("PORT", 4000),
        )
