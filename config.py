import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import dotenv_values

DEFAULT_DATABASE_URL = "sqlite:///./blackjack.db"
DEFAULT_LOG_LEVEL = "INFO"


def _load_env_from_files() -> dict:
    """
    Load variables from the ``.env`` file next to this module, without
    writing them into ``os.environ`` (kept in memory only).
    """
    env_file = Path(__file__).parent / ".env"
    if env_file.exists():
        return dict(dotenv_values(env_file))
    return {}


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str


def _get(env: dict, key: str, default: str) -> str:
    value = os.environ.get(key) or env.get(key)
    if not value or not value.strip():
        return default
    return value.strip()


@lru_cache()
def get_settings() -> Settings:
    """Settings from the environment, falling back to ``.env`` and then to defaults."""
    env = _load_env_from_files()
    return Settings(
        database_url=_get(env, "BLACKJACK_DATABASE_URL", DEFAULT_DATABASE_URL),
        log_level=_get(env, "BLACKJACK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
