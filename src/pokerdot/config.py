"""
Runtime configuration for the pokerdot client.

Values come from ``POKERDOT_*`` environment variables (a project ``.env`` is
loaded by the CLI before this module is consulted) and fall back to the
defaults the web client shipped with.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent

# Local store
STORAGE_KEY = "pokerdot-games"
SESSION_MAX_AGE_MS = 1000 * 60 * 60 * 24 * 7  # 7 days

# Game server API
API_PORT = 7000
API_PATH = "/api"

# Reconnect policy (seconds)
MIN_RECONNECT_DELAY = 1.0
RECONNECT_JITTER = 4.0
MAX_RECONNECT_DELAY = 10.0
RECONNECT_GROW_FACTOR = 1.3
CONNECTION_TIMEOUT = 4.0


def _default_data_dir() -> Path:
    return Path(os.getenv("POKERDOT_DATA_DIR", str(Path.home() / ".pokerdot")))


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Config:
    """Effective settings, rebuilt from the environment by ``reload``."""

    data_dir: Path = field(default_factory=_default_data_dir)
    host: str = "localhost"
    storage_key: str = STORAGE_KEY
    session_max_age_ms: int = SESSION_MAX_AGE_MS
    min_reconnect_delay: float = MIN_RECONNECT_DELAY
    reconnect_jitter: float = RECONNECT_JITTER
    max_reconnect_delay: float = MAX_RECONNECT_DELAY
    reconnect_grow_factor: float = RECONNECT_GROW_FACTOR
    connection_timeout: float = CONNECTION_TIMEOUT

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            data_dir=_default_data_dir(),
            host=os.getenv("POKERDOT_HOST", "localhost"),
            storage_key=os.getenv("POKERDOT_STORAGE_KEY", STORAGE_KEY),
            min_reconnect_delay=_env_float(
                "POKERDOT_MIN_RECONNECT_DELAY", MIN_RECONNECT_DELAY
            ),
            reconnect_jitter=_env_float("POKERDOT_RECONNECT_JITTER", RECONNECT_JITTER),
            max_reconnect_delay=_env_float(
                "POKERDOT_MAX_RECONNECT_DELAY", MAX_RECONNECT_DELAY
            ),
            reconnect_grow_factor=_env_float(
                "POKERDOT_RECONNECT_GROW_FACTOR", RECONNECT_GROW_FACTOR
            ),
            connection_timeout=_env_float(
                "POKERDOT_CONNECTION_TIMEOUT", CONNECTION_TIMEOUT
            ),
        )

    def reload(self) -> None:
        """Re-read the environment in place."""
        fresh = Config.from_env()
        for name in self.__dataclass_fields__:
            setattr(self, name, getattr(fresh, name))


CONFIG = Config.from_env()
