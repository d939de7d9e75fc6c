"""Environment-driven settings for the greeter service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_REALTIME_URL = "wss://api.openai.com/v1/realtime"
DEFAULT_REALTIME_MODEL = "gpt-4o-realtime-preview"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name}={raw!r} is not a number") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name}={raw!r} is not a whole number of seconds") from exc
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


@dataclass(frozen=True)
class GreeterSettings:
    """Process-wide configuration read once at startup.

    Attributes:
        openai_api_key: Provider credential; never sent to clients.
        database_dir: Directory holding the session store database, if configured.
        realtime_url: Base URL of the upstream realtime endpoint.
        realtime_model: Model name passed to the realtime endpoint.
        connect_timeout: Seconds allowed for the upstream websocket handshake.
        inject_interval: Seconds between compliment checks on a live connection.
        compliment_ttl: Seconds a stored compliment stays readable.
        purge_interval: Seconds between background purges of expired rows.
    """

    openai_api_key: Optional[str] = None
    database_dir: Optional[Path] = None
    realtime_url: str = DEFAULT_REALTIME_URL
    realtime_model: str = DEFAULT_REALTIME_MODEL
    connect_timeout: float = 10.0
    inject_interval: float = 10.0
    compliment_ttl: int = 60
    purge_interval: float = 300.0

    @classmethod
    def from_env(cls) -> "GreeterSettings":
        """Build settings from environment variables (see `.env`)."""
        api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
        db_dir = (os.getenv("DATABASE_DIR") or "").strip()
        return cls(
            openai_api_key=api_key,
            database_dir=Path(db_dir).expanduser() if db_dir else None,
            realtime_url=os.getenv("OPENAI_REALTIME_URL") or DEFAULT_REALTIME_URL,
            realtime_model=os.getenv("OPENAI_REALTIME_MODEL") or DEFAULT_REALTIME_MODEL,
            connect_timeout=_env_float("REALTIME_CONNECT_TIMEOUT", 10.0),
            inject_interval=_env_float("COMPLIMENT_INJECT_INTERVAL", 10.0),
            compliment_ttl=_env_int("COMPLIMENT_TTL_SECONDS", 60),
            purge_interval=_env_float("STORE_PURGE_INTERVAL", 300.0),
        )

    @property
    def realtime_endpoint(self) -> str:
        """Return the full realtime URL including the model query parameter."""
        separator = "&" if "?" in self.realtime_url else "?"
        return f"{self.realtime_url}{separator}model={self.realtime_model}"
