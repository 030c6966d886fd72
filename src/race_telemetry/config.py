"""Runtime settings read from ``RACE_TELEMETRY_*`` environment variables.

Entry points call ``dotenv.load_dotenv()`` first so a ``.env`` file in the
working directory is honoured.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from race_telemetry.ingest.source import DEFAULT_HOST, DEFAULT_PORT
from race_telemetry.protocol import MAX_PACKET_SIZE

_PREFIX = "RACE_TELEMETRY_"


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{_PREFIX}{name} must be an integer, got {raw!r}") from None


_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{_PREFIX}{name} must be a boolean, got {raw!r}")


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _log_level(env: Mapping[str, str], default: str) -> str:
    raw = env.get(_PREFIX + "LOG_LEVEL")
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().upper()
    if value not in _LOG_LEVELS:
        choices = ", ".join(_LOG_LEVELS)
        raise ValueError(f"{_PREFIX}LOG_LEVEL must be one of {choices}, got {raw!r}")
    return value


@dataclass
class Settings:
    """Where to listen and how loud to log."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    buffer_size: int = MAX_PACKET_SIZE
    log_level: str = "INFO"
    listen: bool = True
    """Whether the web app starts ingesting on startup."""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *env* (``os.environ`` by default)."""
        env = os.environ if env is None else env
        settings = cls(
            host=env.get(_PREFIX + "HOST") or DEFAULT_HOST,
            port=_int(env, "PORT", DEFAULT_PORT),
            buffer_size=_int(env, "BUFFER_SIZE", MAX_PACKET_SIZE),
            log_level=_log_level(env, "INFO"),
            listen=_bool(env, "LISTEN", True),
        )
        if not 0 < settings.port < 65536:
            raise ValueError(f"{_PREFIX}PORT out of range: {settings.port}")
        if settings.buffer_size < MAX_PACKET_SIZE:
            raise ValueError(
                f"{_PREFIX}BUFFER_SIZE must be at least {MAX_PACKET_SIZE}, got {settings.buffer_size}"
            )
        return settings
