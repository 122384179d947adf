"""
Desk Configuration
==================
Settings shared by the REPL and the server. Values come from the
environment first; command-line flags override them.

Environment:
    LISTDESK_HOST       Bind address for `serve`    (default 127.0.0.1)
    LISTDESK_PORT       Port for `serve`            (default 8000)
    LISTDESK_LOG_LEVEL  Logging level name          (default WARNING)
    LISTDESK_SEED       Initial records, '|'-separated
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass
class DeskConfig:
    """Configuration for a listdesk process."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "WARNING"
    seed: list[str] = field(default_factory=list)  # Records present at startup

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> DeskConfig:
        """Build a config from LISTDESK_* variables."""
        env = os.environ if environ is None else environ
        config = cls()

        config.host = env.get("LISTDESK_HOST", config.host)

        raw_port = env.get("LISTDESK_PORT")
        if raw_port:
            config.port = parse_port(raw_port)

        raw_level = env.get("LISTDESK_LOG_LEVEL")
        if raw_level:
            config.log_level = parse_log_level(raw_level)

        raw_seed = env.get("LISTDESK_SEED", "")
        config.seed = [s for s in raw_seed.split("|") if s]
        return config


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_log_level(value: str) -> str:
    """Normalise a logging level name, raising ValueError for unknown ones."""
    level = str(value).strip().upper()
    if level == "WARN":
        level = "WARNING"
    if level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {value!r} (choose from {', '.join(LOG_LEVELS)})"
        )
    return level


def parse_port(value: str) -> int:
    """Parse a TCP port number, raising ValueError if it isn't one."""
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port: {value!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range: {port}")
    return port
