"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Names uvicorn accepts; stdlib aliases like WARN or FATAL are not among them.
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    max_sessions: int = 1000


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``TICTACTOE_*`` variables.

    Raises ``ValueError`` when a numeric variable is not a positive integer
    or the log level is not one the server understands.
    """

    env = os.environ if environ is None else environ
    port = int(env.get("TICTACTOE_PORT", "8000"))
    max_sessions = int(env.get("TICTACTOE_MAX_SESSIONS", "1000"))
    if port <= 0 or max_sessions <= 0:
        raise ValueError("TICTACTOE_PORT and TICTACTOE_MAX_SESSIONS must be positive")
    log_level = env.get("TICTACTOE_LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Unsupported TICTACTOE_LOG_LEVEL {log_level!r}. "
            f"Choose one of {', '.join(LOG_LEVELS)}."
        )
    return Settings(
        host=env.get("TICTACTOE_HOST", "0.0.0.0"),
        port=port,
        log_level=log_level,
        max_sessions=max_sessions,
    )
