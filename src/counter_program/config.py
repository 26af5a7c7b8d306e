"""Runtime configuration read from the environment.

Environment variables:
  - COUNTER_PROGRAM_ID           (hex)  default: 32 zero bytes
  - COUNTER_PROGRAM_LOG_LEVEL    (str)  default: INFO
  - COUNTER_PROGRAM_SERVER_NAME  (str)  default: counter-program

Usage::

    from counter_program.config import load_config
    cfg = load_config()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from .models.account import KEY_SIZE, parse_key

DEFAULT_PROGRAM_ID = bytes(KEY_SIZE)
DEFAULT_SERVER_NAME = "counter-program"


@dataclass(frozen=True)
class Config:
    program_id: bytes = DEFAULT_PROGRAM_ID
    log_level: int = logging.INFO
    server_name: str = DEFAULT_SERVER_NAME


def _log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{name}'")
    return level


def config_from_env(env: dict[str, str] | None = None) -> Config:
    """Build a Config from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env

    program_id = DEFAULT_PROGRAM_ID
    if env.get("COUNTER_PROGRAM_ID"):
        program_id = parse_key(env["COUNTER_PROGRAM_ID"])

    return Config(
        program_id=program_id,
        log_level=_log_level(env.get("COUNTER_PROGRAM_LOG_LEVEL") or "INFO"),
        server_name=env.get("COUNTER_PROGRAM_SERVER_NAME") or DEFAULT_SERVER_NAME,
    )


@lru_cache(maxsize=1)
def load_config() -> Config:
    """Return the process-wide Config, read once from the environment."""
    return config_from_env()
