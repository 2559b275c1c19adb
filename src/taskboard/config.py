# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Settings loaded from environment variables (+ optional .env).

Nothing here requires secrets at import time: ``load_settings`` is called
when the application starts, and raises ``ConfigError`` for missing values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from taskboard.errors import ConfigError

ENV_PREFIX = "TASKBOARD"

DEFAULT_PORT = 3200
DEFAULT_DB_NAME = "node-project"
USERS_COLLECTION = "users"
TASKS_COLLECTION = "todo"

# argon2 cost parameters
DEFAULT_HASH_TIME_COST = 3
DEFAULT_HASH_MEMORY_COST = 65536


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(*names: str, default: Optional[str] = None) -> Optional[str]:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v.strip()
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(*names: str, default: int) -> int:
    raw = _first_env(*names)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{names[0]} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    session_secret: str
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    db_name: str = DEFAULT_DB_NAME
    cookie_name: str = "taskboard_session"
    session_max_age: int = 28800  # 8 hours
    cookie_secure: bool = False
    hash_time_cost: int = DEFAULT_HASH_TIME_COST
    hash_memory_cost: int = DEFAULT_HASH_MEMORY_COST
    mongo_timeout_ms: int = 5000
    log_level: str = "INFO"
    reload: bool = False

    def cookie_settings(self) -> dict:
        return {"httponly": True, "samesite": "lax", "secure": self.cookie_secure}


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build ``Settings`` from the process environment."""
    if dotenv:
        load_dotenv(override=False)

    mongo_uri = _first_env("MONGO_URI", _k("MONGO_URI"))
    if not mongo_uri:
        raise ConfigError("Missing MONGO_URI (or TASKBOARD_MONGO_URI) in environment")
    secret = _first_env("SESSION_SECRET", "SECRET_KEY", _k("SECRET_KEY"))
    if not secret:
        raise ConfigError("Missing SESSION_SECRET (or SECRET_KEY) in environment")

    return Settings(
        mongo_uri=mongo_uri,
        session_secret=secret,
        port=_env_int("PORT", _k("PORT"), default=DEFAULT_PORT),
        host=_first_env(_k("HOST"), default="0.0.0.0"),
        db_name=_first_env(_k("DB_NAME"), default=DEFAULT_DB_NAME),
        cookie_name=_first_env(_k("COOKIE_NAME"), default="taskboard_session"),
        session_max_age=_env_int(_k("SESSION_MAX_AGE"), default=28800),
        cookie_secure=_env_bool(_k("COOKIE_SECURE"), False),
        hash_time_cost=_env_int(_k("HASH_TIME_COST"), default=DEFAULT_HASH_TIME_COST),
        hash_memory_cost=_env_int(_k("HASH_MEMORY_COST"), default=DEFAULT_HASH_MEMORY_COST),
        mongo_timeout_ms=_env_int(_k("MONGO_TIMEOUT_MS"), default=5000),
        log_level=_first_env(_k("LOG_LEVEL"), default="INFO").upper(),
        reload=_env_bool(_k("RELOAD"), False),
    )
