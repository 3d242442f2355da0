# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from gigauth.errors import ConfigurationError

_TRUTHY = {"1", "true", "yes", "y"}


@dataclass(frozen=True)
class Settings:
    hashing_secret: str
    session_secret: str
    database_url: str = "sqlite:///./data/gigauth.db"
    cookie_name: str = "connect.sid"
    cookie_secure: bool = False
    session_max_age: int = 60 * 60 * 24
    session_check_period: int = 60 * 60 * 24
    argon2_time_cost: int = 6
    argon2_parallelism: int = 6
    argon2_memory_cost: int = 65536
    login_max_attempts: int = 3
    login_lockout_seconds: int = 5 * 60
    admins_path: Path = Path("data/admins.yml")


def _secret(*names: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    raise ConfigurationError(f"Missing {names[0]} (or {', '.join(names[1:])}) in environment")


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build settings from the environment.

    Both secrets are mandatory: the process must not start without them.
    """
    return Settings(
        hashing_secret=_secret("GIGAUTH_HASHING_SECRET", "HASHINGSECRET"),
        session_secret=_secret("GIGAUTH_SESSION_SECRET", "SESSIONSECRET"),
        database_url=os.getenv("GIGAUTH_DATABASE_URL", "sqlite:///./data/gigauth.db"),
        cookie_name=os.getenv("GIGAUTH_COOKIE_NAME", "connect.sid"),
        cookie_secure=os.getenv("GIGAUTH_COOKIE_SECURE", "false").lower() in _TRUTHY,
        session_max_age=_int("GIGAUTH_SESSION_MAX_AGE", 60 * 60 * 24),
        session_check_period=_int("GIGAUTH_SESSION_CHECK_PERIOD", 60 * 60 * 24),
        argon2_time_cost=_int("GIGAUTH_ARGON2_TIME_COST", 6),
        argon2_parallelism=_int("GIGAUTH_ARGON2_PARALLELISM", 6),
        argon2_memory_cost=_int("GIGAUTH_ARGON2_MEMORY_COST", 65536),
        login_max_attempts=_int("GIGAUTH_LOGIN_MAX_ATTEMPTS", 3),
        login_lockout_seconds=_int("GIGAUTH_LOGIN_LOCKOUT", 5 * 60),
        admins_path=Path(os.getenv("GIGAUTH_ADMINS_PATH", "data/admins.yml")).resolve(),
    )
