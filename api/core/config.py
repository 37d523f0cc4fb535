"""
Environment helpers.

Settings are read from the process environment on every call, so tests can
override them with `monkeypatch.setenv`. A local `.env` file is loaded once
at import time for development.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def cors_origins() -> list[str]:
    raw = env_str("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def quiz_time_limit_ms() -> int:
    # 20 minutes per attempt.
    limit = env_int("QUIZ_TIME_LIMIT_MS", 20 * 60 * 1000)
    return limit if limit > 0 else 20 * 60 * 1000
