# src/seat_watch/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Poll interval and per-sweep concurrency are plain settings, not constants.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SEATWATCH"

DEFAULT_BANNER_BASE_URL = "https://banner9-registration.kfupm.edu.sa/StudentRegistrationSsb"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Connector flags ----
    console_enabled: bool
    matrix_enabled: bool

    # ---- Registration platform ----
    banner_base_url: str
    query_timeout_seconds: float
    page_max_size: int

    # ---- Polling ----
    poll_interval_seconds: float
    poll_max_concurrency: int

    # ---- Matrix ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_access_token: str
    matrix_device_id: str
    matrix_rooms: list[str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "seat-watch").strip() or "seat-watch"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/seat_watch"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        matrix_enabled = _env_bool(_k("MATRIX_ENABLED"), False)

        banner_base_url = (_env(_k("BANNER_BASE_URL"), DEFAULT_BANNER_BASE_URL).strip() or DEFAULT_BANNER_BASE_URL)
        query_timeout_seconds = max(1.0, _env_float(_k("QUERY_TIMEOUT_SECONDS"), 20.0))
        page_max_size = _env_int(_k("PAGE_MAX_SIZE"), 50)

        poll_interval_seconds = max(1.0, _env_float(_k("POLL_INTERVAL_SECONDS"), 300.0))
        poll_max_concurrency = max(1, _env_int(_k("POLL_MAX_CONCURRENCY"), 4))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            matrix_enabled=matrix_enabled,
            banner_base_url=banner_base_url.rstrip("/"),
            query_timeout_seconds=query_timeout_seconds,
            page_max_size=page_max_size,
            poll_interval_seconds=poll_interval_seconds,
            poll_max_concurrency=poll_max_concurrency,
            matrix_homeserver=_env(_k("MATRIX_HOMESERVER")).strip(),
            matrix_user_id=_env(_k("MATRIX_USER_ID")).strip(),
            matrix_password=_env(_k("MATRIX_PASSWORD")).strip(),
            matrix_access_token=_env(_k("MATRIX_ACCESS_TOKEN")).strip(),
            matrix_device_id=_env(_k("MATRIX_DEVICE_ID")).strip(),
            matrix_rooms=_env_list(_k("MATRIX_ROOMS"), []),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
