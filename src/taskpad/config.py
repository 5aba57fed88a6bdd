# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing secret is needed to start; all values have local defaults.
- Services receive settings by injection; only the CLI calls get_settings().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPAD"

STORE_BACKENDS = ("sqlite", "memory")


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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default


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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path
    store_backend: str
    export_path: Path

    # ---- Behaviour ----
    anonymous_mode: bool

    # ---- Simulated latency / transitions (seconds) ----
    loading_seconds: float
    signup_delay_seconds: float
    login_delay_seconds: float
    redirect_delay_seconds: float
    fade_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "store.sqlite3")
        export_path = _env_path(_k("EXPORT_PATH"), data_dir / "tasks.json")

        store_backend = _env(_k("STORE_BACKEND"), "sqlite").strip().lower()
        if store_backend not in STORE_BACKENDS:
            store_backend = "sqlite"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            store_backend=store_backend,
            export_path=export_path,
            anonymous_mode=_env_bool(_k("ANONYMOUS_MODE"), False),
            loading_seconds=_env_float(_k("LOADING_SECONDS"), 2.0),
            signup_delay_seconds=_env_float(_k("SIGNUP_DELAY_SECONDS"), 1.0),
            login_delay_seconds=_env_float(_k("LOGIN_DELAY_SECONDS"), 0.8),
            redirect_delay_seconds=_env_float(_k("REDIRECT_DELAY_SECONDS"), 1.5),
            fade_seconds=_env_float(_k("FADE_SECONDS"), 0.25),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load settings once per process (.env first, real environment wins)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
