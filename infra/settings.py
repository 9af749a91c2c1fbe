"""Environment-driven defaults (read from the process env and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_json: bool = False
    seed: Optional[int] = None


def load_settings() -> Settings:
    """Build settings from CTF_LOG_LEVEL, CTF_LOG_JSON and CTF_SEED."""
    return Settings(
        log_level=os.getenv("CTF_LOG_LEVEL", "INFO").upper(),
        log_json=_env_bool("CTF_LOG_JSON", False),
        seed=_env_int("CTF_SEED"),
    )
