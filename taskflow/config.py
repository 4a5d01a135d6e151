from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from taskflow.domain.enums import StoreBackend


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    store_backend: str = StoreBackend.MEMORY.value
    database_url: str | None = None
    latency_scale: float = 1.0
    log_level: str = "INFO"
    log_dir: str = "logs"


def load_settings() -> Settings:
    return Settings(
        store_backend=os.getenv("STORE_BACKEND", StoreBackend.MEMORY.value).strip().lower(),
        database_url=os.getenv("DATABASE_URL", "").strip() or None,
        latency_scale=float(os.getenv("SIMULATED_LATENCY_SCALE", "1.0")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
    )


load_env()

SETTINGS = load_settings()
