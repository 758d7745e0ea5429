from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "ORDER_COMPOSER_"


def _env(name: str, fallback: str | None = None) -> str | None:
    return os.getenv(ENV_PREFIX + name, fallback)


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = _env(name, fallback)
    if not raw_value:
        return []
    return [item.strip().upper() for item in raw_value.split(",") if item.strip()]


def _get_bool(name: str, fallback: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return fallback
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    default_currency: str = field(
        default_factory=lambda: (_env("DEFAULT_CURRENCY", "EUR") or "EUR").upper()
    )
    currencies: List[str] = field(
        default_factory=lambda: _get_list("CURRENCIES", "EUR,USD,GBP")
    )
    catalog_path: str | None = field(default_factory=lambda: _env("CATALOG_PATH"))
    compose_timeout_seconds: float = field(
        default_factory=lambda: float(_env("COMPOSE_TIMEOUT_SECONDS", "10") or "10")
    )
    host: str = field(default_factory=lambda: _env("HOST", "0.0.0.0") or "0.0.0.0")
    port: int = field(default_factory=lambda: int(_env("PORT", "8000") or "8000"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    json_logs: bool = field(default_factory=lambda: _get_bool("LOG_JSON"))


def load_settings() -> Settings:
    return Settings()
