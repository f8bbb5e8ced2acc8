# debtplan/config.py
"""Environment-driven settings for the payoff engine and its HTTP surface.

Only reads ``os.environ``; the app entry point loads ``.env`` first.
"""

import os
from dataclasses import dataclass
from typing import Tuple


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_json: bool = False
    currency_symbol: str = "$"
    default_strategy: str = "AVALANCHE"
    cors_origins: Tuple[str, ...] = ("*",)


def get_settings() -> Settings:
    """Read settings from the environment.

    Built fresh on every call so tests can monkeypatch the environment.
    """
    return Settings(
        log_level=os.getenv("DEBTPLAN_LOG_LEVEL", "INFO").strip().upper(),
        log_json=_env_bool("DEBTPLAN_LOG_JSON", default=False),
        currency_symbol=os.getenv("DEBTPLAN_CURRENCY_SYMBOL", "$"),
        default_strategy=os.getenv("DEBTPLAN_DEFAULT_STRATEGY", "AVALANCHE").strip().upper(),
        cors_origins=_env_list("DEBTPLAN_CORS_ORIGINS", "*"),
    )
