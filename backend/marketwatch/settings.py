from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


DEFAULT_QUOTE_BASE_URL = "https://www.alphavantage.co/query"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    database_url: str
    alpha_vantage_api_key: str | None
    quote_base_url: str = DEFAULT_QUOTE_BASE_URL
    requests_per_minute: int = 5
    request_timeout_sec: float = 10.0
    log_level: str = "INFO"

    @property
    def request_interval_sec(self) -> float:
        # 5 req/min -> 12s between two provider calls
        return 60.0 / self.requests_per_minute

    def __post_init__(self) -> None:
        if self.requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be > 0")
        if self.request_timeout_sec <= 0:
            raise ValueError("request_timeout_sec must be > 0")


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _data_dir() -> Path:
    env = _env("MARKETWATCH_DATA_DIR")
    if env:
        p = Path(env).expanduser()
    else:
        # marketwatch/settings.py -> marketwatch/ -> backend/
        p = Path(__file__).resolve().parents[1] / "data"
    p.mkdir(parents=True, exist_ok=True)
    return p


def load_settings() -> Settings:
    """Read settings from the environment (no caching)."""
    data_dir = _data_dir()
    database_url = _env("MARKETWATCH_DATABASE_URL") or f"sqlite:///{(data_dir / 'marketwatch.db').as_posix()}"

    return Settings(
        data_dir=data_dir,
        database_url=database_url,
        alpha_vantage_api_key=_env("ALPHA_VANTAGE_API_KEY"),
        quote_base_url=_env("MARKETWATCH_QUOTE_BASE_URL") or DEFAULT_QUOTE_BASE_URL,
        requests_per_minute=int(_env("MARKETWATCH_REQUESTS_PER_MINUTE") or 5),
        request_timeout_sec=float(_env("MARKETWATCH_REQUEST_TIMEOUT_SEC") or 10.0),
        log_level=(_env("MARKETWATCH_LOG_LEVEL") or "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
