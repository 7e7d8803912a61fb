"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_PREFIX = "DECKQUIZ_"
DEFAULT_ANKI_CONNECT_URL = "http://localhost:8765"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_CACHE_PATH = Path(".deckquiz") / "quizzes.db"


@dataclass(frozen=True)
class Settings:
    """Collaborator endpoints, cache location, and logging level."""

    anki_connect_url: str = DEFAULT_ANKI_CONNECT_URL
    quiz_service_url: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    cache_path: Path = DEFAULT_CACHE_PATH
    timeout_seconds: float = 30.0
    log_level: str = "WARNING"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from `DECKQUIZ_*` variables, falling back to defaults."""
    env = os.environ if environ is None else environ

    def read(name: str) -> str | None:
        value = env.get(ENV_PREFIX + name, "").strip()
        return value or None

    timeout_raw = read("TIMEOUT")
    timeout = 30.0
    if timeout_raw is not None:
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}TIMEOUT must be a number, got {timeout_raw!r}.") from None
        if timeout <= 0:
            raise ValueError(f"{ENV_PREFIX}TIMEOUT must be positive, got {timeout_raw!r}.")

    cache_raw = read("CACHE_PATH")
    return Settings(
        anki_connect_url=read("ANKI_CONNECT_URL") or DEFAULT_ANKI_CONNECT_URL,
        quiz_service_url=read("QUIZ_SERVICE_URL"),
        openai_model=read("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        cache_path=Path(cache_raw) if cache_raw else DEFAULT_CACHE_PATH,
        timeout_seconds=timeout,
        log_level=(read("LOG_LEVEL") or "WARNING").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings."""
    return load_settings()
