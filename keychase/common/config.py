from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(value: str, default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _env_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


def _parse_origins(value: str | None) -> list[str]:
    if not value:
        return [
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ]
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    grid_width: int = int(os.getenv("KEYCHASE_GRID_WIDTH", "20"))
    language: str = os.getenv("KEYCHASE_LANGUAGE", "english_lower")
    random_seed: int | None = _env_int(os.getenv("KEYCHASE_RANDOM_SEED"))
    chaser_interval_ms: int = int(os.getenv("KEYCHASE_CHASER_INTERVAL_MS", "1100"))
    nommer_interval_ms: int = int(os.getenv("KEYCHASE_NOMMER_INTERVAL_MS", "800"))
    runner_interval_ms: int = int(os.getenv("KEYCHASE_RUNNER_INTERVAL_MS", "800"))
    unpause_delay_ms: int = int(os.getenv("KEYCHASE_UNPAUSE_DELAY_MS", "1000"))
    autostart: bool = _env_bool(os.getenv("KEYCHASE_AUTOSTART", "1"))
    cors_origins: list[str] = field(
        default_factory=lambda: _parse_origins(os.getenv("KEYCHASE_CORS_ORIGINS"))
    )


settings = Settings()
