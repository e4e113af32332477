from __future__ import annotations

import logging
import os
from dataclasses import dataclass

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class CompilerPolicy:
    default_artboard_width: int
    default_artboard_height: int
    default_duration_s: float
    max_prompt_chars: int
    log_level: str


def _env_int(name: str, fallback: int, min_value: int = 1, max_value: int = 100_000) -> int:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return max(min_value, min(max_value, value))


def _env_float(name: str, fallback: float, min_value: float = 0.1, max_value: float = 3600.0) -> float:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return fallback
    try:
        value = float(raw)
    except ValueError:
        return fallback
    return max(min_value, min(max_value, value))


def _env_log_level(name: str, fallback: str = "INFO") -> str:
    raw = str(os.getenv(name, "")).strip().upper()
    if raw in VALID_LOG_LEVELS:
        return raw
    return fallback


def default_policy() -> CompilerPolicy:
    return CompilerPolicy(
        default_artboard_width=_env_int("MAESTRO_DEFAULT_ARTBOARD_WIDTH", 800, min_value=16, max_value=16_384),
        default_artboard_height=_env_int("MAESTRO_DEFAULT_ARTBOARD_HEIGHT", 600, min_value=16, max_value=16_384),
        default_duration_s=_env_float("MAESTRO_DEFAULT_DURATION_S", 4.0, min_value=0.5, max_value=600.0),
        max_prompt_chars=_env_int("MAESTRO_MAX_PROMPT_CHARS", 4000, min_value=16, max_value=100_000),
        log_level=_env_log_level("MAESTRO_LOG_LEVEL"),
    )


def configure_logging(policy: CompilerPolicy | None = None) -> None:
    active = policy or default_policy()
    logging.getLogger("maestro").setLevel(getattr(logging, active.log_level, logging.INFO))


__all__ = ["CompilerPolicy", "configure_logging", "default_policy"]
