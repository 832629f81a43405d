# Role: Central configuration module. Loads .env into environment variables and computes runtime flags (DEBUG).
# RouterSettings holds the routing constants (cooldowns, attempt cap, confidence thresholds); importers read
# widget_router.config.DEBUG to control debug tracing without threading flags through every call.

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel

DEBUG: bool = False


def load_env() -> None:
    """
    Load .env into os.environ, then recompute DEBUG.
    This makes DEBUG correct even if load_env() is called after import.
    """
    global DEBUG
    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class RouterSettings(BaseModel):
    standard_cooldown_seconds: float = 60.0
    typed_penalty_seconds: float = 120.0
    typed_instead_window_seconds: float = 30.0
    max_attempts: int = 2

    confidence_high: int = 80
    confidence_medium: int = 60
    confidence_low: int = 40

    expert_completion_threshold: float = 0.5
    history_context_size: int = 10

    @classmethod
    def from_env(cls) -> "RouterSettings":
        # Unset or invalid values keep the defaults.
        defaults = cls()
        return cls(
            standard_cooldown_seconds=_env_float("WIDGET_COOLDOWN_SECONDS", defaults.standard_cooldown_seconds),
            typed_penalty_seconds=_env_float("WIDGET_TYPED_PENALTY_SECONDS", defaults.typed_penalty_seconds),
            typed_instead_window_seconds=_env_float(
                "WIDGET_TYPED_WINDOW_SECONDS", defaults.typed_instead_window_seconds
            ),
            max_attempts=_env_int("WIDGET_MAX_ATTEMPTS", defaults.max_attempts),
            confidence_low=_env_int("CONFIDENCE_LOW", defaults.confidence_low),
            expert_completion_threshold=_env_float(
                "EXPERT_COMPLETION_THRESHOLD", defaults.expert_completion_threshold
            ),
        )
