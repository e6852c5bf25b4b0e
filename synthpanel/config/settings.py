"""Centralized environment-based settings for synthpanel.

Reads configuration from environment variables with sensible defaults.
The LLM client reads its own API key from env, so this module provides
the system-level settings that aren't client-specific.

Usage:
    from synthpanel.config.settings import get_settings
    settings = get_settings()
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SynthPanelSettings:
    """Immutable application settings loaded from environment."""

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True

    # Storage
    data_dir: Path = Path("data")
    persist_storage: bool = True

    # LLM model override (empty = use client default)
    llm_model: str = ""
    llm_max_tokens: int = 1024
    persona_max_tokens: int = 16000

    # Test runs
    default_persona_count: int = 100
    max_persona_count: int = 150
    max_concurrency: int = 0
    run_timeout_seconds: float = 300.0
    test_price_usd: float = 29.0

    # Feature flags
    enforce_paywall: bool = False

    @property
    def concurrency_limit(self) -> int | None:
        """Fan-out cap, or None for unbounded dispatch."""
        return self.max_concurrency if self.max_concurrency > 0 else None

    def has_anthropic_key(self) -> bool:
        return bool(os.environ.get("ANTHROPIC_API_KEY"))


def get_settings() -> SynthPanelSettings:
    """Load settings from environment variables.

    Environment variables (all optional):
        SYNTHPANEL_LOG_LEVEL: Logging level (default: INFO)
        SYNTHPANEL_JSON_LOGS: Render logs as JSON (default: true)
        SYNTHPANEL_DATA_DIR: Storage directory (default: data)
        SYNTHPANEL_PERSIST_STORAGE: Enable JSONL persistence (default: true)
        SYNTHPANEL_LLM_MODEL: Override LLM model name
        SYNTHPANEL_LLM_MAX_TOKENS: Max tokens for evaluation calls (default: 1024)
        SYNTHPANEL_PERSONA_MAX_TOKENS: Max tokens for persona generation (default: 16000)
        SYNTHPANEL_DEFAULT_PERSONA_COUNT: Personas per run (default: 100)
        SYNTHPANEL_MAX_PERSONA_COUNT: Largest accepted persona count (default: 150)
        SYNTHPANEL_MAX_CONCURRENCY: Evaluation fan-out cap, 0 = unbounded (default: 0)
        SYNTHPANEL_RUN_TIMEOUT: Overall run ceiling in seconds (default: 300)
        SYNTHPANEL_TEST_PRICE_USD: Price recorded per test (default: 29.0)
        SYNTHPANEL_ENFORCE_PAYWALL: Apply subscription tier gates (default: false)
    """
    def _bool(key: str, default: bool = False) -> bool:
        val = os.environ.get(key, "").lower()
        if val in ("1", "true", "yes"):
            return True
        if val in ("0", "false", "no"):
            return False
        return default

    return SynthPanelSettings(
        log_level=os.environ.get("SYNTHPANEL_LOG_LEVEL", "INFO").upper(),
        json_logs=_bool("SYNTHPANEL_JSON_LOGS", True),
        data_dir=Path(os.environ.get("SYNTHPANEL_DATA_DIR", "data")),
        persist_storage=_bool("SYNTHPANEL_PERSIST_STORAGE", True),
        llm_model=os.environ.get("SYNTHPANEL_LLM_MODEL", ""),
        llm_max_tokens=int(os.environ.get("SYNTHPANEL_LLM_MAX_TOKENS", "1024")),
        persona_max_tokens=int(os.environ.get("SYNTHPANEL_PERSONA_MAX_TOKENS", "16000")),
        default_persona_count=int(os.environ.get("SYNTHPANEL_DEFAULT_PERSONA_COUNT", "100")),
        max_persona_count=int(os.environ.get("SYNTHPANEL_MAX_PERSONA_COUNT", "150")),
        max_concurrency=int(os.environ.get("SYNTHPANEL_MAX_CONCURRENCY", "0")),
        run_timeout_seconds=float(os.environ.get("SYNTHPANEL_RUN_TIMEOUT", "300")),
        test_price_usd=float(os.environ.get("SYNTHPANEL_TEST_PRICE_USD", "29.0")),
        enforce_paywall=_bool("SYNTHPANEL_ENFORCE_PAYWALL", False),
    )
