from __future__ import annotations

import os
from dataclasses import dataclass


def _f(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except Exception:
        return default


def _i(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except Exception:
        return default


def _s(name: str, default: str) -> str:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else default


@dataclass(frozen=True)
class ResolverConfig:
    # Bounded worker pool for per-person resolution within a pass
    max_concurrency: int = _i("JUURET_MAX_CONCURRENCY", 4)

    # External parser (LLM) settings
    llm_model: str = _s("JUURET_LLM_MODEL", "claude-sonnet-4-20250514")
    llm_max_tokens: int = _i("JUURET_LLM_MAX_TOKENS", 4096)
    llm_temperature: float = _f("JUURET_LLM_TEMPERATURE", 0.0)

    # Extra attempts when the parser returns malformed JSON
    parse_retries: int = _i("JUURET_PARSE_RETRIES", 2)


CONFIG = ResolverConfig()
