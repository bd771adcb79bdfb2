"""
Centralized settings with environment variable overrides.

Each numeric value is parsed with a logged fallback so that a bad value in
the environment never stops the service from starting.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class AppConfig:
    """Data source and recommendation settings"""
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./card_advisor.db")
    USE_MOCK_DATA = _env_bool("USE_MOCK_DATA", False)
    HEALTH_CHECK_TTL_SECONDS = _env_int("HEALTH_CHECK_TTL_SECONDS", 30)
    TOP_N_STORE = _env_int("RECOMMENDATION_TOP_N_STORE", 5)
    TOP_N_STATIC = _env_int("RECOMMENDATION_TOP_N_STATIC", 3)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    ]


class LLMConfig:
    """LLM settings for re-ranking and reason enrichment"""
    API_KEY: Optional[str] = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
    BASE_URL: Optional[str] = os.getenv("LLM_BASE_URL") or None
    MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")

    RERANK_TEMPERATURE = _env_float("LLM_RERANK_TEMPERATURE", 0.3)
    RERANK_MAX_TOKENS = _env_int("LLM_RERANK_MAX_TOKENS", 500)
    ENRICH_TEMPERATURE = _env_float("LLM_ENRICH_TEMPERATURE", 0.5)
    ENRICH_MAX_TOKENS = _env_int("LLM_ENRICH_MAX_TOKENS", 800)
    TIMEOUT_SECONDS = _env_int("LLM_TIMEOUT", 10)
    MAX_RETRIES = max(_env_int("LLM_MAX_RETRIES", 1), 1)


class TwilioConfig:
    """WhatsApp delivery through the Twilio REST API"""
    ACCOUNT_SID: Optional[str] = os.getenv("TWILIO_ACCOUNT_SID")
    AUTH_TOKEN: Optional[str] = os.getenv("TWILIO_AUTH_TOKEN")
    WHATSAPP_FROM = os.getenv("TWILIO_WHATSAPP_FROM", "whatsapp:+14155238886")
    DEFAULT_TEMPLATE_SID = os.getenv("TWILIO_TEMPLATE_SID", "HXb5b62575e6e4ff6129ad7c8efe1f983e")
    API_BASE_URL = "https://api.twilio.com/2010-04-01"
    TIMEOUT_SECONDS = _env_int("TWILIO_TIMEOUT", 10)


if not LLMConfig.API_KEY:
    logger.warning(
        "LLM_API_KEY / OPENAI_API_KEY not set. "
        "Recommendations will use heuristic ranking and reasons only."
    )
