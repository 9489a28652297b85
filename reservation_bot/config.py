"""
Centralized configuration with environment variable overrides.

Restaurant rules, session lifetimes, model settings, and storage
credentials are all read here. Nothing is hardcoded in dialogue or
storage logic.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from reservation_bot.logging_context import install_session_filter

load_dotenv()

logger = logging.getLogger(__name__)

DIALOGUE_MODES = ("guided", "freeform")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class RestaurantConfig:
    """Restaurant identity, service window, and party-size limits."""

    name: str = os.getenv("RESTAURANT_NAME", "Restoran WAJIB")
    timezone: str = os.getenv("RESTAURANT_TIMEZONE", "Asia/Jakarta")
    opening_hour: int = _safe_int("OPENING_HOUR", "10")
    closing_hour: int = _safe_int("CLOSING_HOUR", "22")
    min_guests: int = _safe_int("MIN_GUESTS", "1")
    max_guests: int = _safe_int("MAX_GUESTS", "20")


@dataclass(frozen=True)
class SessionConfig:
    """Dialogue mode and in-memory session lifetimes."""

    dialogue_mode: str = os.getenv("DIALOGUE_MODE", "guided")
    completion_grace_seconds: int = _safe_int("SESSION_COMPLETION_GRACE_SECONDS", "300")
    idle_ttl_seconds: int = _safe_int("SESSION_IDLE_TTL_SECONDS", "3600")
    sweep_interval_seconds: int = _safe_int("SESSION_SWEEP_INTERVAL_SECONDS", "60")
    max_history_messages: int = _safe_int("MAX_HISTORY_MESSAGES", "40")


@dataclass(frozen=True)
class ModelConfig:
    """Text-generation service settings (any OpenAI-compatible endpoint)."""

    api_key: Optional[str] = os.getenv("GROQ_API_KEY")
    base_url: str = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
    llm_model: str = os.getenv("LLM_MODEL", "llama-3.3-70b-versatile")
    llm_temperature: float = _safe_float("LLM_TEMPERATURE", "0.7")
    max_tokens: int = _safe_int("LLM_MAX_TOKENS", "500")
    timeout_sec: float = _safe_float("LLM_TIMEOUT", "20.0")
    max_retries: int = _safe_int("LLM_MAX_RETRIES", "2")


@dataclass(frozen=True)
class StorageConfig:
    """Supabase credentials and table names."""

    supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
    supabase_key: Optional[str] = os.getenv("SUPABASE_KEY")
    reservations_table: str = os.getenv("RESERVATIONS_TABLE", "reservations")
    conversation_log_table: str = os.getenv("CONVERSATION_LOG_TABLE", "conversation_logs")

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


@dataclass(frozen=True)
class ServerConfig:
    """HTTP listener settings."""

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _safe_int("PORT", "3000")
    max_message_length: int = _safe_int("MAX_MESSAGE_LENGTH", "1000")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    restaurant: RestaurantConfig = field(default_factory=RestaurantConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    restaurant = config.restaurant
    if not 0 <= restaurant.opening_hour <= 23:
        raise ValueError(f"OPENING_HOUR must be between 0 and 23, got {restaurant.opening_hour}")
    if not 0 <= restaurant.closing_hour <= 23:
        raise ValueError(f"CLOSING_HOUR must be between 0 and 23, got {restaurant.closing_hour}")
    if restaurant.opening_hour > restaurant.closing_hour:
        raise ValueError(
            "OPENING_HOUR must not be after CLOSING_HOUR, "
            f"got {restaurant.opening_hour} > {restaurant.closing_hour}"
        )
    if restaurant.min_guests < 1:
        raise ValueError(f"MIN_GUESTS must be >= 1, got {restaurant.min_guests}")
    if restaurant.max_guests < restaurant.min_guests:
        raise ValueError(
            f"MAX_GUESTS must be >= MIN_GUESTS, got {restaurant.max_guests}"
        )

    if config.session.dialogue_mode not in DIALOGUE_MODES:
        raise ValueError(
            f"DIALOGUE_MODE must be one of {DIALOGUE_MODES}, got {config.session.dialogue_mode!r}"
        )
    for name, value in [
        ("SESSION_COMPLETION_GRACE_SECONDS", config.session.completion_grace_seconds),
        ("SESSION_IDLE_TTL_SECONDS", config.session.idle_ttl_seconds),
        ("SESSION_SWEEP_INTERVAL_SECONDS", config.session.sweep_interval_seconds),
        ("MAX_HISTORY_MESSAGES", config.session.max_history_messages),
    ]:
        if value < 1:
            raise ValueError(f"{name} must be >= 1, got {value}")

    if not 0.0 <= config.model.llm_temperature <= 2.0:
        raise ValueError(
            f"LLM_TEMPERATURE must be between 0.0 and 2.0, got {config.model.llm_temperature}"
        )
    if config.model.max_tokens < 1:
        raise ValueError(f"LLM_MAX_TOKENS must be >= 1, got {config.model.max_tokens}")
    if config.model.timeout_sec <= 0:
        raise ValueError(f"LLM_TIMEOUT must be > 0, got {config.model.timeout_sec}")
    if config.model.max_retries < 0:
        raise ValueError(f"LLM_MAX_RETRIES must be >= 0, got {config.model.max_retries}")

    if not 1 <= config.server.port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.server.port}")
    if config.server.max_message_length < 1:
        raise ValueError(
            f"MAX_MESSAGE_LENGTH must be >= 1, got {config.server.max_message_length}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s [%(session_id)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_session_filter()
    logger.info("Configuration loaded for '%s'", config.restaurant.name)
    return config


# Singleton instance
settings = load_config()
