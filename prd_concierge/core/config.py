"""Application configuration management."""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "PRD Concierge"
    app_version: str = "1.0.0"
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    # Conversation
    session_timeout_minutes: int = 30
    max_conversation_turns: int = 50
    sweep_interval_seconds: int = 600
    min_confidence_for_prd: int = 75
    project_type_confidence_threshold: int = 70

    # Completion
    llm_default_temperature: float = 0.7
    llm_max_tokens: int = 2000
    llm_timeout_seconds: float = 60.0

    # Network transport (OpenAI-compatible)
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Personas
    personas_dir: Optional[Path] = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.session_timeout_minutes <= 0:
            raise ValueError("SESSION_TIMEOUT_MINUTES must be positive")
        if self.max_conversation_turns <= 0:
            raise ValueError("MAX_CONVERSATION_TURNS must be positive")
        if self.log_format not in ("json", "text"):
            raise ValueError(f"LOG_FORMAT must be 'json' or 'text', got {self.log_format!r}")

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def network_transport_enabled(self) -> bool:
        """The network fallback is only wired in when a key is configured."""
        return bool(self.openai_api_key)


def load_settings_from_env() -> Settings:
    """Load settings from environment variables."""
    load_dotenv()

    def get_int(key: str, default: int) -> int:
        return int(os.getenv(key, str(default)))

    def get_float(key: str, default: float) -> float:
        return float(os.getenv(key, str(default)))

    personas_dir = os.getenv("PERSONAS_DIR")

    return Settings(
        # App
        app_name=os.getenv("APP_NAME", "PRD Concierge"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        environment=os.getenv("ENVIRONMENT", "development"),

        # Server
        host=os.getenv("HOST", "0.0.0.0"),
        port=get_int("PORT", 8000),

        # Logging
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "text"),

        # Conversation
        session_timeout_minutes=get_int("SESSION_TIMEOUT_MINUTES", 30),
        max_conversation_turns=get_int("MAX_CONVERSATION_TURNS", 50),
        sweep_interval_seconds=get_int("SWEEP_INTERVAL_SECONDS", 600),
        min_confidence_for_prd=get_int("MIN_CONFIDENCE_FOR_PRD", 75),
        project_type_confidence_threshold=get_int("PROJECT_TYPE_CONFIDENCE_THRESHOLD", 70),

        # Completion
        llm_default_temperature=get_float("LLM_DEFAULT_TEMPERATURE", 0.7),
        llm_max_tokens=get_int("LLM_MAX_TOKENS", 2000),
        llm_timeout_seconds=get_float("LLM_TIMEOUT_SECONDS", 60.0),

        # Network transport
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),

        # Personas
        personas_dir=Path(personas_dir) if personas_dir else None,
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings_from_env()
