"""
Configuration management.

Centralized environment variable management and validation.
"""

from typing import List, Literal, Set
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.errors import ConfigError

DEFAULT_AI_TIMEOUT_SECONDS = 20.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: str = "logs"

    # Supabase (reading persistence). Required outside development and test.
    supabase_url: str = ""
    supabase_service_key: str = ""
    aura_readings_table: str = "aura_readings"

    # JWT configuration
    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"

    # GLM is the primary provider.
    # AURA_-prefixed names are accepted for deployments that predate the short names.
    glm_api_key: str = Field(default="", validation_alias=AliasChoices("glm_api_key", "aura_glm_api_key"))
    glm_api_url: str = Field(
        default="https://api.z.ai/api/paas/v4/chat/completions",
        validation_alias=AliasChoices("glm_api_url", "aura_glm_api_url"),
    )
    glm_model: str = Field(default="glm-4.7", validation_alias=AliasChoices("glm_model", "aura_glm_model"))

    # DeepSeek is the secondary fallback provider.
    deepseek_api_key: str = Field(
        default="", validation_alias=AliasChoices("deepseek_api_key", "aura_deepseek_api_key")
    )
    deepseek_api_url: str = Field(
        default="https://api.deepseek.com/chat/completions",
        validation_alias=AliasChoices("deepseek_api_url", "aura_deepseek_api_url"),
    )
    deepseek_model: str = Field(
        default="deepseek-chat", validation_alias=AliasChoices("deepseek_model", "aura_deepseek_model")
    )

    # OpenAI is optional and the only provider that receives the image itself.
    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o-mini"

    # AURA_PROVIDER_ORDER: comma-separated provider names, highest priority first.
    # Unknown names are ignored; providers missing from the list are not used.
    aura_provider_order: str = "glm,deepseek,openai"

    # Per-request timeout for provider calls, in seconds
    aura_ai_timeout: float = DEFAULT_AI_TIMEOUT_SECONDS
    # Fixed delay before the single retry on a provider rate limit
    aura_ai_rate_limit_backoff: float = 2.0

    # Scan eligibility
    free_daily_scan_limit: int = 2
    premium_user_ids: str = ""

    # Upload limits
    max_image_data_bytes: int = 3 * 1024 * 1024  # base64 payload
    max_upload_bytes: int = 4 * 1024 * 1024

    @field_validator("aura_ai_timeout")
    @classmethod
    def validate_aura_ai_timeout(cls, v: float) -> float:
        """Fall back to the default timeout when a non-positive value is configured."""
        if v <= 0:
            return DEFAULT_AI_TIMEOUT_SECONDS
        return v

    @field_validator("aura_ai_rate_limit_backoff")
    @classmethod
    def validate_rate_limit_backoff(cls, v: float) -> float:
        """Validate rate limit backoff."""
        if v < 0:
            raise ConfigError("AURA_AI_RATE_LIMIT_BACKOFF must not be negative")
        return v

    @field_validator("glm_api_url", "deepseek_api_url", "openai_api_url")
    @classmethod
    def validate_provider_url(cls, v: str) -> str:
        """Validate provider endpoint URL format."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ConfigError("Provider API URL must be a valid HTTP/HTTPS URL")
        return v

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Validate Supabase URL format when one is configured."""
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            raise ConfigError("SUPABASE_URL must be a valid HTTP/HTTPS URL")
        return v

    @field_validator("free_daily_scan_limit")
    @classmethod
    def validate_free_daily_scan_limit(cls, v: int) -> int:
        """Validate daily scan limit."""
        if v < 0:
            raise ConfigError("FREE_DAILY_SCAN_LIMIT must not be negative")
        return v

    @property
    def database_configured(self) -> bool:
        """True when Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_service_key.strip())

    @property
    def provider_order(self) -> List[str]:
        """Provider names in priority order."""
        return [name.strip().lower() for name in self.aura_provider_order.split(",") if name.strip()]

    @property
    def premium_users(self) -> Set[str]:
        """User ids treated as premium (unlimited scans)."""
        return {u.strip() for u in self.premium_user_ids.split(",") if u.strip()}


# Singleton instance
try:
    settings = Settings()
except Exception as e:
    # Re-raise as ConfigError for consistency
    if isinstance(e, ConfigError):
        raise
    raise ConfigError(f"Failed to load configuration: {str(e)}") from e
