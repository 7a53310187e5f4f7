"""
Configuration management for CompareAI.

Supports environment variables, .env files, and YAML configuration.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """API keys and endpoints for every provider in the model registry."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_org_id: str | None = Field(default=None, alias="OPENAI_ORG_ID")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        alias="OPENAI_BASE_URL"
    )

    # Anthropic Configuration
    anthropic_api_key: SecretStr | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_base_url: str = Field(
        default="https://api.anthropic.com",
        alias="ANTHROPIC_BASE_URL"
    )

    # Google Configuration
    google_api_key: SecretStr | None = Field(default=None, alias="GOOGLE_API_KEY")

    # OpenAI-compatible providers
    deepseek_api_key: SecretStr | None = Field(default=None, alias="DEEPSEEK_API_KEY")
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com",
        alias="DEEPSEEK_BASE_URL"
    )
    xai_api_key: SecretStr | None = Field(default=None, alias="XAI_API_KEY")
    xai_base_url: str = Field(default="https://api.x.ai/v1", alias="XAI_BASE_URL")
    perplexity_api_key: SecretStr | None = Field(default=None, alias="PERPLEXITY_API_KEY")
    perplexity_base_url: str = Field(
        default="https://api.perplexity.ai",
        alias="PERPLEXITY_BASE_URL"
    )

    # Meta has no adapter; the key is read so /api/models can report it.
    meta_api_key: SecretStr | None = Field(default=None, alias="META_API_KEY")

    def credential(self, var_name: str) -> str | None:
        """
        Look up a credential by its environment variable name.

        Args:
            var_name: e.g. ``"OPENAI_API_KEY"``

        Returns:
            The secret value, or None if unset or unknown
        """
        for name, field in type(self).model_fields.items():
            if field.alias == var_name:
                value = getattr(self, name)
                if isinstance(value, SecretStr):
                    secret = value.get_secret_value()
                    return secret or None
                return None
        return None

    def has_credential(self, var_name: str) -> bool:
        """Check if a credential is configured."""
        return self.credential(var_name) is not None


class CompareSettings(BaseSettings):
    """Core fan-out settings."""

    model_config = SettingsConfigDict(
        env_prefix="COMPAREAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Per-adapter call budget in seconds; None waits indefinitely
    adapter_timeout: float | None = 60.0
    max_output_tokens: int = Field(default=1000, gt=0)

    # Prompt history
    history_key: str = "ai-comparison-history"
    history_max_items: int = Field(default=20, gt=0)
    history_file: Path | None = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @field_validator("adapter_timeout")
    @classmethod
    def validate_adapter_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            return None
        return v


class RedisSettings(BaseSettings):
    """Redis configuration for the prompt history store."""

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    url: str | None = Field(default=None, alias="REDIS_URL")
    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    db: int = 0
    ssl: bool = False
    socket_timeout: float = 5.0

    @property
    def is_configured(self) -> bool:
        """Check if Redis is configured."""
        return self.url is not None or self.host != "localhost"


class ServerSettings(BaseSettings):
    """API server settings."""

    model_config = SettingsConfigDict(
        env_prefix="COMPAREAI_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseSettings):
    """Combined application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    compare: CompareSettings = Field(default_factory=CompareSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)

    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


@lru_cache()
def get_provider_settings() -> ProviderSettings:
    """Get cached provider settings."""
    return ProviderSettings()


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    get_provider_settings.cache_clear()
    return get_settings()
