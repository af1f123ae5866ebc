from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coda.errors import ConfigurationError
from coda.providers.base import ProviderConfig
from coda.utils.validation import validate_url

# Priority order used when picking the default provider.
PROVIDER_ORDER = ("openai", "anthropic", "google", "xai", "local")

SolanaNetwork = Literal["mainnet-beta", "testnet", "devnet", "localnet"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # AI providers
    openai_api_key: str | None = None
    openai_model: str = "gpt-4-turbo-preview"

    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-opus-20240229"

    google_ai_api_key: str | None = None
    google_ai_model: str = "gemini-pro"

    xai_api_key: str | None = None
    xai_model: str = "grok-beta"
    xai_endpoint: str = "https://api.x.ai/v1/chat/completions"

    # Local OpenAI-compatible server (llama.cpp, LM Studio, vLLM, ...)
    local_ai_endpoint: str | None = None
    local_ai_model: str = "local-model"

    request_timeout: float = Field(default=60.0, gt=0)
    rate_limit_enabled: bool = True

    # Solana
    solana_rpc_url: str = "https://api.devnet.solana.com"
    solana_network: SolanaNetwork = "devnet"

    # Server
    host: str = "localhost"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origin: str = "*"
    log_level: Literal["DEBUG", "INFO", "WARN", "WARNING", "ERROR"] = "INFO"

    @field_validator(
        "openai_api_key",
        "anthropic_api_key",
        "google_ai_api_key",
        "xai_api_key",
        "local_ai_endpoint",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("local_ai_endpoint", "xai_endpoint", "solana_rpc_url")
    @classmethod
    def _absolute_url(cls, value: str | None) -> str | None:
        if value is not None and not validate_url(value):
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value.rstrip("/") if value else value

    # ── Derived values ────────────────────────────────────────────────────────

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]

    @property
    def python_log_level(self) -> str:
        return "WARNING" if self.log_level == "WARN" else self.log_level

    def provider_config(self, name: str) -> ProviderConfig:
        match name:
            case "openai":
                return ProviderConfig(model=self.openai_model, api_key=self.openai_api_key, timeout=self.request_timeout)
            case "anthropic":
                return ProviderConfig(
                    model=self.anthropic_model, api_key=self.anthropic_api_key, timeout=self.request_timeout
                )
            case "google":
                return ProviderConfig(
                    model=self.google_ai_model, api_key=self.google_ai_api_key, timeout=self.request_timeout
                )
            case "xai":
                return ProviderConfig(
                    model=self.xai_model,
                    api_key=self.xai_api_key,
                    base_url=self.xai_endpoint,
                    timeout=self.request_timeout,
                )
            case "local":
                return ProviderConfig(
                    model=self.local_ai_model, base_url=self.local_ai_endpoint, timeout=self.request_timeout
                )
            case _:
                raise ConfigurationError(f"Unknown provider: {name!r}")

    def enabled_providers(self) -> list[str]:
        """Configured providers, in default-selection priority order."""
        enabled = []
        for name in PROVIDER_ORDER:
            cfg = self.provider_config(name)
            credential = cfg.base_url if name == "local" else cfg.api_key
            if credential:
                enabled.append(name)
        return enabled
