import pytest
from conftest import make_settings
from pydantic import ValidationError

from coda.config import PROVIDER_ORDER
from coda.errors import ConfigurationError


def test_defaults():
    settings = make_settings()

    assert settings.openai_model == "gpt-4-turbo-preview"
    assert settings.anthropic_model == "claude-3-opus-20240229"
    assert settings.google_ai_model == "gemini-pro"
    assert settings.xai_model == "grok-beta"
    assert settings.solana_network == "devnet"
    assert settings.port == 3000
    assert settings.request_timeout == 60.0
    assert settings.rate_limit_enabled is True
    assert settings.enabled_providers() == []


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")

    settings = make_settings()

    assert settings.openai_api_key == "sk-env"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.rate_limit_enabled is False
    assert settings.enabled_providers() == ["openai"]


def test_blank_credentials_count_as_unset():
    settings = make_settings(openai_api_key="  ", local_ai_endpoint="")

    assert settings.openai_api_key is None
    assert settings.local_ai_endpoint is None
    assert settings.enabled_providers() == []


def test_enabled_providers_in_priority_order():
    settings = make_settings(
        local_ai_endpoint="http://localhost:1234/",
        google_ai_api_key="gk",
        openai_api_key="sk-a",
        xai_api_key="xk",
        anthropic_api_key="ak",
    )

    assert settings.enabled_providers() == list(PROVIDER_ORDER)
    assert settings.provider_config("local").base_url == "http://localhost:1234"


def test_provider_config_carries_timeout_and_model():
    settings = make_settings(xai_api_key="xk", xai_model="grok-2", request_timeout=5)
    config = settings.provider_config("xai")

    assert config.model == "grok-2"
    assert config.api_key == "xk"
    assert config.base_url == "https://api.x.ai/v1/chat/completions"
    assert config.timeout == 5


def test_unknown_provider_config():
    with pytest.raises(ConfigurationError):
        make_settings().provider_config("nope")


@pytest.mark.parametrize(
    "overrides",
    [
        {"port": 0},
        {"request_timeout": 0},
        {"solana_network": "moonnet"},
        {"log_level": "TRACE"},
        {"local_ai_endpoint": "localhost:8080"},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        make_settings(**overrides)


def test_derived_values():
    settings = make_settings(cors_origin="http://a.test, http://b.test", log_level="warn")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.python_log_level == "WARNING"
