import httpx
import pytest
from conftest import Recorder, make_settings, mock_client, openai_completion

from coda.errors import ConfigurationError
from coda.providers.anthropic import AnthropicProvider
from coda.providers.factory import ProviderFactory
from coda.providers.local import LocalAIProvider
from coda.providers.openai import OpenAIProvider
from coda.providers.rate_limiter import RateLimiterRegistry

pytestmark = pytest.mark.asyncio


def _factory(limiters: RateLimiterRegistry | None = None, **settings) -> ProviderFactory:
    vendor = Recorder(lambda request: httpx.Response(200, json=openai_completion("ok")))
    return ProviderFactory(make_settings(**settings), limiters=limiters, client=mock_client(vendor))


async def test_create_provider_is_cached():
    factory = _factory(openai_api_key="sk-a")
    first = factory.create_provider("openai")

    assert isinstance(first, OpenAIProvider)
    assert factory.create_provider("openai") is first
    await factory.aclose()


async def test_create_provider_passes_configured_model():
    factory = _factory(anthropic_api_key="ak", anthropic_model="claude-test")
    provider = factory.create_provider("anthropic")

    assert isinstance(provider, AnthropicProvider)
    assert provider.model == "claude-test"
    await factory.aclose()


async def test_unknown_provider_is_a_configuration_error():
    factory = _factory(openai_api_key="sk-a")
    with pytest.raises(ConfigurationError):
        factory.create_provider("mistral")
    await factory.aclose()


async def test_available_providers_follow_priority_order():
    factory = _factory(
        local_ai_endpoint="http://localhost:8080",
        xai_api_key="xk",
        anthropic_api_key="ak",
    )
    names = [p.name for p in factory.get_available_providers()]

    assert names == ["anthropic", "xai", "local"]
    assert factory.get_default_provider().name == "anthropic"
    await factory.aclose()


async def test_no_configured_provider():
    factory = _factory()

    assert factory.get_available_providers() == []
    with pytest.raises(ConfigurationError, match="No AI providers configured"):
        factory.get_default_provider()
    await factory.aclose()


async def test_resolve_by_name_or_default():
    factory = _factory(openai_api_key="sk-a", local_ai_endpoint="http://localhost:8080")

    assert factory.resolve(None).name == "openai"
    assert factory.resolve("default").name == "openai"
    assert isinstance(factory.resolve("local"), LocalAIProvider)
    with pytest.raises(ConfigurationError, match="AI provider google is not available"):
        factory.resolve("google")
    await factory.aclose()


async def test_rate_limiter_attached_only_when_enabled():
    limiters = RateLimiterRegistry()
    enabled = _factory(limiters, openai_api_key="sk-a")
    disabled = _factory(limiters, openai_api_key="sk-a", rate_limit_enabled=False)

    assert enabled.create_provider("openai")._transport.limiter is limiters.get("openai")
    assert disabled.create_provider("openai")._transport.limiter is None
    await enabled.aclose()
    await disabled.aclose()
