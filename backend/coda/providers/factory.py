from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from coda.errors import ConfigurationError
from coda.providers.base import AIProvider
from coda.providers.rate_limiter import RateLimiterRegistry

if TYPE_CHECKING:
    from coda.config import Settings

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Builds adapters from settings and caches one instance per provider name.

    A single ``httpx.AsyncClient`` is shared by every adapter the factory
    creates; ``aclose()`` releases it when the application shuts down.
    """

    def __init__(
        self,
        settings: Settings,
        limiters: RateLimiterRegistry | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.limiters = limiters or RateLimiterRegistry()
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout))
        self._providers: dict[str, AIProvider] = {}

    def create_provider(self, name: str) -> AIProvider:
        cached = self._providers.get(name)
        if cached is not None:
            return cached

        config = self.settings.provider_config(name)
        limiter = self.limiters.get(name) if self.settings.rate_limit_enabled else None

        match name:
            case "openai":
                from coda.providers.openai import OpenAIProvider
                provider: AIProvider = OpenAIProvider(config, self._client, limiter)
            case "anthropic":
                from coda.providers.anthropic import AnthropicProvider
                provider = AnthropicProvider(config, self._client, limiter)
            case "google":
                from coda.providers.google import GoogleAIProvider
                provider = GoogleAIProvider(config, self._client, limiter)
            case "xai":
                from coda.providers.xai import XAIProvider
                provider = XAIProvider(config, self._client, limiter)
            case "local":
                from coda.providers.local import LocalAIProvider
                provider = LocalAIProvider(config, self._client, limiter)
            case _:
                raise ConfigurationError(f"Unknown provider: {name!r}")

        logger.debug("Created %s provider (model=%s)", name, provider.model)
        self._providers[name] = provider
        return provider

    def get_available_providers(self) -> list[AIProvider]:
        providers = (self.create_provider(name) for name in self.settings.enabled_providers())
        return [p for p in providers if p.is_available()]

    def get_default_provider(self) -> AIProvider:
        available = self.get_available_providers()
        if not available:
            raise ConfigurationError("No AI providers configured. Please add at least one API key.")
        return available[0]

    def resolve(self, name: str | None) -> AIProvider:
        """Provider named in a request, or the default one for None / "default"."""
        if not name or name == "default":
            return self.get_default_provider()
        provider = self.create_provider(name)
        if not provider.is_available():
            raise ConfigurationError(f"AI provider {name} is not available")
        return provider

    async def aclose(self) -> None:
        await self._client.aclose()
