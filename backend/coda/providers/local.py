from collections.abc import AsyncIterator
from contextlib import aclosing

import httpx

from coda.errors import ConfigurationError
from coda.providers.base import AIRequest, AIResponse, ProviderConfig
from coda.providers.openai_compat import build_chat_payload, chat_delta, parse_chat_completion
from coda.providers.rate_limiter import TokenBucket
from coda.providers.stream import iter_sse_data
from coda.providers.transport import ProviderTransport, log_request, log_response


class LocalAIProvider:
    """Adapter for a self-hosted server speaking the OpenAI chat completions API."""

    name = "local"

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        limiter: TokenBucket | None = None,
    ) -> None:
        self.config = config
        self.model = config.model or "local-model"
        self._transport = ProviderTransport(self.name, client, timeout=config.timeout, limiter=limiter)

    def is_available(self) -> bool:
        return bool(self.config.base_url)

    def _chat_url(self) -> str:
        if not self.config.base_url:
            raise ConfigurationError("Local AI endpoint not configured")
        return f"{self.config.base_url.rstrip('/')}/v1/chat/completions"

    async def generate(self, request: AIRequest) -> AIResponse:
        url = self._chat_url()
        log_request(self.name, self.model, request, stream=False)
        data = await self._transport.post_json(url, build_chat_payload(self.model, request, stream=False))
        # Local servers often omit or zero out usage counters.
        response = parse_chat_completion(data, self.name, self.model, lenient_usage=True)
        log_response(response)
        return response

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        url = self._chat_url()
        log_request(self.name, self.model, request, stream=True)
        payload = build_chat_payload(self.model, request, stream=True)
        async with aclosing(self._transport.stream_lines(url, payload)) as lines:
            async for event in iter_sse_data(lines):
                if text := chat_delta(event):
                    yield text
