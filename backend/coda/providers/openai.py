from collections.abc import AsyncIterator
from contextlib import aclosing

import httpx

from coda.errors import ConfigurationError
from coda.providers.base import AIRequest, AIResponse, ProviderConfig
from coda.providers.openai_compat import build_chat_payload, chat_delta, parse_chat_completion
from coda.providers.rate_limiter import TokenBucket
from coda.providers.stream import iter_sse_data
from coda.providers.transport import ProviderTransport, log_request, log_response

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
_DEFAULT_MODEL = "gpt-4-turbo-preview"


class OpenAIProvider:
    name = "openai"

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        limiter: TokenBucket | None = None,
    ) -> None:
        self.config = config
        self.model = config.model or _DEFAULT_MODEL
        self._url = config.base_url or OPENAI_CHAT_URL
        self._transport = ProviderTransport(self.name, client, timeout=config.timeout, limiter=limiter)

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def _headers(self) -> dict[str, str]:
        if not self.config.api_key:
            raise ConfigurationError("OpenAI API key not configured")
        return {"Authorization": f"Bearer {self.config.api_key}"}

    async def generate(self, request: AIRequest) -> AIResponse:
        headers = self._headers()
        log_request(self.name, self.model, request, stream=False)
        data = await self._transport.post_json(
            self._url, build_chat_payload(self.model, request, stream=False), headers
        )
        response = parse_chat_completion(data, self.name, self.model)
        log_response(response)
        return response

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        headers = self._headers()
        log_request(self.name, self.model, request, stream=True)
        payload = build_chat_payload(self.model, request, stream=True)
        async with aclosing(self._transport.stream_lines(self._url, payload, headers)) as lines:
            async for event in iter_sse_data(lines):
                if text := chat_delta(event):
                    yield text
