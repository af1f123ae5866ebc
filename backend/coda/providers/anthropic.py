from collections.abc import AsyncIterator
from contextlib import aclosing

import httpx

from coda.errors import ConfigurationError, ProviderError
from coda.providers.base import AIRequest, AIResponse, ChatMessage, ProviderConfig, Usage
from coda.providers.rate_limiter import TokenBucket
from coda.providers.stream import iter_sse_data
from coda.providers.transport import ProviderTransport, log_request, log_response

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
_DEFAULT_MAX_TOKENS = 4096


def split_system(messages: list[ChatMessage]) -> tuple[str, list[dict]]:
    """Hoist system messages into Anthropic's top-level ``system`` field.

    System contents are joined with newlines; the remaining turns keep their
    order.
    """
    system = "\n".join(m.content for m in messages if m.role == "system")
    turns = [
        {"role": "assistant" if m.role == "assistant" else "user", "content": m.content}
        for m in messages
        if m.role != "system"
    ]
    return system, turns


class AnthropicProvider:
    name = "anthropic"

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        limiter: TokenBucket | None = None,
    ) -> None:
        self.config = config
        self.model = config.model or "claude-3-opus-20240229"
        self._url = config.base_url or ANTHROPIC_MESSAGES_URL
        self._transport = ProviderTransport(self.name, client, timeout=config.timeout, limiter=limiter)

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def _headers(self) -> dict[str, str]:
        if not self.config.api_key:
            raise ConfigurationError("Anthropic API key not configured")
        return {"x-api-key": self.config.api_key, "anthropic-version": ANTHROPIC_VERSION}

    def _payload(self, request: AIRequest, *, stream: bool) -> dict:
        system, turns = split_system(request.messages)
        payload: dict = {
            "model": self.model,
            "messages": turns,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens or self.config.extra.get("max_tokens", _DEFAULT_MAX_TOKENS),
        }
        if system:
            payload["system"] = system
        if stream:
            payload["stream"] = True
        return payload

    async def generate(self, request: AIRequest) -> AIResponse:
        headers = self._headers()
        log_request(self.name, self.model, request, stream=False)
        data = await self._transport.post_json(self._url, self._payload(request, stream=False), headers)

        blocks = data.get("content")
        if not isinstance(blocks, list) or not all(isinstance(b, dict) for b in blocks):
            raise ProviderError(f"{self.name} returned a malformed message", self.name)
        text = "".join(
            b["text"] for b in blocks if b.get("type", "text") == "text" and isinstance(b.get("text"), str)
        )

        usage = None
        raw_usage = data.get("usage")
        if isinstance(raw_usage, dict) and "input_tokens" in raw_usage and "output_tokens" in raw_usage:
            usage = Usage(
                prompt_tokens=raw_usage["input_tokens"],
                completion_tokens=raw_usage["output_tokens"],
                total_tokens=raw_usage["input_tokens"] + raw_usage["output_tokens"],
            )
        response = AIResponse(content=text, usage=usage, model=data.get("model") or self.model, provider=self.name)
        log_response(response)
        return response

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        headers = self._headers()
        log_request(self.name, self.model, request, stream=True)
        payload = self._payload(request, stream=True)
        async with aclosing(self._transport.stream_lines(self._url, payload, headers)) as lines:
            async for event in iter_sse_data(lines):
                if event.get("type") == "message_stop":
                    return
                if event.get("type") != "content_block_delta":
                    continue
                delta = event.get("delta")
                if isinstance(delta, dict) and isinstance(text := delta.get("text"), str) and text:
                    yield text
