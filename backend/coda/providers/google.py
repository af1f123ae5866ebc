from collections.abc import AsyncIterator
from contextlib import aclosing
from urllib.parse import urlencode

import httpx

from coda.errors import ConfigurationError, ProviderError
from coda.providers.base import AIRequest, AIResponse, ChatMessage, ProviderConfig, Usage
from coda.providers.rate_limiter import TokenBucket
from coda.providers.stream import iter_json_objects, iter_sse_data
from coda.providers.transport import ProviderTransport, log_request, log_response

GOOGLE_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def to_contents(messages: list[ChatMessage]) -> list[dict]:
    # Google uses "user"/"model" roles; system text is sent as a user turn.
    return [
        {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
        for m in messages
    ]


def candidate_text(event: dict) -> str | None:
    try:
        parts = event["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(parts, list):
        return None
    text = "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))
    return text or None


class GoogleAIProvider:
    name = "google"

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        limiter: TokenBucket | None = None,
    ) -> None:
        self.config = config
        self.model = config.model or "gemini-pro"
        self._base = (config.base_url or GOOGLE_API_BASE).rstrip("/")
        self._transport = ProviderTransport(self.name, client, timeout=config.timeout, limiter=limiter)

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def _url(self, method: str, **params: str) -> str:
        if not self.config.api_key:
            raise ConfigurationError("Google AI API key not configured")
        query = urlencode({"key": self.config.api_key, **params})
        return f"{self._base}/models/{self.model}:{method}?{query}"

    def _payload(self, request: AIRequest) -> dict:
        generation_config: dict = {"temperature": request.temperature}
        if request.max_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_tokens
        return {"contents": to_contents(request.messages), "generationConfig": generation_config}

    async def generate(self, request: AIRequest) -> AIResponse:
        url = self._url("generateContent")
        log_request(self.name, self.model, request, stream=False)
        data = await self._transport.post_json(url, self._payload(request))

        text = candidate_text(data)
        if text is None:
            raise ProviderError(f"{self.name} returned no candidate text", self.name)

        usage = None
        meta = data.get("usageMetadata")
        if isinstance(meta, dict) and meta:
            usage = Usage(
                prompt_tokens=meta.get("promptTokenCount", 0),
                completion_tokens=meta.get("candidatesTokenCount", 0),
                total_tokens=meta.get("totalTokenCount", 0),
            )
        response = AIResponse(content=text, usage=usage, model=self.model, provider=self.name)
        log_response(response)
        return response

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        url = self._url("streamGenerateContent", alt="sse")
        log_request(self.name, self.model, request, stream=True)
        async with self._transport.open_stream(url, self._payload(request)) as response:
            # Without alt=sse (e.g. behind a proxy) the body is one JSON array.
            content_type = response.headers.get("content-type", "")
            async with aclosing(self._transport.response_lines(response)) as lines:
                if content_type.startswith("text/event-stream"):
                    events = iter_sse_data(lines)
                else:
                    events = iter_json_objects(lines)
                async with aclosing(events):
                    async for event in events:
                        if text := candidate_text(event):
                            yield text
