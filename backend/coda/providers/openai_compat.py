"""Wire format helpers for OpenAI-style ``/chat/completions`` endpoints.

OpenAI, xAI and most local inference servers (llama.cpp, vLLM, LM Studio)
speak this dialect, so the three adapters share these pure functions.
"""

from coda.errors import ProviderError
from coda.providers.base import AIRequest, AIResponse, Usage


def build_chat_payload(model: str, request: AIRequest, *, stream: bool) -> dict:
    payload: dict = {
        "model": model,
        "messages": [{"role": m.role, "content": m.content} for m in request.messages],
        "temperature": request.temperature,
        "stream": stream,
    }
    if request.max_tokens is not None:
        payload["max_tokens"] = request.max_tokens
    return payload


def parse_usage(raw: dict | None, *, lenient: bool = False) -> Usage | None:
    if not raw or not isinstance(raw, dict):
        return None
    if lenient:
        return Usage(
            prompt_tokens=raw.get("prompt_tokens") or 0,
            completion_tokens=raw.get("completion_tokens") or 0,
            total_tokens=raw.get("total_tokens") or 0,
        )
    try:
        return Usage(
            prompt_tokens=raw["prompt_tokens"],
            completion_tokens=raw["completion_tokens"],
            total_tokens=raw["total_tokens"],
        )
    except KeyError:
        return None


def parse_chat_completion(
    data: dict, provider: str, fallback_model: str, *, lenient_usage: bool = False
) -> AIResponse:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ProviderError(f"{provider} returned a malformed completion", provider) from exc
    if content is not None and not isinstance(content, str):
        raise ProviderError(f"{provider} returned a malformed completion", provider)
    return AIResponse(
        content=content or "",
        usage=parse_usage(data.get("usage"), lenient=lenient_usage),
        model=data.get("model") or fallback_model,
        provider=provider,
    )


def chat_delta(event: dict) -> str | None:
    """Incremental text of one streamed chunk, or None for metadata-only chunks."""
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) and content else None
