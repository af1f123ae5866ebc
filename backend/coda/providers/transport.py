"""HTTP plumbing shared by the vendor adapters.

Adapters compose a ``ProviderTransport`` rather than inheriting behaviour:
it throttles through the provider's token bucket, enforces the request
timeout and turns transport failures into ``ProviderError`` values that
carry the vendor's raw error body.
"""

import asyncio
import logging
import re
from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager

import httpx

from coda.errors import ProviderError, ProviderTimeoutError
from coda.providers.base import AIRequest, AIResponse
from coda.providers.rate_limiter import TokenBucket
from coda.providers.stream import iter_lines

logger = logging.getLogger(__name__)

_KEY_PARAM_RE = re.compile(r"([?&]key=)[^&\s'\"]+")


def scrub_secrets(text: str) -> str:
    """Mask API keys passed as query parameters so they never reach logs or clients."""
    return _KEY_PARAM_RE.sub(r"\1****", text)


def log_request(provider: str, model: str, request: AIRequest, *, stream: bool) -> None:
    logger.debug(
        "[%s] request model=%s messages=%d temperature=%s stream=%s",
        provider,
        model,
        len(request.messages),
        request.temperature,
        stream,
    )


def log_response(response: AIResponse) -> None:
    logger.info(
        "[%s] response model=%s total_tokens=%s",
        response.provider,
        response.model,
        response.usage.total_tokens if response.usage else "n/a",
    )


class ProviderTransport:
    def __init__(
        self,
        provider: str,
        client: httpx.AsyncClient,
        timeout: float | None = None,
        limiter: TokenBucket | None = None,
    ) -> None:
        self.provider = provider
        self.client = client
        self.timeout = timeout
        self.limiter = limiter

    async def _throttle(self) -> None:
        if self.limiter is not None:
            await self.limiter.wait_for_token()

    async def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = (await response.aread()).decode("utf-8", errors="replace")
        logger.warning("[%s] vendor returned %s: %.500s", self.provider, response.status_code, body)
        raise ProviderError(
            f"{self.provider} API error ({response.status_code}): {body}",
            self.provider,
            vendor_status=response.status_code,
        )

    def _transport_error(self, exc: Exception) -> ProviderError:
        if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
            logger.warning("[%s] request timed out after %ss", self.provider, self.timeout)
            return ProviderTimeoutError(self.provider, self.timeout or 0)
        message = scrub_secrets(str(exc))
        logger.warning("[%s] network error: %s", self.provider, message)
        return ProviderError(f"{self.provider} network error: {message}", self.provider)

    async def post_json(self, url: str, payload: dict, headers: dict[str, str] | None = None) -> dict:
        await self._throttle()
        try:
            # The deadline covers the whole exchange and is disarmed on every exit path.
            async with asyncio.timeout(self.timeout):
                response = await self.client.post(url, json=payload, headers=headers)
                await self._raise_for_status(response)
                data = response.json()
        except (TimeoutError, httpx.HTTPError) as exc:
            raise self._transport_error(exc) from exc
        except ValueError as exc:
            raise ProviderError(f"{self.provider} returned a non-JSON body", self.provider) from exc
        if not isinstance(data, dict):
            raise ProviderError(f"{self.provider} returned an unexpected body", self.provider)
        return data

    @asynccontextmanager
    async def open_stream(
        self, url: str, payload: dict, headers: dict[str, str] | None = None
    ) -> AsyncIterator[httpx.Response]:
        await self._throttle()
        request = self.client.build_request("POST", url, json=payload, headers=headers)
        try:
            # Only connecting and receiving the status line is bounded; the body may stream for longer.
            async with asyncio.timeout(self.timeout):
                response = await self.client.send(request, stream=True)
        except (TimeoutError, httpx.HTTPError) as exc:
            raise self._transport_error(exc) from exc
        try:
            await self._raise_for_status(response)
            yield response
        finally:
            await response.aclose()

    async def stream_lines(
        self, url: str, payload: dict, headers: dict[str, str] | None = None
    ) -> AsyncIterator[str]:
        async with self.open_stream(url, payload, headers) as response:
            async with aclosing(self.response_lines(response)) as lines:
                async for line in lines:
                    yield line

    async def response_lines(self, response: httpx.Response) -> AsyncIterator[str]:
        try:
            async for line in iter_lines(response.aiter_bytes()):
                yield line
        except httpx.HTTPError as exc:
            raise self._transport_error(exc) from exc
