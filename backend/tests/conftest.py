"""
Shared pytest fixtures.

Vendor APIs are never contacted: adapters get an ``httpx.AsyncClient`` backed
by ``httpx.MockTransport`` and the API is exercised in-process through
``httpx.ASGITransport``.
"""

import json
from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from coda.config import Settings
from coda.main import create_app
from coda.providers.base import AIRequest, AIResponse
from coda.providers.factory import ProviderFactory

_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "GOOGLE_AI_API_KEY",
    "GOOGLE_AI_MODEL",
    "XAI_API_KEY",
    "XAI_MODEL",
    "XAI_ENDPOINT",
    "LOCAL_AI_ENDPOINT",
    "LOCAL_AI_MODEL",
    "SOLANA_RPC_URL",
    "SOLANA_NETWORK",
    "HOST",
    "PORT",
    "CORS_ORIGIN",
    "LOG_LEVEL",
    "REQUEST_TIMEOUT",
    "RATE_LIMIT_ENABLED",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer / CI credentials out of the tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


# ── Vendor stubs ──────────────────────────────────────────────────────────────


class Recorder:
    """MockTransport handler that records requests and replays a canned response."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def openai_completion(content: str, *, usage: dict | None = None, model: str = "gpt-test") -> dict:
    body: dict = {
        "id": "chatcmpl-1",
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
    }
    if usage is not None:
        body["usage"] = usage
    return body


def sse_body(*events: dict | str) -> bytes:
    lines = []
    for event in events:
        payload = event if isinstance(event, str) else json.dumps(event)
        lines.append(f"data: {payload}\n\n")
    return "".join(lines).encode()


class StubProvider:
    """In-memory adapter: replies with fixed text and records the requests it saw."""

    def __init__(self, reply: str = "", name: str = "stub", fragments: list[str] | None = None) -> None:
        self.name = name
        self.model = "stub-model"
        self.reply = reply
        self.fragments = fragments if fragments is not None else [reply]
        self.requests: list[AIRequest] = []

    def is_available(self) -> bool:
        return True

    async def generate(self, request: AIRequest) -> AIResponse:
        self.requests.append(request)
        return AIResponse(content=self.reply, model=self.model, provider=self.name)

    async def generate_stream(self, request: AIRequest) -> AsyncIterator[str]:
        self.requests.append(request)
        for fragment in self.fragments:
            yield fragment


# ── HTTP test client ──────────────────────────────────────────────────────────


@pytest.fixture
def vendor() -> Recorder:
    """OpenAI-shaped vendor; tests swap ``vendor.respond`` to change the reply."""
    return Recorder(lambda request: httpx.Response(200, json=openai_completion("no files here")))


@pytest.fixture
def settings() -> Settings:
    return make_settings(openai_api_key="sk-test", rate_limit_enabled=False)


@pytest_asyncio.fixture
async def factory(settings: Settings, vendor: Recorder) -> AsyncIterator[ProviderFactory]:
    f = ProviderFactory(settings, client=mock_client(vendor))
    yield f
    await f.aclose()


@pytest_asyncio.fixture
async def client(settings: Settings, factory: ProviderFactory) -> AsyncIterator[AsyncClient]:
    app = create_app(settings=settings, factory=factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
